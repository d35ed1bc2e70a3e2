"""
Services Layer

Pure pairing and scoring services that:
- Accept players, matches, partner history and an injected random source
- Return new values (players, rounds, states)
- Do NOT depend on storage or transport
- Do NOT mutate their inputs
"""
