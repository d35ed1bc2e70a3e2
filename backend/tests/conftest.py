import random

import pytest

# ============================================================================
# Seeded randomness
# ============================================================================
# Every pairing/court function takes an explicit random.Random. Tests use a
# fixed seed so failures reproduce; tests that need several independent
# streams build their own Random(seed).


@pytest.fixture(name="rng")
def rng_fixture() -> random.Random:
    return random.Random(12345)
