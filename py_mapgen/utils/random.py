"""
Random number generation utilities.

Map generation is a pure function of its configuration and seed. The seed is
drawn here, once, by the configuration layer; the core only ever receives
the seeded generator built by ``make_rng``.
"""

import secrets

import numpy as np

# Seeds are kept within an unsigned 64-bit integer
MAX_SEED = 2**64 - 1


def generate_seed() -> int:
    """
    Draw a fresh seed from OS entropy.

    Returns:
        Non-negative integer seed
    """
    return secrets.randbits(64)


def make_rng(seed: int) -> np.random.Generator:
    """
    Build the random source consumed by noise construction and generators.

    Args:
        seed: Non-negative integer seed

    Returns:
        Seeded NumPy Generator
    """
    if seed < 0:
        raise ValueError(f"Seed must be non-negative, got {seed}")
    return np.random.default_rng(seed)
