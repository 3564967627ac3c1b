"""Seed resolution and explicit random-source construction.

Sampling never touches the global numpy or stdlib RNG state. A run builds
one numpy Generator from a resolved seed and passes it down explicitly; the
seed is logged so any run can be reproduced with ``--seed``.
"""

import logging
import os
import time

import numpy as np

log = logging.getLogger(__name__)

SEED_BITS = 64


def entropy_seed() -> int:
    """Draw a 64-bit seed from the OS entropy pool.

    Falls back to a nanosecond timestamp when no OS source is available.
    """
    try:
        return int.from_bytes(os.urandom(SEED_BITS // 8), "little")
    except NotImplementedError:
        log.warning("OS entropy source unavailable, falling back to time seed")
        return time.time_ns() % (1 << SEED_BITS)


def resolve_seed(seed: int | None = None) -> int:
    """Return `seed` unchanged, or a fresh entropy seed if it is None."""
    if seed is None:
        return entropy_seed()
    if seed < 0:
        raise ValueError(f"seed must be >= 0, got {seed}")
    return seed


def make_rng(seed: int | None = None) -> tuple[np.random.Generator, int]:
    """Build the random-source handle for one run.

    Args:
        seed: Fixed seed, or None to draw one from OS entropy.

    Returns:
        (generator, resolved_seed) so callers can record the seed used.
    """
    resolved = resolve_seed(seed)
    log.info("Random source seeded with %d", resolved)
    return np.random.default_rng(resolved), resolved
