"""Reproducibility infrastructure: seed resolution and random-source handles."""

from randdot.reproducibility.seed import entropy_seed, make_rng, resolve_seed

__all__ = [
    "entropy_seed",
    "make_rng",
    "resolve_seed",
]
