"""Utilities for the simulation."""

from mycorrhiza.util.rng import MissingRNGError, RandomSource, require_rng_param, seed_for

__all__ = [
    "MissingRNGError",
    "RandomSource",
    "require_rng_param",
    "seed_for",
]
