"""RNG utilities for deterministic simulation.

Every random draw in the simulation goes through an RNG that is handed in
explicitly, so a seeded session replays exactly. This module provides the
structural type engines accept and a helper that fails loudly when an RNG
was not provided, rather than silently creating an unseeded fallback.
"""

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    """The subset of ``random.Random`` the engines draw from."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...


class MissingRNGError(RuntimeError):
    """Raised when an RNG is required but not available.

    This error indicates a bug in the simulation setup - engines and
    managers should receive the session's RNG.
    """


def require_rng_param(rng: Optional[RandomSource], context: str) -> RandomSource:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self.rng = require_rng_param(rng, "GrowthEngine.__init__")
    """
    if rng is None:
        raise MissingRNGError(
            f"RNG required: {context}. Pass the session RNG explicitly."
        )
    return rng


def seed_for(seed: Optional[int]) -> int:
    """Return ``seed`` or a fresh one from system entropy."""
    if seed is not None:
        return seed
    return random.SystemRandom().randint(0, 2**31 - 1)
