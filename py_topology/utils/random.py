"""
Random source helpers.

Terrain generation takes its PRNG as an argument. This module only supplies
a process-wide fallback instance and seed creation for callers that do not
care about reproducibility.
"""

import uuid
from typing import Optional

from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng = None


def new_seed() -> str:
    """Short random seed string, same shape the API hands back to clients."""
    return str(uuid.uuid4())[:8]


def make_prng(seed: Optional[str] = None) -> AleaPRNG:
    """
    Build an independent PRNG.

    Args:
        seed: Seed string; a fresh one is drawn when omitted

    Returns:
        New AleaPRNG instance
    """
    return AleaPRNG(seed if seed is not None else new_seed())


def set_random_seed(seed: str) -> None:
    """Reseed the process-wide PRNG."""
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the process-wide PRNG, creating it with a random seed on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = make_prng()
    return _prng
