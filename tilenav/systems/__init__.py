"""Engine systems: deterministic RNG and level generation."""

from tilenav.systems.generator import generate_level
from tilenav.systems.rng import DeterministicRNG

__all__ = ["DeterministicRNG", "generate_level"]
