"""Domain-separated deterministic RNG using xxhash.

A generated level depends only on (seed, width, height, density): every
random decision is a pure hash of the seed, a domain and the cell being
decided, so the order cells are visited in never matters.

Formula: RNG_Value = Hash(WorldSeed, Domain, X, Y)
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from tilenav.core.enums import Domain
from tilenav.core.models import Cell

T = TypeVar("T")


class DeterministicRNG:
    """Stateless pseudo-random values keyed by (seed, domain, cell)."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, x: int, y: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, x, y)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, cell: Cell) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, cell.x, cell.y) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, cell: Cell, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, cell)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, cell: Cell, probability: float = 0.5) -> bool:
        return self.next_float(domain, cell) < probability

    def choice(self, domain: Domain, cell: Cell, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self.next_int(domain, cell, 0, len(items) - 1)]
