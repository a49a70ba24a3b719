"""Domain-separated deterministic RNG using xxhash.

Every random draw in the kingdom goes through one injectable instance, so
tests can substitute a scripted source and assert exact outcomes.

Formula: value = Hash(WorldSeed, Domain, EntityID, Tick, Salt)
"""

from __future__ import annotations

import struct

import xxhash

from kingdom.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, entity_id, tick, salt);
    ``salt`` separates several draws made by one entity in one tick.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, entity_id: int, tick: int, salt: int) -> int:
        payload = struct.pack("<qiqqi", self._seed, domain.value, entity_id, tick, salt)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, entity_id: int, tick: int, salt: int = 0) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, entity_id, tick, salt) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, entity_id: int, tick: int, low: int, high: int, salt: int = 0) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, entity_id, tick, salt)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, entity_id: int, tick: int, probability: float = 0.5, salt: int = 0) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, entity_id, tick, salt) < probability
