"""Perception system: Manhattan-range proximity lookups.

All methods are pure. Results keep the order of the input collection,
which for registry dicts is id order, so ties downstream are stable.
"""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from kingdom.core.models import Vector2


class Positioned(Protocol):
    id: int
    pos: Vector2


T = TypeVar("T", bound=Positioned)


class Perception:
    """Stateless perception utilities."""

    __slots__ = ()

    @staticmethod
    def nearby(origin: Vector2, collection: Iterable[T], range_: int) -> list[T]:
        """Every member whose Manhattan distance to *origin* is <= *range_*."""
        ox, oy = origin.x, origin.y
        return [e for e in collection if abs(e.pos.x - ox) + abs(e.pos.y - oy) <= range_]

    @staticmethod
    def nearest(origin: Vector2, collection: Iterable[T]) -> T | None:
        """Closest member, tie-broken by lowest id."""
        members = list(collection)
        if not members:
            return None
        return min(members, key=lambda e: (origin.manhattan(e.pos), e.id))

    @staticmethod
    def centroid(collection: Iterable[Positioned]) -> tuple[float, float] | None:
        members = list(collection)
        if not members:
            return None
        n = len(members)
        return sum(e.pos.x for e in members) / n, sum(e.pos.y for e in members) / n
