"""Grid: per-cell occupancy index for the four entity categories.

A cell only *references* occupants by id; the WorldState owns them.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple

from kingdom.core.models import Vector2

BUILDING = "building"
HERO = "hero"
ENEMY = "enemy"
FLAG = "flag"

CATEGORIES: tuple[str, ...] = (BUILDING, HERO, ENEMY, FLAG)


class Cell(NamedTuple):
    """Read-only view of one grid cell."""

    x: int
    y: int
    building: int | None
    hero: int | None
    enemy: int | None
    flag: int | None

    @property
    def empty(self) -> bool:
        return self.building is None and self.hero is None and self.enemy is None and self.flag is None


class Grid:
    """2D occupancy grid backed by one flat list per category."""

    __slots__ = ("width", "height", "_layers")

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._layers: dict[str, list[int | None]] = {
            category: [None] * (width * height) for category in CATEGORIES
        }

    # -- access --

    def _idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get(self, category: str, pos: Vector2) -> int | None:
        if not self.in_bounds(pos):
            return None
        return self._layers[category][self._idx(pos.x, pos.y)]

    def set(self, category: str, pos: Vector2, entity_id: int | None) -> None:
        if self.in_bounds(pos):
            self._layers[category][self._idx(pos.x, pos.y)] = entity_id

    def clear(self, category: str, pos: Vector2, entity_id: int) -> None:
        """Clear the cell reference only if it still points at ``entity_id``."""
        if self.get(category, pos) == entity_id:
            self.set(category, pos, None)

    # -- convenience --

    def building_at(self, pos: Vector2) -> int | None:
        return self.get(BUILDING, pos)

    def hero_at(self, pos: Vector2) -> int | None:
        return self.get(HERO, pos)

    def enemy_at(self, pos: Vector2) -> int | None:
        return self.get(ENEMY, pos)

    def flag_at(self, pos: Vector2) -> int | None:
        return self.get(FLAG, pos)

    def cell(self, pos: Vector2) -> Cell:
        i = self._idx(pos.x, pos.y)
        return Cell(
            pos.x, pos.y,
            self._layers[BUILDING][i],
            self._layers[HERO][i],
            self._layers[ENEMY][i],
            self._layers[FLAG][i],
        )

    def occupied_cells(self) -> Iterator[Cell]:
        """Yield every cell holding at least one reference, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                c = self.cell(Vector2(x, y))
                if not c.empty:
                    yield c

    def references(self, category: str) -> Iterator[tuple[Vector2, int]]:
        layer = self._layers[category]
        for i, entity_id in enumerate(layer):
            if entity_id is not None:
                yield Vector2(i % self.width, i // self.width), entity_id

    def is_edge(self, pos: Vector2) -> bool:
        return pos.x in (0, self.width - 1) or pos.y in (0, self.height - 1)

    # -- copy --

    def copy(self) -> Grid:
        new = Grid.__new__(Grid)
        new.width = self.width
        new.height = self.height
        new._layers = {category: list(layer) for category, layer in self._layers.items()}
        return new
