"""Mutable authoritative world state: the entity registry and its grid index."""

from __future__ import annotations

import logging

from kingdom.core.buildings import BUILDING_DEFS, CASTLE, BuildingDef
from kingdom.core.enums import FailureReason
from kingdom.core.flags import FLAG_DEFS
from kingdom.core.grid import BUILDING, CATEGORIES, ENEMY, FLAG, HERO, Grid
from kingdom.core.models import CARDINAL_OFFSETS, Building, Enemy, Flag, GameStatistics, Hero, Resources, Vector2
from kingdom.core.results import CommandResult

logger = logging.getLogger(__name__)

Entity = Building | Hero | Enemy | Flag

_CATEGORY_BY_TYPE: dict[type, str] = {
    Building: BUILDING,
    Hero: HERO,
    Enemy: ENEMY,
    Flag: FLAG,
}


def category_of(entity: Entity) -> str:
    return _CATEGORY_BY_TYPE[type(entity)]


class WorldState:
    """The single source of truth for the kingdom.

    Every placement, move and removal goes through this class so that the
    per-category collections and the grid never disagree.
    """

    __slots__ = (
        "tick", "seed", "grid", "resources", "statistics",
        "buildings", "heroes", "enemies", "flags",
        "game_over", "game_over_reason", "_next_ids",
    )

    def __init__(self, seed: int, grid: Grid, resources: Resources | None = None) -> None:
        self.tick: int = 0
        self.seed: int = seed
        self.grid: Grid = grid
        self.resources: Resources = resources if resources is not None else Resources()
        self.statistics: GameStatistics = GameStatistics()
        self.buildings: dict[int, Building] = {}
        self.heroes: dict[int, Hero] = {}
        self.enemies: dict[int, Enemy] = {}
        self.flags: dict[int, Flag] = {}
        self.game_over: bool = False
        self.game_over_reason: str = ""
        self._next_ids: dict[str, int] = {category: 1 for category in CATEGORIES}

    # -- identifiers --

    def allocate_id(self, category: str) -> int:
        eid = self._next_ids[category]
        self._next_ids[category] += 1
        return eid

    @property
    def next_ids(self) -> dict[str, int]:
        return dict(self._next_ids)

    def restore_counters(self, counters: dict[str, int]) -> None:
        for category in CATEGORIES:
            self._next_ids[category] = int(counters.get(category, 1))

    # -- collections --

    def collection(self, category: str) -> dict:
        match category:
            case "building":
                return self.buildings
            case "hero":
                return self.heroes
            case "enemy":
                return self.enemies
            case "flag":
                return self.flags
        raise KeyError(category)

    def castle(self) -> Building | None:
        for b in self.buildings.values():
            if b.building_type == CASTLE:
                return b
        return None

    def buildings_of_type(self, building_type: str) -> list[Building]:
        return [b for b in self.buildings.values() if b.building_type == building_type]

    # -- registration --

    def add_entity(self, entity: Entity) -> None:
        """Register an already-validated entity in its collection and cell."""
        category = category_of(entity)
        self.collection(category)[entity.id] = entity
        self.grid.set(category, entity.pos, entity.id)

    def remove_entity(self, entity: Entity) -> None:
        """Detach from cell and registry. Unregistered entities are ignored."""
        category = category_of(entity)
        registered = self.collection(category).pop(entity.id, None)
        if registered is None:
            return
        self.grid.clear(category, registered.pos, registered.id)

    def can_enter(self, entity: Hero | Enemy, pos: Vector2) -> bool:
        """Heroes are blocked by buildings and heroes; enemies by buildings and enemies."""
        if not self.grid.in_bounds(pos):
            return False
        if self.grid.building_at(pos) is not None:
            return False
        category = category_of(entity)
        occupant = self.grid.get(category, pos)
        return occupant is None or occupant == entity.id

    def move_entity(self, entity: Hero | Enemy, pos: Vector2) -> bool:
        if not self.can_enter(entity, pos):
            return False
        category = category_of(entity)
        if entity.id not in self.collection(category):
            return False
        self.grid.clear(category, entity.pos, entity.id)
        entity.pos = pos
        self.grid.set(category, pos, entity.id)
        return True

    def relocate(self, entity: Hero | Enemy, pos: Vector2) -> None:
        """Move without movement rules (recruitment, respawn). Caller checks the cell."""
        category = category_of(entity)
        self.grid.clear(category, entity.pos, entity.id)
        entity.pos = pos
        self.grid.set(category, pos, entity.id)

    def hero_landing_cell(self, pos: Vector2, hero_id: int | None = None) -> Vector2 | None:
        """*pos* if no other hero stands there, else the first free N/E/S/W neighbour."""
        if self.grid.in_bounds(pos) and self.grid.hero_at(pos) in (None, hero_id):
            return pos
        for off in CARDINAL_OFFSETS:
            cell = pos + off
            if (
                self.grid.in_bounds(cell)
                and self.grid.hero_at(cell) in (None, hero_id)
                and self.grid.building_at(cell) is None
            ):
                return cell
        return None

    # -- placement --

    def found_castle(self, pos: Vector2) -> Building:
        """Place the kingdom's castle for free. Only used when founding a world."""
        castle = self._register_building(BUILDING_DEFS[CASTLE], pos, cost_paid=0)
        logger.info("Castle founded at %s", pos)
        return castle

    def place_building(self, building_type: str, x: int, y: int) -> CommandResult:
        pos = Vector2(x, y)
        if not self.grid.in_bounds(pos):
            return CommandResult.failure(FailureReason.OUT_OF_BOUNDS)
        bdef = BUILDING_DEFS.get(building_type)
        if bdef is None:
            return CommandResult.failure(FailureReason.UNKNOWN_TYPE, f"unknown building type {building_type!r}")
        if not bdef.placeable:
            return CommandResult.failure(FailureReason.NOT_ELIGIBLE, f"{bdef.name} cannot be built")
        if self.grid.building_at(pos) is not None:
            return CommandResult.failure(FailureReason.CELL_OCCUPIED)
        if not self.resources.spend(gold=bdef.gold_cost, supplies=bdef.supplies_cost):
            return CommandResult.failure(FailureReason.INSUFFICIENT_RESOURCES)

        building = self._register_building(bdef, pos, cost_paid=bdef.gold_cost)
        self.statistics.buildings_constructed += 1
        logger.info("Tick %d: Built %s #%d at %s", self.tick, bdef.name, building.id, pos)
        return CommandResult.success(building.id, f"{bdef.name} built")

    def _register_building(self, bdef: BuildingDef, pos: Vector2, cost_paid: int) -> Building:
        building = Building(
            id=self.allocate_id(BUILDING),
            building_type=bdef.building_type,
            pos=pos,
            gold_income=bdef.gold_income,
            mana_income=bdef.mana_income,
            supplies_income=bdef.supplies_income,
            housing=bdef.housing,
            cost_paid=cost_paid,
        )
        self.add_entity(building)
        self.resources.max_population += bdef.housing
        return building

    def place_flag(self, flag_type: str, x: int, y: int) -> CommandResult:
        pos = Vector2(x, y)
        if not self.grid.in_bounds(pos):
            return CommandResult.failure(FailureReason.OUT_OF_BOUNDS)
        fdef = FLAG_DEFS.get(flag_type)
        if fdef is None:
            return CommandResult.failure(FailureReason.UNKNOWN_TYPE, f"unknown flag type {flag_type!r}")
        if self.grid.flag_at(pos) is not None or self.grid.building_at(pos) is not None:
            return CommandResult.failure(FailureReason.CELL_OCCUPIED)
        if not self.resources.spend(gold=fdef.cost):
            return CommandResult.failure(FailureReason.INSUFFICIENT_RESOURCES)

        flag = Flag(id=self.allocate_id(FLAG), flag_type=flag_type, pos=pos, reward=fdef.reward, cost=fdef.cost)
        self.add_entity(flag)
        logger.info("Tick %d: Placed %s #%d at %s", self.tick, fdef.name, flag.id, pos)
        return CommandResult.success(flag.id, f"{fdef.name} placed")

    # -- consistency --

    def check_invariants(self) -> None:
        """Raise AssertionError on the first grid/registry desync found."""
        for category in CATEGORIES:
            entities = self.collection(category)
            for eid, entity in entities.items():
                assert entity.id == eid, f"{category} #{eid} stored under wrong key"
                assert eid < self._next_ids[category], f"{category} #{eid} beyond id counter"
                assert self.grid.get(category, entity.pos) == eid, (
                    f"{category} #{eid} at {entity.pos} missing from its cell"
                )
            seen: set[int] = set()
            for pos, eid in self.grid.references(category):
                assert eid not in seen, f"{category} #{eid} referenced by more than one cell"
                seen.add(eid)
                entity = entities.get(eid)
                assert entity is not None, f"cell {pos} references unregistered {category} #{eid}"
                assert entity.pos == pos, f"{category} #{eid} stored at {entity.pos} but cell is {pos}"
        res = self.resources
        assert min(res.gold, res.mana, res.supplies, res.population) >= 0, "negative resource"
        assert res.population <= res.max_population, "population above cap"
