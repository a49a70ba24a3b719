"""World <-> plain document codec.

The document holds only dicts, lists, strings, numbers, booleans and None,
so any JSON or key-value store can persist it verbatim. Identifier counters
travel with the document: entities created after a load never collide with
loaded ones.

Decoding validates field types with pydantic, then admits entities one by
one with explicit checks, so a bad document never yields a half-consistent
world.
"""

from __future__ import annotations

from dataclasses import asdict
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from kingdom.core.buildings import BUILDING_DEFS
from kingdom.core.classes import CLASS_DEFS, SPECIALIZATION_DEFS
from kingdom.core.enemies import ENEMY_DEFS
from kingdom.core.flags import FLAG_DEFS
from kingdom.core.grid import Grid
from kingdom.core.items import EQUIPMENT_DEFS
from kingdom.core.models import Building, Enemy, Flag, GameStatistics, Hero, Resources
from kingdom.core.world_state import Entity, WorldState, category_of

DOCUMENT_VERSION = 1


class SaveGameError(ValueError):
    """Raised when a document cannot be turned back into a consistent world."""


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def to_document(world: WorldState) -> dict[str, Any]:
    return {
        "version": DOCUMENT_VERSION,
        "tick": world.tick,
        "seed": world.seed,
        "width": world.grid.width,
        "height": world.grid.height,
        "game_over": world.game_over,
        "game_over_reason": world.game_over_reason,
        "next_ids": world.next_ids,
        "resources": _plain(asdict(world.resources)),
        "statistics": _plain(asdict(world.statistics)),
        "buildings": [_plain(asdict(b)) for b in world.buildings.values()],
        "heroes": [_plain(asdict(h)) for h in world.heroes.values()],
        "enemies": [_plain(asdict(e)) for e in world.enemies.values()],
        "flags": [_plain(asdict(f)) for f in world.flags.values()],
    }


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class SaveDocument(BaseModel):
    """Shape of a version-1 document. Entity fields are typed by the engine dataclasses."""

    version: int
    tick: int = Field(ge=0)
    seed: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    game_over: bool = False
    game_over_reason: str = ""
    next_ids: dict[str, int]
    resources: Resources
    statistics: GameStatistics = Field(default_factory=GameStatistics)
    buildings: list[Building] = Field(default_factory=list)
    heroes: list[Hero] = Field(default_factory=list)
    enemies: list[Enemy] = Field(default_factory=list)
    flags: list[Flag] = Field(default_factory=list)


def _unknown_reference(entity: Entity) -> str | None:
    """Name the first catalog id *entity* refers to that does not exist."""
    match entity:
        case Building():
            if entity.building_type not in BUILDING_DEFS:
                return f"building type {entity.building_type!r}"
        case Hero():
            if entity.hero_class not in CLASS_DEFS:
                return f"hero class {entity.hero_class!r}"
            for equipment_id in (entity.weapon, entity.armor, entity.accessory):
                if equipment_id is not None and equipment_id not in EQUIPMENT_DEFS:
                    return f"equipment {equipment_id!r}"
            if entity.specialization is not None and entity.specialization not in SPECIALIZATION_DEFS:
                return f"specialization {entity.specialization!r}"
        case Enemy():
            if entity.enemy_type not in ENEMY_DEFS:
                return f"enemy type {entity.enemy_type!r}"
        case Flag():
            if entity.flag_type not in FLAG_DEFS:
                return f"flag type {entity.flag_type!r}"
    return None


def _admit(world: WorldState, entity: Entity) -> None:
    """Register *entity*, raising SaveGameError if it would break a world invariant."""
    category = category_of(entity)
    label = f"{category} #{entity.id}"
    if not 1 <= entity.id < world.next_ids[category]:
        raise SaveGameError(f"{label} outside the id counter {world.next_ids[category]}")
    if entity.id in world.collection(category):
        raise SaveGameError(f"{label} appears twice")
    if not world.grid.in_bounds(entity.pos):
        raise SaveGameError(f"{label} out of bounds at {entity.pos}")
    occupant = world.grid.get(category, entity.pos)
    if occupant is not None:
        raise SaveGameError(f"two {category} entities at {entity.pos}: #{occupant} and #{entity.id}")
    unknown = _unknown_reference(entity)
    if unknown is not None:
        raise SaveGameError(f"{label} refers to unknown {unknown}")
    world.add_entity(entity)


def from_document(doc: dict[str, Any]) -> WorldState:
    """Rebuild a world (grid included) from a document.

    Raises SaveGameError for malformed or inconsistent input; nothing
    outside the returned object is touched.
    """
    if not isinstance(doc, dict):
        raise SaveGameError("save document must be a mapping")
    version = doc.get("version")
    if version != DOCUMENT_VERSION:
        raise SaveGameError(f"unsupported save document version {version!r}")

    try:
        parsed = SaveDocument.model_validate(doc)
    except ValidationError as exc:
        raise SaveGameError(f"malformed save document: {exc}") from exc

    res = parsed.resources
    if min(res.gold, res.mana, res.supplies, res.population) < 0:
        raise SaveGameError("negative resource in save document")
    if res.population > res.max_population:
        raise SaveGameError(f"population {res.population} above cap {res.max_population}")

    world = WorldState(seed=parsed.seed, grid=Grid(parsed.width, parsed.height), resources=res)
    world.tick = parsed.tick
    world.statistics = parsed.statistics
    world.game_over = parsed.game_over
    world.game_over_reason = parsed.game_over_reason
    world.restore_counters(parsed.next_ids)

    for entities in (parsed.buildings, parsed.heroes, parsed.enemies, parsed.flags):
        for entity in entities:
            _admit(world, entity)
    return world
