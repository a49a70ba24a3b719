"""EntityGenerator: enemy spawns at the map edge and hero recruitment at guilds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kingdom.core.buildings import BUILDING_DEFS
from kingdom.core.classes import CLASS_DEFS
from kingdom.core.enemies import ENEMY_DEFS
from kingdom.core.enums import Domain, FailureReason
from kingdom.core.grid import ENEMY, HERO
from kingdom.core.models import Enemy, Hero, Vector2
from kingdom.core.results import CommandResult

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.world_state import WorldState
    from kingdom.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

_SPAWN_STREAM = 0   # entity id used for the spawner's own RNG stream


class EntityGenerator:
    """Creates new heroes and enemies. All randomness comes from the injected RNG."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    # ------------------------------------------------------------------
    # Enemies
    # ------------------------------------------------------------------

    def edge_position(self, width: int, height: int, tick: int) -> Vector2:
        """A uniformly chosen side, then a uniform cell along it."""
        rng = self._rng
        side = rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, 3, salt=0)
        match side:
            case 0:
                return Vector2(rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, width - 1, salt=1), 0)
            case 1:
                return Vector2(width - 1, rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, height - 1, salt=1))
            case 2:
                return Vector2(rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, width - 1, salt=1), height - 1)
            case _:
                return Vector2(0, rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, height - 1, salt=1))

    def spawn_enemy(self, world: WorldState) -> Enemy | None:
        """Spawn on a border cell, or return None if that cell is taken."""
        grid = world.grid
        tick = world.tick
        pos = self.edge_position(grid.width, grid.height, tick)
        if grid.building_at(pos) is not None or grid.hero_at(pos) is not None or grid.enemy_at(pos) is not None:
            logger.debug("Tick %d: Spawn cell %s occupied, skipping", tick, pos)
            return None

        types = list(ENEMY_DEFS)
        edef = ENEMY_DEFS[types[self._rng.next_int(Domain.SPAWN, _SPAWN_STREAM, tick, 0, len(types) - 1, salt=2)]]
        enemy = Enemy(
            id=world.allocate_id(ENEMY),
            enemy_type=edef.enemy_type,
            pos=pos,
            health=edef.health,
            max_health=edef.health,
            damage=edef.damage,
            reward=edef.reward,
        )
        world.add_entity(enemy)
        logger.info("Tick %d: %s %d spawned at %s", tick, edef.name, enemy.id, pos)
        return enemy

    # ------------------------------------------------------------------
    # Heroes
    # ------------------------------------------------------------------

    def recruit_hero(self, world: WorldState, guild_id: int) -> CommandResult:
        """Recruit the guild's archetype onto the guild cell (or a free neighbour)."""
        guild = world.buildings.get(guild_id)
        if guild is None:
            return CommandResult.failure(FailureReason.GUILD_MISSING, f"no building #{guild_id}")
        bdef = BUILDING_DEFS.get(guild.building_type)
        if bdef is None or not bdef.is_guild:
            return CommandResult.failure(FailureReason.GUILD_MISSING, f"building #{guild_id} is not a guild")

        cdef = CLASS_DEFS[bdef.hero_class]
        resources = world.resources
        if resources.free_population <= 0:
            return CommandResult.failure(FailureReason.POPULATION_CAP)
        if not resources.can_afford(gold=cdef.recruit_cost):
            return CommandResult.failure(FailureReason.INSUFFICIENT_RESOURCES)
        cell = world.hero_landing_cell(guild.pos)
        if cell is None:
            return CommandResult.failure(FailureReason.CELL_OCCUPIED, "no free cell at the guild")

        resources.spend(gold=cdef.recruit_cost)
        resources.population += 1
        hero = Hero(
            id=world.allocate_id(HERO),
            hero_class=cdef.class_id,
            pos=cell,
            health=cdef.health,
            max_health=cdef.health,
            damage=cdef.damage,
            speed=cdef.speed,
            guild_id=guild.id,
            target=cell,
            experience_to_next=self._config.base_experience,
            preferences=tuple(cdef.preferences),
        )
        world.add_entity(hero)
        world.statistics.heroes_recruited += 1
        logger.info("Tick %d: Recruited %s %d at %s", world.tick, cdef.name, hero.id, cell)
        return CommandResult.success(hero.id, f"{cdef.name} recruited")
