"""KingdomSimulation: the one object that owns a running kingdom.

Readers get immutable snapshots or subscribe to events. Writers go through
the command methods, each of which returns a CommandResult. Every command
and every tick runs under one re-entrant lock, so a multi-threaded host
(see ``kingdom.api.engine_manager``) can drive ticks from a background
thread while HTTP handlers issue commands.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from kingdom.config import SimulationConfig
from kingdom.core.buildings import BUILDING_DEFS
from kingdom.core.document import from_document, to_document
from kingdom.core.enums import FailureReason
from kingdom.core.grid import Grid
from kingdom.core.models import Resources, Vector2
from kingdom.core.results import CommandResult
from kingdom.core.snapshot import Snapshot
from kingdom.core.world_state import WorldState
from kingdom.engine.world_loop import WorldLoop
from kingdom.systems.economy import cancel_flag, upgrade_building
from kingdom.systems.generator import EntityGenerator
from kingdom.systems.progression import Progression
from kingdom.systems.rng import DeterministicRNG
from kingdom.utils.event_log import EventLog, SimEvent

logger = logging.getLogger(__name__)


def found_kingdom(config: SimulationConfig) -> WorldState:
    """A fresh world: starting treasury and a castle in the middle of the map."""
    grid = Grid(config.grid_width, config.grid_height)
    resources = Resources(
        gold=config.start_gold,
        mana=config.start_mana,
        supplies=config.start_supplies,
        population=config.start_population,
        max_population=config.start_max_population,
    )
    world = WorldState(seed=config.world_seed, grid=grid, resources=resources)
    world.found_castle(Vector2(config.grid_width // 2, config.grid_height // 2))
    return world


class KingdomSimulation:
    """Command, query, event and persistence surface of the simulation core."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: DeterministicRNG | None = None,
        world: WorldState | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self._config = config or SimulationConfig()
        self._rng = rng or DeterministicRNG(self._config.world_seed)
        self._lock = threading.RLock()
        self._events = event_log or EventLog()
        self._paused = False
        self._progression = Progression(self._config)
        self._generator = EntityGenerator(self._config, self._rng)
        self._world = world if world is not None else found_kingdom(self._config)
        self._loop = WorldLoop(self._config, self._world, self._rng, self._progression, self._generator)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def world(self) -> WorldState:
        """Live world. Mutate only through commands; read through snapshot()."""
        return self._world

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def game_over(self) -> bool:
        return self._world.game_over

    @property
    def tick(self) -> int:
        return self._world.tick

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot.from_world(self._world, paused=self._paused)

    # ------------------------------------------------------------------
    # Event surface
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[SimEvent], None]) -> Callable[[], None]:
        return self._events.subscribe(callback)

    def _emit(self, category: str, message: str, entity_ids: tuple[int, ...] = (),
              metadata: dict | None = None) -> None:
        self._events.append(SimEvent(
            tick=self._world.tick, category=category, message=message,
            entity_ids=entity_ids, metadata=metadata,
        ))

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def advance_tick(self) -> bool:
        """Run one tick unless paused or over. Returns True if a tick ran."""
        with self._lock:
            if self._paused:
                return False
            return self._run_tick()

    def step(self) -> bool:
        """Run exactly one tick, even while paused."""
        with self._lock:
            return self._run_tick()

    def _run_tick(self) -> bool:
        if self._world.game_over:
            return False
        ticked_from = self._world.tick
        self._loop.tick_once()
        events = list(self._loop.tick_events)
        if events:
            self._events.append_many(events)
        return self._world.tick > ticked_from

    def pause(self) -> CommandResult:
        with self._lock:
            self._paused = True
            logger.info("Simulation paused at tick %d", self._world.tick)
            return CommandResult.success(message="paused")

    def resume(self) -> CommandResult:
        with self._lock:
            self._paused = False
            logger.info("Simulation resumed at tick %d", self._world.tick)
            return CommandResult.success(message="resumed")

    def restart(self) -> CommandResult:
        with self._lock:
            self._install(found_kingdom(self._config), paused=False)
            self._events.clear()
            logger.info("Simulation restarted")
            self._emit("restart", "A new kingdom has been founded.")
            return CommandResult.success(message="restarted")

    def _install(self, world: WorldState, paused: bool) -> None:
        self._world = world
        self._loop.world = world
        self._paused = paused

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _closed(self) -> CommandResult | None:
        if self._world.game_over:
            return CommandResult.failure(FailureReason.GAME_OVER, "the kingdom has fallen")
        return None

    def place_building(self, building_type: str, x: int, y: int) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            result = self._world.place_building(building_type, x, y)
            if result.ok:
                name = BUILDING_DEFS[building_type].name
                self._emit("building_placed", f"{name} built at ({x}, {y})", (result.entity_id,),
                           {"building_type": building_type})
            return result

    def place_flag(self, flag_type: str, x: int, y: int) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            result = self._world.place_flag(flag_type, x, y)
            if result.ok:
                self._emit("flag_placed", f"{flag_type.capitalize()} flag placed at ({x}, {y})",
                           (result.entity_id,), {"flag_type": flag_type})
            return result

    def cancel_flag(self, flag_id: int) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            result = cancel_flag(self._world, flag_id, self._config.flag_refund_ratio)
            if result.ok:
                self._emit("flag_cancelled", result.message, (flag_id,))
            return result

    def spawn_hero_from_guild(self, guild_id: int) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            result = self._generator.recruit_hero(self._world, guild_id)
            if result.ok:
                hero = self._world.heroes[result.entity_id]
                self._emit("hero_recruited", f"A {hero.hero_class} joined the kingdom",
                           (hero.id, guild_id), {"hero_class": hero.hero_class})
            return result

    def upgrade_building(self, building_id: int) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            result = upgrade_building(self._world, building_id)
            if result.ok:
                building = self._world.buildings[building_id]
                self._emit("building_upgraded", result.message, (building_id,), {"level": building.level})
            return result

    def assign_specialization(self, hero_id: int, spec_id: str) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            hero = self._world.heroes.get(hero_id)
            if hero is None:
                return CommandResult.failure(FailureReason.NOT_FOUND, f"no hero #{hero_id}")
            result = self._progression.assign_specialization(hero, spec_id)
            if result.ok:
                self._emit("specialization", result.message, (hero_id,), {"specialization": spec_id})
            return result

    def equip_item(self, hero_id: int, equipment_id: str) -> CommandResult:
        with self._lock:
            if (closed := self._closed()) is not None:
                return closed
            hero = self._world.heroes.get(hero_id)
            if hero is None:
                return CommandResult.failure(FailureReason.NOT_FOUND, f"no hero #{hero_id}")
            result = self._progression.equip(hero, equipment_id, self._world.resources)
            if result.ok:
                self._emit("item_equipped", result.message, (hero_id,), {"equipment": equipment_id})
            return result

    # ------------------------------------------------------------------
    # Persistence boundary
    # ------------------------------------------------------------------

    def to_document(self) -> dict[str, Any]:
        with self._lock:
            document = to_document(self._world)
            document["paused"] = self._paused
            return document

    def load_document(self, document: dict[str, Any]) -> None:
        """Replace the running world. A bad document raises SaveGameError and changes nothing."""
        world = from_document(document)
        with self._lock:
            self._install(world, paused=bool(document.get("paused", False)))
            logger.info("Loaded save at tick %d", world.tick)
            self._emit("loaded", f"Save loaded at tick {world.tick}")

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any],
        config: SimulationConfig | None = None,
        rng: DeterministicRNG | None = None,
    ) -> KingdomSimulation:
        sim = cls(config=config, rng=rng, world=from_document(document))
        sim._paused = bool(document.get("paused", False))
        return sim
