"""EngineManager: owns one KingdomSimulation and ticks it on a background thread.

HTTP handlers read the latest published Snapshot (atomic reference swap)
and send commands through the manager; the simulation's own lock keeps
commands and ticks from interleaving.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any

from kingdom.core.results import CommandResult
from kingdom.core.snapshot import Snapshot
from kingdom.engine.simulation import KingdomSimulation
from kingdom.utils.event_log import EventLog

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the simulation lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (shared with the simulation)
      - control commands (start / pause / resume / step / reset)
      - player commands (buildings, flags, heroes, save/load)
    """

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config
        self._tick_rate: float = config.tick_rate

        self._sim: KingdomSimulation | None = None

        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def simulation(self) -> KingdomSimulation:
        assert self._sim is not None
        return self._sim

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self.simulation.resume()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="kingdom-loop", daemon=True)
        self._thread.start()
        self._publish_snapshot()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        self.simulation.pause()
        self._publish_snapshot()

    def resume(self) -> None:
        self._paused.clear()
        self.simulation.resume()
        self._publish_snapshot()

    def step(self) -> None:
        """Run exactly one tick now, leaving the simulation paused."""
        if not self._paused.is_set():
            self.pause()
        self.simulation.step()
        self._publish_snapshot()

    def stop(self) -> None:
        self._stop_requested.set()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Found a new kingdom, keeping the thread state (running or not) as it was."""
        self.simulation.restart()
        if self._paused.is_set():
            self.simulation.pause()
        self._publish_snapshot()
        logger.info("EngineManager reset.")

    # -- commands --

    def place_building(self, building_type: str, x: int, y: int) -> CommandResult:
        return self._command(self.simulation.place_building, building_type, x, y)

    def upgrade_building(self, building_id: int) -> CommandResult:
        return self._command(self.simulation.upgrade_building, building_id)

    def place_flag(self, flag_type: str, x: int, y: int) -> CommandResult:
        return self._command(self.simulation.place_flag, flag_type, x, y)

    def cancel_flag(self, flag_id: int) -> CommandResult:
        return self._command(self.simulation.cancel_flag, flag_id)

    def recruit_hero(self, guild_id: int) -> CommandResult:
        return self._command(self.simulation.spawn_hero_from_guild, guild_id)

    def assign_specialization(self, hero_id: int, spec_id: str) -> CommandResult:
        return self._command(self.simulation.assign_specialization, hero_id, spec_id)

    def equip_item(self, hero_id: int, equipment_id: str) -> CommandResult:
        return self._command(self.simulation.equip_item, hero_id, equipment_id)

    def save_document(self) -> dict[str, Any]:
        return self.simulation.to_document()

    def load_document(self, document: dict[str, Any]) -> None:
        """Replace the running world; SaveGameError leaves the current one untouched."""
        self.simulation.load_document(document)
        if self.simulation.paused:
            self._paused.set()
        else:
            self._paused.clear()
        self._publish_snapshot()

    def _command(self, func, *args) -> CommandResult:
        result = func(*args)
        if result.ok:
            self._publish_snapshot()
        else:
            logger.debug("Command %s%r rejected: %s", func.__name__, args, result.message)
        return result

    # -- internals --

    def _build(self) -> None:
        self._sim = KingdomSimulation(self._config, event_log=self._event_log)
        self._publish_snapshot()

    def _run_loop(self) -> None:
        """Main simulation loop running on a background thread."""
        logger.info("Simulation loop thread started.")
        while not self._stop_requested.is_set():
            if self._paused.is_set():
                time.sleep(0.01)
                continue
            try:
                self.simulation.advance_tick()
            except Exception:
                logger.exception("Tick %d failed; pausing the simulation", self.simulation.tick)
                self.pause()
                continue
            self._publish_snapshot()
            time.sleep(self._tick_rate)
        logger.info("Simulation loop thread exited.")

    def _publish_snapshot(self) -> None:
        snap = self.simulation.snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap
