"""Engine: tick loop, action resolution and the simulation facade."""

from kingdom.engine.action_resolver import ActionResolver
from kingdom.engine.simulation import KingdomSimulation, found_kingdom
from kingdom.engine.world_loop import WorldLoop

__all__ = ["ActionResolver", "KingdomSimulation", "WorldLoop", "found_kingdom"]
