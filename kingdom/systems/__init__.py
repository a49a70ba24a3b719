"""Systems: RNG, entity generation, economy, progression."""

from kingdom.systems.economy import cancel_flag, collect_income, upgrade_building
from kingdom.systems.generator import EntityGenerator
from kingdom.systems.progression import Progression
from kingdom.systems.rng import DeterministicRNG

__all__ = [
    "DeterministicRNG",
    "EntityGenerator",
    "Progression",
    "cancel_flag",
    "collect_income",
    "upgrade_building",
]
