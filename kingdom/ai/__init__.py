"""AI subsystem: perception, tactics, target scoring, hero and enemy brains."""

from kingdom.ai.brain import HeroBrain
from kingdom.ai.enemy_brain import EnemyBrain
from kingdom.ai.perception import Perception
from kingdom.ai.tactics import Tactics

__all__ = ["EnemyBrain", "HeroBrain", "Perception", "Tactics"]
