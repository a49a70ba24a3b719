"""Target scoring for the hero decision engine.

EnemyScorer   - additive utility of attacking a visible enemy.
FlagScorer    - additive utility of walking to a visible flag.
ArchetypeAffinity / AFFINITY_REGISTRY - per-archetype enemy preferences.

To add an archetype preference, subclass ArchetypeAffinity and call
``register_affinity()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from kingdom.ai.tactics import Tactics
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Enemy, Flag, Hero
    from kingdom.core.world_state import WorldState


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

PROXIMITY_WEIGHT = 10.0
ONE_HIT_KILL_BONUS = 30.0
TWO_HIT_KILL_BONUS = 15.0
TACTICAL_WEIGHT = 100.0

FLAG_PROXIMITY_WEIGHT = 5.0
PREFERENCE_BONUS = 50.0
ATTACK_FLAG_THREAT_BONUS = 30.0
EXPLORE_FLAG_CLEAR_BONUS = 20.0
LOW_GOLD_THRESHOLD = 50
LOW_GOLD_BONUS = 20.0
HURT_DEFEND_BONUS = 15.0


@dataclass(frozen=True, slots=True)
class ScoredTarget:
    target_id: int
    score: float


# ---------------------------------------------------------------------------
# Archetype affinities
# ---------------------------------------------------------------------------

class ArchetypeAffinity(ABC):
    """Archetype-specific bonus added to every enemy score."""

    @abstractmethod
    def score(self, hero: Hero, enemy: Enemy, visible: Sequence[Enemy]) -> float:
        """Return an additive bonus (may be 0)."""


class TankAffinity(ArchetypeAffinity):
    """Prefers the hardest-hitting enemy, drawing it away from softer allies."""

    def score(self, hero: Hero, enemy: Enemy, visible: Sequence[Enemy]) -> float:
        return float(enemy.damage)


class BurstAffinity(ArchetypeAffinity):
    """Prefers enemies that are nearly dead."""

    def score(self, hero: Hero, enemy: Enemy, visible: Sequence[Enemy]) -> float:
        missing = 1.0 - enemy.health / enemy.max_health if enemy.max_health else 0.0
        return 20.0 * missing + max(0, 40 - enemy.health) * 0.5


class RangedAffinity(ArchetypeAffinity):
    """Prefers targets it can engage while still keeping some distance."""

    def score(self, hero: Hero, enemy: Enemy, visible: Sequence[Enemy]) -> float:
        return 5.0 * min(hero.pos.manhattan(enemy.pos), 3)


class CasterAffinity(ArchetypeAffinity):
    """Gets more out of fights with several enemies around."""

    def score(self, hero: Hero, enemy: Enemy, visible: Sequence[Enemy]) -> float:
        return 10.0 * max(0, len(visible) - 1)


AFFINITY_REGISTRY: dict[str, ArchetypeAffinity] = {}


def register_affinity(hero_class: str, affinity: ArchetypeAffinity) -> ArchetypeAffinity:
    AFFINITY_REGISTRY[hero_class] = affinity
    return affinity


register_affinity("warrior", TankAffinity())
register_affinity("rogue", BurstAffinity())
register_affinity("ranger", RangedAffinity())
register_affinity("wizard", CasterAffinity())


# ---------------------------------------------------------------------------
# Enemy scoring
# ---------------------------------------------------------------------------

class EnemyScorer:
    """Scores visible enemies; highest wins, earlier (lower id) wins ties."""

    __slots__ = ("_tactics",)

    def __init__(self, tactics: Tactics) -> None:
        self._tactics = tactics

    def score(self, world: WorldState, hero: Hero, enemy: Enemy, visible: Sequence[Enemy], sight: int) -> float:
        distance = hero.pos.manhattan(enemy.pos)
        total = PROXIMITY_WEIGHT * max(0, sight + 1 - distance)

        damage = hero.effective_damage()
        if damage >= enemy.health:
            total += ONE_HIT_KILL_BONUS
        elif damage * 2 >= enemy.health:
            total += TWO_HIT_KILL_BONUS

        affinity = AFFINITY_REGISTRY.get(hero.hero_class)
        if affinity is not None:
            total += affinity.score(hero, enemy, visible)

        total += TACTICAL_WEIGHT * self._tactics.bonus(world, hero, enemy).total
        return total

    def best(self, world: WorldState, hero: Hero, visible: Sequence[Enemy], sight: int) -> ScoredTarget | None:
        best: ScoredTarget | None = None
        for enemy in visible:
            s = self.score(world, hero, enemy, visible, sight)
            if best is None or s > best.score:
                best = ScoredTarget(enemy.id, s)
        return best


# ---------------------------------------------------------------------------
# Flag scoring
# ---------------------------------------------------------------------------

class FlagScorer:
    """Scores visible flags; highest wins, earlier (lower id) wins ties."""

    __slots__ = ("_config",)

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config

    def score(self, hero: Hero, flag: Flag, enemies_near: bool) -> float:
        cfg = self._config
        distance = hero.pos.manhattan(flag.pos)
        total = FLAG_PROXIMITY_WEIGHT * max(0, cfg.flag_sight_range + 1 - distance)

        if flag.flag_type in hero.preferences:
            total += PREFERENCE_BONUS

        match flag.flag_type:
            case "attack" if enemies_near:
                total += ATTACK_FLAG_THREAT_BONUS
            case "explore" if not enemies_near:
                total += EXPLORE_FLAG_CLEAR_BONUS
            case "gold" if hero.gold < LOW_GOLD_THRESHOLD:
                total += LOW_GOLD_BONUS
            case "defend" if cfg.retreat_threshold <= hero.health_ratio < cfg.aggression_threshold:
                total += HURT_DEFEND_BONUS
        return total

    def best(self, hero: Hero, visible: Sequence[Flag], enemies_near: bool) -> ScoredTarget | None:
        best: ScoredTarget | None = None
        for flag in visible:
            s = self.score(hero, flag, enemies_near)
            if best is None or s > best.score:
                best = ScoredTarget(flag.id, s)
        return best
