"""Damage rolls for both sides of a hero/enemy exchange.

The hero's strike scales with tactical bonuses and can crit; the enemy's
counter is softened by the hero's damage reduction. Both add a small
integer noise drawn after the multipliers, so a critical hit doubles the
pre-noise damage exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.core.enums import Domain

if TYPE_CHECKING:
    from kingdom.ai.tactics import TacticalBonus
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Enemy, Hero
    from kingdom.systems.rng import DeterministicRNG

# Salt offsets so the draws of one exchange never share a stream.
_SALT_CRIT = 0
_SALT_HERO_NOISE = 1
_SALT_ENEMY_NOISE = 2


@dataclass(frozen=True, slots=True)
class DamageRoll:
    """Resolved damage of one strike."""

    base: float          # damage before noise (multipliers and crit applied)
    noise: int
    critical: bool = False

    @property
    def amount(self) -> int:
        return max(0, math.floor(self.base + self.noise))


def hero_strike(
    hero: Hero,
    enemy: Enemy,
    bonus: TacticalBonus,
    config: SimulationConfig,
    rng: DeterministicRNG,
    tick: int,
) -> DamageRoll:
    salt = enemy.id * 8
    critical = rng.next_bool(
        Domain.COMBAT, hero.id, tick, hero.crit_chance(config.base_crit_chance), salt=salt + _SALT_CRIT,
    )
    base = hero.effective_damage() * (1.0 + bonus.total)
    if critical:
        base *= 2
    noise = rng.next_int(Domain.COMBAT, hero.id, tick, 0, config.hero_damage_noise, salt=salt + _SALT_HERO_NOISE)
    return DamageRoll(base=base, noise=noise, critical=critical)


def enemy_strike(
    enemy: Enemy,
    hero: Hero,
    config: SimulationConfig,
    rng: DeterministicRNG,
    tick: int,
) -> DamageRoll:
    """At least ``1 - max_damage_reduction`` of the raw hit lands, and never less than 1."""
    reduction = hero.damage_reduction(config.max_damage_reduction)
    base = enemy.damage * (1.0 - reduction)
    noise = rng.next_int(
        Domain.COMBAT, enemy.id, tick, 0, config.enemy_damage_noise, salt=hero.id * 8 + _SALT_ENEMY_NOISE,
    )
    return DamageRoll(base=max(base, 1.0), noise=noise)
