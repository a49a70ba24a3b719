"""Enemy types that spawn at the edge of the map."""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass


@pydantic_dataclass(frozen=True)
class EnemyDef:
    enemy_type: str
    name: str
    health: int
    damage: int
    reward: int


ENEMY_DEFS: dict[str, EnemyDef] = {}


def _reg(d: EnemyDef) -> EnemyDef:
    ENEMY_DEFS[d.enemy_type] = d
    return d


_reg(EnemyDef(enemy_type="goblin", name="Goblin", health=40, damage=8, reward=20))
_reg(EnemyDef(enemy_type="orc", name="Orc", health=60, damage=12, reward=35))
_reg(EnemyDef(enemy_type="troll", name="Troll", health=120, damage=25, reward=80))
