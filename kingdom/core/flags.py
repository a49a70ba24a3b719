"""Reward flags the player plants to steer heroes.

A flag's type matches the hero preference vocabulary. Its reward equals
its placement cost and is paid to the hero who collects it.
"""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass


@pydantic_dataclass(frozen=True)
class FlagDef:
    flag_type: str
    name: str
    cost: int
    description: str = ""

    @property
    def reward(self) -> int:
        return self.cost


FLAG_DEFS: dict[str, FlagDef] = {}


def _reg(d: FlagDef) -> FlagDef:
    FLAG_DEFS[d.flag_type] = d
    return d


_reg(FlagDef(flag_type="attack", name="Attack Flag", cost=50,
             description="Bounty paid for clearing enemies from a spot"))
_reg(FlagDef(flag_type="explore", name="Explore Flag", cost=30,
             description="Rewards heroes for scouting a location"))
_reg(FlagDef(flag_type="defend", name="Defend Flag", cost=40,
             description="Draws heroes to hold a position"))
_reg(FlagDef(flag_type="gold", name="Gold Flag", cost=60,
             description="A purse for heroes short on coin"))
