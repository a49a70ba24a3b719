"""Building definitions: costs, income, housing, upgrade paths.

Guild buildings additionally name the hero archetype they recruit.
The castle is placed once when the kingdom is founded and cannot be
placed by the player.
"""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass


# ---------------------------------------------------------------------------
# Definition models
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class UpgradeDef:
    """One level of a building's upgrade path."""

    level: int
    name: str
    gold_cost: int = 0
    supplies_cost: int = 0
    gold_bonus: int = 0
    mana_bonus: int = 0
    supplies_bonus: int = 0
    housing_bonus: int = 0
    description: str = ""


@pydantic_dataclass(frozen=True)
class BuildingDef:
    """Immutable blueprint for a building type."""

    building_type: str
    name: str
    gold_cost: int = 0
    supplies_cost: int = 0
    gold_income: int = 0
    mana_income: int = 0
    supplies_income: int = 0
    housing: int = 0
    max_level: int = 5
    hero_class: str | None = None
    placeable: bool = True
    upgrades: tuple[UpgradeDef, ...] = ()
    description: str = ""

    @property
    def is_guild(self) -> bool:
        return self.hero_class is not None

    def upgrade_for(self, level: int) -> UpgradeDef | None:
        """Return the upgrade that takes a building *to* ``level``."""
        for upgrade in self.upgrades:
            if upgrade.level == level:
                return upgrade
        return None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

BUILDING_DEFS: dict[str, BuildingDef] = {}


def _reg(d: BuildingDef) -> BuildingDef:
    BUILDING_DEFS[d.building_type] = d
    return d


CASTLE = "castle"

_reg(BuildingDef(
    building_type=CASTLE, name="Castle",
    gold_income=10, housing=5, max_level=10, placeable=False,
    upgrades=(
        UpgradeDef(level=2, name="Royal Quarters", gold_cost=500, gold_bonus=5, housing_bonus=2,
                   description="Royal quarters raise income and housing"),
        UpgradeDef(level=3, name="Treasury", gold_cost=1000, gold_bonus=10,
                   description="A treasury for steadier gold"),
    ),
    description="Seat of the kingdom. Losing it ends the game.",
))
_reg(BuildingDef(
    building_type="warriorGuild", name="Warrior Guild",
    gold_cost=100, supplies_cost=20, hero_class="warrior",
    upgrades=(UpgradeDef(level=2, name="Training Grounds", gold_cost=200, supplies_cost=30),),
    description="Recruits warriors.",
))
_reg(BuildingDef(
    building_type="rangerGuild", name="Ranger Guild",
    gold_cost=120, supplies_cost=25, hero_class="ranger",
    upgrades=(UpgradeDef(level=2, name="Archery Range", gold_cost=250, supplies_cost=35),),
    description="Recruits rangers.",
))
_reg(BuildingDef(
    building_type="wizardGuild", name="Wizard Guild",
    gold_cost=150, supplies_cost=30, mana_income=5, hero_class="wizard",
    upgrades=(UpgradeDef(level=2, name="Arcane Library", gold_cost=300, supplies_cost=40, mana_bonus=3),),
    description="Recruits wizards and produces mana.",
))
_reg(BuildingDef(
    building_type="rogueGuild", name="Rogue Guild",
    gold_cost=80, supplies_cost=15, gold_income=3, hero_class="rogue",
    upgrades=(UpgradeDef(level=2, name="Thieves' Den", gold_cost=150, supplies_cost=25, gold_bonus=2),),
    description="Recruits rogues and skims a little gold.",
))
_reg(BuildingDef(
    building_type="marketplace", name="Marketplace",
    gold_cost=60, supplies_cost=10, gold_income=15, max_level=8,
    upgrades=(UpgradeDef(level=2, name="Trade Routes", gold_cost=150, supplies_cost=20, gold_bonus=8),),
    description="Main source of gold income.",
))
_reg(BuildingDef(
    building_type="blacksmith", name="Blacksmith",
    gold_cost=80, supplies_cost=25, gold_income=8, supplies_income=2, max_level=6,
    upgrades=(UpgradeDef(level=2, name="Master Forge", gold_cost=200, supplies_cost=40, supplies_bonus=3),),
    description="Produces gold and supplies.",
))
_reg(BuildingDef(
    building_type="inn", name="Inn",
    gold_cost=50, supplies_cost=8, gold_income=12, housing=1, max_level=6,
    upgrades=(UpgradeDef(level=2, name="Tavern Hall", gold_cost=120, supplies_cost=15, gold_bonus=6,
                         housing_bonus=1),),
    description="Houses one more hero and earns gold.",
))
_reg(BuildingDef(
    building_type="guardTower", name="Guard Tower",
    gold_cost=40, supplies_cost=20, gold_income=2, max_level=4,
    upgrades=(UpgradeDef(level=2, name="Watchtower", gold_cost=100, supplies_cost=30),),
    description="Cheap structure that anchors hero formations.",
))


def guild_types_for(hero_class: str) -> tuple[str, ...]:
    """Building types that recruit ``hero_class``."""
    return tuple(d.building_type for d in BUILDING_DEFS.values() if d.hero_class == hero_class)
