"""Equipment catalog. Heroes hold at most one item per slot."""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass

from kingdom.core.enums import EquipmentSlot, Rarity


@pydantic_dataclass(frozen=True)
class EquipmentDef:
    """Immutable blueprint for a piece of gear, referenced by equipment_id."""

    equipment_id: str
    name: str
    slot: EquipmentSlot
    rarity: Rarity
    cost: int                       # gold, paid from the kingdom treasury
    health_bonus: int = 0
    damage_bonus: int = 0
    speed_bonus: int = 0
    damage_reduction: float = 0.0   # armor only
    description: str = ""


# Critical chance granted by the rarity of the equipped weapon.
WEAPON_RARITY_CRIT: dict[int, float] = {
    Rarity.COMMON: 0.0,
    Rarity.RARE: 0.03,
    Rarity.EPIC: 0.06,
}


EQUIPMENT_DEFS: dict[str, EquipmentDef] = {}


def _reg(d: EquipmentDef) -> EquipmentDef:
    EQUIPMENT_DEFS[d.equipment_id] = d
    return d


# --- Weapons ---
_reg(EquipmentDef(
    equipment_id="iron_sword", name="Iron Sword", slot=EquipmentSlot.WEAPON,
    rarity=Rarity.COMMON, cost=50, damage_bonus=8,
    description="A sturdy iron blade",
))
_reg(EquipmentDef(
    equipment_id="steel_sword", name="Steel Sword", slot=EquipmentSlot.WEAPON,
    rarity=Rarity.RARE, cost=150, damage_bonus=15, speed_bonus=1,
    description="A well-balanced steel sword",
))
_reg(EquipmentDef(
    equipment_id="enchanted_blade", name="Enchanted Blade", slot=EquipmentSlot.WEAPON,
    rarity=Rarity.EPIC, cost=500, health_bonus=5, damage_bonus=25, speed_bonus=2,
    description="A blade humming with arcane power",
))

# --- Armor ---
_reg(EquipmentDef(
    equipment_id="leather_armor", name="Leather Armor", slot=EquipmentSlot.ARMOR,
    rarity=Rarity.COMMON, cost=40, health_bonus=15, damage_reduction=0.10,
    description="Light and flexible protection",
))
_reg(EquipmentDef(
    equipment_id="chainmail", name="Chainmail", slot=EquipmentSlot.ARMOR,
    rarity=Rarity.RARE, cost=120, health_bonus=30, speed_bonus=-1, damage_reduction=0.20,
    description="Interlocking rings of steel",
))
_reg(EquipmentDef(
    equipment_id="plate_armor", name="Plate Armor", slot=EquipmentSlot.ARMOR,
    rarity=Rarity.EPIC, cost=400, health_bonus=50, damage_bonus=5, speed_bonus=-2,
    damage_reduction=0.30,
    description="Heavy plates that turn aside most blows",
))

# --- Accessories ---
_reg(EquipmentDef(
    equipment_id="health_ring", name="Ring of Vitality", slot=EquipmentSlot.ACCESSORY,
    rarity=Rarity.RARE, cost=200, health_bonus=25,
    description="Strengthens the wearer's constitution",
))
_reg(EquipmentDef(
    equipment_id="speed_boots", name="Boots of Swiftness", slot=EquipmentSlot.ACCESSORY,
    rarity=Rarity.RARE, cost=180, speed_bonus=3,
    description="Light boots that quicken every step",
))
_reg(EquipmentDef(
    equipment_id="power_amulet", name="Amulet of Power", slot=EquipmentSlot.ACCESSORY,
    rarity=Rarity.EPIC, cost=350, health_bonus=10, damage_bonus=10, speed_bonus=1,
    description="Radiates raw strength",
))
