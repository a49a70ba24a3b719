"""Hero archetypes and their level-gated specializations."""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass


# ---------------------------------------------------------------------------
# Archetype definition
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class HeroClassDef:
    """Base stats and behaviour knobs for one hero archetype."""

    class_id: str
    name: str
    health: int
    damage: int
    speed: int
    preferences: tuple[str, ...]
    sight_range: int = 4
    crit_bonus: float = 0.0        # added to the base critical chance
    defense_bonus: float = 0.0     # fraction of incoming damage ignored
    recruit_cost: int = 50         # gold
    description: str = ""


CLASS_DEFS: dict[str, HeroClassDef] = {}


def _reg_class(d: HeroClassDef) -> HeroClassDef:
    CLASS_DEFS[d.class_id] = d
    return d


_reg_class(HeroClassDef(
    class_id="warrior", name="Warrior", health=100, damage=20, speed=1,
    preferences=("attack", "defend"), sight_range=4, defense_bonus=0.15, recruit_cost=50,
    description="Heavily armored fighters who excel in direct combat",
))
_reg_class(HeroClassDef(
    class_id="ranger", name="Ranger", health=80, damage=15, speed=2,
    preferences=("explore", "attack"), sight_range=6, crit_bonus=0.05, defense_bonus=0.05,
    recruit_cost=60,
    description="Swift archers skilled in ranged combat and exploration",
))
_reg_class(HeroClassDef(
    class_id="wizard", name="Wizard", health=60, damage=25, speed=1,
    preferences=("attack", "explore"), sight_range=5, crit_bonus=0.10, recruit_cost=75,
    description="Masters of arcane magic with devastating spells",
))
_reg_class(HeroClassDef(
    class_id="rogue", name="Rogue", health=70, damage=18, speed=2,
    preferences=("gold", "explore"), sight_range=4, crit_bonus=0.15, defense_bonus=0.05,
    recruit_cost=40,
    description="Stealthy operatives who strike from the shadows",
))


# ---------------------------------------------------------------------------
# Specializations
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class SpecializationDef:
    """Permanent sub-class upgrade, unlocked at ``unlock_level``."""

    spec_id: str
    name: str
    hero_class: str
    health_bonus: int = 0
    damage_bonus: int = 0
    speed_bonus: int = 0
    crit_bonus: float = 0.0
    defense_bonus: float = 0.0
    unlock_level: int = 3
    abilities: tuple[str, ...] = ()
    description: str = ""


SPECIALIZATION_DEFS: dict[str, SpecializationDef] = {}


def _reg_spec(d: SpecializationDef) -> SpecializationDef:
    SPECIALIZATION_DEFS[d.spec_id] = d
    return d


# -- warrior --
_reg_spec(SpecializationDef(
    spec_id="guardian", name="Guardian", hero_class="warrior",
    health_bonus=30, damage_bonus=5, defense_bonus=0.15,
    abilities=("taunt", "shield_wall", "protect_ally"),
    description="Master of defense and protection",
))
_reg_spec(SpecializationDef(
    spec_id="berserker", name="Berserker", hero_class="warrior",
    health_bonus=10, damage_bonus=15, speed_bonus=1, crit_bonus=0.10,
    abilities=("rage", "bloodlust", "cleave"),
    description="Fury-driven warrior with devastating attacks",
))
_reg_spec(SpecializationDef(
    spec_id="paladin", name="Paladin", hero_class="warrior",
    health_bonus=25, damage_bonus=10, crit_bonus=0.05, defense_bonus=0.10, unlock_level=5,
    abilities=("heal", "divine_smite", "blessing"),
    description="Holy warrior blessed with divine power",
))

# -- ranger --
_reg_spec(SpecializationDef(
    spec_id="scout", name="Scout", hero_class="ranger",
    health_bonus=5, damage_bonus=8, speed_bonus=3, crit_bonus=0.05,
    abilities=("stealth", "track", "ambush"),
    description="Master of reconnaissance and stealth",
))
_reg_spec(SpecializationDef(
    spec_id="hunter", name="Hunter", hero_class="ranger",
    health_bonus=10, damage_bonus=12, speed_bonus=1, crit_bonus=0.10,
    abilities=("piercing_shot", "trap", "mark_target"),
    description="Deadly marksman with enhanced accuracy",
))
_reg_spec(SpecializationDef(
    spec_id="beastmaster", name="Beastmaster", hero_class="ranger",
    health_bonus=15, damage_bonus=5, speed_bonus=2, defense_bonus=0.05, unlock_level=5,
    abilities=("summon_wolf", "animal_bond", "pack_leader"),
    description="Commands animal companions in battle",
))

# -- wizard --
_reg_spec(SpecializationDef(
    spec_id="elementalist", name="Elementalist", hero_class="wizard",
    health_bonus=5, damage_bonus=20, crit_bonus=0.10,
    abilities=("fireball", "ice_shard", "lightning_bolt"),
    description="Master of fire, ice, and lightning magic",
))
_reg_spec(SpecializationDef(
    spec_id="necromancer", name="Necromancer", hero_class="wizard",
    health_bonus=10, damage_bonus=15, crit_bonus=0.05, defense_bonus=0.05, unlock_level=5,
    abilities=("raise_skeleton", "drain_life", "curse"),
    description="Dark mage who commands the undead",
))
_reg_spec(SpecializationDef(
    spec_id="enchanter", name="Enchanter", hero_class="wizard",
    health_bonus=15, damage_bonus=8, speed_bonus=1, defense_bonus=0.10,
    abilities=("enhance_weapon", "magic_shield", "haste"),
    description="Support mage who enhances allies",
))

# -- rogue --
_reg_spec(SpecializationDef(
    spec_id="assassin", name="Assassin", hero_class="rogue",
    health_bonus=5, damage_bonus=18, speed_bonus=2, crit_bonus=0.20,
    abilities=("backstab", "poison", "vanish"),
    description="Silent killer with deadly precision",
))
_reg_spec(SpecializationDef(
    spec_id="thief", name="Thief", hero_class="rogue",
    health_bonus=10, damage_bonus=8, speed_bonus=3, crit_bonus=0.10,
    abilities=("steal", "lockpick", "sleight_of_hand"),
    description="Master of stealth and acquisition",
))
_reg_spec(SpecializationDef(
    spec_id="shadowdancer", name="Shadowdancer", hero_class="rogue",
    health_bonus=8, damage_bonus=12, speed_bonus=4, crit_bonus=0.15, defense_bonus=0.05,
    unlock_level=5,
    abilities=("shadow_step", "darkness", "shadow_clone"),
    description="Mystical rogue who bends shadows to their will",
))
