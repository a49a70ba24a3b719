"""Core data models: Vector2, Resources and the four entity categories."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from kingdom.core.classes import CLASS_DEFS, SPECIALIZATION_DEFS
from kingdom.core.enums import CombatOutcome, EquipmentSlot, HeroState
from kingdom.core.items import EQUIPMENT_DEFS, WEAPON_RARITY_CRIT, EquipmentDef


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Cardinal step offsets, in the order random steps are enumerated.
CARDINAL_OFFSETS: tuple[Vector2, ...] = (
    Vector2(0, -1),
    Vector2(1, 0),
    Vector2(0, 1),
    Vector2(-1, 0),
)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Resources:
    """Kingdom treasury. No spend may drive a field negative."""

    gold: int = 500
    mana: int = 50
    supplies: int = 100
    population: int = 0
    max_population: int = 10

    @property
    def free_population(self) -> int:
        return self.max_population - self.population

    def can_afford(self, gold: int = 0, mana: int = 0, supplies: int = 0) -> bool:
        return self.gold >= gold and self.mana >= mana and self.supplies >= supplies

    def spend(self, gold: int = 0, mana: int = 0, supplies: int = 0) -> bool:
        """Deduct a cost atomically. Returns False (and changes nothing) if unaffordable."""
        if not self.can_afford(gold, mana, supplies):
            return False
        self.gold -= gold
        self.mana -= mana
        self.supplies -= supplies
        return True

    def add(self, gold: int = 0, mana: int = 0, supplies: int = 0) -> None:
        self.gold += gold
        self.mana += mana
        self.supplies += supplies

    def copy(self) -> Resources:
        return replace(self)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Building:
    """A placed structure. Income fields include upgrade bonuses."""

    id: int
    building_type: str
    pos: Vector2
    level: int = 1
    health: int = 100
    max_health: int = 100
    gold_income: int = 0
    mana_income: int = 0
    supplies_income: int = 0
    housing: int = 0
    cost_paid: int = 0

    def copy(self) -> Building:
        return replace(self)


@dataclass(frozen=True, slots=True)
class CombatRecord:
    """One line of a hero's append-only combat history."""

    tick: int
    enemy_id: int
    enemy_type: str
    outcome: CombatOutcome
    damage_dealt: int
    damage_taken: int = 0
    experience_gained: int = 0
    critical: bool = False


@dataclass(slots=True)
class Hero:
    """A recruited hero.

    ``max_health``, ``damage`` and ``speed`` are base values (archetype,
    levels and specialization). Equipment is layered on top through the
    ``effective_*`` accessors; ``health`` is bounded by the effective maximum.
    """

    id: int
    hero_class: str
    pos: Vector2
    health: int
    max_health: int
    damage: int
    speed: int
    guild_id: int | None = None
    target: Vector2 | None = None
    gold: int = 0
    level: int = 1
    experience: int = 0
    experience_to_next: int = 100
    morale: float = 100.0
    preferences: tuple[str, ...] = ()
    weapon: str | None = None
    armor: str | None = None
    accessory: str | None = None
    specialization: str | None = None
    last_action: str = "idle"
    state: HeroState = HeroState.IDLE
    move_cooldown: int = 0
    combat_history: list[CombatRecord] = field(default_factory=list)

    @property
    def alive(self) -> bool:
        return self.health > 0

    # -- equipment --

    def equipped_in(self, slot: EquipmentSlot) -> str | None:
        return getattr(self, slot.value)

    def equipment(self) -> list[EquipmentDef]:
        items = []
        for equipment_id in (self.weapon, self.armor, self.accessory):
            if equipment_id is not None and equipment_id in EQUIPMENT_DEFS:
                items.append(EQUIPMENT_DEFS[equipment_id])
        return items

    # -- effective stats --

    def effective_max_health(self) -> int:
        return self.max_health + sum(e.health_bonus for e in self.equipment())

    def effective_damage(self) -> int:
        return self.damage + sum(e.damage_bonus for e in self.equipment())

    def effective_speed(self) -> int:
        return max(0, self.speed + sum(e.speed_bonus for e in self.equipment()))

    @property
    def health_ratio(self) -> float:
        max_hp = self.effective_max_health()
        return self.health / max_hp if max_hp > 0 else 0.0

    def crit_chance(self, base: float) -> float:
        """Base chance plus archetype, weapon rarity and specialization modifiers."""
        chance = base
        class_def = CLASS_DEFS.get(self.hero_class)
        if class_def is not None:
            chance += class_def.crit_bonus
        if self.weapon is not None and self.weapon in EQUIPMENT_DEFS:
            chance += WEAPON_RARITY_CRIT.get(EQUIPMENT_DEFS[self.weapon].rarity, 0.0)
        if self.specialization is not None and self.specialization in SPECIALIZATION_DEFS:
            chance += SPECIALIZATION_DEFS[self.specialization].crit_bonus
        return min(chance, 1.0)

    def damage_reduction(self, cap: float) -> float:
        """Fraction of incoming damage ignored (armor, archetype, specialization)."""
        reduction = 0.0
        if self.armor is not None and self.armor in EQUIPMENT_DEFS:
            reduction += EQUIPMENT_DEFS[self.armor].damage_reduction
        class_def = CLASS_DEFS.get(self.hero_class)
        if class_def is not None:
            reduction += class_def.defense_bonus
        if self.specialization is not None and self.specialization in SPECIALIZATION_DEFS:
            reduction += SPECIALIZATION_DEFS[self.specialization].defense_bonus
        return min(reduction, cap)

    def copy(self) -> Hero:
        return replace(self, combat_history=list(self.combat_history))


@dataclass(slots=True)
class Enemy:
    id: int
    enemy_type: str
    pos: Vector2
    health: int
    max_health: int
    damage: int
    reward: int
    move_cooldown: int = 0

    @property
    def alive(self) -> bool:
        return self.health > 0

    def copy(self) -> Enemy:
        return replace(self)


@dataclass(slots=True)
class Flag:
    id: int
    flag_type: str
    pos: Vector2
    reward: int
    cost: int

    def copy(self) -> Flag:
        return replace(self)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class GameStatistics:
    """Running counters for achievement trackers and the end-of-game screen."""

    total_gold_earned: int = 0
    heroes_recruited: int = 0
    heroes_lost: int = 0
    enemies_defeated: int = 0
    buildings_constructed: int = 0
    flags_collected: int = 0
    highest_hero_level: int = 1

    def copy(self) -> GameStatistics:
        return replace(self)
