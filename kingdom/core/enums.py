"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class ActionType(IntEnum):
    """Types of actions a hero or enemy can propose."""

    REST = 0
    MOVE = 1
    ATTACK = 2
    COLLECT = 3


@unique
class HeroState(IntEnum):
    """Per-tick decision outcome; recomputed every tick, never persisted as logic."""

    IDLE = 0
    RESTING = 1
    RETREATING = 2
    PURSUING = 3
    ATTACKING = 4
    COLLECTING = 5
    PATROLLING = 6
    GUARDING = 7
    SUPPORTING = 8


@unique
class Domain(IntEnum):
    """RNG domain separators. Each subsystem draws from its own stream."""

    HERO_ACT = 0
    ENEMY_ACT = 1
    HERO_AI = 2
    ENEMY_AI = 3
    COMBAT = 4
    SPAWN = 5
    PATROL = 6


@unique
class Rarity(IntEnum):
    COMMON = 0
    RARE = 1
    EPIC = 2


class EquipmentSlot(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


class CombatOutcome(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"
    EXCHANGE = "exchange"


class FailureReason(str, Enum):
    """Why a player command was rejected. Rejections never mutate state."""

    OUT_OF_BOUNDS = "out_of_bounds"
    CELL_OCCUPIED = "cell_occupied"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    POPULATION_CAP = "population_cap"
    UNKNOWN_TYPE = "unknown_type"
    GUILD_MISSING = "guild_missing"
    NOT_FOUND = "not_found"
    NOT_ELIGIBLE = "not_eligible"
    MAX_LEVEL = "max_level"
    GAME_OVER = "game_over"
