"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for a kingdom run."""

    # World
    world_seed: int = 42
    grid_width: int = 20
    grid_height: int = 15

    # Starting resources (the castle's housing is added on top)
    start_gold: int = 500
    start_mana: int = 50
    start_supplies: int = 100
    start_population: int = 0
    start_max_population: int = 5

    # Timing
    max_ticks: int = 0                     # 0 = unbounded (headless runs pass --ticks)
    hero_act_chance: float = 0.7
    enemy_act_chance: float = 0.5
    income_interval: int = 5
    spawn_interval: int = 8
    spawn_chance: float = 0.5
    tick_rate: float = 0.25                # seconds between ticks when served

    # Cooldowns (ticks between actions)
    hero_cooldown_base: int = 3            # hero waits max(0, base - speed)
    enemy_move_cooldown: int = 2
    enemy_advance_chance: float = 0.7      # otherwise a random step

    # Hero AI
    low_morale_threshold: float = 20.0
    morale_decay: float = 0.1              # per tick, every hero
    rest_morale_regen: float = 2.0
    retreat_threshold: float = 0.3
    aggression_threshold: float = 0.7
    flag_sight_range: int = 7
    support_range: int = 3
    engage_threshold: float = 30.0
    collect_threshold: float = 20.0
    patrol_move_chance: float = 0.8

    # Tactics
    building_adjacency_bonus: float = 0.10
    flank_bonus: float = 0.20
    formation_radius: int = 2
    formation_bonus_per_ally: float = 0.05
    formation_bonus_cap: float = 0.20
    diversity_bonus: float = 0.10

    # Combat
    base_crit_chance: float = 0.05
    hero_damage_noise: int = 4             # inclusive upper bound of added noise
    enemy_damage_noise: int = 2
    max_damage_reduction: float = 0.9
    xp_reward_multiplier: float = 1.5
    combat_xp_rate: float = 0.2
    kingdom_reward_share: float = 0.5
    respawn_fee: int = 50

    # Progression
    base_experience: int = 100
    level_multiplier: float = 1.2
    morale_on_victory: float = 5.0
    morale_on_defeat: float = 20.0
    morale_on_flag: float = 10.0
    morale_on_level_up: float = 10.0

    # Flags
    flag_refund_ratio: float = 0.5

    # Output
    log_level: str = "INFO"
    save_file: str = "savegame.json"
