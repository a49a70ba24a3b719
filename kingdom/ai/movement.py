"""Single-step movement primitives shared by hero and enemy brains."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingdom.core.models import CARDINAL_OFFSETS, Vector2

if TYPE_CHECKING:
    from kingdom.core.enums import Domain
    from kingdom.core.grid import Grid
    from kingdom.core.models import Enemy, Hero
    from kingdom.core.world_state import WorldState
    from kingdom.systems.rng import DeterministicRNG


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def clamp(pos: Vector2, grid: Grid) -> Vector2:
    return Vector2(
        max(0, min(grid.width - 1, pos.x)),
        max(0, min(grid.height - 1, pos.y)),
    )


def step_toward(origin: Vector2, target: Vector2, grid: Grid) -> Vector2:
    """Reduce the larger axis delta by one. Ties move vertically."""
    dx = target.x - origin.x
    dy = target.y - origin.y
    if dx == 0 and dy == 0:
        return origin
    if abs(dx) > abs(dy):
        step = Vector2(origin.x + _sign(dx), origin.y)
    else:
        step = Vector2(origin.x, origin.y + _sign(dy))
    return clamp(step, grid)


def step_away(origin: Vector2, threat: tuple[float, float], grid: Grid) -> Vector2:
    """One step that increases distance from the *threat* point on its dominant axis."""
    dx = origin.x - threat[0]
    dy = origin.y - threat[1]
    if dx == 0 and dy == 0:
        return origin
    if abs(dx) > abs(dy):
        step = Vector2(origin.x + _sign(dx), origin.y)
    else:
        step = Vector2(origin.x, origin.y + _sign(dy))
    return clamp(step, grid)


def free_steps(world: WorldState, entity: Hero | Enemy) -> list[Vector2]:
    """Cardinal neighbours the entity may enter, in N/E/S/W order."""
    return [entity.pos + off for off in CARDINAL_OFFSETS if world.can_enter(entity, entity.pos + off)]


def random_step(
    world: WorldState,
    entity: Hero | Enemy,
    rng: DeterministicRNG,
    domain: Domain,
    tick: int,
) -> Vector2 | None:
    options = free_steps(world, entity)
    if not options:
        return None
    return options[rng.next_int(domain, entity.id, tick, 0, len(options) - 1, salt=7)]
