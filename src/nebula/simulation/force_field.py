"""Force field primitive shared by every entity that reacts to an emitter.

A single function family maps an emitter (position, radius, strength,
mode) and a target's position to a velocity delta:

  - ``force_delta()`` - pure: returns ``(dvx, dvy, force)`` without
    touching anything.
  - ``apply_force()`` - adds that delta to ``target.vx/vy`` and returns
    the scalar force so callers can threshold it (stun, damage).

Falloff is linear: ``f = strength * (radius - d) / radius``, zero at the
boundary and maximal at the centre.  Every mode is a mix of the radial
unit vector (emitter -> target) and its left-hand tangent, looked up in
``MODE_COEFFICIENTS``.  Two modes add a twist:

  - ``wave`` modulates its radial term by ``cos(2*pi*d / (radius/2))``
    so agents ride alternating push/pull rings.
  - ``paint`` cycles the target's decorative ``hue``.

No randomness: identical inputs give identical outputs.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Protocol


class ForceMode(str, Enum):
    """Emitter behaviour selected by the player."""
    REPEL = "repel"
    ATTRACT = "attract"
    VORTEX = "vortex"
    PAINT = "paint"
    GRAVITY = "gravity"
    WAVE = "wave"
    BLAST = "blast"
    CONSTELLATION = "constellation"


class Movable(Protocol):
    x: float
    y: float
    vx: float
    vy: float


# (radial, tangential) multipliers applied to the falloff force.
# Positive radial pushes away from the emitter.
MODE_COEFFICIENTS: dict[ForceMode, tuple[float, float]] = {
    ForceMode.REPEL: (0.15, 0.0),
    ForceMode.ATTRACT: (-0.08, 0.0),
    # Small outward drift keeps spun agents from orbiting forever.
    ForceMode.VORTEX: (0.02, 0.12),
    ForceMode.PAINT: (0.05, 0.05),
    ForceMode.GRAVITY: (-0.12, 0.03),
    ForceMode.WAVE: (0.10, 0.0),
    ForceMode.BLAST: (0.0, 0.0),
    ForceMode.CONSTELLATION: (-0.04, 0.06),
}

# Modes with no continuous field (offense only).
FIELDLESS_MODES: frozenset[ForceMode] = frozenset({ForceMode.BLAST})

# Degrees of hue shift per unit of force in paint mode
PAINT_HUE_RATE = 2.5


def falloff(distance: float, radius: float, strength: float) -> float:
    """Linear falloff; 0.0 outside the radius and at the exact centre."""
    if distance >= radius or distance <= 0.0:
        return 0.0
    return strength * (radius - distance) / radius


def force_delta(
    dx: float,
    dy: float,
    radius: float,
    strength: float,
    mode: ForceMode | str,
) -> tuple[float, float, float]:
    """Velocity delta for a target offset ``(dx, dy)`` from the emitter.

    Returns ``(dvx, dvy, force)``.  All three are zero outside the radius,
    at ``d == 0`` and for fieldless modes.
    """
    mode = ForceMode(mode)
    if mode in FIELDLESS_MODES:
        return 0.0, 0.0, 0.0
    dist = math.hypot(dx, dy)
    f = falloff(dist, radius, strength)
    if f == 0.0:
        return 0.0, 0.0, 0.0

    nx = dx / dist
    ny = dy / dist
    radial, tangential = MODE_COEFFICIENTS[mode]
    if mode is ForceMode.WAVE:
        radial *= math.cos(2.0 * math.pi * dist / (radius * 0.5))

    dvx = nx * f * radial - ny * f * tangential
    dvy = ny * f * radial + nx * f * tangential
    return dvx, dvy, f


def apply_force(
    target: Movable,
    emitter_x: float,
    emitter_y: float,
    radius: float,
    strength: float,
    mode: ForceMode | str,
) -> float:
    """Push *target* by the emitter field and return the force magnitude."""
    dvx, dvy, f = force_delta(
        target.x - emitter_x, target.y - emitter_y, radius, strength, mode,
    )
    if f == 0.0:
        return 0.0
    target.vx += dvx
    target.vy += dvy
    if ForceMode(mode) is ForceMode.PAINT and hasattr(target, "hue"):
        target.hue = (target.hue + f * PAINT_HUE_RATE) % 360.0
    return f


def push_radial(target: Movable, origin_x: float, origin_y: float,
                magnitude: float) -> None:
    """Add *magnitude* along the unit vector from origin to target.

    Used by blasts, whose shove is not subject to emitter falloff.
    """
    dx = target.x - origin_x
    dy = target.y - origin_y
    dist = math.hypot(dx, dy)
    if dist == 0.0:
        return
    target.vx += dx / dist * magnitude
    target.vy += dy / dist * magnitude
