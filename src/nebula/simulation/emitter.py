"""Emitters - the player-driven force source and ambient force sources.

Exactly one ``Emitter`` follows the player's pointer.  Any number of
``AmbientEmitter`` instances (nebulae, gravity wells) can drift in with
their own lifetime; they obey the same field contract but cost no energy
and never stun or damage.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .force_field import FIELDLESS_MODES, ForceMode, apply_force

FORCE_RADIUS = 160.0
FORCE_STRENGTH = 14.0


@dataclass
class Emitter:
    """Player-controlled force source."""

    x: float = 0.0
    y: float = 0.0
    active: bool = False
    mode: ForceMode = ForceMode.REPEL
    radius: float = FORCE_RADIUS
    strength: float = FORCE_STRENGTH

    def move_to(self, x: float, y: float) -> None:
        x, y = float(x), float(y)
        self.x = x
        self.y = y

    def set_mode(self, mode: ForceMode | str) -> None:
        self.mode = ForceMode(mode)

    @property
    def has_field(self) -> bool:
        """True when the current mode produces a continuous field."""
        return self.mode not in FIELDLESS_MODES

    def apply(self, target) -> float:
        return apply_force(target, self.x, self.y, self.radius, self.strength, self.mode)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "active": self.active,
            "mode": self.mode.value,
            "radius": self.radius,
            "strength": self.strength,
        }


@dataclass
class AmbientEmitter:
    """A timed force source independent of the player."""

    x: float
    y: float
    radius: float
    strength: float
    mode: ForceMode = ForceMode.GRAVITY
    ttl: int = 600
    emitter_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self) -> None:
        self.mode = ForceMode(self.mode)

    @property
    def expired(self) -> bool:
        return self.ttl <= 0

    def apply(self, target) -> float:
        return apply_force(target, self.x, self.y, self.radius, self.strength, self.mode)

    def tick(self) -> None:
        if self.ttl > 0:
            self.ttl -= 1

    def to_dict(self) -> dict:
        return {
            "id": self.emitter_id,
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
            "strength": self.strength,
            "mode": self.mode.value,
            "ttl": self.ttl,
        }
