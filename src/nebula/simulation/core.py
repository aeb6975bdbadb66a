"""Core - the stationary objective the player defends."""

from __future__ import annotations

import math
from dataclasses import dataclass

CORE_RADIUS = 50.0
CORE_MAX_HEALTH = 100.0


@dataclass
class Core:
    x: float
    y: float
    radius: float = CORE_RADIUS
    health: float = CORE_MAX_HEALTH
    max_health: float = CORE_MAX_HEALTH

    @property
    def destroyed(self) -> bool:
        return self.health <= 0

    def collides(self, x: float, y: float, other_radius: float) -> bool:
        return math.hypot(x - self.x, y - self.y) < self.radius + other_radius

    def apply_damage(self, amount: float) -> bool:
        """Reduce health, clamped to [0, max_health].  True once destroyed."""
        self.health = min(self.max_health, max(0.0, self.health - amount))
        return self.destroyed

    def recenter(self, width: float, height: float) -> None:
        self.x = width / 2.0
        self.y = height / 2.0

    def restore(self) -> None:
        self.health = self.max_health

    def to_dict(self) -> dict:
        return {
            "position": {"x": self.x, "y": self.y},
            "radius": self.radius,
            "health": round(self.health, 1),
            "max_health": self.max_health,
        }
