"""Agent - one hostile unit pursuing the core.

Architecture
------------
Agent is a flat dataclass, like every other entity in the simulation.
Archetype-specific numbers (size, hue, health, speed multiplier, rewards)
come from the ``nebula.units`` registry once, at creation, through
``Agent.create()``; after that the agent carries plain numbers and the
tick code never branches on the archetype tag.

Timers are countdown integers decremented once per tick and floored at
zero:

  - ``invulnerable`` - spawn grace.  While > 0 the agent cannot take
    force/blast damage or be ejection-killed, so an agent spawned inside
    a force zone does not die on its first frame.
  - ``stunned`` - while > 0 the agent stops seeking and its velocity
    decays quickly.

Lifecycle:
  spawning -> active <-> stunned -> dead | ejected | core_hit
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field

from nebula.units import require_type

# Seek acceleration per tick, as a fraction of speed
SEEK_ACCEL = 0.06
# Velocity multiplier applied every tick
FRICTION = 0.96
# Extra decay while stunned
STUN_DAMPING = 0.92
# Ticks of spawn grace
SPAWN_INVULNERABILITY = 30

TERMINAL_STATUSES = ("dead", "ejected", "core_hit")


@dataclass
class Agent:
    """A single hostile unit."""

    archetype: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    size: float = 14.0
    hue: float = 0.0
    health: float = 1.0
    max_health: float = 1.0
    speed: float = 1.0
    stunned: int = 0
    invulnerable: int = SPAWN_INVULNERABILITY
    status: str = "active"
    agent_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @classmethod
    def create(cls, archetype: str, x: float, y: float, base_speed: float,
               max_speed: float) -> Agent:
        """Build an agent from its archetype profile.

        ``speed = min(base_speed * speed_mult, max_speed)``.
        """
        kind = require_type(archetype)
        return cls(
            archetype=kind.type_id,
            x=x,
            y=y,
            size=kind.size,
            hue=kind.hue,
            health=kind.stats.health,
            max_health=kind.stats.health,
            speed=min(base_speed * kind.stats.speed_mult, max_speed),
        )

    # -- State ----------------------------------------------------------------

    @property
    def alive(self) -> bool:
        return self.status not in TERMINAL_STATUSES

    @property
    def is_invulnerable(self) -> bool:
        return self.invulnerable > 0

    @property
    def is_stunned(self) -> bool:
        return self.stunned > 0

    @property
    def phase(self) -> str:
        if not self.alive:
            return self.status
        if self.is_invulnerable:
            return "spawning"
        if self.is_stunned:
            return "stunned"
        return "active"

    @property
    def velocity(self) -> float:
        return math.hypot(self.vx, self.vy)

    # -- Mutators -------------------------------------------------------------

    def stun(self, floor: int) -> None:
        """Raise the stun counter to *floor*.  Repeated stuns do not stack."""
        if self.stunned < floor:
            self.stunned = floor

    def apply_damage(self, amount: float) -> bool:
        """Apply *amount* damage.  Returns True if health reached zero."""
        if amount > 0:
            self.health = max(0.0, self.health - amount)
        self.health = min(self.health, self.max_health)
        return self.health <= 0

    def countdown(self) -> None:
        """Decrement the stun and spawn-grace timers.  Start of every tick."""
        if self.stunned > 0:
            self.stunned -= 1
        if self.invulnerable > 0:
            self.invulnerable -= 1

    def step(self, core_x: float, core_y: float) -> None:
        """Move: seek the core (or bleed speed while stunned), friction, integrate."""
        if not self.alive:
            return

        if self.stunned > 0:
            self.vx *= STUN_DAMPING
            self.vy *= STUN_DAMPING
        else:
            dx = core_x - self.x
            dy = core_y - self.y
            dist = math.hypot(dx, dy)
            if dist > 0:
                self.vx += (dx / dist) * self.speed * SEEK_ACCEL
                self.vy += (dy / dist) * self.speed * SEEK_ACCEL

        self.vx *= FRICTION
        self.vy *= FRICTION
        self.x += self.vx
        self.y += self.vy

    def tick(self, core_x: float, core_y: float) -> None:
        """One unforced tick: countdown then step."""
        self.countdown()
        self.step(core_x, core_y)

    def outward_speed(self, core_x: float, core_y: float) -> float:
        """Velocity component pointing away from the core (negative = inbound)."""
        dx = self.x - core_x
        dy = self.y - core_y
        dist = math.hypot(dx, dy)
        if dist == 0:
            return 0.0
        return (self.vx * dx + self.vy * dy) / dist

    def to_dict(self) -> dict:
        return {
            "id": self.agent_id,
            "archetype": self.archetype,
            "display_name": require_type(self.archetype).display_name,
            "position": {"x": self.x, "y": self.y},
            "velocity": {"x": self.vx, "y": self.vy},
            "size": self.size,
            "hue": round(self.hue, 1),
            "health": round(self.health, 3),
            "max_health": self.max_health,
            "speed": self.speed,
            "stunned": self.stunned,
            "invulnerable": self.invulnerable,
            "phase": self.phase,
        }
