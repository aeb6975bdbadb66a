"""Economy - score, combo multiplier, energy, and pickups.

Scoring
-------
Every kill or pickup credits ``floor(base * multiplier)`` where
``multiplier = 1 + combo * COMBO_WEIGHT``.  The multiplier in force is
the one *before* the kill's own combo gain is added.

Combo
-----
A kill adds its archetype's ``combo_gain`` (ejection kills add a flat
``EJECTION_COMBO_GAIN``), capped at ``MAX_COMBO``, and resets the
countdown to ``COMBO_DURATION`` ticks.  When the countdown lapses the
combo drops to zero.  Letting an agent reach the core breaks the combo
immediately.

Energy
------
Channeling a field mode drains energy at the mode's rate each tick;
otherwise energy regenerates.  Blasts are paid for up front through
``try_spend()``, which is all-or-nothing.

Pickups
-------
Dropped where an agent dies.  While the player emitter is active, pickups
inside ``PICKUP_ATTRACT_RADIUS`` accelerate toward it and are consumed
inside ``PICKUP_COLLECT_RADIUS``, crediting score and energy.  Uncollected
pickups expire after ``PICKUP_LIFETIME`` ticks.

Events published on the EventBus:
  - ``pickup_collected``: value, points, position
  - ``combo_lost``: combo level lost and why (timeout | core_hit)
"""

from __future__ import annotations

import math
import random
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nebula.units import require_type

from .force_field import ForceMode

if TYPE_CHECKING:
    from nebula.comms.event_bus import EventBus
    from .emitter import Emitter

MAX_COMBO = 20
COMBO_WEIGHT = 0.1
COMBO_DURATION = 120  # ticks

EJECTION_SCORE_FACTOR = 0.5
EJECTION_COMBO_GAIN = 1

MAX_ENERGY = 100.0
ENERGY_REGEN = 0.25  # per tick while not channeling

# Per-tick drain while the emitter is active in each mode
ENERGY_DRAIN: dict[ForceMode, float] = {
    ForceMode.REPEL: 0.30,
    ForceMode.ATTRACT: 0.25,
    ForceMode.VORTEX: 0.35,
    ForceMode.PAINT: 0.15,
    ForceMode.GRAVITY: 0.40,
    ForceMode.WAVE: 0.30,
    ForceMode.BLAST: 0.0,
    ForceMode.CONSTELLATION: 0.20,
}

BLAST_COST = 20.0

PICKUP_ATTRACT_RADIUS = 200.0
PICKUP_COLLECT_RADIUS = 30.0
PICKUP_ACCEL = 0.6
PICKUP_FRICTION = 0.92
PICKUP_LIFETIME = 600  # ticks
PICKUP_SCATTER = (0.5, 2.0)


@dataclass
class Pickup:
    """A collectible orb dropped by a destroyed agent."""

    x: float
    y: float
    value: float
    vx: float = 0.0
    vy: float = 0.0
    ttl: int = PICKUP_LIFETIME
    pickup_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @property
    def expired(self) -> bool:
        return self.ttl <= 0

    def to_dict(self) -> dict:
        return {
            "id": self.pickup_id,
            "position": {"x": self.x, "y": self.y},
            "value": self.value,
            "ttl": self.ttl,
        }


class Economy:
    """Score, combo, energy and pickup bookkeeping for one session."""

    def __init__(self, event_bus: EventBus | None = None,
                 rng: random.Random | None = None) -> None:
        self._event_bus = event_bus
        self._rng = rng if rng is not None else random.Random()
        self.score: int = 0
        self.combo: int = 0
        self.combo_timer: int = 0
        self.energy: float = MAX_ENERGY
        self.kills: int = 0
        self.ejections: int = 0
        self.pickups: list[Pickup] = []

    # -- Scoring ----------------------------------------------------------------

    @property
    def multiplier(self) -> float:
        return 1.0 + self.combo * COMBO_WEIGHT

    def award(self, base: float) -> int:
        """Credit ``floor(base * multiplier)`` points and return them."""
        points = max(0, math.floor(base * self.multiplier))
        self.score += points
        return points

    def gain_combo(self, amount: int) -> None:
        if amount <= 0:
            return
        self.combo = min(MAX_COMBO, self.combo + amount)
        self.combo_timer = COMBO_DURATION

    def break_combo(self, reason: str = "core_hit") -> None:
        lost = self.combo
        self.combo = 0
        self.combo_timer = 0
        if lost > 0:
            self._publish("combo_lost", {"combo": lost, "reason": reason})

    def register_kill(self, archetype: str, x: float, y: float) -> int:
        """Full-reward kill: score, combo gain, and pickup drops."""
        kind = require_type(archetype)
        points = self.award(kind.stats.kill_score)
        self.gain_combo(kind.stats.combo_gain)
        self.kills += 1
        self.drop_pickups(x, y, kind.drops.count, kind.drops.value)
        return points

    def register_ejection(self, archetype: str) -> int:
        """Reduced-reward kill: partial score, flat combo, no pickups."""
        kind = require_type(archetype)
        points = self.award(kind.stats.kill_score * EJECTION_SCORE_FACTOR)
        self.gain_combo(EJECTION_COMBO_GAIN)
        self.kills += 1
        self.ejections += 1
        return points

    # -- Energy -----------------------------------------------------------------

    def try_spend(self, cost: float) -> bool:
        """Deduct *cost* if affordable.  Leaves energy untouched otherwise."""
        if cost < 0 or self.energy < cost:
            return False
        self.energy = max(0.0, self.energy - cost)
        return True

    def _tick_energy(self, emitter: Emitter | None) -> None:
        drain = 0.0
        if emitter is not None and emitter.active:
            drain = ENERGY_DRAIN.get(emitter.mode, 0.0)
        if drain > 0:
            self.energy -= drain
        else:
            self.energy += ENERGY_REGEN
        self.energy = min(MAX_ENERGY, max(0.0, self.energy))

    # -- Pickups ----------------------------------------------------------------

    def drop_pickups(self, x: float, y: float, count: int, value: float) -> list[Pickup]:
        dropped = []
        lo, hi = PICKUP_SCATTER
        for _ in range(count):
            angle = self._rng.random() * math.pi * 2.0
            speed = self._rng.uniform(lo, hi)
            dropped.append(Pickup(
                x=x, y=y, value=value,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
            ))
        self.pickups.extend(dropped)
        return dropped

    def _tick_pickups(self, emitter: Emitter | None) -> list[Pickup]:
        collected: list[Pickup] = []
        keep: list[Pickup] = []
        pulling = emitter is not None and emitter.active

        for p in self.pickups:
            p.ttl -= 1
            if pulling:
                dx = emitter.x - p.x
                dy = emitter.y - p.y
                dist = math.hypot(dx, dy)
                if dist < PICKUP_COLLECT_RADIUS:
                    collected.append(p)
                    continue
                if dist < PICKUP_ATTRACT_RADIUS:
                    p.vx += dx / dist * PICKUP_ACCEL
                    p.vy += dy / dist * PICKUP_ACCEL
            p.vx *= PICKUP_FRICTION
            p.vy *= PICKUP_FRICTION
            p.x += p.vx
            p.y += p.vy
            if p.expired:
                continue
            keep.append(p)

        self.pickups = keep
        for p in collected:
            points = self.award(p.value)
            self.energy = min(MAX_ENERGY, self.energy + p.value)
            self._publish("pickup_collected", {
                "pickup_id": p.pickup_id,
                "value": p.value,
                "points": points,
                "position": {"x": p.x, "y": p.y},
            })
        return collected

    # -- Tick -------------------------------------------------------------------

    def tick(self, emitter: Emitter | None) -> list[Pickup]:
        """Advance pickups, energy, and the combo countdown by one tick.

        Returns the pickups collected this tick.
        """
        collected = self._tick_pickups(emitter)
        self._tick_energy(emitter)
        if self.combo_timer > 0:
            self.combo_timer -= 1
            if self.combo_timer == 0:
                self.break_combo(reason="timeout")
        return collected

    def reset(self) -> None:
        self.score = 0
        self.combo = 0
        self.combo_timer = 0
        self.energy = MAX_ENERGY
        self.kills = 0
        self.ejections = 0
        self.pickups.clear()

    def get_state(self) -> dict:
        return {
            "score": self.score,
            "combo": self.combo,
            "combo_timer": self.combo_timer,
            "multiplier": round(self.multiplier, 2),
            "energy": round(self.energy, 2),
            "kills": self.kills,
            "ejections": self.ejections,
        }

    def _publish(self, event_type: str, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)
