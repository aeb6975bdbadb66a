"""CombatSystem - force effects, blasts, and kill resolution.

Architecture
------------
CombatSystem runs once per tick while the game is playing.  For every
live agent it:

  0. Counts down the agent's stun and spawn-grace timers, so a stun
     applied below lasts its full floor from this tick on.
  1. Applies the player emitter's field (if the emitter is active, has
     energy, and is in a field mode), then any ambient emitters.
  2. Thresholds the player's force: above ``STUN_FORCE_FRACTION`` of
     nominal strength the agent is stunned to ``STUN_FLOOR`` and, once
     past spawn grace, takes damage proportional to how hard it is being
     pushed: ``max(0, |v| - VELOCITY_DAMAGE_THRESHOLD) * DAMAGE_COEFFICIENT``.
  3. Applies each active Blast whose expanding ring currently overlaps
     the agent (``|d - blast.radius| <= BLAST_BAND``): a strong outward
     shove, a longer stun, and a flat hit once per blast.
  4. Steps the agent (seek or stun decay, friction, integrate).
  5. Resolves at most one terminal outcome, first match wins:
       ejection -> core collision -> health depletion

A core hit that destroys the core ends resolution for the tick: agents
later in the list are kept untouched and earn nothing.

Ejection requires the agent to be past spawn grace, outside the play
bounds by ``EJECTION_MARGIN`` *and* moving away from the core faster than
``EJECTION_SPEED``.  An agent drifting back in from outside is left alone.
Ejections pay a reduced reward and drop nothing, so parking at the edge
is never the best farm.

Blasts expand by ``BLAST_GROWTH`` per tick and lose strength
geometrically; they are removed once past ``BLAST_MAX_RADIUS`` or below
``BLAST_MIN_STRENGTH``.  Paying for a blast is the Economy's job; this
module only creates it.

Events published on the EventBus:
  - ``blast_fired``: new blast ring
  - ``agent_eliminated``: method is ``health`` or ``ejection``
  - ``core_hit``: an agent reached the core
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from nebula.units import require_type

from .force_field import push_radial

if TYPE_CHECKING:
    from nebula.comms.event_bus import EventBus
    from .agent import Agent
    from .core import Core
    from .economy import Economy
    from .emitter import AmbientEmitter, Emitter

# Force above this fraction of nominal strength stuns
STUN_FORCE_FRACTION = 0.2
STUN_FLOOR = 12

VELOCITY_DAMAGE_THRESHOLD = 2.0
DAMAGE_COEFFICIENT = 0.05

BLAST_INITIAL_STRENGTH = 30.0
BLAST_DECAY = 0.94
BLAST_GROWTH = 12.0
BLAST_MAX_RADIUS = 420.0
BLAST_MIN_STRENGTH = 1.0
BLAST_BAND = 24.0
BLAST_DAMAGE = 0.6
BLAST_PUSH = 0.5
BLAST_STUN_FLOOR = 30

EJECTION_MARGIN = 40.0
EJECTION_SPEED = 0.5


@dataclass
class Blast:
    """An expanding shockwave ring."""

    x: float
    y: float
    radius: float = 0.0
    strength: float = BLAST_INITIAL_STRENGTH
    damage: float = BLAST_DAMAGE
    blast_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    hit_ids: set[str] = field(default_factory=set)

    @property
    def expired(self) -> bool:
        return self.radius > BLAST_MAX_RADIUS or self.strength < BLAST_MIN_STRENGTH

    def in_band(self, x: float, y: float) -> bool:
        d = math.hypot(x - self.x, y - self.y)
        return abs(d - self.radius) <= BLAST_BAND

    def advance(self) -> None:
        self.radius += BLAST_GROWTH
        self.strength *= BLAST_DECAY

    def to_dict(self) -> dict:
        return {
            "id": self.blast_id,
            "position": {"x": self.x, "y": self.y},
            "radius": round(self.radius, 2),
            "strength": round(self.strength, 3),
        }


@dataclass
class Resolution:
    """Terminal outcome for one agent on one tick."""

    agent: Agent
    outcome: str  # "ejected" | "core_hit" | "dead"
    points: int = 0


class CombatSystem:
    """Applies force and blast effects to agents and resolves kills."""

    def __init__(self, event_bus: EventBus, economy: Economy) -> None:
        self._event_bus = event_bus
        self._economy = economy
        self._blasts: list[Blast] = []

    @property
    def blast_count(self) -> int:
        return len(self._blasts)

    @property
    def blasts(self) -> list[Blast]:
        return list(self._blasts)

    def fire_blast(self, x: float, y: float) -> Blast:
        blast = Blast(x=x, y=y)
        self._blasts.append(blast)
        logger.debug(f"Blast {blast.blast_id} fired at ({x:.0f}, {y:.0f})")
        self._event_bus.publish("blast_fired", {
            "blast_id": blast.blast_id,
            "position": {"x": x, "y": y},
        })
        return blast

    def clear(self) -> None:
        self._blasts.clear()

    def get_active_blasts(self) -> list[dict]:
        return [b.to_dict() for b in self._blasts]

    # -- Tick -------------------------------------------------------------------

    def tick(
        self,
        agents: list[Agent],
        emitter: Emitter,
        core: Core,
        width: float,
        height: float,
        ambient: list[AmbientEmitter] | None = None,
    ) -> list[Resolution]:
        """Resolve one tick.  Removes finished agents from *agents* in place."""
        field_on = emitter.active and emitter.has_field and self._economy.energy > 0
        stun_threshold = emitter.strength * STUN_FORCE_FRACTION

        survivors: list[Agent] = []
        resolutions: list[Resolution] = []

        for agent in agents:
            if not agent.alive:
                continue
            if core.destroyed:
                # Session ended on an earlier core hit this tick
                survivors.append(agent)
                continue
            agent.countdown()

            if field_on:
                force = emitter.apply(agent)
                if force > stun_threshold:
                    agent.stun(STUN_FLOOR)
                    if not agent.is_invulnerable:
                        excess = agent.velocity - VELOCITY_DAMAGE_THRESHOLD
                        agent.apply_damage(max(0.0, excess) * DAMAGE_COEFFICIENT)
            for well in ambient or ():
                well.apply(agent)

            for blast in self._blasts:
                if not blast.in_band(agent.x, agent.y):
                    continue
                push_radial(agent, blast.x, blast.y, blast.strength * BLAST_PUSH)
                agent.stun(BLAST_STUN_FLOOR)
                if not agent.is_invulnerable and agent.agent_id not in blast.hit_ids:
                    blast.hit_ids.add(agent.agent_id)
                    agent.apply_damage(blast.damage)

            agent.step(core.x, core.y)

            resolution = self._resolve(agent, core, width, height)
            if resolution is None:
                survivors.append(agent)
            else:
                resolutions.append(resolution)

        agents[:] = survivors

        for blast in self._blasts:
            blast.advance()
        self._blasts = [b for b in self._blasts if not b.expired]
        return resolutions

    # -- Outcomes ---------------------------------------------------------------

    def _resolve(self, agent: Agent, core: Core,
                 width: float, height: float) -> Resolution | None:
        if self._is_ejected(agent, core, width, height):
            agent.status = "ejected"
            points = self._economy.register_ejection(agent.archetype)
            self._publish_elimination(agent, "ejection", points)
            return Resolution(agent, "ejected", points)

        if core.collides(agent.x, agent.y, agent.size):
            agent.status = "core_hit"
            damage = require_type(agent.archetype).stats.core_damage
            core.apply_damage(damage)
            self._economy.break_combo(reason="core_hit")
            self._event_bus.publish("core_hit", {
                "agent_id": agent.agent_id,
                "archetype": agent.archetype,
                "damage": damage,
                "core_health": core.health,
            })
            return Resolution(agent, "core_hit")

        if agent.health <= 0:
            agent.status = "dead"
            points = self._economy.register_kill(agent.archetype, agent.x, agent.y)
            self._publish_elimination(agent, "health", points)
            return Resolution(agent, "dead", points)

        return None

    @staticmethod
    def _is_ejected(agent: Agent, core: Core, width: float, height: float) -> bool:
        if agent.is_invulnerable:
            return False
        outside = (
            agent.x < -EJECTION_MARGIN or agent.x > width + EJECTION_MARGIN
            or agent.y < -EJECTION_MARGIN or agent.y > height + EJECTION_MARGIN
        )
        if not outside:
            return False
        return agent.outward_speed(core.x, core.y) > EJECTION_SPEED

    def _publish_elimination(self, agent: Agent, method: str, points: int) -> None:
        self._event_bus.publish("agent_eliminated", {
            "agent_id": agent.agent_id,
            "archetype": agent.archetype,
            "method": method,
            "points": points,
            "position": {"x": agent.x, "y": agent.y},
        })
