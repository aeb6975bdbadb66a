"""SpawnScheduler - decides when, how many, and which agents enter.

Timing is counted in ticks.  A spawn event fires when more than
``spawn_interval(wave)`` ticks have passed since the previous one:

    interval = max(MIN_INTERVAL, BASE_INTERVAL - wave * PER_WAVE_REDUCTION)

Each event places ``batch_size(wave)`` agents on a ring of radius
``max(width, height) * SPAWN_RING`` around the core, at uniform-random
angles, with archetypes drawn uniformly from the weighted candidate list
of ``nebula.units.spawn_candidates(wave)``.  The live population is
hard-capped at ``max_agents``.

All randomness goes through one injected ``random.Random`` so scenario
tests can seed it.
"""

from __future__ import annotations

import math
import random

from loguru import logger

from nebula.units import spawn_candidates

from .agent import Agent

BASE_INTERVAL = 70
MIN_INTERVAL = 25
PER_WAVE_REDUCTION = 8

MAX_BATCH = 5
MAX_AGENTS = 60

SPAWN_RING = 0.55

BASE_SPEED = 0.8
SPEED_PER_WAVE = 0.1
MAX_SPEED = 2.2


def spawn_interval(wave: int) -> int:
    return max(MIN_INTERVAL, BASE_INTERVAL - wave * PER_WAVE_REDUCTION)


def batch_size(wave: int, capacity: int = MAX_BATCH) -> int:
    return min(1 + wave // 3, capacity)


def base_speed(wave: int) -> float:
    return BASE_SPEED + wave * SPEED_PER_WAVE


class SpawnScheduler:
    """Wave-scaled agent spawner."""

    def __init__(self, rng: random.Random | None = None,
                 max_agents: int = MAX_AGENTS) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.max_agents = max_agents
        self.last_spawn_tick: int = 0
        self.total_spawned: int = 0

    @property
    def rng(self) -> random.Random:
        return self._rng

    def reset(self) -> None:
        self.last_spawn_tick = 0
        self.total_spawned = 0

    def due(self, tick: int, wave: int) -> bool:
        return tick - self.last_spawn_tick > spawn_interval(wave)

    def tick(self, tick: int, wave: int, live_count: int,
             core_x: float, core_y: float,
             width: float, height: float) -> list[Agent]:
        """Return the agents to add this tick (possibly none)."""
        if not self.due(tick, wave):
            return []
        self.last_spawn_tick = tick

        room = max(0, self.max_agents - live_count)
        count = min(batch_size(wave), room)
        ring = max(width, height) * SPAWN_RING
        spawned = [self.spawn_one(wave, core_x, core_y, ring) for _ in range(count)]
        if spawned:
            logger.debug(
                f"Spawned {len(spawned)} agent(s) at tick {tick} "
                f"(wave {wave}, live {live_count + len(spawned)})"
            )
        return spawned

    def choose_archetype(self, wave: int) -> str:
        return self._rng.choice(spawn_candidates(wave))

    def spawn_one(self, wave: int, core_x: float, core_y: float,
                  ring: float) -> Agent:
        """Create one agent on the spawn ring."""
        angle = self._rng.random() * math.pi * 2.0
        archetype = self.choose_archetype(wave)
        self.total_spawned += 1
        return Agent.create(
            archetype,
            x=core_x + math.cos(angle) * ring,
            y=core_y + math.sin(angle) * ring,
            base_speed=base_speed(wave),
            max_speed=MAX_SPEED,
        )
