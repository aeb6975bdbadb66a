"""SimulationEngine - fixed-step tick loop owning all simulation state.

Architecture
------------
The engine is the authoritative owner of every entity collection
(agents, pickups, blasts, ambient emitters) and of the subsystems that
mutate them.  Nothing else writes to them; renderers and the API read
``snapshot()``, a plain-dict projection taken after a tick completes.

Tick order (one fixed step, only while GameMode is ``playing``):

  1. SpawnScheduler - may add a batch of agents on the spawn ring.
  2. CombatSystem   - emitter field, ambient emitters, blasts, agent
                      motion, and kill resolution (one outcome per agent).
  3. GameMode       - if the core fell, gameover now and the step ends.
  4. Ambient emitters age and expire.
  5. Economy        - pickups, energy drain/regen, combo countdown.
  6. GameMode       - wave progression.

In ``menu`` and ``gameover`` a tick is a no-op.

Threading:
  A single ``threading.Lock`` guards all state.  ``tick()``, ``update()``,
  the input setters, ``fire_blast()``, ``resize()``, ``start_game()`` and
  ``snapshot()`` all take it, so input can never interleave with a tick
  and no caller ever sees a half-applied step.  ``start()`` runs an
  optional daemon thread (``sim-tick``) that calls ``update(dt)``;
  ``stop()`` joins it and leaves the state resumable.

Fixed step:
  The field constants are tuned per frame at 60 Hz.  ``update(dt)``
  accumulates wall time and runs whole 1/60 s steps, at most
  ``MAX_STEPS_PER_UPDATE`` per call; any larger backlog is dropped rather
  than spiralling.

Persistence:
  With a HighScoreStore attached, the best score is loaded at
  construction and saved on a short-lived daemon thread whenever a game
  ends with a new best, so file I/O never runs inside the lock.
"""

from __future__ import annotations

import random
import threading
import time
from typing import TYPE_CHECKING

from loguru import logger

from .agent import Agent
from .combat import CombatSystem
from .core import Core
from .economy import BLAST_COST, Economy
from .emitter import AmbientEmitter, Emitter
from .force_field import ForceMode
from .game_mode import GameMode
from .spawner import SpawnScheduler

if TYPE_CHECKING:
    from nebula.comms.event_bus import EventBus
    from .highscore import HighScoreStore

FIXED_STEP = 1.0 / 60.0
MAX_STEPS_PER_UPDATE = 5


class SimulationEngine:
    """Drives the defence simulation and publishes gameplay events."""

    def __init__(
        self,
        event_bus: EventBus,
        width: float = 1280.0,
        height: float = 720.0,
        seed: int | None = None,
        wave_policy: str = "kills",
        high_score_store: HighScoreStore | None = None,
        tick_rate: float = 60.0,
        rng: random.Random | None = None,
    ) -> None:
        self._validate_bounds(width, height)
        self._event_bus = event_bus
        self._lock = threading.Lock()
        self._running = False
        self._thread: threading.Thread | None = None
        self._persist_thread: threading.Thread | None = None
        self._tick_rate = tick_rate
        self._accumulator = 0.0

        self._width = float(width)
        self._height = float(height)
        self._tick = 0

        # One RNG for every random decision so seeded runs repeat exactly
        self._rng = rng if rng is not None else random.Random(seed)

        self._store = high_score_store
        high_score = high_score_store.load() if high_score_store is not None else 0

        self.core = Core(x=self._width / 2.0, y=self._height / 2.0)
        self.emitter = Emitter(x=self._width / 2.0, y=self._height / 2.0)
        self.economy = Economy(event_bus, rng=self._rng)
        self.combat = CombatSystem(event_bus, self.economy)
        self.spawner = SpawnScheduler(rng=self._rng)
        self.game_mode = GameMode(
            event_bus,
            wave_policy=wave_policy,
            high_score=high_score,
            on_high_score=self._persist_high_score,
        )

        self._agents: list[Agent] = []
        self._ambient: list[AmbientEmitter] = []

    # -- Accessors --------------------------------------------------------------

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def tick_count(self) -> int:
        return self._tick

    @property
    def state(self) -> str:
        return self.game_mode.state

    @property
    def running(self) -> bool:
        return self._running

    def get_agents(self) -> list[Agent]:
        with self._lock:
            return list(self._agents)

    def get_ambient_emitters(self) -> list[AmbientEmitter]:
        with self._lock:
            return list(self._ambient)

    # -- Entity management ------------------------------------------------------

    def add_agent(self, agent: Agent) -> None:
        """Insert an agent directly (scenario setup, debugging)."""
        with self._lock:
            self._agents.append(agent)

    def add_ambient_emitter(
        self,
        x: float,
        y: float,
        radius: float = 220.0,
        strength: float = 6.0,
        mode: ForceMode | str = ForceMode.GRAVITY,
        ttl: int = 600,
    ) -> AmbientEmitter:
        """Drop a nebula / gravity well into the field."""
        well = AmbientEmitter(x=x, y=y, radius=radius, strength=strength,
                              mode=ForceMode(mode), ttl=ttl)
        with self._lock:
            self._ambient.append(well)
        logger.debug(f"Ambient {well.mode.value} emitter {well.emitter_id} at ({x:.0f}, {y:.0f})")
        return well

    # -- Input ------------------------------------------------------------------

    def set_emitter(
        self,
        x: float | None = None,
        y: float | None = None,
        active: bool | None = None,
        mode: ForceMode | str | None = None,
    ) -> None:
        """Update the player emitter.  Omitted fields keep their value.

        Raises ValueError for an unknown mode, before anything changes.
        """
        new_mode = ForceMode(mode) if mode is not None else None
        with self._lock:
            if x is not None or y is not None:
                self.emitter.move_to(
                    self.emitter.x if x is None else x,
                    self.emitter.y if y is None else y,
                )
            if active is not None:
                self.emitter.active = bool(active)
            if new_mode is not None:
                self.emitter.mode = new_mode

    def fire_blast(self) -> bool:
        """Spend energy for a blast at the emitter.  False if not possible."""
        with self._lock:
            if not self.game_mode.is_playing:
                return False
            if not self.economy.try_spend(BLAST_COST):
                return False
            self.combat.fire_blast(self.emitter.x, self.emitter.y)
            return True

    def resize(self, width: float, height: float) -> None:
        """Adopt new viewport bounds.  In-flight entities are kept as-is."""
        self._validate_bounds(width, height)
        with self._lock:
            self._width = float(width)
            self._height = float(height)
            self.core.recenter(self._width, self._height)
        logger.info(f"Viewport resized to {width}x{height}")

    # -- Lifecycle --------------------------------------------------------------

    def start_game(self) -> bool:
        """Start or restart a session.  False if already playing."""
        with self._lock:
            if self.game_mode.is_playing:
                return False
            self._clear_field()
            return self.game_mode.start()

    def reset_game(self) -> None:
        """Abandon the session and return to the menu."""
        with self._lock:
            self._clear_field()
            self.game_mode.reset()

    def _clear_field(self) -> None:
        self._agents.clear()
        self._ambient.clear()
        self.combat.clear()
        self.economy.reset()
        self.spawner.reset()
        self.core.restore()
        self._tick = 0
        self._accumulator = 0.0

    # -- Tick -------------------------------------------------------------------

    def tick(self) -> None:
        """Execute exactly one fixed simulation step."""
        with self._lock:
            self._step()

    def update(self, dt: float) -> int:
        """Advance by *dt* seconds of wall time.  Returns steps executed."""
        with self._lock:
            self._accumulator += max(0.0, dt)
            steps = 0
            while self._accumulator >= FIXED_STEP and steps < MAX_STEPS_PER_UPDATE:
                self._step()
                self._accumulator -= FIXED_STEP
                steps += 1
            if steps == MAX_STEPS_PER_UPDATE:
                self._accumulator = 0.0
            return steps

    def _step(self) -> None:
        if not self.game_mode.is_playing:
            return
        self._tick += 1
        wave = self.game_mode.wave

        spawned = self.spawner.tick(
            self._tick, wave, len(self._agents),
            self.core.x, self.core.y, self._width, self._height,
        )
        for agent in spawned:
            self._agents.append(agent)
            self._event_bus.publish("agent_spawned", {
                "agent_id": agent.agent_id,
                "archetype": agent.archetype,
                "position": {"x": agent.x, "y": agent.y},
                "wave": wave,
            })

        self.combat.tick(
            self._agents, self.emitter, self.core,
            self._width, self._height, ambient=self._ambient,
        )
        if self.core.destroyed:
            self.game_mode.end_game(self.economy.score, self.economy.kills)
            return

        for well in self._ambient:
            well.tick()
        self._ambient = [w for w in self._ambient if not w.expired]

        self.economy.tick(self.emitter)
        self.game_mode.update_wave(self.economy.kills, self.economy.score)

    # -- Snapshot ---------------------------------------------------------------

    def snapshot(self) -> dict:
        """Read-only projection of the whole simulation for rendering."""
        with self._lock:
            state = self._hud_state()
            state.update({
                "bounds": {"width": self._width, "height": self._height},
                "core": self.core.to_dict(),
                "emitter": self.emitter.to_dict(),
                "agents": [a.to_dict() for a in self._agents],
                "pickups": [p.to_dict() for p in self.economy.pickups],
                "blasts": self.combat.get_active_blasts(),
                "ambient_emitters": [w.to_dict() for w in self._ambient],
            })
            return state

    def get_game_state(self) -> dict:
        """HUD scalars only (no entity lists)."""
        with self._lock:
            return self._hud_state()

    def _hud_state(self) -> dict:
        state = self.game_mode.get_state()
        state.update(self.economy.get_state())
        state["tick"] = self._tick
        state["core_health"] = round(self.core.health, 1)
        state["agent_count"] = len(self._agents)
        return state

    # -- Driver thread ----------------------------------------------------------

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._tick_loop, name="sim-tick", daemon=True
        )
        self._thread.start()
        logger.info(f"Simulation engine started ({self._tick_rate:.0f} Hz)")

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Simulation engine stopped")

    def _tick_loop(self) -> None:
        period = 1.0 / self._tick_rate
        last = time.monotonic()
        while self._running:
            time.sleep(period)
            now = time.monotonic()
            self.update(now - last)
            last = now

    # -- Helpers ----------------------------------------------------------------

    def _persist_high_score(self, value: int) -> None:
        if self._store is None:
            return
        self._persist_thread = threading.Thread(
            target=self._store.save, args=(value,),
            name="highscore-save", daemon=True,
        )
        self._persist_thread.start()

    def wait_for_persistence(self, timeout: float = 2.0) -> None:
        """Block until the last high-score write (if any) finishes."""
        if self._persist_thread is not None:
            self._persist_thread.join(timeout=timeout)

    @staticmethod
    def _validate_bounds(width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must be positive, got {width}x{height}")
