"""GameMode - session state machine, wave progression, and high score.

Architecture
------------
GameMode manages the flow of a defence session through a small state
machine:

  menu -> playing -> gameover -> (start) -> playing

``menu`` and ``gameover`` do not simulate; the engine skips the spawner,
combat and economy entirely while in them.  ``start()`` is accepted from
either of them and ignored while already playing.  The engine clears the
field (agents, pickups, blasts, ambient emitters) and restores the core
and economy before calling it.

The only way from ``playing`` to ``gameover`` is ``end_game()``, called
by the engine in the same tick the core's health reaches zero.  The high
score is updated atomically with that transition and the persistence
hook runs only when it actually increased.

Wave progression
----------------
Waves only ever go up.  Two policies are supported:

  - ``kills``: ``wave = max(wave, kills // KILLS_PER_WAVE + 1)``
  - ``score``: advance while ``score >= wave * WAVE_SCORE_THRESHOLD``

Events published on EventBus:
  - ``game_state_change``: any state transition
  - ``wave_start``: wave number increased
  - ``game_over``: final score, wave, kills
  - ``high_score``: a new best was recorded
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

if TYPE_CHECKING:
    from nebula.comms.event_bus import EventBus

KILLS_PER_WAVE = 12
WAVE_SCORE_THRESHOLD = 300

WAVE_POLICIES = ("kills", "score")


class GameMode:
    """Game state machine + wave controller + high score."""

    STATES = ("menu", "playing", "gameover")

    def __init__(
        self,
        event_bus: EventBus,
        wave_policy: str = "kills",
        high_score: int = 0,
        on_high_score: Callable[[int], None] | None = None,
    ) -> None:
        if wave_policy not in WAVE_POLICIES:
            raise ValueError(f"Unknown wave policy: {wave_policy!r}")
        self._event_bus = event_bus
        self.wave_policy = wave_policy
        self._on_high_score = on_high_score

        self.state: str = "menu"
        self.wave: int = 1
        self.high_score: int = max(0, int(high_score))
        self.final_score: int = 0

    @property
    def is_playing(self) -> bool:
        return self.state == "playing"

    # -- Transitions ------------------------------------------------------------

    def start(self) -> bool:
        """menu/gameover -> playing.  Returns False if already playing."""
        if self.state == "playing":
            return False
        previous = self.state
        self.state = "playing"
        self.wave = 1
        self.final_score = 0
        logger.info(f"Game started (from {previous})")
        self._publish_state_change()
        self._event_bus.publish("wave_start", {"wave_number": self.wave})
        return True

    def end_game(self, score: int, kills: int = 0) -> None:
        """playing -> gameover.  Records the high score."""
        if self.state != "playing":
            return
        self.state = "gameover"
        self.final_score = score
        new_best = score > self.high_score
        self.high_score = max(self.high_score, score)

        logger.info(f"Game over: score {score}, wave {self.wave}, kills {kills}")
        self._event_bus.publish("game_over", {
            "final_score": score,
            "wave": self.wave,
            "total_kills": kills,
            "high_score": self.high_score,
        })
        if new_best:
            logger.info(f"New high score: {self.high_score}")
            self._event_bus.publish("high_score", {"high_score": self.high_score})
            if self._on_high_score is not None:
                self._on_high_score(self.high_score)
        self._publish_state_change()

    def reset(self) -> None:
        """Return to the menu.  Keeps the high score."""
        self.state = "menu"
        self.wave = 1
        self.final_score = 0
        self._publish_state_change()

    # -- Waves ------------------------------------------------------------------

    def update_wave(self, kills: int, score: int) -> bool:
        """Advance the wave per policy.  Returns True if it changed."""
        if self.state != "playing":
            return False
        if self.wave_policy == "kills":
            target = max(self.wave, kills // KILLS_PER_WAVE + 1)
        else:
            target = self.wave
            while score >= target * WAVE_SCORE_THRESHOLD:
                target += 1
        if target <= self.wave:
            return False
        self.wave = target
        logger.info(f"Wave {self.wave} (kills {kills}, score {score})")
        self._event_bus.publish("wave_start", {"wave_number": self.wave})
        return True

    # -- Serialization ----------------------------------------------------------

    def get_state(self) -> dict:
        return {
            "state": self.state,
            "wave": self.wave,
            "wave_policy": self.wave_policy,
            "high_score": self.high_score,
            "final_score": self.final_score,
        }

    def _publish_state_change(self) -> None:
        self._event_bus.publish("game_state_change", self.get_state())
