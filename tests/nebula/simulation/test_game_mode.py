"""Unit tests for the GameMode state machine and wave progression."""

from __future__ import annotations

import pytest

from nebula.comms.event_bus import EventBus
from nebula.simulation.game_mode import GameMode


pytestmark = pytest.mark.unit


def _types(q) -> list[str]:
    out = []
    while not q.empty():
        out.append(q.get_nowait()["type"])
    return out


@pytest.fixture
def bus():
    return EventBus()


class TestStateMachine:
    def test_starts_in_menu(self, bus):
        gm = GameMode(bus)
        assert gm.state == "menu"
        assert gm.wave == 1

    def test_start_from_menu(self, bus):
        q = bus.subscribe()
        gm = GameMode(bus)
        assert gm.start() is True
        assert gm.state == "playing"
        assert _types(q) == ["game_state_change", "wave_start"]

    def test_start_ignored_while_playing(self, bus):
        gm = GameMode(bus)
        gm.start()
        gm.wave = 4
        assert gm.start() is False
        assert gm.wave == 4

    def test_end_game_only_from_playing(self, bus):
        gm = GameMode(bus)
        gm.end_game(500)
        assert gm.state == "menu"
        assert gm.high_score == 0

    def test_restart_after_game_over(self, bus):
        gm = GameMode(bus)
        gm.start()
        gm.wave = 3
        gm.end_game(100)
        assert gm.state == "gameover"
        assert gm.start() is True
        assert gm.wave == 1
        assert gm.final_score == 0

    def test_reset_keeps_high_score(self, bus):
        gm = GameMode(bus)
        gm.start()
        gm.end_game(700)
        gm.reset()
        assert gm.state == "menu"
        assert gm.high_score == 700

    def test_unknown_policy_rejected(self, bus):
        with pytest.raises(ValueError):
            GameMode(bus, wave_policy="time")


class TestHighScore:
    def test_new_best_fires_hook(self, bus):
        saved = []
        q = bus.subscribe()
        gm = GameMode(bus, high_score=100, on_high_score=saved.append)
        gm.start()
        _types(q)
        gm.end_game(250, kills=14)
        assert gm.high_score == 250
        assert saved == [250]
        assert _types(q) == ["game_over", "high_score", "game_state_change"]

    def test_worse_score_keeps_best(self, bus):
        saved = []
        gm = GameMode(bus, high_score=900, on_high_score=saved.append)
        gm.start()
        gm.end_game(250)
        assert gm.high_score == 900
        assert gm.final_score == 250
        assert saved == []

    def test_equal_score_is_not_a_new_best(self, bus):
        saved = []
        gm = GameMode(bus, high_score=250, on_high_score=saved.append)
        gm.start()
        gm.end_game(250)
        assert saved == []


class TestWaves:
    def test_kills_policy(self, bus):
        gm = GameMode(bus)
        gm.start()
        assert gm.update_wave(kills=11, score=0) is False
        assert gm.update_wave(kills=12, score=0) is True
        assert gm.wave == 2
        gm.update_wave(kills=40, score=0)
        assert gm.wave == 4

    def test_score_policy(self, bus):
        gm = GameMode(bus, wave_policy="score")
        gm.start()
        gm.update_wave(kills=0, score=299)
        assert gm.wave == 1
        gm.update_wave(kills=0, score=950)
        assert gm.wave == 4

    def test_waves_never_decrease(self, bus):
        gm = GameMode(bus)
        gm.start()
        gm.update_wave(kills=36, score=0)
        assert gm.update_wave(kills=0, score=0) is False
        assert gm.wave == 4

    def test_no_waves_outside_play(self, bus):
        gm = GameMode(bus)
        assert gm.update_wave(kills=100, score=0) is False
        assert gm.wave == 1

    def test_wave_start_event(self, bus):
        gm = GameMode(bus)
        gm.start()
        q = bus.subscribe("wave_start")
        gm.update_wave(kills=24, score=0)
        assert q.get_nowait()["data"] == {"wave_number": 3}
