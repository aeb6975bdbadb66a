"""Unit tests for score, combo, energy and pickups."""

from __future__ import annotations

import random

import pytest

from nebula.comms.event_bus import EventBus
from nebula.simulation.economy import (
    COMBO_DURATION,
    MAX_COMBO,
    MAX_ENERGY,
    PICKUP_LIFETIME,
    Economy,
    Pickup,
)
from nebula.simulation.emitter import Emitter
from nebula.simulation.force_field import ForceMode


pytestmark = pytest.mark.unit


def _drain(q) -> list[dict]:
    out = []
    while not q.empty():
        out.append(q.get_nowait())
    return out


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def economy(bus):
    return Economy(bus, rng=random.Random(0))


# --------------------------------------------------------------------------
# Score and combo
# --------------------------------------------------------------------------

class TestScoring:
    def test_multiplier_from_combo(self, economy):
        economy.combo = 3
        assert economy.multiplier == pytest.approx(1.3)
        assert economy.award(18) == 23
        assert economy.score == 23

    def test_kill_uses_pre_kill_multiplier(self, economy):
        points = economy.register_kill("basic", 0.0, 0.0)
        assert points == 18
        assert economy.combo == 2
        assert economy.kills == 1

    def test_tank_kill_gains_more_combo(self, economy):
        economy.register_kill("tank", 0.0, 0.0)
        assert economy.combo == 3

    def test_kill_drops_pickups(self, economy):
        economy.register_kill("tank", 50.0, 60.0)
        assert len(economy.pickups) == 3
        assert all(p.value == 8 for p in economy.pickups)

    def test_ejection_reward_is_reduced(self, economy):
        points = economy.register_ejection("basic")
        assert points == 9
        assert economy.combo == 1
        assert economy.ejections == 1
        assert economy.kills == 1
        assert economy.pickups == []

    def test_combo_capped(self, economy):
        for _ in range(15):
            economy.register_kill("tank", 0.0, 0.0)
        assert economy.combo == MAX_COMBO
        assert economy.multiplier == pytest.approx(3.0)

    def test_score_never_decreases(self, economy):
        previous = 0
        for archetype in ("basic", "fast", "tank", "swarm", "basic"):
            economy.register_kill(archetype, 0.0, 0.0)
            economy.break_combo()
            assert economy.score >= previous
            previous = economy.score


class TestComboTimer:
    def test_combo_expires(self, economy, bus):
        q = bus.subscribe("combo_lost")
        economy.gain_combo(4)
        for _ in range(COMBO_DURATION - 1):
            economy.tick(None)
        assert economy.combo == 4
        economy.tick(None)
        assert economy.combo == 0
        events = _drain(q)
        assert events[0]["data"] == {"combo": 4, "reason": "timeout"}

    def test_kill_refreshes_timer(self, economy):
        economy.gain_combo(2)
        for _ in range(100):
            economy.tick(None)
        economy.gain_combo(2)
        assert economy.combo_timer == COMBO_DURATION

    def test_break_without_combo_is_silent(self, economy, bus):
        q = bus.subscribe()
        economy.break_combo()
        assert q.empty()


# --------------------------------------------------------------------------
# Energy
# --------------------------------------------------------------------------

class TestEnergy:
    def test_channeling_drains(self, economy):
        economy.tick(Emitter(active=True, mode=ForceMode.REPEL))
        assert economy.energy == pytest.approx(99.7)

    def test_idle_regenerates(self, economy):
        economy.energy = 50.0
        economy.tick(Emitter(active=False))
        assert economy.energy == pytest.approx(50.25)

    def test_blast_mode_regenerates(self, economy):
        economy.energy = 50.0
        economy.tick(Emitter(active=True, mode=ForceMode.BLAST))
        assert economy.energy == pytest.approx(50.25)

    def test_energy_bounded(self, economy):
        economy.tick(None)
        assert economy.energy == MAX_ENERGY
        economy.energy = 0.1
        economy.tick(Emitter(active=True, mode=ForceMode.GRAVITY))
        assert economy.energy == 0.0

    def test_spend_is_all_or_nothing(self, economy):
        economy.energy = 10.0
        assert economy.try_spend(20.0) is False
        assert economy.energy == 10.0
        assert economy.try_spend(10.0) is True
        assert economy.energy == 0.0

    def test_negative_cost_rejected(self, economy):
        assert economy.try_spend(-5.0) is False
        assert economy.energy == MAX_ENERGY


# --------------------------------------------------------------------------
# Pickups
# --------------------------------------------------------------------------

class TestPickups:
    def test_collected_near_active_emitter(self, economy, bus):
        q = bus.subscribe("pickup_collected")
        economy.energy = 50.0
        economy.pickups.append(Pickup(x=10.0, y=0.0, value=6))
        collected = economy.tick(Emitter(x=0.0, y=0.0, active=True, mode=ForceMode.PAINT))
        assert len(collected) == 1
        assert economy.pickups == []
        assert economy.score == 6
        # +6 from the pickup, -0.15 paint drain
        assert economy.energy == pytest.approx(55.85)
        assert _drain(q)[0]["data"]["points"] == 6

    def test_inactive_emitter_does_not_collect(self, economy):
        economy.pickups.append(Pickup(x=10.0, y=0.0, value=6))
        economy.tick(Emitter(x=0.0, y=0.0, active=False))
        assert len(economy.pickups) == 1
        assert economy.score == 0

    def test_pickup_pulled_toward_emitter(self, economy):
        economy.pickups.append(Pickup(x=150.0, y=0.0, value=6))
        emitter = Emitter(x=0.0, y=0.0, active=True)
        economy.tick(emitter)
        assert economy.pickups[0].x < 150.0
        for _ in range(120):
            if not economy.pickups:
                break
            economy.tick(emitter)
        assert economy.pickups == []
        assert economy.score > 0

    def test_pickup_outside_attract_radius_ignored(self, economy):
        economy.pickups.append(Pickup(x=500.0, y=0.0, value=6))
        economy.tick(Emitter(x=0.0, y=0.0, active=True))
        assert economy.pickups[0].x == 500.0

    def test_pickups_expire(self, economy):
        economy.pickups.append(Pickup(x=500.0, y=0.0, value=6))
        for _ in range(PICKUP_LIFETIME):
            economy.tick(None)
        assert economy.pickups == []
        assert economy.score == 0


class TestState:
    def test_reset(self, economy):
        economy.register_kill("basic", 0.0, 0.0)
        economy.energy = 5.0
        economy.reset()
        assert economy.get_state() == {
            "score": 0,
            "combo": 0,
            "combo_timer": 0,
            "multiplier": 1.0,
            "energy": 100.0,
            "kills": 0,
            "ejections": 0,
        }
        assert economy.pickups == []
