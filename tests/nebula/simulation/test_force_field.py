"""Unit tests for the force field primitive and emitters."""

from __future__ import annotations

import math
from types import SimpleNamespace

import pytest

from nebula.simulation.emitter import FORCE_RADIUS, FORCE_STRENGTH, AmbientEmitter, Emitter
from nebula.simulation.force_field import (
    MODE_COEFFICIENTS,
    ForceMode,
    apply_force,
    falloff,
    force_delta,
    push_radial,
)


pytestmark = pytest.mark.unit

R = FORCE_RADIUS
S = FORCE_STRENGTH


def _body(x: float, y: float, hue: float | None = None):
    body = SimpleNamespace(x=x, y=y, vx=0.0, vy=0.0)
    if hue is not None:
        body.hue = hue
    return body


class TestFalloff:
    def test_linear_inside(self):
        assert falloff(R / 2, R, S) == pytest.approx(S / 2)

    def test_zero_at_boundary(self):
        assert falloff(R, R, S) == 0.0

    def test_zero_at_centre(self):
        assert falloff(0.0, R, S) == 0.0


class TestNoEffectZones:
    @pytest.mark.parametrize("mode", list(ForceMode))
    def test_outside_radius_is_zero(self, mode):
        body = _body(R + 5.0, 0.0)
        assert apply_force(body, 0.0, 0.0, R, S, mode) == 0.0
        assert (body.vx, body.vy) == (0.0, 0.0)

    @pytest.mark.parametrize("mode", list(ForceMode))
    def test_exactly_at_radius_is_zero(self, mode):
        body = _body(0.0, R)
        assert apply_force(body, 0.0, 0.0, R, S, mode) == 0.0
        assert (body.vx, body.vy) == (0.0, 0.0)

    @pytest.mark.parametrize("mode", list(ForceMode))
    def test_on_top_of_emitter_is_zero(self, mode):
        body = _body(10.0, 10.0)
        assert apply_force(body, 10.0, 10.0, R, S, mode) == 0.0
        assert (body.vx, body.vy) == (0.0, 0.0)


class TestModes:
    def test_repel_pushes_outward(self):
        body = _body(R / 2, 0.0)
        f = apply_force(body, 0.0, 0.0, R, S, ForceMode.REPEL)
        assert f == pytest.approx(S / 2)
        assert body.vx == pytest.approx(S / 2 * 0.15)
        assert body.vy == pytest.approx(0.0)

    def test_attract_pulls_inward(self):
        body = _body(R / 2, 0.0)
        apply_force(body, 0.0, 0.0, R, S, "attract")
        assert body.vx == pytest.approx(-S / 2 * 0.08)

    def test_repel_stronger_than_attract(self):
        rep = abs(MODE_COEFFICIENTS[ForceMode.REPEL][0])
        att = abs(MODE_COEFFICIENTS[ForceMode.ATTRACT][0])
        assert rep > att

    def test_vortex_is_mostly_tangential(self):
        body = _body(R / 2, 0.0)
        apply_force(body, 0.0, 0.0, R, S, ForceMode.VORTEX)
        # radial drift along +x, spin along +y
        assert body.vx == pytest.approx(S / 2 * 0.02)
        assert body.vy == pytest.approx(S / 2 * 0.12)
        assert abs(body.vy) > abs(body.vx)

    def test_gravity_pulls_and_swirls(self):
        body = _body(0.0, R / 2)
        apply_force(body, 0.0, 0.0, R, S, ForceMode.GRAVITY)
        assert body.vy < 0  # inward
        assert body.vx != 0  # tangential component

    def test_wave_alternates_direction_with_distance(self):
        # cos(2*pi*d / (R/2)): +1 at d = R/2, -1 at d = R/4
        dvx_out, _, _ = force_delta(R / 2, 0.0, R, S, ForceMode.WAVE)
        dvx_in, _, _ = force_delta(R / 4, 0.0, R, S, ForceMode.WAVE)
        assert dvx_out > 0
        assert dvx_in < 0

    def test_blast_mode_has_no_field(self):
        body = _body(R / 2, 0.0)
        assert apply_force(body, 0.0, 0.0, R, S, ForceMode.BLAST) == 0.0
        assert (body.vx, body.vy) == (0.0, 0.0)

    def test_paint_cycles_hue(self):
        body = _body(R / 2, 0.0, hue=350.0)
        f = apply_force(body, 0.0, 0.0, R, S, ForceMode.PAINT)
        assert body.hue == pytest.approx((350.0 + f * 2.5) % 360.0)
        assert 0.0 <= body.hue < 360.0

    def test_paint_without_hue_attribute(self):
        body = _body(R / 2, 0.0)
        assert apply_force(body, 0.0, 0.0, R, S, ForceMode.PAINT) > 0
        assert not hasattr(body, "hue")

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            force_delta(1.0, 0.0, R, S, "telekinesis")


class TestDeterminism:
    @pytest.mark.parametrize("mode", list(ForceMode))
    def test_same_inputs_same_outputs(self, mode):
        assert force_delta(37.0, -21.0, R, S, mode) == force_delta(37.0, -21.0, R, S, mode)

    def test_delta_matches_apply(self):
        body = _body(30.0, 40.0)
        dvx, dvy, f = force_delta(30.0, 40.0, R, S, ForceMode.CONSTELLATION)
        assert apply_force(body, 0.0, 0.0, R, S, ForceMode.CONSTELLATION) == f
        assert (body.vx, body.vy) == (dvx, dvy)


class TestPushRadial:
    def test_push_along_offset(self):
        body = _body(3.0, 4.0)
        push_radial(body, 0.0, 0.0, 10.0)
        assert body.vx == pytest.approx(6.0)
        assert body.vy == pytest.approx(8.0)

    def test_push_at_origin_is_noop(self):
        body = _body(0.0, 0.0)
        push_radial(body, 0.0, 0.0, 10.0)
        assert (body.vx, body.vy) == (0.0, 0.0)


class TestEmitters:
    def test_defaults(self):
        e = Emitter()
        assert e.radius == 160.0
        assert e.strength == 14.0
        assert e.mode is ForceMode.REPEL
        assert e.active is False

    def test_set_mode_from_string(self):
        e = Emitter()
        e.set_mode("vortex")
        assert e.mode is ForceMode.VORTEX

    def test_blast_mode_has_no_field(self):
        e = Emitter(mode=ForceMode.BLAST)
        assert e.has_field is False

    def test_emitter_apply(self):
        e = Emitter(x=0.0, y=0.0)
        body = _body(R / 2, 0.0)
        assert e.apply(body) == pytest.approx(S / 2)

    def test_ambient_counts_down_and_expires(self):
        well = AmbientEmitter(x=0.0, y=0.0, radius=100.0, strength=5.0, mode="gravity", ttl=2)
        assert well.mode is ForceMode.GRAVITY
        well.tick()
        assert not well.expired
        well.tick()
        assert well.expired
        well.tick()
        assert well.ttl == 0

    def test_ambient_uses_same_contract(self):
        well = AmbientEmitter(x=0.0, y=0.0, radius=100.0, strength=10.0, mode="repel")
        body = _body(50.0, 0.0)
        assert well.apply(body) == pytest.approx(5.0)
        assert body.vx > 0
        assert math.isclose(body.vy, 0.0)

    def test_to_dict(self):
        d = Emitter(x=1.0, y=2.0, active=True, mode=ForceMode.WAVE).to_dict()
        assert d["mode"] == "wave"
        assert d["active"] is True

    def test_move_to_is_all_or_nothing(self):
        e = Emitter(x=1.0, y=2.0)
        with pytest.raises(ValueError):
            e.move_to(5.0, "abc")
        assert (e.x, e.y) == (1.0, 2.0)
