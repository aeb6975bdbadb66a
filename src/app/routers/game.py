"""Game control API - start, reset, steer the emitter, fire blasts."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from nebula.simulation.force_field import ForceMode

router = APIRouter(prefix="/api/game", tags=["game"])


class EmitterInput(BaseModel):
    x: Optional[float] = None
    y: Optional[float] = None
    active: Optional[bool] = None
    mode: Optional[ForceMode] = None


class Viewport(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class AmbientWell(BaseModel):
    x: float
    y: float
    radius: float = Field(220.0, gt=0)
    strength: float = Field(6.0, ge=0)
    mode: ForceMode = ForceMode.GRAVITY
    ttl: int = Field(600, gt=0)


def _get_engine(request: Request):
    """Retrieve the SimulationEngine from app state."""
    sim = getattr(request.app.state, "simulation_engine", None)
    if sim is not None:
        return sim
    raise HTTPException(503, "Simulation engine not available")


@router.get("/state")
async def get_game_state(request: Request):
    """Full render snapshot."""
    engine = _get_engine(request)
    return engine.snapshot()


@router.get("/hud")
async def get_hud(request: Request):
    """Score, combo, energy, wave, core health - no entity lists."""
    engine = _get_engine(request)
    return engine.get_game_state()


@router.post("/start")
async def start_game(request: Request):
    """Start from the menu, or restart after game over."""
    engine = _get_engine(request)
    # start_game() checks the state under the engine lock
    if not engine.start_game():
        raise HTTPException(400, f"Cannot start game in state: {engine.game_mode.state}")
    return {"status": "playing", "wave": 1}


@router.post("/reset")
async def reset_game(request: Request):
    """Abandon the session and return to the menu."""
    engine = _get_engine(request)
    engine.reset_game()
    return {"status": "reset", "state": "menu"}


@router.post("/emitter")
async def update_emitter(data: EmitterInput, request: Request):
    """Move, toggle, or switch the mode of the player emitter."""
    engine = _get_engine(request)
    engine.set_emitter(x=data.x, y=data.y, active=data.active, mode=data.mode)
    return engine.emitter.to_dict()


@router.post("/blast")
async def fire_blast(request: Request):
    """Fire a blast at the emitter.  ``fired`` is False without energy."""
    engine = _get_engine(request)
    fired = engine.fire_blast()
    return {"fired": fired, "energy": round(engine.economy.energy, 2)}


@router.post("/resize")
async def resize(viewport: Viewport, request: Request):
    engine = _get_engine(request)
    engine.resize(viewport.width, viewport.height)
    return {"width": viewport.width, "height": viewport.height}


@router.post("/wells")
async def add_well(well: AmbientWell, request: Request):
    """Drop an ambient nebula / gravity well into the field."""
    engine = _get_engine(request)
    if engine.game_mode.state != "playing":
        raise HTTPException(400, "Ambient emitters can only be added while playing")
    emitter = engine.add_ambient_emitter(
        well.x, well.y, radius=well.radius, strength=well.strength,
        mode=well.mode, ttl=well.ttl,
    )
    return emitter.to_dict()
