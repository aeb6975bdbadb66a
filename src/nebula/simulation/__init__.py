"""Threat simulation and combat resolution - drives the defence at 60 Hz.

Package layout:
  force_field.py - force primitive shared by agents, pickups and blasts
  emitter.py     - player emitter + ambient nebulae/gravity wells
  agent.py       - Agent dataclass (hostile unit + countdown timers)
  core.py        - Core objective
  spawner.py     - SpawnScheduler (wave-scaled, seedable)
  combat.py      - CombatSystem (field effects, blasts, kill resolution)
  economy.py     - Economy (score, combo, energy, pickups)
  game_mode.py   - GameMode (menu/playing/gameover, waves, high score)
  highscore.py   - HighScoreStore (JSON persistence hook)
  engine.py      - SimulationEngine (fixed-step tick, snapshot, driver)
"""

from .agent import Agent
from .combat import Blast, CombatSystem, Resolution
from .core import Core
from .economy import Economy, Pickup
from .emitter import AmbientEmitter, Emitter
from .engine import SimulationEngine
from .force_field import ForceMode, apply_force, force_delta
from .game_mode import GameMode
from .highscore import HighScoreStore
from .spawner import SpawnScheduler

__all__ = [
    "Agent",
    "AmbientEmitter",
    "Blast",
    "CombatSystem",
    "Core",
    "Economy",
    "Emitter",
    "ForceMode",
    "GameMode",
    "HighScoreStore",
    "Pickup",
    "Resolution",
    "SimulationEngine",
    "SpawnScheduler",
    "apply_force",
    "force_delta",
]
