"""Base classes for the agent archetype system.

DropTable   -- frozen dataclass: pickups left behind on a full kill
AgentStats  -- frozen dataclass for health/speed/reward stats
AgentType   -- abstract base every concrete archetype subclasses
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class DropTable:
    """Pickups spawned where an agent of this archetype is destroyed."""
    count: int
    value: float


@dataclass(frozen=True)
class AgentStats:
    """Immutable combat and reward profile for an archetype."""
    health: float
    speed_mult: float
    kill_score: int
    combo_gain: int
    core_damage: float


class AgentType:
    """Abstract base for every hostile archetype.

    Subclasses MUST set all ClassVar fields without defaults.  The registry
    discovers concrete subclasses automatically at import time.
    """

    # -- identity --
    type_id: ClassVar[str]
    display_name: ClassVar[str]

    # -- appearance --
    size: ClassVar[float]
    hue: ClassVar[float]

    # -- combat --
    stats: ClassVar[AgentStats]
    drops: ClassVar[DropTable]

    # -- spawn rules --
    unlock_wave: ClassVar[int] = 1
    spawn_weight: ClassVar[int] = 1

    @classmethod
    def is_unlocked(cls, wave: int) -> bool:
        return wave >= cls.unlock_wave
