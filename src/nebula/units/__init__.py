"""Agent archetype registry with auto-discovery.

Import this package to access the full registry::

    from nebula.units import get_type, all_types, unlocked_types

    tank_cls = get_type("tank")   # -> Tank class
    print(tank_cls.stats.health)  # 2.5
    print(len(all_types()))       # 4

The registry is populated at import time by walking every submodule
under ``nebula.units`` and collecting concrete ``AgentType`` subclasses.
The spawner and combat resolver only ever look archetypes up here, so
adding a new hostile type means adding one module under ``archetypes``.
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import Optional

from nebula.units.base import AgentStats, AgentType, DropTable

__all__ = [
    "AgentType",
    "AgentStats",
    "DropTable",
    "get_type",
    "require_type",
    "all_types",
    "type_ids",
    "unlocked_types",
    "spawn_candidates",
]

# ---------------------------------------------------------------------------
# Internal registry
# ---------------------------------------------------------------------------
_registry: dict[str, type[AgentType]] = {}


def _discover() -> None:
    """Walk all subpackages and register concrete AgentType subclasses."""
    package = importlib.import_module("nebula.units")
    _walk(package.__path__, package.__name__)


def _walk(path: list[str], prefix: str) -> None:
    for _importer, modname, _ispkg in pkgutil.walk_packages(path, prefix + "."):
        mod = importlib.import_module(modname)
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            if (
                isinstance(obj, type)
                and issubclass(obj, AgentType)
                and obj is not AgentType
                and hasattr(obj, "type_id")
            ):
                _registry[obj.type_id] = obj


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_type(type_id: str) -> Optional[type[AgentType]]:
    """Return the AgentType class for *type_id*, or ``None``."""
    return _registry.get(type_id)


def require_type(type_id: str) -> type[AgentType]:
    """Return the AgentType class for *type_id* or raise ``KeyError``."""
    cls = _registry.get(type_id)
    if cls is None:
        raise KeyError(f"Unknown archetype: {type_id!r}")
    return cls


def all_types() -> list[type[AgentType]]:
    """Return every registered AgentType class (stable order by unlock wave)."""
    return sorted(_registry.values(), key=lambda c: (c.unlock_wave, c.type_id))


def type_ids() -> set[str]:
    return set(_registry)


def unlocked_types(wave: int) -> list[type[AgentType]]:
    """Archetypes available at *wave* (stable order)."""
    return [cls for cls in all_types() if cls.is_unlocked(wave)]


def spawn_candidates(wave: int) -> list[str]:
    """Weighted candidate list for *wave*.

    Each unlocked archetype appears ``spawn_weight`` times, so a uniform
    choice over the list yields the weighted distribution.
    """
    out: list[str] = []
    for cls in unlocked_types(wave):
        out.extend([cls.type_id] * cls.spawn_weight)
    return out


# ---------------------------------------------------------------------------
# Auto-discover on import
# ---------------------------------------------------------------------------
_discover()
