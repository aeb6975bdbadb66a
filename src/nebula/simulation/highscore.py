"""HighScoreStore - JSON file persistence for the best score.

Read once at startup and written whenever a game ends with a new best.
A missing or unreadable file counts as a high score of 0; write failures
are logged and swallowed so a full disk never stalls the tick.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger


class HighScoreStore:
    """Persists a single integer high score to ``path``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return max(0, int(data.get("high_score", 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"High score load failed ({self.path}): {e}")
            return 0

    def save(self, value: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump({"high_score": int(value)}, f)
            logger.debug(f"High score {value} saved to {self.path}")
        except OSError as e:
            logger.warning(f"High score save failed ({self.path}): {e}")
