"""
High Score Store - Ranked summaries of finished games.

The store:
- Keeps one JSON file on local disk
- Appends, sorts by score (highest first), keeps the top 20
- Is the ONLY persistence in the system; gameplay is session-scoped

Design decisions:
- Simple file-based storage, no database
- A missing or unreadable file is an empty scoreboard
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


MAX_ENTRIES = 20
SCORES_FILE = "high_scores.json"


def default_data_dir() -> Path:
    """FLIPDUNGEON_DATA_DIR, or ~/.flipdungeon."""
    configured = os.getenv("FLIPDUNGEON_DATA_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".flipdungeon"


class HighScoreStore:
    """
    File-based high-score list.

    Usage:
        store = HighScoreStore()
        store.save(high_score_entry(state, "Ada"))
        for entry in store.list():
            ...
    """

    def __init__(self, data_dir: str | Path | None = None, max_entries: int = MAX_ENTRIES):
        self.data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
        self.max_entries = max_entries

    @property
    def path(self) -> Path:
        return self.data_dir / SCORES_FILE

    def list(self) -> list[dict[str, Any]]:
        """All stored entries, best first."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read high scores from %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.warning("ignoring malformed high score file %s", self.path)
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def save(self, entry: dict[str, Any]) -> list[dict[str, Any]]:
        """Add an entry and return the updated ranking."""
        entries = self.list()
        entries.append(entry)
        entries.sort(key=lambda e: e.get("score", 0), reverse=True)
        entries = entries[: self.max_entries]

        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)
        logger.info("saved high score %s for %s", entry.get("score"), entry.get("player_name"))
        return entries

    def clear(self):
        """Delete every stored entry."""
        self.path.unlink(missing_ok=True)
