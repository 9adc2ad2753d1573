"""
Scoreboard - Local high-score persistence.
"""

from .store import HighScoreStore, MAX_ENTRIES

__all__ = ["HighScoreStore", "MAX_ENTRIES"]
