"""
Bots module - Automated players.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy, FirstLegalPolicy, GreedyPolicy: Built-in policies
- play_game: Drives a whole game with a policy
"""

from .policy import (
    BotDecision,
    BotPolicy,
    FirstLegalPolicy,
    GreedyPolicy,
    GreedyWeights,
    RandomPolicy,
)
from .runner import GameRecord, play_game

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "GreedyPolicy",
    "GreedyWeights",
    "GameRecord",
    "play_game",
]
