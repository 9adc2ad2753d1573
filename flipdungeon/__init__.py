"""
Flip Dungeon - Card-driven dungeon adventure engine

A deterministic, single-player engine for a card game where a hand of
playing cards is spent against a drawn dungeon card. Provides:
- Turn resolution with hand combos and encounter modifiers
- Branching location progression
- Player resources, alignment and quests
- Bot policies and an HTTP API
"""

__version__ = "0.1.0"
