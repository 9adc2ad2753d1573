"""
Session - Ephemeral in-memory game sessions.
"""

from .manager import Session, SessionManager, SessionState

__all__ = ["Session", "SessionManager", "SessionState"]
