"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a game session
2. Lists and applies actions
3. Saves the score of a finished game
4. Optionally fetches generated art and narration

All game state is session-scoped. Only high scores persist.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    SaveScoreRequest,
    # Responses
    ActionResponse,
    AssetResponse,
    ErrorResponse,
    GameStateResponse,
    HighScoreListResponse,
    LegalActionsResponse,
    SessionResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateSessionRequest",
    "SaveScoreRequest",
    # Responses
    "ActionResponse",
    "AssetResponse",
    "ErrorResponse",
    "GameStateResponse",
    "HighScoreListResponse",
    "LegalActionsResponse",
    "SessionResponse",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
