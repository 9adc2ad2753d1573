"""
FastAPI Application - REST API for a game client.

Endpoints:
    POST   /api/v1/sessions                 Start a game
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session status
    DELETE /api/v1/sessions/{id}            End session
    GET    /api/v1/sessions/{id}/state      Get game state
    GET    /api/v1/sessions/{id}/actions    List legal actions
    POST   /api/v1/sessions/{id}/actions    Apply an action
    POST   /api/v1/sessions/{id}/score      Save a finished game's score
    GET    /api/v1/sessions/{id}/narration  Spoken ending narration
    GET    /api/v1/scores                   High score list
    GET    /api/v1/classes/{name}/icon      Generated class icon

A rejected action is not an HTTP error: the response has success=false and
the engine's rule_code. HTTP errors are reserved for unknown sessions and
unreadable requests.

Run with: uvicorn flipdungeon.api.app:create_app --factory
"""

from typing import Optional, Union
import os

# Environment configuration
FLIPDUNGEON_ENV = os.getenv("FLIPDUNGEON_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "0.1.0"


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..narration import AssetService, default_generator
    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateSessionRequest,
        SaveScoreRequest,
        # Response models
        ActionResponse,
        AssetResponse,
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        HighScoreListResponse,
        LegalActionsResponse,
        SessionListResponse,
        SessionResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Flip Dungeon API",
        description="""
Turn resolution and progression engine for Flip Dungeon.

## Turn Flow

1. `POST /actions` with `play_cards` resolves a turn; the game is now `resolving`
2. Optionally `rewind_fate` once to redraw the dungeon card of a failed turn
3. `end_turn` commits the result and deals the next hand

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ACTION` | Action request could not be understood |
| `VALIDATION_ERROR` | Bad class, difficulty or settings |
| `GAME_NOT_OVER` | Needs a finished game |
| `SCORE_ALREADY_SAVED` | Score was already recorded |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(asset_service=AssetService(default_generator()))

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.GAME_NOT_OVER: 409,
        ErrorCode.SCORE_ALREADY_SAVED: 409,
    }

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code,
                response.error,
                status_code=status_codes.get(response.error_code, 400),
                details=response.details,
            )
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid class, difficulty or settings"}},
        tags=["Sessions"],
        summary="Start a new game",
    )
    async def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Start a new game.

        Pass `random_seed` for a reproducible deal and map.
        """
        return respond(api_service.create_session(request))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release its state."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Get the current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game_state(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="List legal actions",
    )
    async def get_legal_actions(
        session_id: str,
        max_play_size: Optional[int] = Query(None, ge=1, description="Largest card group to enumerate"),
    ) -> Union[LegalActionsResponse, JSONResponse]:
        """Every action the engine accepts in the current state."""
        return respond(api_service.legal_actions(session_id, max_play_size=max_play_size))

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unreadable action"},
            404: {"model": ErrorResponse},
        },
        tags=["Game Loop"],
        summary="Apply an action",
    )
    async def apply_action(session_id: str, request: ActionRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Apply an action.

        **Examples:**
        ```json
        {"action_type": "play_cards", "action_kind": "train", "card_ids": ["7-clubs-00a1b2c3d4"]}
        {"action_type": "end_turn"}
        ```
        """
        return respond(api_service.apply_action(session_id, request))

    # =========================================================================
    # Scoreboard Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/score",
        response_model=HighScoreListResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Game not over or already saved"},
        },
        tags=["Scores"],
        summary="Save a finished game's score",
    )
    async def save_score(
        session_id: str,
        request: Optional[SaveScoreRequest] = Body(None),
    ) -> Union[HighScoreListResponse, JSONResponse]:
        return respond(api_service.save_score(session_id, request))

    @app.get(
        "/api/v1/scores",
        response_model=HighScoreListResponse,
        tags=["Scores"],
        summary="High score list",
    )
    async def list_scores() -> HighScoreListResponse:
        return api_service.list_scores()

    # =========================================================================
    # Generated Assets
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/narration",
        response_model=AssetResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Assets"],
        summary="Spoken narration of a finished game",
    )
    async def ending_narration(session_id: str) -> Union[AssetResponse, JSONResponse]:
        """Returns available=false when no narrator is configured or generation fails."""
        return respond(await api_service.ending_narration(session_id))

    @app.get(
        "/api/v1/classes/{class_name}/icon",
        response_model=AssetResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Assets"],
        summary="Generated icon for a character class",
    )
    async def class_icon(class_name: str) -> Union[AssetResponse, JSONResponse]:
        return respond(await api_service.class_icon(class_name))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="flipdungeon",
            version=API_VERSION,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Flip Dungeon API",
            "version": API_VERSION,
            "environment": FLIPDUNGEON_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
