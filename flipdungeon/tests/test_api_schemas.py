"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- The OpenAPI schema generates with every response model
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ActionRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    HighScoreEntry,
)


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_create_session_defaults(self):
        request = CreateSessionRequest()
        assert request.character_class == "Druid"
        assert request.difficulty == "Normal"
        assert request.random_seed is None

    def test_extra_locations_bounds(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(extra_locations=9)

    def test_action_request_needs_type(self):
        with pytest.raises(ValidationError):
            ActionRequest()

    def test_error_response_serializes(self):
        data = ErrorResponse(error="gone", error_code=ErrorCode.SESSION_NOT_FOUND).model_dump()
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["api_version"] == "v1"

    def test_high_score_entry_requires_score(self):
        with pytest.raises(ValidationError):
            HighScoreEntry.model_validate({"id": "x", "player_name": "Ada"})

    def test_error_codes_are_upper_snake_case(self):
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self, tmp_path):
        from fastapi.openapi.utils import get_openapi

        from ..api.app import create_app
        from ..api.service import APIService
        from ..scoreboard import HighScoreStore

        app = create_app(APIService(score_store=HighScoreStore(tmp_path)))
        return get_openapi(title=app.title, version=app.version, routes=app.routes)

    def test_openapi_schema_generates(self, schema):
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in ("SessionResponse", "GameStateResponse", "ActionResponse",
                     "LegalActionsResponse", "HighScoreListResponse", "ErrorResponse"):
            assert name in schemas, f"Missing schema: {name}"

    def test_game_loop_endpoints(self, schema):
        paths = schema["paths"]
        assert "post" in paths["/api/v1/sessions"]
        assert "get" in paths["/api/v1/sessions/{session_id}/actions"]
        assert "post" in paths["/api/v1/sessions/{session_id}/actions"]
        assert "post" in paths["/api/v1/sessions/{session_id}/score"]
        assert "get" in paths["/api/v1/scores"]
