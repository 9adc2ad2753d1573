"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a client UI and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- ACTION_REJECTED: The engine declined the action (see rule_code)
- INVALID_ACTION: The action request could not be understood
- VALIDATION_ERROR: Request values are out of range (bad settings, class, ...)
- GAME_NOT_OVER: Scores and narration need a finished game
- SCORE_ALREADY_SAVED: The session's score was already recorded
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    PLAYING = "playing"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ACTION_REJECTED = "ACTION_REJECTED"
    INVALID_ACTION = "INVALID_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    GAME_NOT_OVER = "GAME_NOT_OVER"
    SCORE_ALREADY_SAVED = "SCORE_ALREADY_SAVED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """A playing card."""
    card_id: str
    suit: str
    rank: str
    value: int
    color: str
    label: str


class ModifierInfo(BaseModel):
    """An encounter modifier."""
    kind: str = Field(description="difficulty, max_cards, suit_penalty, elite_mechanic")
    value: int = 0
    name: str
    description: str = ""
    target_suit: Optional[str] = None
    elite: Optional[str] = Field(None, description="double_damage or power_floor")
    floor: int = 0


class EncounterInfo(BaseModel):
    encounter_id: str
    name: str
    modifier: Optional[ModifierInfo] = None
    branch_text: Optional[str] = Field(None, description="Set when the encounter forks")


class LocationInfo(BaseModel):
    """A location and its route."""
    location_id: str
    name: str
    description: str = ""
    stat_attribute: str
    preferred_suit: str
    progress: int = Field(description="Encounters passed")
    length: int = Field(description="Encounters on the current route")
    is_cleared: bool
    current_encounter: Optional[EncounterInfo] = None
    path: list[EncounterInfo] = Field(default_factory=list)
    completion_reward: str


class CriterionInfo(BaseModel):
    description: str
    target: int
    progress: int
    met: bool


class QuestInfo(BaseModel):
    quest_id: str
    name: str
    description: str = ""
    bonus_points: int
    is_completed: bool
    criteria: list[CriterionInfo] = Field(default_factory=list)


class AbilityInfo(BaseModel):
    name: str
    description: str
    mana_cost: int
    health_cost: int = 0
    cooldown: int


class PlayerInfo(BaseModel):
    """The player's sheet."""
    character_class: str
    stats: dict[str, int]
    resources: dict[str, int]
    scoring: dict[str, int]
    items: list[str] = Field(default_factory=list)
    artifacts: list[str] = Field(default_factory=list)
    effects: dict[str, Any] = Field(default_factory=dict)
    alignment: int = 0
    locations_cleared: int = 0
    damage_taken: int = 0
    extra_turns_bought: int = 0
    ability_cooldown: int = 0
    ability: Optional[AbilityInfo] = None
    quests: list[QuestInfo] = Field(default_factory=list)


class TurnRecordInfo(BaseModel):
    """One committed history entry."""
    round: int
    turn: int
    action_name: str
    player_total: int
    dungeon_total: int
    success: bool
    details: str
    card_count: int


class TurnResultInfo(BaseModel):
    """The pending outcome awaiting confirmation."""
    player_cards: list[CardInfo]
    dungeon_card: CardInfo = Field(description="value is the effective dungeon value")
    success: bool
    margin: int
    damage: int
    damage_blocked: bool = False
    message: str
    stat_bonus: int
    suit_bonus: int
    card_total: int
    player_total: int
    combo: Optional[str] = None
    modifier_effect: str = ""
    rewound: bool = False


class ShopItemInfo(BaseModel):
    name: str
    cost: int
    description: str


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game."""
    character_class: str = Field("Druid", description="Druid, Ranger, Paladin, Alchemist, Necromancer, Bard")
    difficulty: str = Field("Normal", description="Easy, Normal or Hard")
    player_name: str = Field("Adventurer", description="Name shown on the scoreboard")
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")
    extra_locations: int = Field(0, ge=0, le=4, description="Random locations beyond the default four")
    settings: Optional[dict[str, int]] = Field(
        None, description="Rule overrides, camelCase or snake_case (e.g. handSize, maxRounds)"
    )


class ActionRequest(BaseModel):
    """
    An action to apply.

    action_type picks the action; the other fields are read as needed:
    play_cards uses action_kind, location_id (explore) and card_ids;
    upgrade_stat uses stat; buy_item uses item_name; mulligan uses card_ids.
    """
    action_type: str = Field(..., description="play_cards, rewind_fate, end_turn, dark_pact, ...")
    action_kind: Optional[str] = Field(None, description="rest, train, loot, study, explore")
    location_id: Optional[str] = None
    card_ids: list[str] = Field(default_factory=list)
    stat: Optional[str] = Field(None, description="might, agility, wisdom, spirit")
    item_name: Optional[str] = None


class SaveScoreRequest(BaseModel):
    """Request to record a finished game."""
    player_name: Optional[str] = Field(None, description="Overrides the session's player name")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    difficulty: str
    round: int
    turn: int
    max_rounds: int
    turns_per_round: int
    player: PlayerInfo
    hand: list[CardInfo] = Field(default_factory=list)
    locations: list[LocationInfo] = Field(default_factory=list)
    turn_result: Optional[TurnResultInfo] = None
    history: list[TurnRecordInfo] = Field(default_factory=list)
    deck_sizes: dict[str, int] = Field(default_factory=dict)
    shop: list[ShopItemInfo] = Field(default_factory=list)
    score: int = 0
    outcome: Optional[str] = Field(None, description="Victory or Defeat once the game is over")
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    player_name: str
    created_at: float = 0.0
    actions_applied: int = 0
    score_saved: bool = False
    game_state: GameStateResponse
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Result of applying an action. Rejections are not HTTP errors."""
    success: bool
    error: Optional[str] = None
    rule_code: Optional[str] = Field(None, description="Engine error code when rejected")
    state_changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse
    api_version: str = "v1"


class LegalActionInfo(BaseModel):
    """A fully specified action the engine will accept."""
    key: str
    action_type: str
    action_kind: Optional[str] = None
    location_id: Optional[str] = None
    card_ids: list[str] = Field(default_factory=list)
    stat: Optional[str] = None
    item_name: Optional[str] = None


class LegalActionsResponse(BaseModel):
    session_id: str
    actions: list[LegalActionInfo]
    count: int
    api_version: str = "v1"


class HighScoreEntry(BaseModel):
    """A finished game on the scoreboard."""
    id: str
    date: str
    player_name: str
    character_class: str
    difficulty: str
    score: int
    outcome: str
    stats: dict[str, int] = Field(default_factory=dict)
    history: list[TurnRecordInfo] = Field(default_factory=list)


class HighScoreListResponse(BaseModel):
    entries: list[HighScoreEntry]
    count: int
    api_version: str = "v1"


class AssetResponse(BaseModel):
    """A generated asset, or available=false when none could be made."""
    available: bool
    data: Optional[str] = Field(None, description="Base64-encoded payload")
    mime_type: Optional[str] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
