"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Records finished games on the scoreboard
4. Fetches optional generated assets
5. Formats engine state as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from pydantic import ValidationError

from ..engine_core.action import Action, ActionKind, ActionPayload, ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Card
from ..engine_core.ledger import criterion_met, criterion_progress
from ..engine_core.scoring import calculate_score, high_score_entry, outcome
from ..engine_core.settings import GameSettings
from ..engine_core.state import (
    AdventureLocation,
    CharacterClass,
    Encounter,
    GamePhase,
    NodeModifier,
    PlayerState,
    StatAttribute,
    TurnRecord,
    TurnResult,
)
from ..narration import AssetService
from ..scoreboard import HighScoreStore
from ..session import Session, SessionManager, SessionState
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
    HighScoreEntry,
    HighScoreListResponse,
    LegalActionInfo,
    LegalActionsResponse,
    SessionResponse,
    # Shared
    AbilityInfo,
    CardInfo,
    CriterionInfo,
    EncounterInfo,
    LocationInfo,
    ModifierInfo,
    PlayerInfo,
    QuestInfo,
    ShopItemInfo,
    TurnRecordInfo,
    TurnResultInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)

logger = logging.getLogger(__name__)


def session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session not found: {session_id}",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a game
        session = service.create_session(CreateSessionRequest(character_class="Ranger"))

        # Play
        options = service.legal_actions(session.session_id)
        result = service.apply_action(session.session_id, ActionRequest(action_type="end_turn"))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    score_store: HighScoreStore = field(default_factory=HighScoreStore)
    asset_service: AssetService = field(default_factory=AssetService)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Create a new game session."""
        try:
            settings = GameSettings.from_dict(request.settings)
            session = self.session_manager.create_session(
                character_class=request.character_class,
                difficulty=request.difficulty,
                settings=settings,
                random_seed=request.random_seed,
                player_name=request.player_name,
                extra_locations=request.extra_locations,
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)
        return self._build_game_state(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Actions
    # =========================================================================

    def legal_actions(self, session_id: str, max_play_size: int | None = None) -> LegalActionsResponse | ErrorResponse:
        """Every action the engine would accept right now."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)
        actions = [
            action_to_info(a)
            for a in legal_actions(session.catalog, session.game_state, max_play_size=max_play_size)
        ]
        return LegalActionsResponse(session_id=session_id, actions=actions, count=len(actions))

    def apply_action(self, session_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """
        Apply an action.

        An engine rejection is still a normal response (success=false with
        the rule code); only unreadable requests become errors.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)

        try:
            action = action_from_request(request)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        result = session.apply(action)
        return ActionResponse(
            success=result.success,
            error=result.error,
            rule_code=result.error_code.value if result.error_code else None,
            state_changes=result.state_changes,
            game_state=self._build_game_state(session),
        )

    # =========================================================================
    # Scoreboard
    # =========================================================================

    def save_score(self, session_id: str, request: SaveScoreRequest | None = None) -> HighScoreListResponse | ErrorResponse:
        """Record a finished game and return the updated ranking."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)
        if not session.game_state.is_over:
            return ErrorResponse(error="The game is still in progress", error_code=ErrorCode.GAME_NOT_OVER)
        if session.score_saved:
            return ErrorResponse(error="Score already saved", error_code=ErrorCode.SCORE_ALREADY_SAVED)

        name = (request.player_name if request else None) or session.player_name
        entries = self.score_store.save(high_score_entry(session.game_state, name))
        session.score_saved = True
        return self._scores_to_response(entries)

    def list_scores(self) -> HighScoreListResponse:
        return self._scores_to_response(self.score_store.list())

    def _scores_to_response(self, entries) -> HighScoreListResponse:
        parsed = []
        for entry in entries:
            try:
                parsed.append(HighScoreEntry.model_validate(entry))
            except ValidationError as e:
                logger.warning("skipping malformed high score entry: %s", e)
        return HighScoreListResponse(entries=parsed, count=len(parsed))

    # =========================================================================
    # Generated assets
    # =========================================================================

    async def class_icon(self, class_name: str) -> AssetResponse | ErrorResponse:
        try:
            character_class = CharacterClass.parse(class_name)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
        definition = self.session_manager.catalog.class_definition(character_class)
        asset = await self.asset_service.class_icon(character_class.value, definition.description)
        if asset is None:
            return AssetResponse(available=False)
        return AssetResponse(available=True, data=asset.data, mime_type=asset.mime_type)

    async def ending_narration(self, session_id: str) -> AssetResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return session_not_found(session_id)
        if not session.game_state.is_over:
            return ErrorResponse(error="The game is still in progress", error_code=ErrorCode.GAME_NOT_OVER)
        asset = await self.asset_service.ending_narration(session.game_state)
        if asset is None:
            return AssetResponse(available=False)
        return AssetResponse(available=True, data=asset.data, mime_type=asset.mime_type)

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=session_status(session),
            player_name=session.player_name,
            created_at=session.created_at,
            actions_applied=session.actions_applied,
            score_saved=session.score_saved,
            game_state=self._build_game_state(session),
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        state = session.game_state
        return GameStateResponse(
            session_id=session.session_id,
            status=session_status(session),
            difficulty=state.difficulty.value,
            round=state.round,
            turn=state.turn,
            max_rounds=state.settings.max_rounds,
            turns_per_round=state.settings.turns_per_round,
            player=player_info(state.player, session),
            hand=[card_info(c) for c in state.hand],
            locations=[location_info(loc) for loc in state.locations],
            turn_result=turn_result_info(state.turn_result) if state.turn_result else None,
            history=[record_info(r) for r in state.history],
            deck_sizes={
                "player": state.player_pile.count,
                "player_discard": len(state.player_pile.discard),
                "dungeon": state.dungeon_pile.count,
                "dungeon_discard": len(state.dungeon_pile.discard),
            },
            shop=[
                ShopItemInfo(name=item.name, cost=item.cost, description=item.description)
                for item in session.catalog.shop
            ],
            score=calculate_score(state.player, state.difficulty),
            outcome=outcome(state.player) if state.is_over else None,
        )


# =============================================================================
# Request parsing
# =============================================================================

def action_from_request(request: ActionRequest) -> Action:
    """Build an engine Action. Raises ValueError on unknown names."""
    try:
        action_type = ActionType(request.action_type)
    except ValueError:
        raise ValueError(f"Unknown action type: {request.action_type}")

    kind = None
    if request.action_kind is not None:
        try:
            kind = ActionKind(request.action_kind)
        except ValueError:
            raise ValueError(f"Unknown action kind: {request.action_kind}")

    stat = None
    if request.stat is not None:
        try:
            stat = StatAttribute(request.stat.lower())
        except ValueError:
            raise ValueError(f"Unknown stat: {request.stat}")

    return Action(
        action_type=action_type,
        payload=ActionPayload(
            action_kind=kind,
            location_id=request.location_id,
            card_ids=tuple(request.card_ids),
            stat=stat,
            item_name=request.item_name,
        ),
    )


def action_to_info(action: Action) -> LegalActionInfo:
    p = action.payload
    return LegalActionInfo(
        key=action.key,
        action_type=action.action_type.value,
        action_kind=p.action_kind.value if p.action_kind else None,
        location_id=p.location_id,
        card_ids=list(p.card_ids),
        stat=p.stat.value if p.stat else None,
        item_name=p.item_name,
    )


# =============================================================================
# State conversion
# =============================================================================

def session_status(session: Session) -> SessionStatus:
    if session.state is not SessionState.ACTIVE or session.game_state.is_over:
        return SessionStatus.GAME_OVER
    if session.game_state.phase is GamePhase.RESOLVING:
        return SessionStatus.RESOLVING
    return SessionStatus.PLAYING


def card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        suit=card.suit.value,
        rank=card.rank.value,
        value=card.value,
        color=card.color.value,
        label=card.label,
    )


def modifier_info(modifier: NodeModifier) -> ModifierInfo:
    return ModifierInfo(
        kind=modifier.kind.value,
        value=modifier.value,
        name=modifier.name,
        description=modifier.description,
        target_suit=modifier.target_suit.value if modifier.target_suit else None,
        elite=modifier.elite.value if modifier.elite else None,
        floor=modifier.floor,
    )


def encounter_info(encounter: Encounter) -> EncounterInfo:
    return EncounterInfo(
        encounter_id=encounter.encounter_id,
        name=encounter.name,
        modifier=modifier_info(encounter.modifier) if encounter.modifier else None,
        branch_text=encounter.branch.text if encounter.branch else None,
    )


def location_info(location: AdventureLocation) -> LocationInfo:
    current = location.current_encounter
    return LocationInfo(
        location_id=location.location_id,
        name=location.name,
        description=location.description,
        stat_attribute=location.stat_attribute.value,
        preferred_suit=location.preferred_suit.value,
        progress=min(location.current_encounter_index, location.length),
        length=location.length,
        is_cleared=location.is_cleared,
        current_encounter=encounter_info(current) if current else None,
        path=[encounter_info(e) for e in location.path],
        completion_reward=location.completion_reward.describe(),
    )


def player_info(player: PlayerState, session: Session) -> PlayerInfo:
    ability = session.catalog.ability_for(player.character_class)
    effects = player.effects
    return PlayerInfo(
        character_class=player.character_class.value,
        stats={
            "level": player.stats.level,
            "might": player.stats.might,
            "agility": player.stats.agility,
            "wisdom": player.stats.wisdom,
            "spirit": player.stats.spirit,
        },
        resources={
            "health": player.resources.health,
            "max_health": player.resources.max_health,
            "gold": player.resources.gold,
            "mana": player.resources.mana,
            "xp": player.resources.xp,
        },
        scoring=player.scoring.to_dict(),
        items=list(player.items),
        artifacts=list(player.artifacts),
        effects={
            "might": effects.might,
            "agility": effects.agility,
            "wisdom": effects.wisdom,
            "spirit": effects.spirit,
            "auto_crit": effects.auto_crit,
            "damage_block": effects.damage_block,
        },
        alignment=player.alignment,
        locations_cleared=player.locations_cleared,
        damage_taken=player.damage_taken,
        extra_turns_bought=player.extra_turns_bought,
        ability_cooldown=player.ability_cooldown,
        ability=AbilityInfo(
            name=ability.name,
            description=ability.description,
            mana_cost=ability.mana_cost,
            health_cost=ability.health_cost,
            cooldown=ability.cooldown,
        ) if ability else None,
        quests=[
            QuestInfo(
                quest_id=q.quest_id,
                name=q.name,
                description=q.description,
                bonus_points=q.bonus_points,
                is_completed=q.is_completed,
                criteria=[
                    CriterionInfo(
                        description=c.description,
                        target=c.target,
                        progress=criterion_progress(player, c),
                        met=criterion_met(player, c),
                    )
                    for c in q.criteria
                ],
            )
            for q in player.quests
        ],
    )


def record_info(record: TurnRecord) -> TurnRecordInfo:
    return TurnRecordInfo(**record.to_dict())


def turn_result_info(result: TurnResult) -> TurnResultInfo:
    return TurnResultInfo(
        player_cards=[card_info(c) for c in result.player_cards],
        dungeon_card=card_info(result.dungeon_card),
        success=result.success,
        margin=result.margin,
        damage=result.damage,
        damage_blocked=result.damage_blocked,
        message=result.message,
        stat_bonus=result.stat_bonus,
        suit_bonus=result.suit_bonus,
        card_total=result.card_total,
        player_total=result.player_total,
        combo=result.combo.name if result.combo else None,
        modifier_effect=result.modifier_effect,
        rewound=result.rewound,
    )
