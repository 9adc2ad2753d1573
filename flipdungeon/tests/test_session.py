"""
Tests for sessions, the high-score store and generated assets.
"""

import asyncio
import json
from dataclasses import replace

import pytest

from ..engine_core.action import Action, ErrorCode
from ..engine_core.scoring import high_score_entry
from ..engine_core.settings import Difficulty
from ..engine_core.state import CharacterClass, GamePhase
from ..games.flip_dungeon import new_game
from ..narration import AssetService, EndingSnapshot, NarrationPrompts, NullAssetGenerator
from ..narration.assets import AssetGenerator
from ..scoreboard import HighScoreStore, MAX_ENTRIES
from ..session import SessionManager, SessionState


class TestSessionManager:
    """Tests for session lifecycle."""

    @pytest.fixture
    def manager(self):
        return SessionManager()

    def test_create_session(self, manager):
        session = manager.create_session(CharacterClass.BARD, Difficulty.EASY, random_seed=5, player_name="Lin")
        assert session.is_active()
        assert session.player_name == "Lin"
        assert session.game_state == new_game(CharacterClass.BARD, Difficulty.EASY, random_seed=5)
        assert manager.get_session(session.session_id) is session

    def test_sessions_are_independent(self, manager):
        a = manager.create_session(random_seed=1)
        b = manager.create_session(random_seed=1)
        assert a.session_id != b.session_id
        a.apply(Action.dark_pact())
        assert b.game_state.player.resources.mana == 0

    def test_apply_keeps_new_snapshot(self, manager):
        session = manager.create_session(random_seed=1)
        result = session.apply(Action.dark_pact())
        assert result.success
        assert session.game_state is result.new_state
        assert session.actions_applied == 1

    def test_rejected_action_keeps_state(self, manager):
        session = manager.create_session(random_seed=1)
        before = session.game_state
        result = session.apply(Action.end_turn())
        assert not result.success
        assert result.error_code is ErrorCode.NOTHING_PENDING
        assert session.game_state is before
        assert session.actions_applied == 0

    def test_end_session(self, manager):
        session = manager.create_session(random_seed=1)
        assert manager.end_session(session.session_id, reason="quit")
        assert session.state is SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager):
        active = manager.create_session(random_seed=1)
        done = manager.create_session(random_seed=2)
        done.state = SessionState.GAME_OVER
        assert manager.list_active_sessions() == [active.session_id]

    def test_cleanup_stale_sessions(self, manager):
        active = manager.create_session(random_seed=1)
        done = manager.create_session(random_seed=2)
        done.state = SessionState.GAME_OVER
        active.created_at = done.created_at = 0
        assert manager.cleanup_stale_sessions(max_age_seconds=60) == 1
        assert manager.get_session(active.session_id) is active
        assert manager.get_session(done.session_id) is None


class TestHighScoreStore:
    """Tests for the local scoreboard."""

    def entry(self, score, name="Ada"):
        return {"id": f"{name}-{score}", "player_name": name, "score": score}

    def test_empty(self, tmp_path):
        assert HighScoreStore(tmp_path).list() == []

    def test_sorted_best_first(self, tmp_path):
        store = HighScoreStore(tmp_path)
        for score in (10, 30, 20):
            store.save(self.entry(score))
        assert [e["score"] for e in store.list()] == [30, 20, 10]

    def test_keeps_top_entries(self, tmp_path):
        store = HighScoreStore(tmp_path)
        for score in range(MAX_ENTRIES + 5):
            store.save(self.entry(score))
        scores = [e["score"] for e in store.list()]
        assert len(scores) == MAX_ENTRIES
        assert min(scores) == 5

    def test_persists_across_instances(self, tmp_path):
        HighScoreStore(tmp_path).save(self.entry(7))
        assert HighScoreStore(tmp_path).list()[0]["score"] == 7

    def test_corrupt_file_is_empty(self, tmp_path):
        store = HighScoreStore(tmp_path)
        store.path.write_text("{not json", encoding="utf-8")
        assert store.list() == []

    def test_non_list_file_is_empty(self, tmp_path):
        store = HighScoreStore(tmp_path)
        store.path.write_text(json.dumps({"score": 3}), encoding="utf-8")
        assert store.list() == []

    def test_clear(self, tmp_path):
        store = HighScoreStore(tmp_path)
        store.save(self.entry(1))
        store.clear()
        assert store.list() == []
        store.clear()

    def test_data_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLIPDUNGEON_DATA_DIR", str(tmp_path))
        assert HighScoreStore().data_dir == tmp_path

    def test_stores_game_summary(self, tmp_path):
        store = HighScoreStore(tmp_path)
        store.save(high_score_entry(new_game(random_seed=3), "Ada"))
        saved = store.list()[0]
        assert saved["player_name"] == "Ada"
        assert saved["character_class"] == "Druid"


class FailingGenerator(AssetGenerator):
    async def generate_class_icon(self, class_name, description):
        raise ConnectionError("offline")

    async def generate_ending_narration(self, snapshot):
        raise ConnectionError("offline")


class TestAssets:
    """Tests for generated assets."""

    def finished(self):
        return replace(new_game(CharacterClass.RANGER, Difficulty.HARD, random_seed=3), phase=GamePhase.GAME_OVER)

    def test_null_generator(self):
        service = AssetService(NullAssetGenerator())
        assert asyncio.run(service.class_icon("Druid", "")) is None
        assert asyncio.run(service.ending_narration(self.finished())) is None

    def test_failures_become_none(self):
        service = AssetService(FailingGenerator())
        assert asyncio.run(service.class_icon("Druid", "")) is None
        assert asyncio.run(service.ending_narration(self.finished())) is None

    def test_ending_snapshot(self):
        snapshot = EndingSnapshot.from_state(self.finished())
        assert snapshot.class_name == "Ranger"
        assert snapshot.outcome == "Victory"
        assert snapshot.difficulty == "Hard"
        assert snapshot.rounds == 1
        assert snapshot.turns_played == 0

    def test_narration_tone(self):
        assert "heroic" in NarrationPrompts.ending_narration("Bard", "Victory", 40, 3, "Normal")
        assert "tragic" in NarrationPrompts.ending_narration("Bard", "Defeat", 10, 1, "Normal")

    def test_icon_prompt_names_class(self):
        assert "Necromancer" in NarrationPrompts.class_icon("Necromancer", "Dark arts.")
