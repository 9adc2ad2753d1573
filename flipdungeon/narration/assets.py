"""
Asset Generators - Optional generated art and speech.

Generators are async collaborators that live outside the engine:
- They read snapshots of a game, never the live state
- The engine never waits for them to advance
- Any failure degrades to "no asset"

AssetService is what the API uses; it wraps a generator and turns every
failure into None.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import base64
import logging
import os

from ..engine_core.scoring import calculate_score, outcome
from ..engine_core.state import GameState
from .prompts import NarrationPrompts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedAsset:
    """A generated image or audio clip, base64-encoded."""
    data: str
    mime_type: str


@dataclass(frozen=True)
class EndingSnapshot:
    """What the narrator is told about a finished game."""
    class_name: str
    outcome: str
    score: int
    rounds: int
    difficulty: str
    turns_played: int = 0

    @classmethod
    def from_state(cls, state: GameState) -> EndingSnapshot:
        player = state.player
        return cls(
            class_name=player.character_class.value,
            outcome=outcome(player),
            score=calculate_score(player, state.difficulty),
            rounds=state.round,
            difficulty=state.difficulty.value,
            turns_played=len(state.history),
        )


class AssetGenerator(ABC):
    """
    Abstract base class for asset generators.

    Both methods return None when they have nothing to offer.
    """

    @abstractmethod
    async def generate_class_icon(self, class_name: str, description: str) -> GeneratedAsset | None:
        """Generate an icon for a character class."""
        pass

    @abstractmethod
    async def generate_ending_narration(self, snapshot: EndingSnapshot) -> GeneratedAsset | None:
        """Generate spoken narration for a finished game."""
        pass


class NullAssetGenerator(AssetGenerator):
    """Generator used when no model is configured."""

    async def generate_class_icon(self, class_name: str, description: str) -> GeneratedAsset | None:
        return None

    async def generate_ending_narration(self, snapshot: EndingSnapshot) -> GeneratedAsset | None:
        return None


class GeminiAssetGenerator(AssetGenerator):
    """
    Generator backed by Google Gemini image and speech models.

    Requires: pip install google-genai
    Set GOOGLE_API_KEY environment variable.
    """

    IMAGE_MODEL = "gemini-2.5-flash-image"
    SPEECH_MODEL = "gemini-2.5-flash-preview-tts"
    VOICE = "Kore"

    def __init__(
        self,
        api_key: str | None = None,
        image_model: str = IMAGE_MODEL,
        speech_model: str = SPEECH_MODEL,
        voice: str = VOICE,
    ):
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("Google API key required. Set GOOGLE_API_KEY env var or pass api_key.")

        from google import genai
        from google.genai import types

        self.client = genai.Client(api_key=self.api_key)
        self.types = types
        self.image_model = image_model
        self.speech_model = speech_model
        self.voice = voice

    @staticmethod
    def _first_inline(response) -> tuple[bytes, str] | None:
        """First inline data part of a response, as (bytes, mime type)."""
        for candidate in response.candidates or []:
            content = candidate.content
            if content is None:
                continue
            for part in content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    return part.inline_data.data, part.inline_data.mime_type
        return None

    @staticmethod
    def _encode(data) -> str:
        if isinstance(data, str):
            return data
        return base64.b64encode(data).decode("ascii")

    async def generate_class_icon(self, class_name: str, description: str) -> GeneratedAsset | None:
        response = await self.client.aio.models.generate_content(
            model=self.image_model,
            contents=NarrationPrompts.class_icon(class_name, description),
        )
        inline = self._first_inline(response)
        if inline is None:
            return None
        data, mime_type = inline
        return GeneratedAsset(data=self._encode(data), mime_type=mime_type or "image/png")

    async def generate_ending_narration(self, snapshot: EndingSnapshot) -> GeneratedAsset | None:
        types = self.types
        prompt = NarrationPrompts.ending_narration(
            snapshot.class_name, snapshot.outcome, snapshot.score, snapshot.rounds, snapshot.difficulty,
        )
        response = await self.client.aio.models.generate_content(
            model=self.speech_model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.voice),
                    ),
                ),
            ),
        )
        inline = self._first_inline(response)
        if inline is None:
            return None
        data, mime_type = inline
        return GeneratedAsset(data=self._encode(data), mime_type=mime_type or "audio/pcm")


def default_generator() -> AssetGenerator:
    """Gemini when GOOGLE_API_KEY is set, otherwise the null generator."""
    if os.getenv("GOOGLE_API_KEY"):
        return GeminiAssetGenerator()
    return NullAssetGenerator()


class AssetService:
    """
    Failure-tolerant front for an AssetGenerator.

    Never raises; a failed generation is logged and yields None.
    """

    def __init__(self, generator: AssetGenerator | None = None):
        self.generator = generator or NullAssetGenerator()

    async def class_icon(self, class_name: str, description: str) -> GeneratedAsset | None:
        try:
            return await self.generator.generate_class_icon(class_name, description)
        except Exception as e:
            logger.warning("class icon generation failed for %s: %s", class_name, e)
            return None

    async def ending_narration(self, state: GameState) -> GeneratedAsset | None:
        try:
            return await self.generator.generate_ending_narration(EndingSnapshot.from_state(state))
        except Exception as e:
            logger.warning("ending narration failed for %s: %s", state.game_id, e)
            return None
