"""
Narration - Generated class art and the narrated ending.

Kept outside the engine: generators only read finished snapshots.
"""

from .assets import (
    AssetGenerator,
    AssetService,
    EndingSnapshot,
    GeminiAssetGenerator,
    GeneratedAsset,
    NullAssetGenerator,
    default_generator,
)
from .prompts import NarrationPrompts

__all__ = [
    "AssetGenerator",
    "AssetService",
    "EndingSnapshot",
    "GeminiAssetGenerator",
    "GeneratedAsset",
    "NullAssetGenerator",
    "default_generator",
    "NarrationPrompts",
]
