"""
Narration Prompts - Prompts for generated art and the narrated ending.

These prompts are sent to the image and speech models. They only read
snapshots of a game; nothing generated ever feeds back into game state.
"""

from dataclasses import dataclass


@dataclass
class NarrationPrompts:
    """
    Collection of generation prompts.

    Each prompt targets one asset:
    - Class icon (image)
    - Ending narration (speech)
    """

    @staticmethod
    def class_icon(class_name: str, description: str) -> str:
        """Prompt for a character class icon."""
        return f"""
Create a simple, stylish, iconic character archetype icon for a fantasy RPG class: {class_name}.
Context: {description}.
Style: Dark fantasy, stylized vector art, flat design, high contrast, dark background, glowing accents.
The image should look like a high-quality game asset, tarot card, or ability icon. Center the subject.
"""

    @staticmethod
    def ending_narration(
        class_name: str,
        outcome: str,
        score: int,
        rounds: int,
        difficulty: str,
    ) -> str:
        """Prompt for a short spoken summary of a finished game."""
        tone = "Make it heroic." if outcome == "Victory" else "Make it tragic but hopeful."
        return f"""
You are an old tavern storyteller recounting a legend.
Narrate a very short, dramatic summary (max 3 sentences) of a {class_name} who ventured into the Flip Dungeon.

Details:
- Outcome: {outcome} ({tone})
- Difficulty: {difficulty}
- They lasted {rounds} rounds and achieved a score of {score}.

Style: Epic, atmospheric, fantasy narration.
Do not include any intro like "Here is the story". Just start the story.
"""
