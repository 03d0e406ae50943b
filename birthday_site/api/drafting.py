"""AI drafting of the site's text via Gemini."""

import logging

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from ..document.schema import DraftedContent

logger = logging.getLogger(__name__)


class DraftingError(RuntimeError):
    """The AI service failed or returned something unusable."""


class _BentoDraft(BaseModel):
    icon: str = Field(description="A single, relevant emoji for the title.")
    title: str = Field(description="A short title for the attribute (e.g., 'Your Radiant Spirit').")
    text: str = Field(description="A short sentence elaborating on the attribute.")


class _Draft(BaseModel):
    """Response schema handed to the model."""

    welcome_message: str = Field(description="A short, sweet welcome message. e.g., 'I built a little world for you...'")
    birthday_message: str = Field(description="A message wishing them a happy birthday.")
    bento_items: list[_BentoDraft] = Field(description="3 to 5 distinct, positive attributes or 'reasons I adore you'.")
    wish_message: str = Field(description="A forward-looking wish for their year ahead.")
    letter: str = Field(description="A heartfelt letter to the recipient, 2-3 paragraphs long.")
    final_message: str = Field(description="A short, final birthday sign-off.")


def build_prompt(name: str, relationship: str, memories: str) -> str:
    return f"""
Based on the following information, generate heartfelt and romantic content for a special birthday website.
- Recipient's Name: {name}
- My Relationship with them: {relationship}
- Key Memories/Feelings: "{memories}"

The tone should be modern, deeply personal, and emotional. Adhere to the requested JSON schema.
The letter should be a longer, heartfelt message (2-3 paragraphs) that expands on the feelings and memories provided.
The final message should be a short, impactful sign-off, e.g. 'Happy Birthday, {name}! ❤️'.
""".strip()


async def draft_birthday_content(
    name: str,
    relationship: str,
    memories: str,
    api_key: str,
    model: str,
) -> DraftedContent:
    """Ask Gemini for the form's text fields."""
    client = genai.Client(api_key=api_key)
    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=build_prompt(name, relationship, memories),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=_Draft,
            ),
        )
    except Exception as e:
        logger.error(f"Error calling Gemini API: {e}")
        raise DraftingError("Failed to generate content from AI service. Please check your inputs.") from e

    text = (response.text or "").strip()
    if not text:
        raise DraftingError("AI returned an empty response.")
    try:
        return DraftedContent.model_validate_json(text)
    except ValidationError as e:
        logger.error(f"Gemini returned unexpected JSON: {e}")
        raise DraftingError("AI returned content in an unexpected shape.") from e
