"""Recipe extraction from photos using LLM vision."""

import base64
from dataclasses import dataclass
from typing import Protocol

from recipe_importer.domain.recipes import RecipeRecord

_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}
_NULLABLE_SECONDS = {"anyOf": [{"type": "integer", "minimum": 0}, {"type": "null"}]}

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "ingredients": {"type": "array", "items": {"type": "string"}},
        "instructions": {"type": "array", "items": {"type": "string"}},
        "notes": _NULLABLE_STRING,
        "cookTime": _NULLABLE_SECONDS,
        "prepTime": _NULLABLE_SECONDS,
        "servings": _NULLABLE_STRING,
    },
    "required": [
        "name",
        "ingredients",
        "instructions",
        "notes",
        "cookTime",
        "prepTime",
        "servings",
    ],
    "additionalProperties": False,
}

RECIPE_PROMPT = (
    "You are an expert recipe digitizer. Extract the recipe from this image.\n"
    "Follow these rules strictly:\n"
    "1. Title: convert the recipe name to Title Case "
    '(e.g. "CHOCOLATE CAKE" -> "Chocolate Cake").\n'
    "2. Fractions: write all fractions with '/' (use \"1/2\", not \"½\" or "
    '"one half").\n'
    "3. Ingredients: one ingredient per line with its quantity. Put listed "
    "substitutions (e.g. \"butter or margarine\") in notes, not the "
    "ingredient line, unless essential to the name.\n"
    "4. Instructions: clear, sequential steps.\n"
    "5. Times: convert cook and prep times to total seconds. If only a total "
    "time is given, put it in cookTime. Use null when not specified."
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class RecipeScanService:
    """Service that turns a recipe photo into a reviewable record."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def extract(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> RecipeRecord:
        """Extract a best-effort recipe record from an image."""
        data_url = _to_data_url(image_bytes, mime_type)
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=data_url,
            schema=RECIPE_SCHEMA,
            prompt=RECIPE_PROMPT,
        )
        return RecipeRecord.model_validate(raw)


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[4:8] == b"ftyp" and image_bytes[8:12] in {b"heic", b"heix"}:
        return "image/heic"
    return "image/jpeg"
