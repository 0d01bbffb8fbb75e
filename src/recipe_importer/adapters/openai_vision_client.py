"""OpenAI Responses API client for recipe extraction."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from recipe_importer.services.vision import VisionClient

_SCHEMA_NAME = "recipe_extract"


@dataclass
class OpenAIVisionClient(VisionClient):
    """Reads recipe pages from photos with the OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVisionClient":
        """Create a recipe extraction client for the given API key."""
        return cls(client=AsyncOpenAI(api_key=api_key))

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
        """Return the recipe fields read from the image as a dict.

        The model must answer with JSON matching the recipe schema.
        """
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": _SCHEMA_NAME,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty recipe extraction")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP client."""
        await self.client.close()
