"""OpenAI Responses API client for meal extraction."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_scoring.domain.errors import IngestParseError
from meal_scoring.services.ingest import MealExtractionClient


@dataclass
class OpenAIMealExtractionClient(MealExtractionClient):
    """Meal extraction client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        model: str,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAIMealExtractionClient":
        """Create an OpenAI meal extraction client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def extract(
        self, *, schema: dict[str, object], prompt: str, message: str
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "instructions": prompt,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": message}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "meal_extract",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise IngestParseError("OpenAI returned an empty response")
        try:
            parsed = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise IngestParseError("OpenAI returned non-JSON content") from exc
        if not isinstance(parsed, dict):
            raise IngestParseError("OpenAI returned a non-object payload")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
