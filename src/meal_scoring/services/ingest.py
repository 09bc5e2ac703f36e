"""Chat export ingestion using an LLM meal extractor."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from meal_scoring.domain.chat import ChatMessage
from meal_scoring.domain.errors import IngestParseError
from meal_scoring.domain.extraction import ExtractedMeals
from meal_scoring.domain.meals import TIME_PATTERN, MealRecord, MealType
from meal_scoring.services.chat_export import parse_chat_export
from meal_scoring.services.meals import MealImportResult, MealService

logger = logging.getLogger(__name__)

EXTRACTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "meals": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "time": {"type": "string", "pattern": TIME_PATTERN},
                    "type": {"type": "string", "enum": [t.value for t in MealType]},
                    "items": {"type": "array", "items": {"type": "string"}},
                    "has_carb": {"type": "boolean"},
                    "has_protein": {"type": "boolean"},
                    "has_veggies": {"type": "boolean"},
                    "notes": {"type": "string"},
                },
                "required": [
                    "time",
                    "type",
                    "items",
                    "has_carb",
                    "has_protein",
                    "has_veggies",
                    "notes",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["meals"],
    "additionalProperties": False,
}

EXTRACTION_PROMPT = (
    "You are a nutrition logging parser. Extract only the meals that are "
    "explicitly present or strongly implied in the message. If no time is "
    "given, use the message time. Classify each meal as breakfast, lunch, "
    "dinner or snack from its time and content. Set has_carb for bread, "
    "pasta, rice, potato or cereal; has_protein for egg, meat, fish, "
    "poultry, tofu or dairy; has_veggies for salads and vegetables. Keep "
    "item names short and in the message language. Return an empty meals "
    "list when the message does not describe food."
)


class MealExtractionClient(Protocol):
    """Interface for LLM meal extraction."""

    async def extract(
        self, *, schema: dict[str, object], prompt: str, message: str
    ) -> dict[str, object]:
        """Return structured meal data for one message."""


@dataclass(frozen=True)
class IngestedMessage:
    """Meals extracted from a single chat message."""

    message: ChatMessage
    meals: list[MealRecord]


@dataclass(frozen=True)
class IngestResult:
    """Outcome of ingesting a chat export."""

    processed: int
    messages: list[IngestedMessage]
    imported: MealImportResult


@dataclass
class IngestService:
    """Turns chat exports into stored meals via the extraction client."""

    client: MealExtractionClient
    meal_service: MealService

    async def extract_meals(self, message: ChatMessage) -> list[MealRecord]:
        """Extract and validate the meals described by one message."""
        raw = await self.client.extract(
            schema=EXTRACTION_SCHEMA,
            prompt=EXTRACTION_PROMPT,
            message=_format_message(message),
        )
        try:
            extracted = ExtractedMeals.model_validate(raw)
        except ValidationError as exc:
            raise IngestParseError(
                f"Meal extraction returned an invalid payload: {exc}"
            ) from exc
        return [
            MealRecord(
                user_id=message.author,
                date=message.date,
                time=meal.time,
                meal_type=meal.type,
                has_carb=meal.has_carb,
                has_protein=meal.has_protein,
                has_veggies=meal.has_veggies,
                items=", ".join(meal.items),
                notes=meal.notes or None,
            )
            for meal in extracted.meals
        ]

    async def ingest_text(self, text: str) -> IngestResult:
        """Parse an export, extract meals from each message and store them."""
        messages = [
            msg
            for msg in parse_chat_export(text)
            if not msg.is_system and not msg.is_placeholder
        ]
        ingested: list[IngestedMessage] = []
        for message in messages:
            meals = await self.extract_meals(message)
            ingested.append(IngestedMessage(message=message, meals=meals))
        records = [meal for entry in ingested for meal in entry.meals]
        imported = self.meal_service.import_meals(records)
        logger.info(
            "Ingested chat export",
            extra={"messages": len(messages), "meals": len(records)},
        )
        return IngestResult(
            processed=len(messages), messages=ingested, imported=imported
        )


def _format_message(message: ChatMessage) -> str:
    return (
        "Message metadata:\n"
        f"- author: {message.author}\n"
        f"- date: {message.date.isoformat()}\n"
        f"- time: {message.time}\n\n"
        f"Message text:\n{message.text}"
    )
