"""Supabase repository for daily scores."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from postgrest.exceptions import APIError
from supabase import Client

from meal_scoring.domain.errors import PersistenceError
from meal_scoring.domain.scoring import DailyScoreRecord, ScoreBreakdown
from meal_scoring.services.daily_scores import DailyScoreRepository


@dataclass
class SupabaseDailyScoreRepository(DailyScoreRepository):
    """Supabase implementation for daily scores."""

    client: Client

    def upsert_score(
        self, user_id: str, day: date, score: int, details: ScoreBreakdown
    ) -> None:
        """Create or replace the row keyed by (user_id, date) in one statement."""
        try:
            self.client.table("daily_scores").upsert(
                {
                    "user_id": user_id,
                    "date": day.isoformat(),
                    "score": score,
                    "details": details.to_dict(),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,date",
            ).execute()
        except APIError as exc:
            raise PersistenceError(f"Failed to store score: {exc.message}") from exc

    def list_scores(
        self, user_id: str, start: date, end: date
    ) -> list[DailyScoreRecord]:
        """Return scores in the date range ordered by date."""
        try:
            response = (
                self.client.table("daily_scores")
                .select("id, user_id, date, score, details, updated_at")
                .eq("user_id", user_id)
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(f"Failed to load scores: {exc.message}") from exc
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> DailyScoreRecord:
    updated_raw = row.get("updated_at")
    details = row.get("details")
    return DailyScoreRecord(
        id=str(row["id"]) if row.get("id") is not None else None,
        user_id=str(row["user_id"]),
        date=date.fromisoformat(str(row["date"])[:10]),
        score=int(row.get("score", 0)),
        details=ScoreBreakdown.from_dict(details if isinstance(details, dict) else {}),
        updated_at=(
            datetime.fromisoformat(updated_raw)
            if isinstance(updated_raw, str) and updated_raw
            else None
        ),
    )
