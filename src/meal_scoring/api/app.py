"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from meal_scoring.api.models import (
    DietProfileIn,
    MealBulkCreate,
    MealCreate,
    diet_to_dict,
    meal_to_dict,
    score_to_dict,
    summary_to_dict,
)
from meal_scoring.app_logging import configure_logging
from meal_scoring.containers import AppContainer
from meal_scoring.domain.errors import (
    IngestParseError,
    InvalidInputError,
    PersistenceError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        logger.warning("Rejected invalid input", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
        )

    @app.exception_handler(IngestParseError)
    async def ingest_failed(request: Request, exc: IngestParseError) -> JSONResponse:
        logger.error(
            "Meal extraction failed",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(exc)}
        )

    @app.exception_handler(PersistenceError)
    async def persistence_failed(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error(
            "Storage operation failed",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": str(exc),
                "written": [day.isoformat() for day in exc.written],
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals")
    async def create_meal(payload: MealCreate, request: Request) -> dict[str, object]:
        """Log one meal and rescore its day."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.meal_service.log_meal(payload.to_record())
        return meal_to_dict(meal)

    @app.get("/meals")
    async def list_meals(
        request: Request,
        user_id: str,
        start: date = Query(alias="from"),
        end: date = Query(alias="to"),
    ) -> list[dict[str, object]]:
        """Return a user's meals in a date range."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_service.list_meals(user_id, start, end)
        return [meal_to_dict(meal) for meal in meals]

    @app.post("/meals/bulk")
    async def import_meals(
        payload: MealBulkCreate, request: Request
    ) -> dict[str, object]:
        """Import a batch of meals and rescore the touched days."""
        state_container: AppContainer = request.app.state.container
        result = state_container.meal_service.import_meals(
            [record.to_record() for record in payload.records]
        )
        return {
            "inserted": result.inserted,
            "scores": [summary_to_dict(summary) for summary in result.scores],
        }

    @app.get("/ideal-diet")
    async def get_diet(request: Request, user_id: str) -> dict[str, object] | None:
        """Return the stored diet profile, or null when none is set."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.diet_service.get_diet(user_id)
        return diet_to_dict(profile) if profile else None

    @app.post("/ideal-diet")
    async def replace_diet(
        payload: DietProfileIn, request: Request
    ) -> dict[str, object]:
        """Replace the diet profile and rescore the trailing window."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.diet_service.replace_diet(payload.to_profile())
        return diet_to_dict(profile)

    @app.get("/scoring/daily")
    async def daily_scores(
        request: Request,
        user_id: str,
        start: date = Query(alias="from"),
        end: date = Query(alias="to"),
    ) -> list[dict[str, object]]:
        """Return persisted daily scores in a date range."""
        state_container: AppContainer = request.app.state.container
        records = state_container.daily_score_service.get_daily_scores(
            user_id, start, end
        )
        return [score_to_dict(record) for record in records]

    @app.post("/scoring/recalculate")
    async def recalculate(
        request: Request,
        user_id: str,
        start: date = Query(alias="from"),
        end: date = Query(alias="to"),
    ) -> dict[str, object]:
        """Recalculate and store daily scores for a date range."""
        state_container: AppContainer = request.app.state.container
        results = state_container.daily_score_service.recalc_daily_scores(
            user_id, start, end
        )
        return {
            "success": True,
            "count": len(results),
            "scores": [summary_to_dict(summary) for summary in results],
        }

    @app.post("/ingest-txt")
    async def ingest_txt(request: Request) -> dict[str, object]:
        """Ingest a plain-text chat export."""
        content_type = request.headers.get("content-type", "")
        if "text/plain" not in content_type:
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail="Expected text/plain",
            )
        body = await request.body()
        state_container: AppContainer = request.app.state.container
        result = await state_container.ingest_service.ingest_text(
            body.decode("utf-8", errors="replace")
        )
        return {
            "processed": result.processed,
            "inserted": result.imported.inserted,
            "records": [
                {
                    "author": entry.message.author,
                    "date": entry.message.date.isoformat(),
                    "text": entry.message.text,
                    "meals": [meal_to_dict(meal) for meal in entry.meals],
                }
                for entry in result.messages
            ],
        }

    return app
