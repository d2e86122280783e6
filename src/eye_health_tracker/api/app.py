"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status

from eye_health_tracker.api.admin import router as admin_router
from eye_health_tracker.api.models import (
    AnswerRequest,
    AnswerResponse,
    PlatePromptResponse,
    ResultResponse,
    SessionStateResponse,
    StartSessionRequest,
    StreakResponse,
)
from eye_health_tracker.app_logging import configure_logging
from eye_health_tracker.containers import AppContainer
from eye_health_tracker.domain.reports import ScreeningReport
from eye_health_tracker.services.errors import (
    BlankAnswerError,
    InvalidSessionCallError,
    PlateCatalogError,
    ResultDeliveryError,
    SessionNotFoundError,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/color-vision/sessions")
    async def start_session(
        body: StartSessionRequest, request: Request
    ) -> PlatePromptResponse:
        """Start a new screening attempt and return the first plate."""
        state_container: AppContainer = request.app.state.container
        try:
            prompt = state_container.screening_service.start_session(body.user_id)
        except PlateCatalogError as exc:
            logger.exception("Failed to start screening session")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=_error_detail(
                    state_container, exc, "The color vision test is unavailable."
                ),
            ) from exc
        return PlatePromptResponse.from_prompt(prompt)

    @app.get("/color-vision/sessions/{user_id}")
    async def session_state(user_id: UUID, request: Request) -> SessionStateResponse:
        """Return the next plate, or the result once completed."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.screening_service.get_session(user_id)
            prompt = state_container.screening_service.current_prompt(user_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return SessionStateResponse(
            status=session.status.value,
            next_plate=PlatePromptResponse.from_prompt(prompt) if prompt else None,
            result=ResultResponse.from_result(session.result)
            if session.result
            else None,
        )

    @app.post("/color-vision/sessions/{user_id}/answers")
    async def submit_answer(
        user_id: UUID, body: AnswerRequest, request: Request
    ) -> AnswerResponse:
        """Score an answer for the current plate."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = state_container.screening_service.submit_answer(
                user_id, body.answer
            )
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        except BlankAnswerError as exc:
            raise HTTPException(
                status_code=422,
                detail="Enter the number you see, or 'nothing'.",
            ) from exc
        except InvalidSessionCallError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except ResultDeliveryError as exc:
            logger.exception(
                "Failed to deliver screening result",
                extra={"user_id": user_id, "stage": exc.stage},
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_error_detail(
                    state_container,
                    exc,
                    "Your test is complete but we couldn't save the results.",
                ),
            ) from exc

        return AnswerResponse(
            plate_id=outcome.answer.plate_id,
            correct=outcome.answer.is_correct,
            completed=outcome.result is not None,
            next_plate=PlatePromptResponse.from_prompt(outcome.next_prompt)
            if outcome.next_prompt
            else None,
            result=ResultResponse.from_result(
                outcome.result, outcome.record.xp_earned if outcome.record else None
            )
            if outcome.result
            else None,
        )

    @app.delete("/color-vision/sessions/{user_id}")
    async def abandon_session(user_id: UUID, request: Request) -> dict[str, str]:
        """Abandon an unfinished session."""
        state_container: AppContainer = request.app.state.container
        if not state_container.screening_service.abandon(user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "abandoned"}

    @app.get("/streaks/{user_id}")
    async def streak_status(user_id: UUID, request: Request) -> StreakResponse:
        """Return the user's weekly streak."""
        state_container: AppContainer = request.app.state.container
        streak = state_container.streak_service.get_status(user_id)
        return StreakResponse(
            effective_streak=streak.effective_streak,
            is_active_this_week=streak.is_active_this_week,
            current_week=streak.current_week,
            last_active_week=streak.last_active_week,
            next_deadline=streak.next_deadline,
            seconds_until_deadline=streak.seconds_until_deadline,
        )

    @app.get("/reports/{user_id}")
    async def report(user_id: UUID, request: Request) -> ScreeningReport:
        """Generate a narrative report from recent results."""
        state_container: AppContainer = request.app.state.container
        return await state_container.report_service.generate(user_id)

    return app


def _error_detail(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
