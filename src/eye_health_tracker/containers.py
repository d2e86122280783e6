"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from eye_health_tracker.adapters.manifest_plate_source import load_plate_catalog
from eye_health_tracker.adapters.openai_report_client import OpenAIReportClient
from eye_health_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from eye_health_tracker.adapters.supabase_result_repository import (
    SupabaseResultRepository,
)
from eye_health_tracker.config import Settings
from eye_health_tracker.services.plates import PlateCatalog
from eye_health_tracker.services.reports import ReportService
from eye_health_tracker.services.results import ResultService
from eye_health_tracker.services.session_store import InMemorySessionStore
from eye_health_tracker.services.sessions import ScreeningSessionService
from eye_health_tracker.services.streaks import StreakService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    plate_catalog: PlateCatalog
    result_service: ResultService
    streak_service: StreakService
    screening_service: ScreeningSessionService
    report_service: ReportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    plate_catalog = load_plate_catalog(resolved_settings.plate_manifest_path)
    result_repository = SupabaseResultRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    streak_service = StreakService(profile_repository)
    result_service = ResultService(
        result_repository=result_repository,
        xp_repository=profile_repository,
        streak_service=streak_service,
        base_xp=resolved_settings.color_vision_base_xp,
    )
    screening_service = ScreeningSessionService(
        catalog=plate_catalog,
        store=InMemorySessionStore(),
        result_service=result_service,
        session_ttl_seconds=resolved_settings.session_ttl_seconds,
    )
    report_client = OpenAIReportClient.create(resolved_settings.openai_api_key)
    report_service = ReportService(
        client=report_client,
        result_service=result_service,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await report_client.close()

    return AppContainer(
        settings=resolved_settings,
        plate_catalog=plate_catalog,
        result_service=result_service,
        streak_service=streak_service,
        screening_service=screening_service,
        report_service=report_service,
        close_resources=close_resources,
    )
