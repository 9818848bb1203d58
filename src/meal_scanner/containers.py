"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from supabase import create_client

from meal_scanner.adapters.ai_gateway_client import OpenAIGatewayClient
from meal_scanner.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from meal_scanner.adapters.supabase_identity_provider import SupabaseIdentityProvider
from meal_scanner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_scanner.config import Settings
from meal_scanner.domain.errors import ConfigurationError
from meal_scanner.services.food_logs import FoodLogService
from meal_scanner.services.identity import IdentityService
from meal_scanner.services.scans import ScanService
from meal_scanner.services.usage import UsageLedger
from meal_scanner.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_service: IdentityService
    scan_service: ScanService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Raises GatewayError when the AI gateway credential is not configured and
    ConfigurationError when the quota timezone is unknown.
    """
    resolved_settings = settings or Settings()
    try:
        ZoneInfo(resolved_settings.quota_timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            f"Unknown quota timezone: {resolved_settings.quota_timezone}"
        ) from exc
    gateway_client = OpenAIGatewayClient.create(
        api_key=resolved_settings.ai_gateway_api_key,
        base_url=resolved_settings.ai_gateway_base_url,
        timeout=resolved_settings.ai_timeout_seconds,
    )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    identity_service = IdentityService(
        provider=SupabaseIdentityProvider(supabase_client),
        profiles=profile_repository,
    )
    scan_service = ScanService(
        vision_service=VisionService(
            client=gateway_client, model=resolved_settings.ai_model
        ),
        usage_ledger=UsageLedger(
            repository=profile_repository,
            plan_limits=resolved_settings.plan_limits(),
        ),
        timezone_name=resolved_settings.quota_timezone,
        allow_anonymous=resolved_settings.allow_anonymous_scans,
    )
    food_log_service = FoodLogService(SupabaseFoodLogRepository(supabase_client))

    async def close_resources() -> None:
        await gateway_client.close()

    return AppContainer(
        settings=resolved_settings,
        identity_service=identity_service,
        scan_service=scan_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
