"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_scanner.domain.food_logs import DailyGoals
from meal_scanner.domain.quota import UNLIMITED_SCANS, Plan, PlanLimits

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    ai_gateway_api_key: str | None = None
    ai_gateway_base_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_model: str = "google/gemini-2.5-flash"
    ai_timeout_seconds: float = 8.0
    # Pricing copy advertises 5 free scans; the quota table uses 3.
    free_scan_limit: int = 3
    basic_scan_limit: int = 20
    pro_scan_limit: int = UNLIMITED_SCANS
    quota_timezone: str = "UTC"
    allow_anonymous_scans: bool = True
    cors_allow_origins: str = "*"
    calorie_goal: float = 2000
    protein_goal_g: float = 150
    carbs_goal_g: float = 250
    fat_goal_g: float = 65
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def plan_limits(self) -> PlanLimits:
        """Build the immutable plan ceiling table."""
        return PlanLimits(
            {
                Plan.FREE: self.free_scan_limit,
                Plan.BASIC: self.basic_scan_limit,
                Plan.PRO: self.pro_scan_limit,
            }
        )

    def daily_goals(self) -> DailyGoals:
        """Return the configured daily macro goals."""
        return DailyGoals(
            calories=self.calorie_goal,
            protein=self.protein_goal_g,
            carbs=self.carbs_goal_g,
            fat=self.fat_goal_g,
        )


def parse_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
    return origins or ["*"]
