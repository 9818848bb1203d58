"""Food log persistence and daily progress."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from meal_scanner.domain.errors import InputError
from meal_scanner.domain.food_logs import (
    DailyGoals,
    DailyProgress,
    FoodLogRecord,
    MealSummary,
    MealType,
)
from meal_scanner.domain.nutrition import NutritionResult


class FoodLogRepository(Protocol):
    """Persistence interface for food log rows."""

    def insert_logs(self, rows: list[dict[str, object]]) -> list[FoodLogRecord]:
        """Insert rows and return the stored records."""

    def list_logs(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        """Return logs with start <= logged_at < end, newest first."""

    def delete_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Delete a user's log row; return False when nothing matched."""


@dataclass
class FoodLogService:
    """Service for committing analysis results to meals."""

    repository: FoodLogRepository

    def save_meal(
        self, user_id: UUID, meal_type: str, result: NutritionResult
    ) -> list[FoodLogRecord]:
        """Store one log row per food item under the given meal slot."""
        slot = parse_meal_type(meal_type)
        if not result.foods:
            raise InputError("No food items to log")
        logged_at = datetime.now(tz=UTC)
        rows = [
            {
                "user_id": str(user_id),
                "meal_type": slot.value,
                "food_name": food.name,
                "calories": food.calories,
                "protein": food.protein,
                "carbs": food.carbs,
                "fat": food.fat,
                "fiber": food.fiber,
                "serving_size": food.serving_size or None,
                "confidence": result.confidence,
                "notes": result.notes or None,
                "logged_at": logged_at.isoformat(),
            }
            for food in result.foods
        ]
        return self.repository.insert_logs(rows)

    def list_for_day(
        self,
        user_id: UUID,
        day: date,
        timezone_name: str,
        meal_type: str | None = None,
    ) -> list[FoodLogRecord]:
        """Return the logs of a calendar day in the given timezone."""
        start, end = _day_bounds(day, ZoneInfo(timezone_name))
        logs = self.repository.list_logs(user_id, start, end)
        if meal_type:
            slot = parse_meal_type(meal_type)
            logs = [log for log in logs if log.meal_type == slot]
        return logs

    def delete_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Delete a log owned by the user."""
        return self.repository.delete_log(user_id, log_id)

    def daily_progress(
        self,
        user_id: UUID,
        timezone_name: str,
        goals: DailyGoals,
        day: date | None = None,
    ) -> DailyProgress:
        """Return per-meal and overall totals for a day, today by default."""
        day = day or datetime.now(tz=ZoneInfo(timezone_name)).date()
        logs = self.list_for_day(user_id, day, timezone_name)
        return summarize_day(day, logs, goals)


def summarize_day(
    day: date, logs: list[FoodLogRecord], goals: DailyGoals
) -> DailyProgress:
    """Aggregate logs by meal slot, keeping slot order."""
    meals: list[MealSummary] = []
    for slot in MealType:
        slot_logs = [log for log in logs if log.meal_type == slot]
        if not slot_logs:
            continue
        meals.append(
            MealSummary(
                meal_type=slot,
                total_calories=sum(log.calories for log in slot_logs),
                total_protein=sum(log.protein for log in slot_logs),
                total_carbs=sum(log.carbs for log in slot_logs),
                total_fat=sum(log.fat for log in slot_logs),
                food_count=len(slot_logs),
            )
        )
    return DailyProgress(
        day=day,
        meals=meals,
        calories=sum(meal.total_calories for meal in meals),
        protein=sum(meal.total_protein for meal in meals),
        carbs=sum(meal.total_carbs for meal in meals),
        fat=sum(meal.total_fat for meal in meals),
        goals=goals,
    )


def parse_meal_type(raw: str) -> MealType:
    """Return the meal slot for a raw value or raise InputError."""
    try:
        return MealType(raw.strip().lower())
    except (AttributeError, ValueError) as exc:
        raise InputError(f"Unknown meal type: {raw}") from exc


def _day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)
