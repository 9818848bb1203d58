"""Domain models for persisted food logs."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class MealType(StrEnum):
    """Meal slots a food can be logged to, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


@dataclass(frozen=True)
class FoodLogRecord:
    """One logged food item."""

    id: UUID
    user_id: UUID
    meal_type: MealType
    food_name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    serving_size: str | None
    confidence: str | None
    notes: str | None
    logged_at: datetime


@dataclass(frozen=True)
class MealSummary:
    """Totals for one meal slot."""

    meal_type: MealType
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    food_count: int


@dataclass(frozen=True)
class DailyGoals:
    """Daily macro targets."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyProgress:
    """Today's logged totals per meal and against goals."""

    day: date
    meals: list[MealSummary]
    calories: float
    protein: float
    carbs: float
    fat: float
    goals: DailyGoals

    def percent_of_goal(self) -> dict[str, float]:
        """Return progress towards each goal, capped at 100."""
        return {
            "calories": _percent(self.calories, self.goals.calories),
            "protein": _percent(self.protein, self.goals.protein),
            "carbs": _percent(self.carbs, self.goals.carbs),
            "fat": _percent(self.fat, self.goals.fat),
        }


def _percent(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(round(value / goal * 100, 1), 100.0)
