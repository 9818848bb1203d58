"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_scanner.domain.food_logs import FoodLogRecord, MealType
from meal_scanner.services.food_logs import FoodLogRepository

_COLUMNS = (
    "id, user_id, meal_type, food_name, calories, protein, carbs, fat, fiber, "
    "serving_size, confidence, notes, logged_at"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log rows."""

    client: Client

    def insert_logs(self, rows: list[dict[str, object]]) -> list[FoodLogRecord]:
        """Insert rows and return the stored records."""
        if not rows:
            return []
        response = self.client.table("food_logs").insert(rows).execute()
        if not response.data:
            raise RuntimeError("Failed to insert food logs")
        return [_parse_row(row) for row in response.data]

    def list_logs(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogRecord]:
        """Return logs in the time range, newest first."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Delete a user's log row."""
        response = (
            self.client.table("food_logs")
            .delete()
            .eq("id", str(log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> FoodLogRecord:
    return FoodLogRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(str(row["meal_type"])),
        food_name=str(row.get("food_name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
        serving_size=row.get("serving_size"),
        confidence=row.get("confidence"),
        notes=row.get("notes"),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )
