"""Supabase repository for profile quota fields."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_scanner.domain.models import ProfileSnapshot
from meal_scanner.domain.quota import parse_plan
from meal_scanner.services.usage import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile reads and conditional updates."""

    client: Client

    def get_profile(self, user_id: UUID) -> ProfileSnapshot | None:
        """Return the profile snapshot for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("user_id, plan, daily_scan_count, last_scan_date")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return ProfileSnapshot(
            user_id=UUID(row["user_id"]),
            plan=parse_plan(row.get("plan")),
            daily_scan_count=_parse_count(row.get("daily_scan_count")),
            last_scan_date=_parse_date(row.get("last_scan_date")),
        )

    def compare_and_set_scan_count(  # noqa: PLR0913
        self,
        user_id: UUID,
        expected_count: int | None,
        expected_date: date | None,
        new_count: int,
        new_date: date,
    ) -> bool:
        """Conditionally update the count; False when another write won."""
        query = (
            self.client.table("profiles")
            .update(
                {
                    "daily_scan_count": new_count,
                    "last_scan_date": new_date.isoformat(),
                }
            )
            .eq("user_id", str(user_id))
        )
        if expected_count is None:
            query = query.is_("daily_scan_count", "null")
        else:
            query = query.eq("daily_scan_count", expected_count)
        if expected_date is None:
            query = query.is_("last_scan_date", "null")
        else:
            query = query.eq("last_scan_date", expected_date.isoformat())
        response = query.execute()
        return bool(response.data)


def _parse_count(raw: object) -> int | None:
    return None if raw is None else int(raw)


def _parse_date(raw: object) -> date | None:
    if isinstance(raw, str) and raw:
        return date.fromisoformat(raw[:10])
    return None
