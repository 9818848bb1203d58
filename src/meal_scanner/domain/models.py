"""Domain models for callers and their profiles."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from meal_scanner.domain.quota import Plan


@dataclass(frozen=True)
class ProfileSnapshot:
    """Quota fields of a user's profile as read from storage."""

    user_id: UUID
    plan: Plan
    daily_scan_count: int | None
    last_scan_date: date | None


@dataclass(frozen=True)
class CallerIdentity:
    """Resolved caller; profile is None for anonymous callers."""

    user_id: UUID | None = None
    profile: ProfileSnapshot | None = None

    @property
    def is_anonymous(self) -> bool:
        """True when no user or profile could be resolved."""
        return self.user_id is None or self.profile is None


ANONYMOUS = CallerIdentity()
