"""Daily scan quota ledger."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from meal_scanner.domain.errors import QuotaExceededError
from meal_scanner.domain.models import ProfileSnapshot
from meal_scanner.domain.quota import PlanLimits, QuotaDecision, effective_count

logger = logging.getLogger(__name__)

MAX_COMMIT_ATTEMPTS = 3


class ProfileRepository(Protocol):
    """Persistence interface for profile quota fields."""

    def get_profile(self, user_id: UUID) -> ProfileSnapshot | None:
        """Return the profile snapshot for a user, if present."""

    def compare_and_set_scan_count(  # noqa: PLR0913
        self,
        user_id: UUID,
        expected_count: int | None,
        expected_date: date | None,
        new_count: int,
        new_date: date,
    ) -> bool:
        """Write the new count and date only if the stored pair is unchanged."""


@dataclass
class UsageLedger:
    """Checks and records daily scans against the plan ceilings."""

    repository: ProfileRepository
    plan_limits: PlanLimits

    def status(self, profile: ProfileSnapshot, today: date) -> QuotaDecision:
        """Return today's quota position for a profile without mutating it."""
        count = effective_count(
            profile.daily_scan_count, profile.last_scan_date, today
        )
        limit = self.plan_limits.limit(profile.plan)
        return QuotaDecision(
            allowed=count < limit,
            effective_count=count,
            limit=limit,
            plan=profile.plan,
        )

    def check(self, profile: ProfileSnapshot, today: date) -> QuotaDecision:
        """Raise QuotaExceededError when the profile has no scans left today."""
        decision = self.status(profile, today)
        if not decision.allowed:
            logger.info(
                "Scan limit reached",
                extra={"user_id": str(profile.user_id), "plan": profile.plan.value},
            )
            raise QuotaExceededError(
                current_count=decision.effective_count,
                limit=decision.limit,
                plan=decision.plan.value,
            )
        return decision

    def commit(self, profile: ProfileSnapshot, today: date) -> QuotaDecision:
        """Record one successful scan and return the updated position.

        The write is conditional on the stored count and date still matching
        the snapshot. On a conflict the profile is re-read and the increment
        retried from the fresh value, so concurrent scans cannot push the
        count past the plan ceiling.
        """
        current = profile
        for _ in range(MAX_COMMIT_ATTEMPTS):
            decision = self.check(current, today)
            new_count = decision.effective_count + 1
            if self.repository.compare_and_set_scan_count(
                current.user_id,
                expected_count=current.daily_scan_count,
                expected_date=current.last_scan_date,
                new_count=new_count,
                new_date=today,
            ):
                return QuotaDecision(
                    allowed=new_count < decision.limit,
                    effective_count=new_count,
                    limit=decision.limit,
                    plan=decision.plan,
                )
            logger.info(
                "Scan count changed concurrently, re-reading profile",
                extra={"user_id": str(current.user_id)},
            )
            refreshed = self.repository.get_profile(current.user_id)
            if refreshed is None:
                raise RuntimeError("Profile disappeared while recording a scan")
            current = refreshed
        raise RuntimeError("Failed to record scan after repeated conflicts")
