"""Quota-enforced photo analysis."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from meal_scanner.domain.errors import (
    AuthenticationRequiredError,
    ProfileUnavailableError,
)
from meal_scanner.domain.models import CallerIdentity
from meal_scanner.domain.nutrition import NutritionResult
from meal_scanner.domain.quota import QuotaDecision
from meal_scanner.services.usage import UsageLedger
from meal_scanner.services.vision import VisionService, to_data_url

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class ScanOutcome:
    """Analysis result plus the caller's quota after the scan."""

    result: NutritionResult
    quota: QuotaDecision | None


@dataclass
class ScanService:
    """Runs one scan: quota check, analysis, then usage commit."""

    vision_service: VisionService
    usage_ledger: UsageLedger
    timezone_name: str = "UTC"
    allow_anonymous: bool = True
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self) -> date:
        """Return the current calendar day in the quota timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone_name)).date()

    async def scan(
        self, caller: CallerIdentity, image: str | bytes | None
    ) -> ScanOutcome:
        """Analyze an image for a caller, recording usage for known users."""
        data_url = to_data_url(image)
        if caller.is_anonymous:
            if not self.allow_anonymous:
                if caller.user_id is not None:
                    raise ProfileUnavailableError(
                        "Your profile could not be loaded. Please try again later."
                    )
                raise AuthenticationRequiredError("Please log in to scan food")
            result = await self.vision_service.analyze(data_url)
            return ScanOutcome(result=result, quota=None)

        profile = caller.profile
        today = self.today()
        self.usage_ledger.check(profile, today)
        result = await self.vision_service.analyze(data_url)
        quota = self.usage_ledger.commit(profile, today)
        logger.info(
            "Scan recorded",
            extra={"user_id": str(profile.user_id), "count": quota.effective_count},
        )
        return ScanOutcome(result=result, quota=quota)

    def quota_status(self, caller: CallerIdentity) -> QuotaDecision | None:
        """Return today's quota for a resolved caller."""
        if caller.is_anonymous:
            return None
        return self.usage_ledger.status(caller.profile, self.today())
