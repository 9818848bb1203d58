"""Plan ceilings and day-based reset rules for daily scans."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from types import MappingProxyType

UNLIMITED_SCANS = 1_000_000


class Plan(StrEnum):
    """Subscription tiers."""

    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


def parse_plan(raw: object) -> Plan:
    """Return the plan for a stored value, falling back to free."""
    if isinstance(raw, str):
        try:
            return Plan(raw.strip().lower())
        except ValueError:
            return Plan.FREE
    return Plan.FREE


@dataclass(frozen=True)
class PlanLimits:
    """Immutable table of daily scan ceilings per plan."""

    limits: Mapping[Plan, int] = field(
        default_factory=lambda: {
            Plan.FREE: 3,
            Plan.BASIC: 20,
            Plan.PRO: UNLIMITED_SCANS,
        }
    )

    def __post_init__(self) -> None:
        if Plan.FREE not in self.limits:
            raise ValueError("Plan limits must define the free plan")
        object.__setattr__(self, "limits", MappingProxyType(dict(self.limits)))

    def limit(self, plan: str) -> int:
        """Return the scan ceiling for a plan; unknown plans get the free limit."""
        return self.limits.get(parse_plan(plan), self.limits[Plan.FREE])


def effective_count(
    stored_count: int | None, last_scan_date: date | None, today: date
) -> int:
    """Return the count that applies today.

    A count recorded on any other day is stale and counts as zero; the stored
    value is left untouched until the next successful scan. A NULL count is zero.
    """
    if last_scan_date != today:
        return 0
    return max(stored_count or 0, 0)


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of checking a profile against its plan ceiling."""

    allowed: bool
    effective_count: int
    limit: int
    plan: Plan

    @property
    def remaining(self) -> int:
        """Scans left today."""
        return max(self.limit - self.effective_count, 0)
