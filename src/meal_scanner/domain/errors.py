"""Error types surfaced by the scan pipeline."""

from enum import StrEnum


class MealScanError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MealScanError):
    """Raised when required configuration is missing."""

    code = "configuration_error"


class InputError(MealScanError):
    """Raised when the caller sent an invalid payload."""

    status_code = 400
    code = "invalid_input"


class AuthenticationRequiredError(MealScanError):
    """Raised when an operation needs a resolved identity."""

    status_code = 401
    code = "authentication_required"


class ProfileUnavailableError(MealScanError):
    """Raised when a signed-in user's profile could not be read."""

    status_code = 503
    code = "profile_unavailable"


class QuotaExceededError(MealScanError):
    """Raised when a user has used up the daily scans for their plan."""

    status_code = 429
    code = "scan_limit_reached"

    def __init__(self, current_count: int, limit: int, plan: str) -> None:
        super().__init__(
            f"You have used all {limit} scans for today on the {plan} plan. "
            "Upgrade your plan or try again tomorrow."
        )
        self.current_count = current_count
        self.limit = limit
        self.plan = plan


class GatewayErrorKind(StrEnum):
    """Failure categories of the AI gateway."""

    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    UPSTREAM_ERROR = "upstream_error"
    MISSING_CREDENTIAL = "missing_credential"
    EMPTY_IMAGE = "empty_image"


_GATEWAY_STATUS = {
    GatewayErrorKind.RATE_LIMITED: 429,
    GatewayErrorKind.PAYMENT_REQUIRED: 402,
    GatewayErrorKind.UPSTREAM_ERROR: 500,
    GatewayErrorKind.MISSING_CREDENTIAL: 500,
    GatewayErrorKind.EMPTY_IMAGE: 400,
}

_GATEWAY_MESSAGES = {
    GatewayErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a moment.",
    GatewayErrorKind.PAYMENT_REQUIRED: (
        "Service temporarily unavailable. Please try again later."
    ),
    GatewayErrorKind.UPSTREAM_ERROR: "Failed to analyze food",
    GatewayErrorKind.MISSING_CREDENTIAL: "AI gateway credential is not configured",
    GatewayErrorKind.EMPTY_IMAGE: "No image provided",
}


class GatewayError(MealScanError):
    """Raised when the AI gateway call cannot produce model text."""

    def __init__(
        self,
        kind: GatewayErrorKind,
        upstream_status: int | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or _GATEWAY_MESSAGES[kind])
        self.kind = kind
        self.upstream_status = upstream_status
        self.status_code = _GATEWAY_STATUS[kind]
        self.code = kind.value


class ParseError(MealScanError):
    """Raised when model output does not match the nutrition schema."""

    code = "parse_error"

    def __init__(self, raw_text: str, reason: str) -> None:
        super().__init__("Failed to parse nutrition data")
        self.raw_text = raw_text
        self.reason = reason
