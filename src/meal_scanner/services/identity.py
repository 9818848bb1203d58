"""Caller identity resolution from bearer credentials."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_scanner.domain.models import ANONYMOUS, CallerIdentity
from meal_scanner.services.usage import ProfileRepository

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Interface for validating access tokens."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid access token."""


@dataclass
class IdentityService:
    """Resolves callers, degrading to anonymous on any failure."""

    provider: IdentityProvider
    profiles: ProfileRepository

    def resolve(self, authorization: str | None) -> CallerIdentity:
        """Return the caller for an Authorization header value."""
        token = parse_bearer_token(authorization)
        if token is None:
            return ANONYMOUS
        try:
            user_id = self.provider.get_user_id(token)
        except Exception:
            logger.warning("Failed to validate access token", exc_info=True)
            return ANONYMOUS
        if user_id is None:
            return ANONYMOUS
        try:
            profile = self.profiles.get_profile(user_id)
        except Exception:
            logger.warning(
                "Failed to load profile",
                exc_info=True,
                extra={"user_id": str(user_id)},
            )
            profile = None
        return CallerIdentity(user_id=user_id, profile=profile)


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from a `Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
