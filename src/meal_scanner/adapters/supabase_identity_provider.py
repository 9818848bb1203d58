"""Supabase Auth-backed access token validation."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_scanner.services.identity import IdentityProvider


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Validates access tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid access token."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
