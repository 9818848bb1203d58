"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from meal_scanner.domain.models import CallerIdentity

if TYPE_CHECKING:
    from meal_scanner.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


def get_caller(
    request: Request, authorization: str | None = Header(default=None)
) -> CallerIdentity:
    """Resolve the caller from the Authorization header."""
    container = get_container(request)
    return container.identity_service.resolve(authorization)


def require_user_id(caller: CallerIdentity = Depends(get_caller)) -> UUID:
    """Ensure the request carries a valid user token."""
    if caller.user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to continue.",
        )
    return caller.user_id
