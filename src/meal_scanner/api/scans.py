"""Photo analysis endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from meal_scanner.api.dependencies import get_caller, get_container, require_user_id
from meal_scanner.api.models import AnalyzeFoodRequest
from meal_scanner.domain.errors import MealScanError, QuotaExceededError
from meal_scanner.domain.models import CallerIdentity
from meal_scanner.domain.quota import QuotaDecision

if TYPE_CHECKING:
    from meal_scanner.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scans"])


@router.post("/analyze-food")
async def analyze_food(
    payload: AnalyzeFoodRequest,
    request: Request,
    caller: CallerIdentity = Depends(get_caller),
) -> JSONResponse:
    """Analyze a meal photo, enforcing the caller's daily scan quota."""
    container: AppContainer = get_container(request)
    try:
        outcome = await container.scan_service.scan(caller, payload.image_base64)
        content: dict[str, object] = {
            "success": True,
            "data": outcome.result.to_payload(),
        }
        if outcome.quota is not None:
            content["scanInfo"] = _scan_info(outcome.quota)
        return JSONResponse(content=content)
    except QuotaExceededError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.code,
                "message": exc.message,
                "currentCount": exc.current_count,
                "limit": exc.limit,
                "plan": exc.plan,
            },
        )
    except MealScanError as exc:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Food analysis failed: %s", exc.message)
        return failure_response(exc.status_code, exc.message)
    except Exception as exc:
        logger.exception("Unexpected error analyzing food")
        return failure_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _debug_message(container, exc, "Failed to analyze food"),
        )


@router.get("/scans/status", dependencies=[Depends(require_user_id)])
async def scan_status(
    request: Request, caller: CallerIdentity = Depends(get_caller)
) -> dict[str, object]:
    """Return today's scan usage for the caller."""
    container: AppContainer = get_container(request)
    decision = container.scan_service.quota_status(caller)
    if decision is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No profile")
    return {**_scan_info(decision), "remaining": decision.remaining}


def failure_response(status_code: int, message: str) -> JSONResponse:
    """Build the uniform failure envelope."""
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def _scan_info(decision: QuotaDecision) -> dict[str, object]:
    return {
        "currentCount": decision.effective_count,
        "limit": decision.limit,
        "plan": decision.plan.value,
    }


def _debug_message(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
