"""Food log endpoints for signed-in users."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from meal_scanner.api.dependencies import get_container, require_user_id
from meal_scanner.api.models import SaveMealRequest
from meal_scanner.domain.errors import InputError
from meal_scanner.services.food_logs import summarize_day

if TYPE_CHECKING:
    from meal_scanner.containers import AppContainer

router = APIRouter(tags=["food-logs"])


@router.post("/food-logs", status_code=status.HTTP_201_CREATED)
async def save_meal(
    payload: SaveMealRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Log every food of an analysis result to a meal slot."""
    container: AppContainer = get_container(request)
    try:
        logs = container.food_log_service.save_meal(
            user_id, payload.meal_type, payload.data
        )
    except InputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return {"logs": [asdict(log) for log in logs]}


@router.get("/food-logs")
async def list_food_logs(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    day: date | None = Query(default=None, alias="date"),
    meal_type: str | None = Query(default=None, alias="mealType"),
    timezone: str | None = Query(default=None, alias="tz"),
) -> dict[str, object]:
    """Return a day's logs, optionally filtered to one meal slot."""
    container: AppContainer = get_container(request)
    timezone_name = _resolve_timezone(container, timezone)
    resolved_day = day or container.scan_service.today()
    try:
        logs = container.food_log_service.list_for_day(
            user_id, resolved_day, timezone_name, meal_type=meal_type
        )
    except InputError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    totals = summarize_day(resolved_day, logs, container.settings.daily_goals())
    return {
        "date": resolved_day.isoformat(),
        "logs": [asdict(log) for log in logs],
        "totals": {
            "calories": totals.calories,
            "protein": totals.protein,
            "carbs": totals.carbs,
            "fat": totals.fat,
        },
    }


@router.delete("/food-logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food_log(
    log_id: UUID, request: Request, user_id: UUID = Depends(require_user_id)
) -> Response:
    """Delete one of the caller's logs."""
    container: AppContainer = get_container(request)
    if not container.food_log_service.delete_log(user_id, log_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/daily-progress")
async def daily_progress(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    day: date | None = Query(default=None, alias="date"),
    timezone: str | None = Query(default=None, alias="tz"),
) -> dict[str, object]:
    """Return a day's totals per meal and against the daily goals."""
    container: AppContainer = get_container(request)
    progress = container.food_log_service.daily_progress(
        user_id,
        _resolve_timezone(container, timezone),
        container.settings.daily_goals(),
        day=day,
    )
    return {**asdict(progress), "percentOfGoal": progress.percent_of_goal()}


def _resolve_timezone(container: AppContainer, timezone: str | None) -> str:
    if timezone is None:
        return container.settings.quota_timezone
    if not _is_valid_timezone(timezone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown timezone"
        )
    return timezone


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
