"""Turn raw model text into a validated nutrition result."""

import json
import logging
import math

from pydantic import ValidationError

from meal_scanner.domain.errors import ParseError
from meal_scanner.domain.nutrition import NutritionResult

logger = logging.getLogger(__name__)

JSON_FENCE = "```json"
FENCE = "```"


def strip_code_fence(text: str) -> str:
    """Remove a leading and trailing markdown code fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith(JSON_FENCE):
        cleaned = cleaned[len(JSON_FENCE) :]
    elif cleaned.startswith(FENCE):
        cleaned = cleaned[len(FENCE) :]
    if cleaned.endswith(FENCE):
        cleaned = cleaned[: -len(FENCE)]
    return cleaned.strip()


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite number {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range {literal}")
    return value


def normalize(raw_text: str) -> NutritionResult:
    """Parse model output into a NutritionResult or raise ParseError."""
    cleaned = strip_code_fence(raw_text)
    try:
        payload = json.loads(
            cleaned, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except ValueError as exc:
        logger.warning("Model output is not valid JSON: %r", raw_text)
        raise ParseError(raw_text, f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        logger.warning("Model output is not a JSON object: %r", raw_text)
        raise ParseError(raw_text, "expected a JSON object")
    try:
        return NutritionResult.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Model output failed schema validation: %r", raw_text)
        raise ParseError(raw_text, str(exc)) from exc
