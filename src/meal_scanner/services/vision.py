"""Nutrition analysis of meal photos through the AI gateway."""

import base64
import binascii
from dataclasses import dataclass
from typing import Protocol

from meal_scanner.domain.errors import GatewayError, GatewayErrorKind
from meal_scanner.domain.nutrition import NutritionResult
from meal_scanner.services.normalizer import normalize

SYSTEM_PROMPT = (
    "You are a nutrition analysis AI. Analyze food images and provide accurate "
    "nutritional information.\n\n"
    "When you receive a food image, identify the food items and estimate their "
    "nutritional content.\n"
    "You MUST respond with ONLY a valid JSON object (no markdown, no code blocks, "
    "no explanations) in this exact format:\n"
    "{\n"
    '  "foods": [\n'
    "    {\n"
    '      "name": "Food name",\n'
    '      "calories": number,\n'
    '      "protein": number (in grams),\n'
    '      "carbs": number (in grams),\n'
    '      "fat": number (in grams),\n'
    '      "fiber": number (in grams),\n'
    '      "servingSize": "estimated serving size"\n'
    "    }\n"
    "  ],\n"
    '  "totalCalories": number,\n'
    '  "totalProtein": number,\n'
    '  "totalCarbs": number,\n'
    '  "totalFat": number,\n'
    '  "totalFiber": number,\n'
    '  "confidence": "high" | "medium" | "low",\n'
    '  "notes": "Any relevant notes about the food or estimation"\n'
    "}\n\n"
    "Totals must equal the sum of the listed foods.\n"
    "Be accurate with Indian cuisine items like dal, roti, rice dishes, curries, etc.\n"
    "If you cannot identify the food clearly, still provide your best estimate "
    'and set confidence to "low".'
)

USER_PROMPT = (
    "Analyze this food image and provide nutritional information. "
    "Respond with ONLY the JSON object, no other text."
)


class VisionClient(Protocol):
    """Interface for the chat-completion gateway."""

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        image_data_url: str,
    ) -> str:
        """Return the raw model text for an image prompt."""


@dataclass
class VisionService:
    """Service that prepares the analysis prompt and validates results."""

    client: VisionClient
    model: str

    async def analyze_raw(self, image: str | bytes | None) -> str:
        """Send an image to the gateway and return the raw model text."""
        data_url = to_data_url(image)
        return await self.client.complete(
            model=self.model,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=USER_PROMPT,
            image_data_url=data_url,
        )

    async def analyze(self, image: str | bytes | None) -> NutritionResult:
        """Analyze an image and return the normalized nutrition result."""
        raw = await self.analyze_raw(image)
        return normalize(raw)


def to_data_url(image: str | bytes | None) -> str:
    """Return a data URL for raw bytes, raw base64, or an existing data URL."""
    if not image:
        raise GatewayError(GatewayErrorKind.EMPTY_IMAGE)
    if isinstance(image, bytes):
        encoded = base64.b64encode(image).decode("utf-8")
        return f"data:{_detect_mime_type(image)};base64,{encoded}"
    cleaned = image.strip()
    if not cleaned:
        raise GatewayError(GatewayErrorKind.EMPTY_IMAGE)
    if cleaned.startswith("data:"):
        return cleaned
    return f"data:{_detect_base64_mime_type(cleaned)};base64,{cleaned}"


def _detect_base64_mime_type(encoded: str) -> str:
    """Infer the MIME type from the first decoded bytes of a base64 payload."""
    try:
        head = base64.b64decode(encoded[:16], validate=False)
    except (binascii.Error, ValueError):
        return "image/jpeg"
    return _detect_mime_type(head)


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
