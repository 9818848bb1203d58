"""Tests for the vision analysis service."""

import asyncio
import base64

import pytest

from meal_scanner.domain.errors import GatewayError, GatewayErrorKind, ParseError
from meal_scanner.services.vision import (
    SYSTEM_PROMPT,
    USER_PROMPT,
    VisionService,
    to_data_url,
)
from tests.conftest import FakeVisionClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"rest-of-image"


def test_analyze_sends_prompt_contract_and_parses() -> None:
    client = FakeVisionClient(text='```json\n{"foods": [{"name": "Roti"}]}\n```')
    service = VisionService(client=client, model="google/gemini-2.5-flash")

    result = asyncio.run(service.analyze("ZmFrZQ=="))

    assert result.foods[0].name == "Roti"
    call = client.calls[0]
    assert call["model"] == "google/gemini-2.5-flash"
    assert call["system_prompt"] == SYSTEM_PROMPT
    assert call["user_prompt"] == USER_PROMPT
    assert call["image_data_url"] == "data:image/jpeg;base64,ZmFrZQ=="


def test_system_prompt_demands_bare_json() -> None:
    assert "ONLY a valid JSON object" in SYSTEM_PROMPT
    assert '"foods"' in SYSTEM_PROMPT
    assert '"high" | "medium" | "low"' in SYSTEM_PROMPT


def test_analyze_surfaces_parse_errors() -> None:
    service = VisionService(client=FakeVisionClient(text="a plate of food"), model="m")

    with pytest.raises(ParseError):
        asyncio.run(service.analyze("ZmFrZQ=="))


@pytest.mark.parametrize("image", [None, "", "   ", b""])
def test_empty_image_is_rejected(image) -> None:  # type: ignore[no-untyped-def]
    client = FakeVisionClient()
    service = VisionService(client=client, model="m")

    with pytest.raises(GatewayError) as exc_info:
        asyncio.run(service.analyze(image))

    assert exc_info.value.kind == GatewayErrorKind.EMPTY_IMAGE
    assert exc_info.value.status_code == 400
    assert client.calls == []


def test_data_url_is_passed_through() -> None:
    url = "data:image/webp;base64,UklGRg=="

    assert to_data_url(url) == url


def test_raw_base64_png_gets_png_prefix() -> None:
    encoded = base64.b64encode(PNG_BYTES).decode()

    assert to_data_url(encoded) == f"data:image/png;base64,{encoded}"


def test_bytes_are_encoded() -> None:
    assert to_data_url(PNG_BYTES).startswith("data:image/png;base64,")
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
