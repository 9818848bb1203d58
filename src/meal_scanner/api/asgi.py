"""ASGI entrypoint for the meal scanner API."""

from meal_scanner.api.app import create_app
from meal_scanner.containers import build_container

app = create_app(build_container())
