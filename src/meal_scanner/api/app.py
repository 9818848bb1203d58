"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meal_scanner.api.food_logs import router as food_logs_router
from meal_scanner.api.scans import failure_response
from meal_scanner.api.scans import router as scans_router
from meal_scanner.app_logging import configure_logging
from meal_scanner.config import parse_origins
from meal_scanner.containers import AppContainer

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=CORS_HEADERS,
    )

    app.include_router(scans_router)
    app.include_router(food_logs_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected invalid request to %s", request.url.path)
        return failure_response(400, "Invalid request body")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
