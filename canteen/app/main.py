# main.py

"""FastAPI application for the campus canteen.

``create_app`` wires settings, storage and services onto ``app.state`` so
tests can build isolated applications; the module level ``app`` is what
uvicorn serves.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .deps import Services, build_services
from .errors import CanteenError
from .middlewares import CORSMiddleware, LoggingMiddleware, RequestIdMiddleware
from .middlewares.cors import parse_origins
from .obs import capture_exception, init_sentry
from .obs.logging import configure_logging
from .routes_cart import router as cart_router
from .routes_checkout import router as checkout_router
from .routes_gateway import router as gateway_router
from .routes_menu import router as menu_router
from .routes_orders import router as orders_router
from .routes_staff import router as staff_router
from .routes_students import router as students_router
from .utils.responses import error_response, ok

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("canteen")


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the application around ``services`` (or a fresh service graph)."""

    settings = settings or get_settings()
    services = services or build_services(settings)
    if settings.seed_demo_students:
        services.students.seed_demo()

    app = FastAPI(title="Canteen API", version="1.0.0")
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allowed_origins=parse_origins(settings.allowed_origins),
        open_paths=("/functions/",),
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(CanteenError)
    async def canteen_error_handler(request: Request, exc: CanteenError):
        logger.warning(
            exc.message,
            extra={"status": exc.status_code, "route": request.url.path},
        )
        return error_response(exc.status_code, exc.code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            exc.detail,
            extra={"status": exc.status_code, "route": request.url.path},
        )
        return error_response(exc.status_code, exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "validation_error",
            extra={"status": 422, "route": request.url.path},
        )
        return error_response(
            422,
            "VALIDATION_ERROR",
            "Invalid request",
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_error",
            extra={"status": 500, "route": request.url.path},
        )
        capture_exception(exc)
        return error_response(500, 500, "Internal Server Error")

    @app.get("/health")
    async def health() -> dict:
        return ok({"status": "ok"})

    app.include_router(menu_router)
    app.include_router(students_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(orders_router)
    app.include_router(staff_router)
    app.include_router(gateway_router)
    return app


configure_logging(getattr(logging, LOG_LEVEL, logging.INFO))
init_sentry(env=os.getenv("ENV"))

app = create_app()
