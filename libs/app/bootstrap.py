# libs/app/bootstrap.py
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Any

from fastapi import FastAPI
from pydantic_settings import BaseSettings

from .exception_filter import SafeExceptionFilter, register_exception_filter
from .logging_middleware import LoggingMiddleware
from libs.app.health import router as health_router
from libs.utils.logging_setup import app_logger as log


@asynccontextmanager
async def service_lifespan(app: FastAPI):
    log.info(f"Starting service '{app.title}'...")
    try:
        yield
    finally:
        log.info(f"Service '{app.title}' stopped.")


def create_service_app(
    *,
    service_name: str,
    version: str = "0.1.0",
    settings: Optional[BaseSettings] = None,
    include_rest_routers: Optional[List[Dict[str, Any]]] = None,
    exception_filter: Optional[SafeExceptionFilter] = None,
) -> FastAPI:
    """
    Builds a FastAPI service with the shared error boundary, request logging
    and the liveness probe installed.
    """
    app = FastAPI(title=service_name, version=version, lifespan=service_lifespan)

    if settings is not None:
        app.state.settings = settings

    # Starlette runs the last added middleware first: the access log wraps
    # the error boundary so it records the sanitized status code.
    register_exception_filter(app, exception_filter)
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)

    if include_rest_routers:
        for router_config in include_rest_routers:
            app.include_router(
                router_config["router"],
                prefix=router_config.get("prefix", ""),
                tags=router_config.get("tags", []),
            )

    log.info(f"Application '{service_name}' configured.")
    return app
