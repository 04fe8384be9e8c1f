# apps/api/main.py
import os

from dotenv import load_dotenv
from starlette.middleware.cors import CORSMiddleware

from apps.api.config.settings_api import ApiSettings
from apps.api.rest.routers_config import ROUTERS_CONFIG
from libs.app.bootstrap import create_service_app
from libs.utils.logging_setup import app_logger as logger, set_log_level

dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)
    logger.info(f".env loaded from {dotenv_path}")


def create_app():
    settings = ApiSettings()
    set_log_level(settings.LOG_LEVEL)

    app = create_service_app(
        service_name=settings.SERVICE_NAME,
        version=settings.APP_VERSION,
        settings=settings,
        include_rest_routers=ROUTERS_CONFIG,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
