# apps/api/config/settings_api.py
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """
    Settings of the tax-preparation API service, read from the environment
    or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    SERVICE_NAME: str = "taxdesk-api"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["*"]
