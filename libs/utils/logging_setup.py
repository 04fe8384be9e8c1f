# libs/utils/logging_setup.py
import os
import logging
import sys

from .json_logging import JsonFormatter, SecretMaskingFilter


# --- Config ---
class LoggerConfig:
    def __init__(self):
        self.service_name = os.getenv("SERVICE_NAME", "taxdesk-api")
        self.console_log_level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
        if not isinstance(self.console_log_level, int):
            self.console_log_level = logging.INFO
        self.sql_echo = os.getenv("SQL_ECHO", "False").lower() == "true"
        self.app_logger = logging.getLogger("taxdesk_app_logger")
        self.app_logger.setLevel(logging.DEBUG)
        self._quiet_sqlalchemy_logs()

    def get_logger(self):
        return self.app_logger

    def _quiet_sqlalchemy_logs(self):
        sql_loggers = [
            "sqlalchemy", "sqlalchemy.engine", "sqlalchemy.pool",
            "sqlalchemy.orm", "asyncpg",
        ]
        for name in sql_loggers:
            logging.getLogger(name).setLevel(
                logging.WARNING if not self.sql_echo else logging.INFO
            )


# --- Console handler factory ---
def get_json_console_handler(level: int, service_name: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter(service_name=service_name))
    handler.addFilter(SecretMaskingFilter())
    return handler


# --- Application logger ---
config = LoggerConfig()
app_logger = config.get_logger()
app_logger.propagate = False

if not app_logger.handlers:
    app_logger.addHandler(get_json_console_handler(config.console_log_level, config.service_name))

# --- Reroute gunicorn/uvicorn logs to the same JSON stdout handler ---
SERVER_LOGGERS = ("gunicorn.error", "gunicorn.access", "uvicorn.error", "uvicorn.access")

for ext_logger_name in SERVER_LOGGERS:
    ext_logger = logging.getLogger(ext_logger_name)
    ext_logger.handlers = [get_json_console_handler(config.console_log_level, ext_logger_name.split(".")[0])]
    ext_logger.propagate = False


def set_log_level(level: str) -> None:
    """Applies a level name such as 'WARNING' to the app and server log handlers."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        app_logger.warning(f"Unknown log level '{level}', keeping current level")
        return
    for logger in (app_logger, *(logging.getLogger(name) for name in SERVER_LOGGERS)):
        for handler in logger.handlers:
            handler.setLevel(resolved)
