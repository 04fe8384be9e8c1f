# apps/api/rest/routers_config.py
from .root_routes import router as root_router

ROUTERS_CONFIG = [
    {"router": root_router, "tags": ["Service"]},
]
