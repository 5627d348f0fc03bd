"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.router import router as api_router
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from core.config import settings
from core.logging import setup_logging
from infrastructure.database.session import engine, init_models

logger = structlog.get_logger()

setup_logging()

DESCRIPTION = """\
## Developer Social Network

Developers register, build a professional profile (experience, education,
skills) and post, like and comment on a shared feed.

### Authentication
Private endpoints require the token returned by `POST /api/users/login`:
```
Authorization: Bearer <your_token>
```
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and readiness checks"},
    {"name": "users", "description": "Registration, login and current user"},
    {"name": "profile", "description": "Profiles with experience and education"},
    {"name": "posts", "description": "Feed posts, likes and comments"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables on startup and release the connection pool on shutdown."""
    await init_models()
    logger.info("application_started", environment=settings.app_env)
    yield
    await engine.dispose()
    logger.info("application_stopped")


def _add_middleware(app: FastAPI) -> None:
    # Last added runs outermost: CORS sees the request first, logging last
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        license_info={"name": "MIT"},
        openapi_tags=OPENAPI_TAGS,
    )

    _add_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
