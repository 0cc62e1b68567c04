"""
ChefOS FastAPI Application
Main entry point: logging, lifespan, middleware, exception handlers and routers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import (
    health,
    users,
    fridge,
    history,
    recipes,
    assistant,
    cart,
    orders,
    wallet,
    courses,
    admin_recipes,
    admin_courses,
    admin_settings,
    admin_users,
)
from domain.models import init_database
from adapters import llm_adapter
from app.config import settings
from api.middleware import (
    RequestLoggingMiddleware,
    chefos_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)
from app.exceptions import ChefOSError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("chefos.main")

ROUTERS = (
    health,
    users,
    fridge,
    history,
    recipes,
    assistant,
    cart,
    orders,
    wallet,
    courses,
    admin_recipes,
    admin_courses,
    admin_settings,
    admin_users,
)


async def wait_for_database(attempts: int, delay: float):
    """
    Create the schema, retrying while the database container comes up.
    Re-raises the last error once all attempts are spent.
    """
    for attempt in range(1, attempts + 1):
        try:
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            return
        except Exception as exc:
            if attempt == attempts:
                _logger.error("Database initialization failed after %d attempts", attempt)
                raise
            _logger.warning(
                "Database init attempt %d/%d failed: %s; retrying in %.1fs",
                attempt,
                attempts,
                exc,
                delay,
            )
            await anyio.sleep(delay)


def start_ai_wizard():
    """Connect the OpenAI client. The API still starts without it."""
    if not settings.ai_enabled:
        _logger.info("AI recipe wizard disabled by configuration")
        return
    try:
        llm_adapter.connect(
            settings.openai_api_key,
            settings.openai_model,
            timeout=settings.openai_timeout_sec,
        )
    except Exception as e:
        _logger.warning("AI recipe wizard unavailable: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(f"Starting ChefOS in {settings.environment.value} mode")
    await wait_for_database(settings.db_init_attempts, settings.db_init_delay_sec)
    start_ai_wizard()
    try:
        yield
    finally:
        _logger.info("Shutting down ChefOS")
        llm_adapter.close()


def create_app() -> FastAPI:
    docs_enabled = not settings.is_production()
    application = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=f"{settings.api_prefix}/openapi.json" if docs_enabled else None,
        docs_url=f"{settings.api_prefix}/docs" if docs_enabled else None,
        redoc_url=f"{settings.api_prefix}/redoc" if docs_enabled else None,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    application.add_middleware(RequestLoggingMiddleware)

    application.add_exception_handler(ChefOSError, chefos_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    for module in ROUTERS:
        application.include_router(module.router, prefix=settings.api_prefix)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
