import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.db import create_engine, create_session_factory, init_db, ping_db
from src.core import Settings, get_settings
from src.api.routes import api_router
from src.core.errors import http_exception_handler, unhandled_exception_handler
from src.core.middleware import RequestLoggingMiddleware, RequestTimeoutMiddleware
from src.logs.server_log import api_logger, setup_logging
from src.logs.debug_log import debug_logger


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    engine = create_engine(settings)
    try:
        # Refuse to serve traffic if the database is not reachable
        await ping_db(engine)
        await init_db(engine)
    except Exception as e:
        debug_logger.critical(f"Database is unreachable, aborting startup: {e}")
        await engine.dispose()
        raise

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    api_logger.info("Database connection verified and tables initialized")

    yield

    # Clean up resources on shutdown
    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    level = logging.DEBUG if settings.DEBUG else logging.INFO
    setup_logging(settings.LOG_DIR)
    debug_logger.configure(settings.LOG_DIR, level)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="API for chord quiz answer statistics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(RequestTimeoutMiddleware, timeout=settings.REQUEST_TIMEOUT_SECONDS)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.ALLOWED_ORIGIN_REGEX,
        allow_credentials=False,
        allow_methods=settings.ALLOWED_METHODS,
        allow_headers=["*"],
        max_age=settings.CORS_MAX_AGE,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    return app


def parse_args(argv: Optional[Sequence[str]] = None) -> Settings:
    """Command line flags take precedence over environment variables"""
    parser = argparse.ArgumentParser(description="Chord quiz statistics server")
    parser.add_argument("-u", "--database-url", dest="DATABASE_URL", help="Database URL (env DATABASE_URL)")
    parser.add_argument("-p", "--port", dest="PORT", type=int, help="Port that server will be listening on (env PORT)")
    parser.add_argument("-a", "--auth-token", dest="AUTH_TOKEN", help="Auth token (env AUTH_TOKEN)")
    parser.add_argument("--host", dest="HOST", help="Interface to bind (env HOST)")
    args = parser.parse_args(argv)

    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return get_settings(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    import uvicorn

    try:
        settings = parse_args(argv)
    except ValidationError as e:
        api_logger.critical(f"Error parsing configuration: {e}")
        sys.exit(1)

    app = create_app(settings)

    print("\033[1;36m" + "=" * 50 + "\033[0m")  # Cyan
    print("\033[1;36m" + "  Запуск API сервера статистики аккордов" + "\033[0m")  # Cyan
    print("\033[1;36m" + "=" * 50 + "\033[0m")  # Cyan

    api_logger.info(f"Starting server on http://{settings.HOST}:{settings.PORT}")

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
