"""
Customer Image API.

Stores customers and their image attachments (base64 text in the database)
behind a REST interface. Each customer may hold at most 10 images; every
mutation re-checks that limit inside its own transaction.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import customers
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import GENERIC_SERVER_MESSAGE, CustomerImageError
from app.db.init_db import init_db
from app.db.session import build_engine, build_session_factory
from app.schemas.response import error_body

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CustomerImageError)
    async def customer_image_error_handler(request: Request, exc: CustomerImageError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.public_message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
        logger.info(f"Bad request on {request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        # Never expose SQL or driver details to callers
        logger.error(
            f"Database error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=error_body(GENERIC_SERVER_MESSAGE))


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or default_settings
    _configure_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup: build the engine, create tables, expose the session factory.
        Shutdown: dispose the engine.
        """
        engine = build_engine(app_settings.DATABASE_URL, app_settings.DB_BUSY_TIMEOUT_SECONDS)
        logger.info("Initializing database...")
        init_db(engine)
        app.state.session_factory = build_session_factory(engine)
        logger.info("Database initialized")

        yield

        engine.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title="Customer Image API",
        description="Customers and their image attachments, max 10 images per customer.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
    )
    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(customers.router, prefix=f"{app_settings.API_PREFIX}/customers", tags=["customers"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
