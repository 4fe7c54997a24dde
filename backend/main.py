"""
Main module for the FastAPI application.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devconnector.__version__ import __version__
from devconnector.api.v1.posts import router as posts_router
from devconnector.api.v1.profiles import router as profiles_router
from devconnector.auth.routes import router as auth_router
from devconnector.core.config import settings
from devconnector.core.errors import ServiceError, ValidationError, request_errors

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler - runs on startup and shutdown.
    """
    logger.info(f"DevConnector API {__version__} starting on {settings.API_HOST}:{settings.API_PORT}")
    if settings.github_credentials is None:
        logger.warning("GITHUB_CLIENT_ID/GITHUB_CLIENT_SECRET not set, GitHub lookups are unauthenticated")

    yield

    # Shutdown
    from devconnector.db.session import engine
    await engine.dispose()
    logger.info("DevConnector API shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="DevConnector API",
        description="Developer profiles, posts and likes",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """
        Renders classified service failures with their own status code.
        """
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """
        Malformed request bodies are reported in the same shape as service
        validation failures.
        """
        error = ValidationError(request_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        """
        Persistence failures are logged in full and reported without detail.
        """
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )

    # Include routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(profiles_router, prefix="/api")
    app.include_router(posts_router, prefix="/api")

    @app.get("/")
    async def root():
        """
        Root endpoint for health checks.
        """
        return {"message": "DevConnector API is running"}

    @app.get("/health")
    async def health():
        """
        Health check endpoint.
        """
        return {"status": "ok"}

    return app


app = create_app()
