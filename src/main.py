"""Trilha API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.access.router import router as access_router
from src.access.service import AccessResolver
from src.config import get_settings
from src.core.context import get_request_id
from src.core.errors import ERROR_STATUS_MAP
from src.core.exceptions import EngineError
from src.core.logging import configure_structlog, get_logger
from src.core.middleware import RequestContextMiddleware
from src.courses.repository import CourseRepository
from src.courses.router import router as courses_router
from src.courses.service import CourseHierarchyService
from src.health import router as health_router
from src.progress.aggregator import ProgressAggregator
from src.progress.repository import EnrollmentRepository, LessonProgressRepository
from src.progress.router import enrollments_router
from src.progress.router import router as progress_router
from src.progress.service import EnrollmentService, LessonCompletionService
from src.quizzes.repository import QuizRepository
from src.quizzes.router import router as quizzes_router
from src.quizzes.service import QuizService
from src.video.router import router as video_router


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


def init_services(app: FastAPI, session: Any, keyspace: str) -> None:
    """Build repositories and services and expose them on ``app.state``."""
    course_repository = CourseRepository(session, keyspace)
    enrollment_repository = EnrollmentRepository(session, keyspace)
    progress_repository = LessonProgressRepository(session, keyspace)
    quiz_repository = QuizRepository(session, keyspace)

    hierarchy = CourseHierarchyService(course_repository)

    app.state.hierarchy_service = hierarchy
    app.state.access_resolver = AccessResolver(hierarchy, enrollment_repository)
    app.state.completion_service = LessonCompletionService(progress_repository, hierarchy)
    app.state.enrollment_service = EnrollmentService(enrollment_repository, hierarchy)
    app.state.progress_aggregator = ProgressAggregator(
        hierarchy, progress_repository, enrollment_repository
    )
    app.state.quiz_service = QuizService(quiz_repository)
    logger.info("engine_services_initialized", keyspace=keyspace)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Driver import deferred so the app module loads without a cluster
    from src.core.database.async_cassandra import (
        init_async_cassandra,
        shutdown_async_cassandra,
    )

    try:
        session = await init_async_cassandra()
        logger.info("cassandra_initialized")
        init_services(app, session, settings.cassandra_keyspace)
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # SECURITY: Always set debug=False so Starlette never renders stack traces
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Trilha - Progresso, acesso e quizzes de cursos",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id()

    # Global exception handlers (security: never expose stack traces)
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        request_id = _get_request_id_safe(request)

        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "message": str(exc.detail)
                if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
                else "Internal server error",
                "status_code": exc.status_code,
                "request_id": request_id,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(EngineError)
    async def engine_exception_handler(
        request: Request, exc: EngineError
    ) -> ORJSONResponse:
        """Handle engine errors that escaped a router's own mapping."""
        request_id = _get_request_id_safe(request)
        status_code = ERROR_STATUS_MAP.get(
            exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )

        logger.warning(
            "engine_error",
            code=exc.code,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status_code,
            content={
                "error": True,
                "message": exc.message,
                "status_code": status_code,
                "request_id": request_id,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle validation errors with safe error messages."""
        request_id = _get_request_id_safe(request)

        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "message": "Validation error",
                "status_code": 422,
                "request_id": request_id,
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg", "Invalid value"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        SECURITY: Never expose stack traces or internal error details to users.
        """
        request_id = _get_request_id_safe(request)

        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "message": "An unexpected error occurred. Please try again later.",
                "status_code": 500,
                "request_id": request_id,
            },
        )

    app.include_router(health_router)
    app.include_router(courses_router)
    app.include_router(access_router)
    app.include_router(progress_router)
    app.include_router(enrollments_router)
    app.include_router(quizzes_router)
    app.include_router(video_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Trilha API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()
