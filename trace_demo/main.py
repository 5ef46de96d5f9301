"""FastAPI application entrypoint for trace-demo services.

Patterns applied:
- create_app() factory so tests can build apps with their own Settings
- asynccontextmanager lifespan (not deprecated @app.on_event)
- configure_logging() called ONCE per process
- TracingMiddleware outside RequestIdMiddleware so a span is current
  when the request id filter copies trace ids into the logging context
- Docs disabled in production
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from trace_demo import __version__
from trace_demo.api.error_handlers import register_exception_handlers
from trace_demo.api.middleware import RequestIdMiddleware
from trace_demo.api.routes.health import router as health_router
from trace_demo.api.routes.ping import router as ping_router
from trace_demo.core.config import Settings, get_settings
from trace_demo.core.constants import API_PREFIX, HTTP_TRACER_NAME, SCHEDULER_TRACER_NAME
from trace_demo.core.logging import configure_logging, get_logger
from trace_demo.observability.tracing import TracingMiddleware, get_tracer, setup_tracing
from trace_demo.services.events import get_service_profile
from trace_demo.services.log_generator import RandomLogGenerator


# =============================================================================
# Application Metadata
# =============================================================================
APP_DESCRIPTION = "Observability skeleton: request-id propagation and trace-correlated logs"
UNTRACED_PATHS = ["/health", "/health/ready"]


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - starts and stops the random log generator.

    Args:
        app: FastAPI application instance.

    Yields:
        None after startup, before shutdown.
    """
    settings: Settings = app.state.settings
    logger = get_logger(__name__)

    logger.info(
        "Application starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    generator: RandomLogGenerator | None = None
    if settings.log_generator_enabled:
        generator = RandomLogGenerator(
            tracer=get_tracer(SCHEDULER_TRACER_NAME, app.state.tracer_provider),
            profile=app.state.profile,
            interval=settings.log_generator_interval_seconds,
        )
        generator.start()
    app.state.log_generator = generator
    app.state.initialized = True

    yield

    logger.info("Application shutting down")
    app.state.initialized = False
    if generator is not None:
        await generator.stop()
    app.state.log_generator = None
    app.state.tracer_provider.shutdown()


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application for the configured service.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        Configured FastAPI app.

    Raises:
        UnknownServiceError: If settings.service_name has no profile.
    """
    settings = settings or get_settings()
    profile = get_service_profile(settings.service_name)

    configure_logging(level=settings.log_level, service_name=profile.name)

    tracer_provider = setup_tracing(
        service_name=profile.name,
        exporter=settings.span_exporter,
        otlp_endpoint=settings.otlp_endpoint,
    )

    app = FastAPI(
        title=profile.name,
        description=APP_DESCRIPTION,
        version=__version__,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.profile = profile
    app.state.service_name = profile.name
    app.state.tracer_provider = tracer_provider
    app.state.initialized = False

    # Last added is outermost
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        TracingMiddleware,
        exclude_paths=UNTRACED_PATHS,
        tracer=get_tracer(HTTP_TRACER_NAME, tracer_provider),
    )

    app.include_router(health_router)
    app.include_router(ping_router, prefix=API_PREFIX)

    register_exception_handlers(app)

    return app


app = create_app()
