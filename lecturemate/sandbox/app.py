"""Reference learning backend.

An in-memory FastAPI application implementing the REST contract the engine
consumes. Used by the test-suite and for local frontend development:

    uvicorn --factory lecturemate.sandbox.app:create_app --port 5000
"""

from fastapi import FastAPI

from lecturemate.config import Settings, get_settings
from lecturemate.core.logging import configure_structlog, get_logger

from .demo import demo_courses
from .repository import InMemoryLearningRepository
from .router import router


logger = get_logger(__name__)


def create_app(
    repository: InMemoryLearningRepository | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create the reference backend.

    Args:
        repository: Storage to serve, seeded with the demo catalog if not given
        settings: Engine settings (name and version of the app)
    """
    settings = settings or get_settings()
    configure_structlog(settings)

    if repository is None:
        repository = InMemoryLearningRepository(demo_courses())

    app = FastAPI(
        title=f"{settings.app_name} reference backend",
        version=settings.app_version,
        debug=settings.debug,
    )
    app.state.repository = repository
    app.include_router(router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """General health check endpoint."""
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        }

    logger.debug("sandbox_app_created", environment=settings.environment)
    return app
