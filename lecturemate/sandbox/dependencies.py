"""FastAPI dependencies for the reference backend.

Provides dependency injection for:
- In-memory repository
- Error handlers
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from lecturemate.core.errors import LearningEngineError

from .repository import InMemoryLearningRepository


async def get_repository(request: Request) -> InMemoryLearningRepository:
    """Get repository from app state.

    Args:
        request: FastAPI request

    Returns:
        InMemoryLearningRepository instance
    """
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Learning repository not available",
        )
    return repository


# Type alias for dependency injection
RepositoryDep = Annotated[InMemoryLearningRepository, Depends(get_repository)]


def handle_engine_error(error: LearningEngineError) -> HTTPException:
    """Convert engine errors to HTTP exceptions.

    Args:
        error: Engine error

    Returns:
        HTTPException with appropriate status code
    """
    status_map = {
        "not_authenticated": status.HTTP_401_UNAUTHORIZED,
        "payment_required": status.HTTP_402_PAYMENT_REQUIRED,
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "enrollment_not_found": status.HTTP_404_NOT_FOUND,
        "lecture_not_found": status.HTTP_400_BAD_REQUEST,
    }

    status_code = status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTTPException(
        status_code=status_code,
        detail=error.message,
    )
