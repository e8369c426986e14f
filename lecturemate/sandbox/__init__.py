"""In-memory reference implementation of the learning REST backend."""

from .app import create_app
from .repository import EnrollmentNotFoundError, InMemoryLearningRepository


__all__ = ["EnrollmentNotFoundError", "InMemoryLearningRepository", "create_app"]
