"""Collaborator contracts consumed by the engine.

The engine depends on these protocols only; ``LearningApiClient`` is the
HTTP implementation, tests substitute ``AsyncMock`` doubles.
"""

from typing import Protocol

from lecturemate.courses.models import Course
from lecturemate.enrollments.models import Enrollment, PaymentConfirmation


class CourseGateway(Protocol):
    """Course lookup (``GET course``)."""

    async def get_course(self, course_id: str) -> Course:
        """Get a course with its chapters and lectures."""
        ...


class EnrollmentGateway(Protocol):
    """Enrollment persistence (``GET``/``POST``/``PATCH enrollment``)."""

    async def get_enrollment(self, course_id: str, student_id: str) -> Enrollment | None:
        """Get the enrollment of a student in a course, None if absent."""
        ...

    async def create_enrollment(
        self,
        course_id: str,
        student_id: str,
        payment: PaymentConfirmation | None = None,
    ) -> tuple[Enrollment, bool]:
        """Create (or return the existing) enrollment.

        Returns:
            Tuple of (enrollment, created) where created is False when the
            server returned an existing record
        """
        ...

    async def patch_enrollment(self, enrollment: Enrollment) -> Enrollment:
        """Persist completion state, returning the server-confirmed record."""
        ...


class EnrollmentCounter(Protocol):
    """Course enrollment counter owned by the backend."""

    async def increment_enrollment_count(self, course_id: str) -> int:
        """Increment and return the course's confirmed enrollment count."""
        ...
