"""In-memory storage behind the reference backend.

Implements the server side of the collaborator contract:
- Enrollment creation is idempotent per (course, student)
- Completion patches merge by set union, so retried or reordered requests
  converge on the same completion set
- Completion is latched and its timestamp set once
- Writes are serialized with a single asyncio lock
"""

import asyncio
from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

from lecturemate.core.errors import (
    CourseNotFoundError,
    LearningEngineError,
    LectureNotFoundError,
    PaymentRequiredError,
)
from lecturemate.core.logging import get_logger
from lecturemate.courses.models import Course
from lecturemate.enrollments.models import Enrollment, PaymentConfirmation
from lecturemate.enrollments.schemas import EnrollmentPatchRequest
from lecturemate.progress.calculator import MAX_PERCENT, course_percent


logger = get_logger(__name__)


class EnrollmentNotFoundError(LearningEngineError):
    """Enrollment id unknown to the backend."""

    def __init__(self, enrollment_id: str):
        self.enrollment_id = enrollment_id
        super().__init__(f"Enrollment {enrollment_id} not found", "enrollment_not_found")


class InMemoryLearningRepository:
    """Courses and enrollments held in process memory."""

    def __init__(self, courses: list[Course] | None = None) -> None:
        self._courses: dict[str, Course] = {}
        self._enrollments: dict[str, Enrollment] = {}
        self._by_pair: dict[tuple[str, str], str] = {}
        self._payments: dict[str, PaymentConfirmation] = {}
        self._lock = asyncio.Lock()
        for course in courses or []:
            self.add_course(course)

    # ==========================================================================
    # Courses
    # ==========================================================================

    def add_course(self, course: Course) -> None:
        """Add or replace a course (authoring is outside the engine)."""
        self._courses[course.id] = course

    def get_course(self, course_id: str) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(course_id)
        return course

    async def increment_enrollment_count(self, course_id: str) -> int:
        async with self._lock:
            course = self.get_course(course_id)
            course = replace(course, total_enrollments=course.total_enrollments + 1)
            self._courses[course_id] = course
            return course.total_enrollments

    # ==========================================================================
    # Enrollments
    # ==========================================================================

    def get_enrollment(self, course_id: str, student_id: str) -> Enrollment | None:
        enrollment_id = self._by_pair.get((course_id, student_id))
        return self._enrollments.get(enrollment_id) if enrollment_id else None

    def payment_for(self, enrollment_id: str) -> PaymentConfirmation | None:
        """Payment recorded with an enrollment, if any."""
        return self._payments.get(enrollment_id)

    async def create_enrollment(
        self,
        course_id: str,
        student_id: str,
        payment: PaymentConfirmation | None = None,
    ) -> tuple[Enrollment, bool]:
        """Create an enrollment or return the existing one.

        Returns:
            Tuple of (enrollment, created)

        Raises:
            CourseNotFoundError: If the course does not exist
            PaymentRequiredError: If a paid course is enrolled without payment
        """
        async with self._lock:
            course = self.get_course(course_id)

            existing = self.get_enrollment(course_id, student_id)
            if existing is not None:
                return existing, False

            if not course.is_free and payment is None:
                raise PaymentRequiredError

            enrollment = Enrollment(
                id=uuid4().hex,
                course_id=course_id,
                student_id=student_id,
                enrolled_at=datetime.now(UTC),
            )
            self._enrollments[enrollment.id] = enrollment
            self._by_pair[(course_id, student_id)] = enrollment.id
            if payment is not None:
                self._payments[enrollment.id] = payment

            logger.info(
                "sandbox_enrollment_created",
                enrollment_id=enrollment.id,
                course_id=course_id,
                student_id=student_id,
            )
            return enrollment, True

    async def patch_enrollment(
        self,
        enrollment_id: str,
        patch: EnrollmentPatchRequest,
    ) -> Enrollment:
        """Apply a completion patch.

        Raises:
            EnrollmentNotFoundError: If the enrollment does not exist
            LectureNotFoundError: If a newly completed lecture is not part of the course
        """
        async with self._lock:
            enrollment = self._enrollments.get(enrollment_id)
            if enrollment is None:
                raise EnrollmentNotFoundError(enrollment_id)

            course = self.get_course(enrollment.course_id)
            added = set(patch.completed_lectures) - enrollment.completed_lecture_ids
            for lecture_id in sorted(added):
                if not course.has_lecture(lecture_id):
                    raise LectureNotFoundError(lecture_id)

            completed = enrollment.completed_lecture_ids.union(patch.completed_lectures)
            progress = course_percent(course, completed)
            is_completed = enrollment.is_completed or progress >= MAX_PERCENT
            completed_at = enrollment.completed_at
            if is_completed and completed_at is None:
                completed_at = patch.completion_date or datetime.now(UTC)

            updated = enrollment.evolve(
                completed_lecture_ids=completed,
                progress_percent=progress,
                is_completed=is_completed,
                completed_at=completed_at,
            )
            self._enrollments[enrollment_id] = updated
            return updated
