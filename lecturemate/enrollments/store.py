"""Enrollment store.

Owns the single enrollment of a (student, course) pair:
- Loading the current enrollment (absence is not an error)
- Idempotent enrollment creation, safe under repeated rapid calls
- One-time enrollment counter increment on first creation
"""

import asyncio
from typing import TYPE_CHECKING

from lecturemate.core.errors import NotAuthenticatedError, PaymentRequiredError
from lecturemate.core.logging import get_logger
from lecturemate.progress.calculator import with_course_progress

from .models import Enrollment, PaymentConfirmation


if TYPE_CHECKING:
    from lecturemate.client.protocols import EnrollmentCounter, EnrollmentGateway
    from lecturemate.courses.models import Course


logger = get_logger(__name__)

EnrollmentKey = tuple[str, str]
# Pair plus whether the call only looks up an owned paid enrollment
PendingKey = tuple[str, str, bool]


class EnrollmentStore:
    """Loads and creates enrollments through the enrollment gateway."""

    def __init__(
        self,
        gateway: "EnrollmentGateway",
        counter: "EnrollmentCounter",
    ) -> None:
        """Initialize with collaborators.

        Args:
            gateway: Enrollment persistence (GET/POST/PATCH)
            counter: Course enrollment counter
        """
        self.gateway = gateway
        self.counter = counter
        self._enrollments: dict[EnrollmentKey, Enrollment] = {}
        self._pending: dict[PendingKey, asyncio.Task[Enrollment]] = {}
        # Enrollments created here whose counter increment has not succeeded yet
        self._uncounted: set[EnrollmentKey] = set()

    # ==========================================================================
    # Queries
    # ==========================================================================

    def cached(self, course_id: str, student_id: str) -> Enrollment | None:
        """Last known enrollment of the pair, without a network call."""
        return self._enrollments.get((course_id, student_id))

    def is_pending(self, course_id: str, student_id: str) -> bool:
        """Check if an enroll call is in flight for the pair."""
        return any(
            (course_id, student_id, lookup_only) in self._pending
            for lookup_only in (False, True)
        )

    async def load(self, course: "Course", student_id: str | None) -> Enrollment | None:
        """Fetch the current enrollment of a student in a course.

        Args:
            course: Course (used to recompute progress)
            student_id: Student id, None for an anonymous viewer

        Returns:
            Enrollment, or None if the viewer is anonymous or not enrolled
        """
        if not student_id:
            return None

        key = (course.id, student_id)
        enrollment = await self.gateway.get_enrollment(course.id, student_id)
        if enrollment is None:
            self._enrollments.pop(key, None)
            return None

        enrollment = with_course_progress(enrollment, course)
        self._enrollments[key] = enrollment
        return enrollment

    # ==========================================================================
    # Enrollment
    # ==========================================================================

    async def enroll(
        self,
        course: "Course",
        student_id: str | None,
        payment: PaymentConfirmation | None = None,
    ) -> Enrollment:
        """Enroll a student in a course (idempotent).

        An existing enrollment is returned unchanged. Concurrent calls for the
        same pair share a single creation request. On a paid course, calls
        without payment only look up an owned enrollment; they are not shared
        with calls that bring a payment confirmation.

        Args:
            course: Course to enroll in
            student_id: Student id
            payment: Payment confirmation, required when the course is paid

        Returns:
            The enrollment of the pair

        Raises:
            NotAuthenticatedError: If no student identity is available
            PaymentRequiredError: If the course is paid and no confirmation given
            NetworkFailureError: If a collaborator call fails
        """
        if not student_id:
            raise NotAuthenticatedError

        key = (course.id, student_id)
        existing = self._enrollments.get(key)
        if existing is not None:
            if key in self._uncounted:
                await self._increment_counter(key)
            logger.debug(
                "already_enrolled", enrollment_id=existing.id, course_id=course.id
            )
            return existing

        pending_key = (*key, not course.is_free and payment is None)
        task = self._pending.get(pending_key)
        if task is None:
            task = asyncio.create_task(self._create(course, student_id, payment))
            self._pending[pending_key] = task
            task.add_done_callback(lambda _: self._pending.pop(pending_key, None))

        return await asyncio.shield(task)

    async def _create(
        self,
        course: "Course",
        student_id: str,
        payment: PaymentConfirmation | None,
    ) -> Enrollment:
        key = (course.id, student_id)

        if not course.is_free and payment is None:
            # A paid course may already be owned; only then is enroll a no-op
            existing = await self.gateway.get_enrollment(course.id, student_id)
            if existing is None:
                logger.info(
                    "enrollment_payment_required",
                    course_id=course.id,
                    price=str(course.price),
                )
                raise PaymentRequiredError
            enrollment = with_course_progress(existing, course)
            self._enrollments[key] = enrollment
            return enrollment

        enrollment, created = await self.gateway.create_enrollment(
            course.id, student_id, payment
        )
        enrollment = with_course_progress(enrollment, course)
        self._enrollments[key] = enrollment

        if created:
            logger.info(
                "enrollment_created",
                enrollment_id=enrollment.id,
                course_id=course.id,
                paid=payment is not None,
            )
            self._uncounted.add(key)
            await self._increment_counter(key)

        return enrollment

    async def _increment_counter(self, key: EnrollmentKey) -> None:
        """Increment the course counter once for a newly created enrollment.

        On failure the key stays pending and the next enroll call retries.
        """
        course_id, _ = key
        total = await self.counter.increment_enrollment_count(course_id)
        self._uncounted.discard(key)
        logger.info(
            "enrollment_count_incremented", course_id=course_id, total_enrollments=total
        )

    # ==========================================================================
    # Cache maintenance
    # ==========================================================================

    def remember(self, enrollment: Enrollment) -> None:
        """Store a server-confirmed enrollment value."""
        self._enrollments[(enrollment.course_id, enrollment.student_id)] = enrollment

    def forget(self, course_id: str, student_id: str) -> None:
        """Drop cached state of a pair (logout, refetch)."""
        self._enrollments.pop((course_id, student_id), None)
