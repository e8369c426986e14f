"""Lecture completion tracking.

Business logic for:
- Marking a lecture complete (set insertion, idempotent)
- Progress recomputation and completion detection
- Persisting through the enrollment gateway before adopting any change
"""

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from lecturemate.core.errors import LectureNotFoundError
from lecturemate.core.logging import get_logger
from lecturemate.enrollments.models import Enrollment
from lecturemate.events import EventDispatcher

from .calculator import MAX_PERCENT, course_percent, with_course_progress
from .detector import CompletionDetector, CompletionOutcome


if TYPE_CHECKING:
    from lecturemate.client.protocols import EnrollmentGateway
    from lecturemate.courses.models import Course
    from lecturemate.enrollments.store import EnrollmentStore


logger = get_logger(__name__)


class CompletionTracker:
    """Records completed lectures of the enrollments of one course.

    The tracker keeps the latest server-confirmed value of each enrollment it
    has seen; readers (the playback coordinator, the session) go through it
    instead of holding their own copy of the completion set.
    """

    def __init__(
        self,
        course: "Course",
        gateway: "EnrollmentGateway",
        detector: CompletionDetector | None = None,
        dispatcher: EventDispatcher | None = None,
        store: "EnrollmentStore | None" = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            course: Course whose lecture tree defines progress
            gateway: Enrollment persistence
            detector: Completion detector (one per tracker by default)
            dispatcher: UI notification fan-out
            store: Enrollment store to keep in sync with confirmed values
        """
        self.course = course
        self.gateway = gateway
        self.detector = detector or CompletionDetector()
        self.dispatcher = dispatcher or EventDispatcher()
        self.store = store
        self._latest: dict[str, Enrollment] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    # ==========================================================================
    # Reads
    # ==========================================================================

    def current(self, enrollment: Enrollment) -> Enrollment:
        """Latest confirmed value of an enrollment."""
        return self._latest.get(enrollment.id, enrollment)

    def adopt(self, enrollment: Enrollment) -> Enrollment:
        """Replace the known value of an enrollment (after load or enroll)."""
        enrollment = with_course_progress(enrollment, self.course)
        self._latest[enrollment.id] = enrollment
        return enrollment

    def is_completed(self, enrollment: Enrollment, lecture_id: str) -> bool:
        """Check if a lecture is marked complete for an enrollment."""
        return self.current(enrollment).has_completed(lecture_id)

    def progress(self, enrollment: Enrollment) -> Decimal:
        """Course progress of an enrollment."""
        return self.current(enrollment).progress_percent

    # ==========================================================================
    # Completion
    # ==========================================================================

    async def mark_complete(self, enrollment: Enrollment, lecture_id: str) -> Enrollment:
        """Mark a lecture complete.

        Re-marking a completed lecture returns the enrollment unchanged without
        contacting the backend. Calls for one enrollment are applied in the
        order they were issued.

        Args:
            enrollment: Enrollment of the viewer
            lecture_id: Lecture that finished playing

        Returns:
            Updated (server-confirmed) enrollment

        Raises:
            LectureNotFoundError: If the lecture is not part of the course
            NetworkFailureError: If persisting fails (nothing is applied)
        """
        if enrollment.course_id != self.course.id:
            msg = f"Enrollment {enrollment.id} belongs to course {enrollment.course_id}"
            raise ValueError(msg)
        if not self.course.has_lecture(lecture_id):
            raise LectureNotFoundError(lecture_id)

        lock = self._locks.setdefault(enrollment.id, asyncio.Lock())
        async with lock:
            current = self.current(enrollment)
            if current.has_completed(lecture_id):
                logger.debug(
                    "lecture_already_completed",
                    enrollment_id=current.id,
                    lecture_id=lecture_id,
                )
                return current

            confirmed, outcome = await self._persist(
                current, current.completed_lecture_ids | {lecture_id}
            )
            logger.info(
                "lecture_marked_complete",
                enrollment_id=confirmed.id,
                lecture_id=lecture_id,
                progress=str(confirmed.progress_percent),
            )

        self._announce(confirmed, outcome)
        return confirmed

    async def reconcile(self, enrollment: Enrollment) -> Enrollment:
        """Adopt an enrollment and record a completion its progress implies.

        A course that lost lectures can put an enrollment at 100% with no
        lecture left to mark. The completion is then persisted and announced
        here, once.

        Raises:
            NetworkFailureError: If persisting fails (the adopted value is kept)
        """
        adopted = self.adopt(enrollment)
        if adopted.is_completed or adopted.progress_percent < MAX_PERCENT:
            return adopted

        lock = self._locks.setdefault(adopted.id, asyncio.Lock())
        async with lock:
            current = self.current(adopted)
            if current.is_completed:
                return current
            confirmed, outcome = await self._persist(current, current.completed_lecture_ids)
            logger.info(
                "completion_reconciled",
                enrollment_id=confirmed.id,
                progress=str(confirmed.progress_percent),
            )

        self._announce(confirmed, outcome)
        return confirmed

    async def _persist(
        self, current: Enrollment, completed: frozenset[str]
    ) -> tuple[Enrollment, CompletionOutcome]:
        """PATCH a new completion set and keep the confirmed value.

        Must be called with the enrollment's lock held.
        """
        new_percent = course_percent(self.course, completed)
        outcome = self.detector.evaluate(current, new_percent, datetime.now(UTC))

        candidate = current.evolve(
            completed_lecture_ids=completed,
            progress_percent=new_percent,
            is_completed=outcome.is_completed,
            completed_at=outcome.completed_at,
        )
        confirmed = with_course_progress(
            await self.gateway.patch_enrollment(candidate), self.course
        )

        self._latest[confirmed.id] = confirmed
        if self.store is not None:
            self.store.remember(confirmed)
        return confirmed, outcome

    def _announce(self, confirmed: Enrollment, outcome: CompletionOutcome) -> None:
        """Notify listeners; completion is announced even if a listener fails."""
        try:
            self.dispatcher.progress_changed(confirmed.progress_percent)
        finally:
            if outcome.fired and confirmed.is_completed and self.detector.confirm(confirmed):
                self.dispatcher.course_completed(confirmed)
