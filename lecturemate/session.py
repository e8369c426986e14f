"""Learning session facade.

Wires the engine for one viewer on one course:
course lookup -> enrollment load -> access-gated playback -> completion
tracking -> progress and certificate notifications.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from lecturemate.access.policy import accessible_lectures, can_access, ensure_access
from lecturemate.core.context import LogContext, generate_session_id
from lecturemate.core.logging import get_logger
from lecturemate.enrollments.store import EnrollmentStore
from lecturemate.events import EventDispatcher
from lecturemate.playback.coordinator import PlaybackCoordinator
from lecturemate.progress.calculator import ChapterProgress, chapter_breakdown
from lecturemate.progress.tracker import CompletionTracker


if TYPE_CHECKING:
    from lecturemate.client.protocols import (
        CourseGateway,
        EnrollmentCounter,
        EnrollmentGateway,
    )
    from lecturemate.courses.models import Course, Lecture
    from lecturemate.enrollments.models import Enrollment, PaymentConfirmation


logger = get_logger(__name__)


class LearningSession:
    """One viewer's session on one course.

    The student id is passed in explicitly; None means an anonymous viewer
    who can only watch free previews.
    """

    def __init__(
        self,
        course: "Course",
        student_id: str | None,
        store: EnrollmentStore,
        tracker: CompletionTracker,
        coordinator: PlaybackCoordinator,
        courses: "CourseGateway",
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or generate_session_id()
        self.course = course
        self.student_id = student_id
        self.store = store
        self.tracker = tracker
        self.coordinator = coordinator
        self.courses = courses

    @classmethod
    async def open(
        cls,
        course_id: str,
        student_id: str | None,
        *,
        courses: "CourseGateway",
        enrollments: "EnrollmentGateway",
        counter: "EnrollmentCounter",
        listeners: Iterable[object] = (),
        store: EnrollmentStore | None = None,
    ) -> "LearningSession":
        """Load a course and the viewer's enrollment.

        Args:
            course_id: Course to open
            student_id: Viewer's student id, None if not logged in
            courses: Course lookup collaborator
            enrollments: Enrollment persistence collaborator
            counter: Enrollment counter collaborator
            listeners: UI listeners (see EngineListener)
            store: Shared enrollment store, created if not given

        Raises:
            CourseNotFoundError: If the course does not exist
            NetworkFailureError: If a collaborator call fails
        """
        session_id = generate_session_id()
        with LogContext(session_id, student_id, course_id):
            course = await courses.get_course(course_id)
            store = store or EnrollmentStore(enrollments, counter)
            enrollment = await store.load(course, student_id)

            dispatcher = EventDispatcher(list(listeners))
            tracker = CompletionTracker(
                course, enrollments, dispatcher=dispatcher, store=store
            )
            if enrollment is not None:
                enrollment = await tracker.reconcile(enrollment)
            coordinator = PlaybackCoordinator(
                course, tracker, dispatcher=dispatcher, enrollment=enrollment
            )

            logger.info(
                "learning_session_opened",
                enrolled=enrollment is not None,
                total_lectures=course.total_lectures,
            )
            return cls(
                course, student_id, store, tracker, coordinator, courses, session_id
            )

    def _log_context(self) -> LogContext:
        return LogContext(self.session_id, self.student_id, self.course.id)

    # ==========================================================================
    # State
    # ==========================================================================

    @property
    def dispatcher(self) -> EventDispatcher:
        return self.tracker.dispatcher

    @property
    def enrollment(self) -> "Enrollment | None":
        return self.coordinator.enrollment

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment is not None

    @property
    def enrollment_pending(self) -> bool:
        """True while an enroll call is in flight (optimistic UI indicator)."""
        if not self.student_id:
            return False
        return self.store.is_pending(self.course.id, self.student_id)

    @property
    def total_enrollments(self) -> int:
        """Server-confirmed enrollment count of the course."""
        return self.course.total_enrollments

    @property
    def progress_percent(self) -> Decimal:
        enrollment = self.enrollment
        return enrollment.progress_percent if enrollment else Decimal(0)

    @property
    def is_course_completed(self) -> bool:
        enrollment = self.enrollment
        return bool(enrollment and enrollment.is_completed)

    def chapter_progress(self) -> list[ChapterProgress]:
        """Per-chapter completion of the viewer."""
        enrollment = self.enrollment
        completed = enrollment.completed_lecture_ids if enrollment else frozenset()
        return chapter_breakdown(self.course, completed)

    # ==========================================================================
    # Access
    # ==========================================================================

    def can_access(self, lecture_id: str) -> bool:
        """Check if a lecture is playable for the viewer."""
        return can_access(self.enrollment, self.course.find_lecture(lecture_id))

    def require_access(self, lecture_id: str) -> "Lecture":
        """Get a lecture, raising AccessDeniedError if it is not playable."""
        lecture = self.course.find_lecture(lecture_id)
        ensure_access(self.enrollment, lecture)
        return lecture

    def accessible_lectures(self) -> list["Lecture"]:
        return accessible_lectures(self.enrollment, self.course)

    # ==========================================================================
    # Actions
    # ==========================================================================

    async def enroll(self, payment: "PaymentConfirmation | None" = None) -> "Enrollment":
        """Enroll the viewer in the course (idempotent).

        Raises:
            NotAuthenticatedError: If the viewer is anonymous
            PaymentRequiredError: If the course is paid and no confirmation given
            NetworkFailureError: If a collaborator call fails
        """
        with self._log_context():
            enrollment = await self.store.enroll(self.course, self.student_id, payment)
            enrollment = await self.tracker.reconcile(self.tracker.current(enrollment))
            self.coordinator.update_enrollment(enrollment)
            return enrollment

    async def mark_complete(self, lecture_id: str) -> "Enrollment | None":
        """Record full playback of a lecture (video player "ended" event)."""
        with self._log_context():
            return await self.coordinator.on_playback_ended(lecture_id)

    async def refresh(self) -> "Enrollment | None":
        """Refetch course and enrollment from the backend."""
        with self._log_context():
            course = await self.courses.get_course(self.course.id)
            enrollment = await self.store.load(course, self.student_id)
            if course != self.course:
                # Lecture tree or counters changed; rebuild course-bound parts
                self.course = course
                self.tracker.course = course
                self.coordinator = PlaybackCoordinator(
                    course, self.tracker, dispatcher=self.dispatcher
                )
            if enrollment is not None:
                enrollment = await self.tracker.reconcile(enrollment)
            self.coordinator.update_enrollment(enrollment)
            return enrollment
