"""Sequential lecture navigation for the video player.

The coordinator walks the course's flat lecture sequence (chapter order,
then lecture order). Moving forward or opening a lecture is gated by the
access policy; a refused lecture is reported through ``on_access_denied``
and never skipped over. Moving backward is not gated: access depends on
enrollment only, so a viewer who reached lecture N may always see N-1.
"""

from typing import TYPE_CHECKING

from lecturemate.access.policy import can_access
from lecturemate.core.logging import get_logger
from lecturemate.events import EventDispatcher


if TYPE_CHECKING:
    from lecturemate.courses.models import Course, Lecture
    from lecturemate.enrollments.models import Enrollment
    from lecturemate.progress.tracker import CompletionTracker


logger = get_logger(__name__)


class PlaybackCoordinator:
    """Navigation and playback-end handling for one course."""

    def __init__(
        self,
        course: "Course",
        tracker: "CompletionTracker",
        dispatcher: EventDispatcher | None = None,
        enrollment: "Enrollment | None" = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            course: Course being watched
            tracker: Completion tracker of the course
            dispatcher: UI notification fan-out (defaults to the tracker's)
            enrollment: Viewer's enrollment, None for anonymous/preview viewing
        """
        self.course = course
        self.tracker = tracker
        self.dispatcher = dispatcher or tracker.dispatcher
        self._lectures = course.lectures()
        self._enrollment = enrollment
        self.current: "Lecture | None" = None

    @property
    def enrollment(self) -> "Enrollment | None":
        """Viewer's enrollment as currently known by the tracker."""
        if self._enrollment is None:
            return None
        return self.tracker.current(self._enrollment)

    def update_enrollment(self, enrollment: "Enrollment | None") -> None:
        """Swap the transient enrollment reference (after enroll or refetch)."""
        self._enrollment = enrollment

    # ==========================================================================
    # Navigation
    # ==========================================================================

    def _admit(self, lecture: "Lecture") -> "Lecture | None":
        if not can_access(self.enrollment, lecture):
            self.dispatcher.access_denied(lecture)
            return None
        self.current = lecture
        return lecture

    def open(self, lecture_id: str) -> "Lecture | None":
        """Open a lecture picked from the lecture list.

        Returns:
            The lecture, or None if access was denied

        Raises:
            LectureNotFoundError: If the lecture is not part of the course
        """
        return self._admit(self.course.find_lecture(lecture_id))

    def next(self, current: "Lecture") -> "Lecture | None":
        """Lecture immediately following ``current``.

        Returns:
            The next lecture, or None at the end of the course or when access
            to the next lecture is denied

        Raises:
            LectureNotFoundError: If ``current`` is not part of the course
        """
        position = self.course.position_of(current.id)
        if position + 1 >= len(self._lectures):
            return None
        return self._admit(self._lectures[position + 1])

    def previous(self, current: "Lecture") -> "Lecture | None":
        """Lecture immediately preceding ``current`` (None at the start)."""
        position = self.course.position_of(current.id)
        if position == 0:
            return None
        self.current = self._lectures[position - 1]
        return self.current

    def has_next(self, current: "Lecture") -> bool:
        return self.course.position_of(current.id) < len(self._lectures) - 1

    def has_previous(self, current: "Lecture") -> bool:
        return self.course.position_of(current.id) > 0

    # ==========================================================================
    # Playback
    # ==========================================================================

    def is_lecture_completed(self, lecture_id: str) -> bool:
        """Check if a lecture is complete for the viewer."""
        enrollment = self.enrollment
        if enrollment is None:
            return False
        return self.tracker.is_completed(enrollment, lecture_id)

    async def on_playback_ended(self, lecture_id: str | None = None) -> "Enrollment | None":
        """Handle the player's "ended" event.

        Only a full playback signal records completion. Preview viewing
        without enrollment records nothing.

        Args:
            lecture_id: Lecture that ended, defaults to the current lecture

        Returns:
            Updated enrollment, or None when nothing was recorded
        """
        lecture_id = lecture_id or (self.current.id if self.current else None)
        if lecture_id is None:
            return None

        if self._enrollment is None:
            logger.debug("completion_not_recorded_without_enrollment", lecture_id=lecture_id)
            return None

        return await self.tracker.mark_complete(self._enrollment, lecture_id)
