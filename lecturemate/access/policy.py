"""Lecture access rules.

A lecture is playable when the viewer is enrolled in its course or when the
lecture is a free preview. Every caller that needs this answer goes through
``can_access``; nothing else re-derives it.
"""

from lecturemate.core.errors import AccessDeniedError
from lecturemate.courses.models import Course, Lecture
from lecturemate.enrollments.models import Enrollment


def can_access(enrollment: Enrollment | None, lecture: Lecture) -> bool:
    """Check if a lecture is playable for the viewer.

    Args:
        enrollment: Viewer's enrollment in the lecture's course, or None
        lecture: Lecture to play

    Returns:
        True if enrolled or the lecture is a free preview

    Examples:
        >>> can_access(None, Lecture(id="l1", is_preview_free=True))
        True
        >>> can_access(None, Lecture(id="l2"))
        False
    """
    return enrollment is not None or lecture.is_preview_free


def ensure_access(enrollment: Enrollment | None, lecture: Lecture) -> None:
    """Raise if the lecture is not playable.

    Raises:
        AccessDeniedError: If not enrolled and not a free preview
    """
    if not can_access(enrollment, lecture):
        raise AccessDeniedError(lecture)


def accessible_lectures(enrollment: Enrollment | None, course: Course) -> list[Lecture]:
    """Lectures of the course the viewer may open, in course order."""
    return [
        lecture for lecture in course.iter_lectures() if can_access(enrollment, lecture)
    ]
