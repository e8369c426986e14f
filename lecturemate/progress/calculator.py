"""Course progress arithmetic.

Progress is always derived from the completion set and the course's lecture
tree; it is never accumulated.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from lecturemate.courses.models import Course
from lecturemate.enrollments.models import Enrollment


MAX_PERCENT = Decimal(100)


@dataclass(frozen=True)
class ChapterProgress:
    """Completion of one chapter."""

    title: str
    lectures_completed: int
    lectures_total: int
    progress_percent: Decimal

    @property
    def is_completed(self) -> bool:
        return self.lectures_total > 0 and self.lectures_completed == self.lectures_total


def percent(completed_count: int, total_count: int) -> Decimal:
    """Percentage of completed lectures, clamped to [0, 100].

    A course without lectures is never in progress, so ``total_count == 0``
    yields 0.

    Examples:
        >>> percent(0, 0)
        Decimal('0')
        >>> percent(1, 2)
        Decimal('50')
    """
    if total_count <= 0:
        return Decimal(0)
    value = Decimal(completed_count) * MAX_PERCENT / Decimal(total_count)
    return max(Decimal(0), min(MAX_PERCENT, value))


def course_percent(course: Course, completed_ids: Iterable[str]) -> Decimal:
    """Course progress for a completion set.

    Ids that are not lectures of the course are ignored.
    """
    completed = course.lecture_ids().intersection(completed_ids)
    return percent(len(completed), course.total_lectures)


def chapter_breakdown(
    course: Course, completed_ids: Iterable[str]
) -> list[ChapterProgress]:
    """Per-chapter completion, in chapter order."""
    completed = frozenset(completed_ids)
    breakdown = []
    for chapter in course.chapters:
        total = len(chapter.lectures)
        done = sum(1 for lecture in chapter.lectures if lecture.id in completed)
        breakdown.append(
            ChapterProgress(
                title=chapter.title,
                lectures_completed=done,
                lectures_total=total,
                progress_percent=percent(done, total),
            )
        )
    return breakdown


def with_course_progress(enrollment: Enrollment, course: Course) -> Enrollment:
    """Return the enrollment with progress recomputed against the course."""
    progress = course_percent(course, enrollment.completed_lecture_ids)
    if progress == enrollment.progress_percent:
        return enrollment
    return enrollment.evolve(progress_percent=progress)
