"""One-shot course completion detection.

Two states, IN_PROGRESS and COMPLETED. The only transition is
IN_PROGRESS -> COMPLETED, taken the first time progress is observed at or
above 100%. Completion is permanent: a later change of the course's lecture
set does not move an enrollment back to IN_PROGRESS.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from lecturemate.core.logging import get_logger
from lecturemate.enrollments.models import Enrollment

from .calculator import MAX_PERCENT


logger = get_logger(__name__)


class CompletionState(str, Enum):
    """Course completion state of an enrollment."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of evaluating a progress change.

    Attributes:
        state: State after the change
        completed_at: Completion timestamp (unchanged if already completed)
        fired: True only on the IN_PROGRESS -> COMPLETED transition
    """

    state: CompletionState
    completed_at: datetime | None
    fired: bool

    @property
    def is_completed(self) -> bool:
        return self.state is CompletionState.COMPLETED


class CompletionDetector:
    """Decides when an enrollment completes its course.

    ``evaluate`` is pure with respect to the enrollment. ``confirm`` records
    that the CourseCompleted event was emitted for an enrollment id, so a
    single detector never lets the event fire twice.
    """

    def __init__(self) -> None:
        self._announced: set[str] = set()

    @staticmethod
    def state_of(enrollment: Enrollment) -> CompletionState:
        """Current state of an enrollment."""
        if enrollment.is_completed:
            return CompletionState.COMPLETED
        return CompletionState.IN_PROGRESS

    def evaluate(
        self,
        enrollment: Enrollment,
        new_percent: Decimal,
        now: datetime,
    ) -> CompletionOutcome:
        """Evaluate a progress change of an enrollment.

        Args:
            enrollment: Enrollment before the change
            new_percent: Progress after the change
            now: Timestamp to use if the transition happens

        Returns:
            CompletionOutcome describing the resulting state
        """
        if self.state_of(enrollment) is CompletionState.COMPLETED:
            return CompletionOutcome(
                state=CompletionState.COMPLETED,
                completed_at=enrollment.completed_at,
                fired=False,
            )

        if new_percent >= MAX_PERCENT:
            return CompletionOutcome(
                state=CompletionState.COMPLETED,
                completed_at=now,
                fired=enrollment.id not in self._announced,
            )

        return CompletionOutcome(
            state=CompletionState.IN_PROGRESS,
            completed_at=None,
            fired=False,
        )

    def confirm(self, enrollment: Enrollment) -> bool:
        """Record the CourseCompleted announcement for an enrollment.

        Returns:
            True if this is the first announcement, False if already made
        """
        if enrollment.id in self._announced:
            return False
        self._announced.add(enrollment.id)
        logger.info(
            "course_completed",
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
            completed_at=enrollment.completed_at.isoformat()
            if enrollment.completed_at
            else None,
        )
        return True
