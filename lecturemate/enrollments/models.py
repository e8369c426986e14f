"""Enrollment entities.

An enrollment links one student to one course and carries the set of
completed lectures. Values are immutable: every change produces a new
Enrollment, so a failed network call can never leave a half-applied state.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (backends may return naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


@dataclass(frozen=True)
class PaymentConfirmation:
    """Result of the external payment flow, forwarded on enroll.

    Attributes:
        payment_id: Payment provider reference
        amount: Amount charged
        method: Optional payment method label
    """

    payment_id: str
    amount: Decimal
    method: str | None = None


@dataclass(frozen=True)
class Enrollment:
    """Course enrollment of a student.

    Attributes:
        id: Server-assigned enrollment id
        course_id: Course id
        student_id: Student id
        completed_lecture_ids: Lectures marked complete (set semantics)
        progress_percent: Derived course progress (0-100)
        is_completed: Course completion latch
        completed_at: First completion timestamp
        enrolled_at: Enrollment timestamp
        certificate_url: Certificate location, when the backend issued one
    """

    id: str
    course_id: str
    student_id: str
    completed_lecture_ids: frozenset[str] = field(default_factory=frozenset)
    progress_percent: Decimal = Decimal(0)
    is_completed: bool = False
    completed_at: datetime | None = None
    enrolled_at: datetime | None = None
    certificate_url: str | None = None

    def __post_init__(self) -> None:
        # Normalize inputs so equality and set semantics hold for any iterable
        object.__setattr__(
            self, "completed_lecture_ids", frozenset(self.completed_lecture_ids)
        )
        object.__setattr__(self, "completed_at", ensure_utc_aware(self.completed_at))
        object.__setattr__(self, "enrolled_at", ensure_utc_aware(self.enrolled_at))

    @property
    def completed_count(self) -> int:
        return len(self.completed_lecture_ids)

    def has_completed(self, lecture_id: str) -> bool:
        """Check if a lecture is in the completion set."""
        return lecture_id in self.completed_lecture_ids

    def evolve(self, **changes: object) -> "Enrollment":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def __repr__(self) -> str:
        return (
            f"<Enrollment id={self.id} student={self.student_id} "
            f"course={self.course_id} {self.progress_percent}%>"
        )
