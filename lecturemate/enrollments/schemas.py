"""Pydantic schemas for enrollment payloads of the learning API.

Request and response models for:
- Enrollment lookup and creation
- Completion persistence (PATCH)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .models import Enrollment, PaymentConfirmation


class PaymentConfirmationPayload(BaseModel):
    """Payment confirmation forwarded with a paid enrollment."""

    model_config = ConfigDict(from_attributes=True)

    payment_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    method: str | None = None

    def to_entity(self) -> PaymentConfirmation:
        return PaymentConfirmation(
            payment_id=self.payment_id, amount=self.amount, method=self.method
        )


class EnrollRequest(BaseModel):
    """Request to enroll a student in a course."""

    student_id: str = Field(..., min_length=1, description="Student id")
    payment_confirmation: PaymentConfirmationPayload | None = None


class EnrollmentPayload(BaseModel):
    """Enrollment as exchanged with the learning API."""

    id: str = Field(..., min_length=1)
    course_id: str
    student_id: str
    completed_lectures: list[str] = Field(default_factory=list)
    progress: Decimal = Field(Decimal(0), ge=0, le=100)
    is_completed: bool = False
    completion_date: datetime | None = None
    enrolled_at: datetime | None = None
    certificate_url: str | None = None

    def to_entity(self) -> Enrollment:
        """Create enrollment entity from payload."""
        return Enrollment(
            id=self.id,
            course_id=self.course_id,
            student_id=self.student_id,
            completed_lecture_ids=frozenset(self.completed_lectures),
            progress_percent=self.progress,
            is_completed=self.is_completed,
            completed_at=self.completion_date,
            enrolled_at=self.enrolled_at,
            certificate_url=self.certificate_url,
        )

    @classmethod
    def from_entity(cls, entity: Enrollment) -> "EnrollmentPayload":
        """Create payload from enrollment entity."""
        return cls(
            id=entity.id,
            course_id=entity.course_id,
            student_id=entity.student_id,
            completed_lectures=sorted(entity.completed_lecture_ids),
            progress=entity.progress_percent,
            is_completed=entity.is_completed,
            completion_date=entity.completed_at,
            enrolled_at=entity.enrolled_at,
            certificate_url=entity.certificate_url,
        )


class EnrollmentPatchRequest(BaseModel):
    """Completion state persisted after a lecture is marked complete."""

    completed_lectures: list[str]
    progress: Decimal = Field(..., ge=0, le=100)
    is_completed: bool
    completion_date: datetime | None = None

    @classmethod
    def from_entity(cls, entity: Enrollment) -> "EnrollmentPatchRequest":
        return cls(
            completed_lectures=sorted(entity.completed_lecture_ids),
            progress=entity.progress_percent,
            is_completed=entity.is_completed,
            completion_date=entity.completed_at,
        )
