"""Pydantic schemas for course payloads of the learning API."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .models import Chapter, Course, Lecture


class LecturePayload(BaseModel):
    """Lecture as returned by ``GET /courses/{course_id}``."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="Lecture id")
    title: str = ""
    is_preview_free: bool = Field(False, description="Playable without enrollment")
    duration_seconds: int = Field(0, ge=0, description="Video length in seconds")

    def to_entity(self) -> Lecture:
        return Lecture(
            id=self.id,
            title=self.title,
            is_preview_free=self.is_preview_free,
            duration_seconds=self.duration_seconds,
        )


class ChapterPayload(BaseModel):
    """Chapter with its ordered lectures."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    lectures: list[LecturePayload] = Field(default_factory=list)

    def to_entity(self) -> Chapter:
        return Chapter(
            title=self.title,
            lectures=tuple(lecture.to_entity() for lecture in self.lectures),
        )


class CoursePayload(BaseModel):
    """Course with chapters, used to compute the total lecture count."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="Course id")
    title: str = ""
    price: Decimal = Field(Decimal(0), ge=0, description="0 means free")
    total_enrollments: int = Field(0, ge=0)
    chapters: list[ChapterPayload] = Field(default_factory=list)

    def to_entity(self) -> Course:
        """Create course entity from payload."""
        return Course(
            id=self.id,
            title=self.title,
            price=self.price,
            chapters=tuple(chapter.to_entity() for chapter in self.chapters),
            total_enrollments=self.total_enrollments,
        )

    @classmethod
    def from_entity(cls, course: Course) -> "CoursePayload":
        """Create payload from course entity."""
        return cls(
            id=course.id,
            title=course.title,
            price=course.price,
            total_enrollments=course.total_enrollments,
            chapters=[
                ChapterPayload(
                    title=chapter.title,
                    lectures=[
                        LecturePayload.model_validate(lecture)
                        for lecture in chapter.lectures
                    ],
                )
                for chapter in course.chapters
            ],
        )


class EnrollmentCountResponse(BaseModel):
    """Server-confirmed enrollment counter of a course."""

    course_id: str
    total_enrollments: int = Field(..., ge=0)
