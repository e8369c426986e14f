"""Course content entities.

A course is an ordered list of chapters, each an ordered list of lectures.
Chapter order followed by lecture order defines the playback sequence.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal

from lecturemate.core.errors import LectureNotFoundError


@dataclass(frozen=True)
class Lecture:
    """A single playable lecture.

    Attributes:
        id: Lecture identifier, unique within its course
        title: Display title
        is_preview_free: Playable without enrollment
        duration_seconds: Video length
    """

    id: str
    title: str = ""
    is_preview_free: bool = False
    duration_seconds: int = 0


@dataclass(frozen=True)
class Chapter:
    """Ordered group of lectures."""

    title: str
    lectures: tuple[Lecture, ...] = ()


@dataclass(frozen=True)
class Course:
    """Course with its chapter tree.

    Attributes:
        id: Course identifier
        title: Display title
        price: Non-negative price, 0 means free
        chapters: Ordered chapters
        total_enrollments: Server-confirmed enrollment count
    """

    id: str
    title: str = ""
    price: Decimal = Decimal(0)
    chapters: tuple[Chapter, ...] = ()
    total_enrollments: int = 0
    _index: dict[str, int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Course price must be non-negative, got {self.price}")
        for position, lecture in enumerate(self.lectures()):
            if lecture.id in self._index:
                raise ValueError(f"Duplicate lecture id {lecture.id} in course {self.id}")
            self._index[lecture.id] = position

    @property
    def is_free(self) -> bool:
        """Check if course can be enrolled without payment."""
        return self.price == 0

    @property
    def total_lectures(self) -> int:
        """Total lecture count across all chapters."""
        return sum(len(chapter.lectures) for chapter in self.chapters)

    def iter_lectures(self) -> Iterator[Lecture]:
        """Iterate lectures in chapter order."""
        for chapter in self.chapters:
            yield from chapter.lectures

    def lectures(self) -> list[Lecture]:
        """Flat, chapter-order-preserving lecture sequence."""
        return list(self.iter_lectures())

    def lecture_ids(self) -> frozenset[str]:
        """All lecture ids of the course."""
        return frozenset(self._index)

    def has_lecture(self, lecture_id: str) -> bool:
        return lecture_id in self._index

    def position_of(self, lecture_id: str) -> int:
        """Zero-based position of a lecture in the flat sequence.

        Raises:
            LectureNotFoundError: If the lecture is not part of the course
        """
        try:
            return self._index[lecture_id]
        except KeyError:
            raise LectureNotFoundError(lecture_id) from None

    def find_lecture(self, lecture_id: str) -> Lecture:
        """Get a lecture by id.

        Raises:
            LectureNotFoundError: If the lecture is not part of the course
        """
        return self.lectures()[self.position_of(lecture_id)]
