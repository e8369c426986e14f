"""Tests for progress arithmetic."""

from decimal import Decimal

import pytest

from lecturemate.progress import (
    chapter_breakdown,
    course_percent,
    percent,
    with_course_progress,
)


class TestPercent:
    """Tests for the percent formula."""

    def test_empty_course_is_zero(self):
        assert percent(0, 0) == Decimal(0)

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (0, 2, Decimal(0)),
            (1, 2, Decimal(50)),
            (2, 2, Decimal(100)),
            (1, 4, Decimal(25)),
        ],
    )
    def test_ratio(self, completed, total, expected):
        assert percent(completed, total) == expected

    def test_clamped_to_hundred(self):
        assert percent(5, 2) == Decimal(100)

    def test_not_rounded(self):
        """One of three keeps its exact decimal value."""
        value = percent(1, 3)
        assert Decimal(33) < value < Decimal(34)


class TestCoursePercent:
    """Tests for course_percent."""

    def test_counts_course_lectures(self, two_lecture_course):
        assert course_percent(two_lecture_course, {"L1"}) == Decimal(50)

    def test_ignores_foreign_ids(self, two_lecture_course):
        """Ids of removed or unknown lectures do not count."""
        assert course_percent(two_lecture_course, {"L1", "gone"}) == Decimal(50)

    def test_empty_course(self, empty_course):
        assert course_percent(empty_course, set()) == Decimal(0)


class TestChapterBreakdown:
    """Tests for chapter_breakdown."""

    def test_per_chapter_completion(self, gated_course):
        breakdown = chapter_breakdown(gated_course, {"A", "B", "C"})

        assert [chapter.title for chapter in breakdown] == ["Part 1", "Part 2"]
        assert breakdown[0].lectures_completed == 2
        assert breakdown[0].is_completed is True
        assert breakdown[1].progress_percent == Decimal(50)
        assert breakdown[1].is_completed is False


class TestWithCourseProgress:
    """Tests for with_course_progress."""

    def test_recomputes_stale_progress(self, two_lecture_course, enrollment):
        stale = enrollment.evolve(
            completed_lecture_ids={"L1"}, progress_percent=Decimal(10)
        )

        fresh = with_course_progress(stale, two_lecture_course)

        assert fresh.progress_percent == Decimal(50)
        assert fresh.completed_lecture_ids == frozenset({"L1"})

    def test_returns_same_object_when_unchanged(self, two_lecture_course, enrollment):
        assert with_course_progress(enrollment, two_lecture_course) is enrollment
