"""Tests for sequential lecture navigation."""

import pytest

from lecturemate.core.errors import LectureNotFoundError
from lecturemate.playback import PlaybackCoordinator
from lecturemate.progress import CompletionTracker


@pytest.fixture
def gated_enrollment(enrollment):
    return enrollment.evolve(course_id="c2")


@pytest.fixture
def tracker(gated_course, mock_gateway, dispatcher):
    return CompletionTracker(gated_course, mock_gateway, dispatcher=dispatcher)


@pytest.fixture
def anonymous(gated_course, tracker):
    return PlaybackCoordinator(gated_course, tracker)


@pytest.fixture
def enrolled(gated_course, tracker, gated_enrollment):
    return PlaybackCoordinator(gated_course, tracker, enrollment=gated_enrollment)


def lecture(course, lecture_id):
    return course.find_lecture(lecture_id)


class TestNavigation:
    """Tests for next and previous."""

    def test_next_within_and_across_chapters(self, enrolled, gated_course):
        assert enrolled.next(lecture(gated_course, "A")).id == "B"
        assert enrolled.next(lecture(gated_course, "B")).id == "C"
        assert enrolled.current.id == "C"

    def test_next_at_end(self, enrolled, gated_course):
        assert enrolled.next(lecture(gated_course, "D")) is None
        assert enrolled.has_next(lecture(gated_course, "D")) is False

    def test_next_denied_does_not_skip(self, anonymous, gated_course, listener):
        """A locked lecture stops navigation; the preview after it is not reached."""
        result = anonymous.next(lecture(gated_course, "A"))

        assert result is None
        assert [denied.id for denied in listener.denied] == ["B"]
        assert anonymous.current is None

    def test_previous_is_not_gated(self, anonymous, gated_course, listener):
        assert anonymous.previous(lecture(gated_course, "C")).id == "B"
        assert listener.denied == []

    def test_previous_at_start(self, anonymous, gated_course):
        assert anonymous.previous(lecture(gated_course, "A")) is None
        assert anonymous.has_previous(lecture(gated_course, "A")) is False

    def test_open_preview_and_locked(self, anonymous, listener):
        assert anonymous.open("C").id == "C"
        assert anonymous.open("D") is None
        assert [denied.id for denied in listener.denied] == ["D"]

    def test_open_unknown_lecture(self, anonymous):
        with pytest.raises(LectureNotFoundError):
            anonymous.open("Z")


class TestPlaybackEnded:
    """Tests for on_playback_ended."""

    @pytest.mark.asyncio
    async def test_preview_viewing_records_nothing(self, anonymous, mock_gateway):
        anonymous.open("A")

        assert await anonymous.on_playback_ended() is None
        mock_gateway.patch_enrollment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_records_current_lecture(self, enrolled, mock_gateway):
        enrolled.open("B")

        updated = await enrolled.on_playback_ended()

        assert updated.completed_lecture_ids == frozenset({"B"})
        assert enrolled.is_lecture_completed("B") is True
        assert enrolled.enrollment == updated
        mock_gateway.patch_enrollment.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_navigation_alone_records_nothing(self, enrolled, gated_course, mock_gateway):
        enrolled.open("A")
        enrolled.next(lecture(gated_course, "A"))

        assert enrolled.is_lecture_completed("A") is False
        mock_gateway.patch_enrollment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_open(self, enrolled):
        assert await enrolled.on_playback_ended() is None

    def test_anonymous_has_no_completions(self, anonymous):
        assert anonymous.is_lecture_completed("A") is False
