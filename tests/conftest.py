"""Shared test fixtures for the learning engine tests."""

from collections.abc import AsyncIterator
from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from lecturemate.client import LearningApiClient
from lecturemate.config import Settings
from lecturemate.courses.models import Chapter, Course, Lecture
from lecturemate.enrollments.models import Enrollment, PaymentConfirmation
from lecturemate.events import EventDispatcher
from lecturemate.sandbox import InMemoryLearningRepository, create_app


class RecordingListener:
    """UI listener double that records every notification."""

    def __init__(self) -> None:
        self.denied: list[Lecture] = []
        self.completed: list[Enrollment] = []
        self.progress: list[Decimal] = []

    def on_access_denied(self, lecture: Lecture) -> None:
        self.denied.append(lecture)

    def on_course_completed(self, enrollment: Enrollment) -> None:
        self.completed.append(enrollment)

    def on_progress_changed(self, percent: Decimal) -> None:
        self.progress.append(percent)


# ==============================================================================
# Courses
# ==============================================================================


@pytest.fixture
def two_lecture_course() -> Course:
    """Free course: L1 is a free preview, L2 is not."""
    return Course(
        id="c1",
        title="Intro",
        chapters=(
            Chapter(
                title="Chapter 1",
                lectures=(
                    Lecture(id="L1", title="Welcome", is_preview_free=True, duration_seconds=60),
                    Lecture(id="L2", title="Basics", duration_seconds=120),
                ),
            ),
        ),
    )


@pytest.fixture
def gated_course() -> Course:
    """Two chapters where a locked lecture sits between two previews."""
    return Course(
        id="c2",
        title="Gated",
        chapters=(
            Chapter(
                title="Part 1",
                lectures=(
                    Lecture(id="A", is_preview_free=True),
                    Lecture(id="B"),
                ),
            ),
            Chapter(
                title="Part 2",
                lectures=(
                    Lecture(id="C", is_preview_free=True),
                    Lecture(id="D"),
                ),
            ),
        ),
    )


@pytest.fixture
def paid_course() -> Course:
    """Paid single-lecture course."""
    return Course(
        id="paid",
        title="Premium",
        price=Decimal("49.90"),
        chapters=(Chapter(title="Only", lectures=(Lecture(id="P1"),)),),
    )


@pytest.fixture
def empty_course() -> Course:
    """Course without lectures."""
    return Course(id="empty", title="Coming soon")


@pytest.fixture
def payment() -> PaymentConfirmation:
    return PaymentConfirmation(payment_id="pay_123456", amount=Decimal("49.90"), method="card")


# ==============================================================================
# Enrollments and collaborators
# ==============================================================================


@pytest.fixture
def enrollment() -> Enrollment:
    """Fresh enrollment of s1 in c1."""
    return Enrollment(id="e1", course_id="c1", student_id="s1")


@pytest.fixture
def mock_gateway(enrollment: Enrollment) -> AsyncMock:
    """Enrollment gateway double.

    PATCH echoes the submitted value back as the server-confirmed one.
    """
    gateway = AsyncMock()
    gateway.get_enrollment = AsyncMock(return_value=None)
    gateway.create_enrollment = AsyncMock(return_value=(enrollment, True))
    gateway.patch_enrollment = AsyncMock(side_effect=lambda candidate: candidate)
    return gateway


@pytest.fixture
def mock_counter() -> AsyncMock:
    counter = AsyncMock()
    counter.increment_enrollment_count = AsyncMock(return_value=1)
    return counter


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def dispatcher(listener: RecordingListener) -> EventDispatcher:
    return EventDispatcher([listener])


# ==============================================================================
# Reference backend
# ==============================================================================


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment="testing", log_level="WARNING")


@pytest.fixture
def repository(
    two_lecture_course: Course, gated_course: Course, paid_course: Course
) -> InMemoryLearningRepository:
    return InMemoryLearningRepository([two_lecture_course, gated_course, paid_course])


@pytest.fixture
def sandbox_app(repository: InMemoryLearningRepository, test_settings: Settings):
    return create_app(repository=repository, settings=test_settings)


@pytest_asyncio.fixture
async def api_client(sandbox_app) -> AsyncIterator[LearningApiClient]:
    """LearningApiClient talking to the reference backend in-process."""
    transport = httpx.ASGITransport(app=sandbox_app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as http_client:
        yield LearningApiClient(base_url="http://testserver", http_client=http_client)
