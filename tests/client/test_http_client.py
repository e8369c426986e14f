"""Tests for the learning API client."""

from decimal import Decimal

import httpx
import pytest

from lecturemate.client import LearningApiClient
from lecturemate.config import Settings
from lecturemate.core.errors import (
    CourseNotFoundError,
    NetworkFailureError,
    NotAuthenticatedError,
    PaymentRequiredError,
)
from lecturemate.enrollments.models import Enrollment


ENROLLMENT_JSON = {
    "id": "e1",
    "course_id": "c1",
    "student_id": "s1",
    "completed_lectures": ["L1"],
    "progress": "50",
    "is_completed": False,
    "completion_date": None,
}


def client_for(handler) -> LearningApiClient:
    """Client whose requests are answered by ``handler``."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://api.test"
    )
    return LearningApiClient(base_url="http://api.test", http_client=http_client)


# ==============================================================================
# Error mapping
# ==============================================================================


class TestErrorMapping:
    """Tests for mapping transport and HTTP failures to engine errors."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(NetworkFailureError) as exc_info:
            await client_for(handler).get_course("c1")

        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkFailureError):
            await client_for(handler).get_enrollment("c1", "s1")

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = client_for(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(NetworkFailureError) as exc_info:
            await client.increment_enrollment_count("c1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "network_failure"

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        client = client_for(lambda request: httpx.Response(401))

        with pytest.raises(NotAuthenticatedError):
            await client.create_enrollment("c1", "s1")

    @pytest.mark.asyncio
    async def test_payment_required(self):
        client = client_for(lambda request: httpx.Response(402))

        with pytest.raises(PaymentRequiredError):
            await client.create_enrollment("paid", "s1")

    @pytest.mark.asyncio
    async def test_invalid_payload(self):
        client = client_for(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(NetworkFailureError):
            await client.get_enrollment("c1", "s1")

    @pytest.mark.asyncio
    async def test_non_json_payload(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(NetworkFailureError):
            await client.get_course("c1")


# ==============================================================================
# Requests
# ==============================================================================


class TestRequests:
    """Tests for request shapes and response parsing."""

    @pytest.mark.asyncio
    async def test_missing_enrollment_is_none(self):
        client = client_for(lambda request: httpx.Response(404))

        assert await client.get_enrollment("c1", "s1") is None

    @pytest.mark.asyncio
    async def test_missing_course(self):
        client = client_for(lambda request: httpx.Response(404))

        with pytest.raises(CourseNotFoundError):
            await client.get_course("nope")

    @pytest.mark.asyncio
    async def test_create_reports_created(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json=ENROLLMENT_JSON)

        enrollment, created = await client_for(handler).create_enrollment("c1", "s1")

        assert created is True
        assert enrollment.completed_lecture_ids == frozenset({"L1"})
        assert requests[0].url.path == "/courses/c1/enrollments"
        assert b'"student_id":"s1"' in requests[0].content.replace(b" ", b"")

    @pytest.mark.asyncio
    async def test_create_existing(self):
        client = client_for(lambda request: httpx.Response(200, json=ENROLLMENT_JSON))

        _, created = await client.create_enrollment("c1", "s1")

        assert created is False

    @pytest.mark.asyncio
    async def test_patch_sends_completion_state(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=ENROLLMENT_JSON)

        enrollment = Enrollment(
            id="e1",
            course_id="c1",
            student_id="s1",
            completed_lecture_ids={"L1"},
            progress_percent=Decimal(50),
        )

        confirmed = await client_for(handler).patch_enrollment(enrollment)

        assert requests[0].method == "PATCH"
        assert requests[0].url.path == "/enrollments/e1"
        assert confirmed.progress_percent == Decimal(50)

    def test_from_settings(self):
        settings = Settings(api_base_url="http://backend:5000/api", api_auth_token="secret")

        client = LearningApiClient.from_settings(settings)

        assert str(client._client.base_url).startswith("http://backend:5000/api")
        assert client._client.headers["Authorization"] == "Bearer secret"


# ==============================================================================
# Against the reference backend
# ==============================================================================


class TestAgainstReferenceBackend:
    """Round trips through the in-process reference backend."""

    @pytest.mark.asyncio
    async def test_course_lookup(self, api_client):
        course = await api_client.get_course("c1")

        assert course.total_lectures == 2
        assert course.find_lecture("L1").is_preview_free is True

    @pytest.mark.asyncio
    async def test_enroll_is_idempotent(self, api_client):
        first, created = await api_client.create_enrollment("c1", "s1")
        second, created_again = await api_client.create_enrollment("c1", "s1")

        assert created is True
        assert created_again is False
        assert first.id == second.id

    @pytest.mark.asyncio
    async def test_patch_merges_completion(self, api_client):
        enrollment, _ = await api_client.create_enrollment("c1", "s1")

        await api_client.patch_enrollment(enrollment.evolve(completed_lecture_ids={"L2"}))
        confirmed = await api_client.patch_enrollment(
            enrollment.evolve(completed_lecture_ids={"L1"})
        )

        assert confirmed.completed_lecture_ids == frozenset({"L1", "L2"})
        assert confirmed.is_completed is True
        assert confirmed.completed_at is not None

    @pytest.mark.asyncio
    async def test_counter(self, api_client):
        assert await api_client.increment_enrollment_count("c1") == 1
        assert await api_client.increment_enrollment_count("c1") == 2
