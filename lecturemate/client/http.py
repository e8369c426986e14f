"""HTTP client for the learning REST backend.

Implements the collaborator calls of the engine:
- Course lookup
- Enrollment lookup, idempotent creation and completion patch
- Enrollment counter increment

Every failure surfaces as an engine error; no call is retried here.
"""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from lecturemate.config.settings import Settings
from lecturemate.core.errors import (
    CourseNotFoundError,
    NetworkFailureError,
    NotAuthenticatedError,
    PaymentRequiredError,
)
from lecturemate.core.logging import get_logger
from lecturemate.courses.models import Course
from lecturemate.courses.schemas import CoursePayload, EnrollmentCountResponse
from lecturemate.enrollments.models import Enrollment, PaymentConfirmation
from lecturemate.enrollments.schemas import (
    EnrollmentPatchRequest,
    EnrollmentPayload,
    EnrollRequest,
    PaymentConfirmationPayload,
)


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class LearningApiClient:
    """Async client for the learning backend.

    Implements CourseGateway, EnrollmentGateway and EnrollmentCounter.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        auth_token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL
            timeout: Per-request timeout in seconds
            auth_token: Optional bearer token
            http_client: Pre-built client (tests pass one with a custom transport)
        """
        headers = {"Accept": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=headers
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LearningApiClient":
        """Build a client from engine settings."""
        return cls(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
            auth_token=settings.api_auth_token,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "LearningApiClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    # ==========================================================================
    # Transport
    # ==========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, mapping transport errors to NetworkFailureError."""
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error("learning_api_timeout", method=method, path=path, error=str(e))
            raise NetworkFailureError("Learning service timed out") from e
        except httpx.RequestError as e:
            logger.error(
                "learning_api_request_error", method=method, path=path, error=str(e)
            )
            raise NetworkFailureError(f"Learning service request error: {e}") from e

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise NotAuthenticatedError
        if response.status_code == httpx.codes.PAYMENT_REQUIRED:
            raise PaymentRequiredError
        return response

    @staticmethod
    def _ensure_success(response: httpx.Response) -> None:
        if response.is_success:
            return
        logger.error(
            "learning_api_request_failed",
            method=response.request.method,
            path=response.request.url.path,
            status_code=response.status_code,
            response_text=response.text[:500],
        )
        raise NetworkFailureError(
            f"Learning service error: {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(
                "learning_api_invalid_payload",
                path=response.request.url.path,
                error=str(e),
            )
            raise NetworkFailureError("Learning service returned an invalid payload") from e

    # ==========================================================================
    # Courses
    # ==========================================================================

    async def get_course(self, course_id: str) -> Course:
        """Get a course with its chapters and lectures.

        Raises:
            CourseNotFoundError: If the backend has no such course
            NetworkFailureError: On any other failure
        """
        response = await self._request("GET", f"/courses/{course_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise CourseNotFoundError(course_id)
        self._ensure_success(response)
        return self._parse(response, CoursePayload).to_entity()

    async def increment_enrollment_count(self, course_id: str) -> int:
        """Increment the course enrollment counter on the backend."""
        response = await self._request("POST", f"/courses/{course_id}/enrollment-count")
        self._ensure_success(response)
        return self._parse(response, EnrollmentCountResponse).total_enrollments

    # ==========================================================================
    # Enrollments
    # ==========================================================================

    async def get_enrollment(self, course_id: str, student_id: str) -> Enrollment | None:
        """Get an enrollment, None when the backend answers 404."""
        response = await self._request(
            "GET", f"/courses/{course_id}/enrollments/{student_id}"
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._ensure_success(response)
        return self._parse(response, EnrollmentPayload).to_entity()

    async def create_enrollment(
        self,
        course_id: str,
        student_id: str,
        payment: PaymentConfirmation | None = None,
    ) -> tuple[Enrollment, bool]:
        """Create an enrollment (idempotent on the backend).

        Returns:
            Tuple of (enrollment, created); created is True on 201
        """
        body = EnrollRequest(
            student_id=student_id,
            payment_confirmation=PaymentConfirmationPayload.model_validate(payment)
            if payment
            else None,
        )
        response = await self._request(
            "POST",
            f"/courses/{course_id}/enrollments",
            json=body.model_dump(mode="json"),
        )
        self._ensure_success(response)
        enrollment = self._parse(response, EnrollmentPayload).to_entity()
        return enrollment, response.status_code == httpx.codes.CREATED

    async def patch_enrollment(self, enrollment: Enrollment) -> Enrollment:
        """Persist completion state and return the confirmed enrollment."""
        body = EnrollmentPatchRequest.from_entity(enrollment)
        response = await self._request(
            "PATCH",
            f"/enrollments/{enrollment.id}",
            json=body.model_dump(mode="json"),
        )
        self._ensure_success(response)
        return self._parse(response, EnrollmentPayload).to_entity()
