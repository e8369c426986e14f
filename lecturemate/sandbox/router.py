"""Reference learning API endpoints.

Provides routes for:
- Course lookup and enrollment counter
- Enrollment lookup and idempotent creation
- Completion persistence
"""

from fastapi import APIRouter, HTTPException, Response, status

from lecturemate.core.errors import LearningEngineError
from lecturemate.courses.schemas import CoursePayload, EnrollmentCountResponse
from lecturemate.enrollments.schemas import (
    EnrollmentPatchRequest,
    EnrollmentPayload,
    EnrollRequest,
)

from .dependencies import RepositoryDep, handle_engine_error


router = APIRouter(tags=["learning"])


# ==============================================================================
# Course Endpoints
# ==============================================================================


@router.get(
    "/courses/{course_id}",
    response_model=CoursePayload,
    summary="Get course with chapters and lectures",
)
async def get_course(course_id: str, repository: RepositoryDep) -> CoursePayload:
    """Get a course with its ordered chapters and lectures."""
    try:
        return CoursePayload.from_entity(repository.get_course(course_id))
    except LearningEngineError as e:
        raise handle_engine_error(e) from e


@router.post(
    "/courses/{course_id}/enrollment-count",
    response_model=EnrollmentCountResponse,
    summary="Increment course enrollment counter",
)
async def increment_enrollment_count(
    course_id: str, repository: RepositoryDep
) -> EnrollmentCountResponse:
    """Increment the enrollment counter after a first enrollment."""
    try:
        total = await repository.increment_enrollment_count(course_id)
    except LearningEngineError as e:
        raise handle_engine_error(e) from e
    return EnrollmentCountResponse(course_id=course_id, total_enrollments=total)


# ==============================================================================
# Enrollment Endpoints
# ==============================================================================


@router.get(
    "/courses/{course_id}/enrollments/{student_id}",
    response_model=EnrollmentPayload,
    summary="Get enrollment of a student",
)
async def get_enrollment(
    course_id: str, student_id: str, repository: RepositoryDep
) -> EnrollmentPayload:
    """Get the enrollment of a student in a course (404 if not enrolled)."""
    enrollment = repository.get_enrollment(course_id, student_id)
    if enrollment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found for this course and student",
        )
    return EnrollmentPayload.from_entity(enrollment)


@router.post(
    "/courses/{course_id}/enrollments",
    response_model=EnrollmentPayload,
    status_code=status.HTTP_200_OK,
    summary="Enroll in a course",
)
async def create_enrollment(
    course_id: str,
    data: EnrollRequest,
    response: Response,
    repository: RepositoryDep,
) -> EnrollmentPayload:
    """Enroll a student (idempotent).

    Answers 201 when the enrollment was created and 200 when it already
    existed. Paid courses require a payment confirmation (402 otherwise).
    """
    payment = data.payment_confirmation.to_entity() if data.payment_confirmation else None
    try:
        enrollment, created = await repository.create_enrollment(
            course_id, data.student_id, payment
        )
    except LearningEngineError as e:
        raise handle_engine_error(e) from e

    if created:
        response.status_code = status.HTTP_201_CREATED
    return EnrollmentPayload.from_entity(enrollment)


@router.patch(
    "/enrollments/{enrollment_id}",
    response_model=EnrollmentPayload,
    summary="Persist lecture completion",
)
async def patch_enrollment(
    enrollment_id: str,
    data: EnrollmentPatchRequest,
    repository: RepositoryDep,
) -> EnrollmentPayload:
    """Merge completed lectures into an enrollment."""
    try:
        enrollment = await repository.patch_enrollment(enrollment_id, data)
    except LearningEngineError as e:
        raise handle_engine_error(e) from e
    return EnrollmentPayload.from_entity(enrollment)
