"""Error taxonomy of the learning engine.

Every engine operation either returns a new state or raises one of these.
The UI layer owns user-visible messaging; ``code`` is the stable key it
switches on.
"""

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from lecturemate.courses.models import Lecture


class LearningEngineError(Exception):
    """Base engine error."""

    def __init__(self, message: str, code: str = "learning_engine_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotAuthenticatedError(LearningEngineError):
    """Enroll attempted without a viewer identity."""

    def __init__(self, message: str = "You must be logged in to enroll"):
        super().__init__(message, "not_authenticated")


class PaymentRequiredError(LearningEngineError):
    """Enroll attempted on a paid course without payment confirmation."""

    def __init__(self, message: str = "Payment is required to enroll in this course"):
        super().__init__(message, "payment_required")


class AccessDeniedError(LearningEngineError):
    """Playback attempted on a non-preview lecture without enrollment."""

    def __init__(
        self,
        lecture: "Lecture",
        message: str = "Enroll in the course to access this lecture",
    ):
        self.lecture = lecture
        super().__init__(message, "access_denied")


class NetworkFailureError(LearningEngineError):
    """A collaborator call failed; the operation was not applied."""

    def __init__(
        self,
        message: str = "Learning service is unavailable",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, "network_failure")


class LectureNotFoundError(LearningEngineError):
    """Lecture id does not belong to the course."""

    def __init__(self, lecture_id: str):
        self.lecture_id = lecture_id
        super().__init__(f"Lecture {lecture_id} not found in course", "lecture_not_found")


class CourseNotFoundError(LearningEngineError):
    """Course lookup returned nothing."""

    def __init__(self, course_id: str):
        self.course_id = course_id
        super().__init__(f"Course {course_id} not found", "course_not_found")
