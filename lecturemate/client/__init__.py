from lecturemate.client.http import LearningApiClient
from lecturemate.client.protocols import (
    CourseGateway,
    EnrollmentCounter,
    EnrollmentGateway,
)


__all__ = [
    "CourseGateway",
    "EnrollmentCounter",
    "EnrollmentGateway",
    "LearningApiClient",
]
