"""LectureMate course enrollment and progress-tracking engine."""

from lecturemate.access import can_access
from lecturemate.client import LearningApiClient
from lecturemate.courses import Chapter, Course, Lecture
from lecturemate.enrollments import Enrollment, PaymentConfirmation
from lecturemate.events import EngineListener, EventDispatcher
from lecturemate.session import LearningSession


__version__ = "0.1.0"

__all__ = [
    "Chapter",
    "Course",
    "EngineListener",
    "Enrollment",
    "EventDispatcher",
    "LearningApiClient",
    "LearningSession",
    "Lecture",
    "PaymentConfirmation",
    "__version__",
    "can_access",
]
