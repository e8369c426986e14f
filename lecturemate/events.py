"""UI-facing engine notifications.

The UI registers listeners implementing any subset of ``EngineListener``;
the dispatcher forwards each notification to every listener in registration
order. Listener errors propagate to the engine caller.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from lecturemate.core.logging import get_logger


if TYPE_CHECKING:
    from lecturemate.courses.models import Lecture
    from lecturemate.enrollments.models import Enrollment


logger = get_logger(__name__)


@runtime_checkable
class EngineListener(Protocol):
    """Callbacks consumed by the UI layer."""

    def on_access_denied(self, lecture: "Lecture") -> None:
        """A lecture was requested without enrollment (prompt to enroll)."""

    def on_course_completed(self, enrollment: "Enrollment") -> None:
        """Course reached 100% for the first time (offer a certificate)."""

    def on_progress_changed(self, percent: Decimal) -> None:
        """Course progress changed."""


class EventDispatcher:
    """Fan-out of engine notifications to registered listeners."""

    def __init__(self, listeners: list[object] | None = None) -> None:
        self._listeners: list[object] = list(listeners or [])

    def subscribe(self, listener: object) -> None:
        """Register a listener."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: object) -> None:
        """Remove a listener (no-op if not registered)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> tuple[object, ...]:
        return tuple(self._listeners)

    def _dispatch(self, method: str, *args: object) -> None:
        for listener in self._listeners:
            callback = getattr(listener, method, None)
            if callback is not None:
                callback(*args)

    def access_denied(self, lecture: "Lecture") -> None:
        logger.info("access_denied", lecture_id=lecture.id)
        self._dispatch("on_access_denied", lecture)

    def course_completed(self, enrollment: "Enrollment") -> None:
        self._dispatch("on_course_completed", enrollment)

    def progress_changed(self, percent: Decimal) -> None:
        logger.debug("progress_changed", progress=str(percent))
        self._dispatch("on_progress_changed", percent)
