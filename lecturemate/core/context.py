"""Log context management using contextvars.

Each viewing session gets an ID and optional student/course information that
is merged into every log entry emitted below it. These values only enrich
logs; engine decisions always take identities as explicit arguments.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4


session_id_var: ContextVar[str] = ContextVar("session_id", default="")
student_id_var: ContextVar[str | None] = ContextVar("student_id", default=None)
course_id_var: ContextVar[str | None] = ContextVar("course_id", default=None)


def generate_session_id() -> str:
    """Generate a new unique session ID."""
    return str(uuid4())


def get_session_id() -> str:
    """Get the current session ID."""
    return session_id_var.get()


def get_context() -> dict[str, Any]:
    """Get all context variables as a dictionary.

    Returns:
        Dictionary with session_id, student_id and course_id when set.
    """
    context: dict[str, Any] = {}

    session_id = get_session_id()
    if session_id:
        context["session_id"] = session_id

    student_id = student_id_var.get()
    if student_id:
        context["student_id"] = student_id

    course_id = course_id_var.get()
    if course_id:
        context["course_id"] = course_id

    return context


def clear_context() -> None:
    """Clear all context variables."""
    session_id_var.set("")
    student_id_var.set(None)
    course_id_var.set(None)


class LogContext:
    """Context manager for a viewing session scope.

    Usage:
        with LogContext(student_id="s1", course_id="c1"):
            log.info("lecture_opened")  # includes session_id, student_id, course_id
    """

    def __init__(
        self,
        session_id: str | None = None,
        student_id: str | None = None,
        course_id: str | None = None,
    ) -> None:
        self.session_id = session_id
        self.student_id = student_id
        self.course_id = course_id
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        """Enter context and set variables."""
        self._tokens["session_id"] = session_id_var.set(
            self.session_id or generate_session_id()
        )

        if self.student_id is not None:
            self._tokens["student_id"] = student_id_var.set(str(self.student_id))

        if self.course_id is not None:
            self._tokens["course_id"] = course_id_var.set(str(self.course_id))

        return self

    def __exit__(self, *_: object) -> None:
        """Exit context and restore previous values."""
        for var_name, token in self._tokens.items():
            if var_name == "session_id":
                session_id_var.reset(token)
            elif var_name == "student_id":
                student_id_var.reset(token)
            elif var_name == "course_id":
                course_id_var.reset(token)
