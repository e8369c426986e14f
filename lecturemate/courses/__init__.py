"""Course content module (chapters and lectures)."""

from .models import Chapter, Course, Lecture


__all__ = ["Chapter", "Course", "Lecture"]
