"""Course progress module.

Provides:
- Progress arithmetic (course and chapter level)
- One-shot course completion detection
- Lecture completion tracking
"""

from .calculator import (
    ChapterProgress,
    chapter_breakdown,
    course_percent,
    percent,
    with_course_progress,
)
from .detector import CompletionDetector, CompletionOutcome, CompletionState
from .tracker import CompletionTracker


__all__ = [
    "ChapterProgress",
    "CompletionDetector",
    "CompletionOutcome",
    "CompletionState",
    "CompletionTracker",
    "chapter_breakdown",
    "course_percent",
    "percent",
    "with_course_progress",
]
