"""Demo catalog served by the reference backend in development."""

from decimal import Decimal

from lecturemate.courses.models import Chapter, Course, Lecture


def demo_courses() -> list[Course]:
    """A free and a paid course with preview lectures."""
    hooks = Course(
        id="react-hooks",
        title="Mastering React Hooks",
        price=Decimal(0),
        chapters=(
            Chapter(
                title="Introduction to Hooks",
                lectures=(
                    Lecture("lec1-1", "What are Hooks?", True, 8 * 60),
                    Lecture("lec1-2", "useState Hook", True, 12 * 60),
                    Lecture("lec1-3", "useEffect Hook Basics", False, 15 * 60),
                ),
            ),
            Chapter(
                title="Advanced Hooks",
                lectures=(
                    Lecture("lec2-1", "useContext for State Management", False, 20 * 60),
                    Lecture("lec2-2", "useReducer for Complex State", False, 25 * 60),
                    Lecture("lec2-3", "useCallback and useMemo", False, 18 * 60),
                ),
            ),
            Chapter(
                title="Custom Hooks",
                lectures=(
                    Lecture("lec3-1", "Building Your First Custom Hook", False, 30 * 60),
                    Lecture("lec3-2", "Testing Hooks", False, 22 * 60),
                    Lecture("lec3-3", "Hooks in Large Applications", False, 25 * 60),
                ),
            ),
        ),
    )
    mindfulness = Course(
        id="mindful-study",
        title="Mindful Study Habits",
        price=Decimal("19.90"),
        chapters=(
            Chapter(
                title="Foundations",
                lectures=(
                    Lecture("ms-1", "Why focus fades", True, 6 * 60),
                    Lecture("ms-2", "Breathing before studying", False, 9 * 60),
                ),
            ),
        ),
    )
    return [hooks, mindfulness]
