from lecturemate.access.policy import accessible_lectures, can_access, ensure_access


__all__ = ["accessible_lectures", "can_access", "ensure_access"]
