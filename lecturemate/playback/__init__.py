from lecturemate.playback.coordinator import PlaybackCoordinator


__all__ = ["PlaybackCoordinator"]
