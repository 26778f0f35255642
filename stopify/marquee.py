"""Scrolling of a line of text too long for its space."""

from __future__ import annotations


class Marquee:
    """Shows a long line a window at a time, bouncing between its ends.

    Each call to ``frame`` is one frame; the window moves one character
    every ``frames_per_step`` frames, and rests for a few frames at each end.
    """

    FRAMES_PER_STEP = 1001
    PAUSE_FRAMES = 5

    def __init__(self) -> None:
        self.frames_per_step = self.FRAMES_PER_STEP
        self.pause_frames = self.PAUSE_FRAMES
        self.offset = 0
        self._direction = 1
        self._frames = 0
        self._resting = False
        self._rest_count = 0

    def _rest(self) -> None:
        if not self._resting:
            self._resting = True
            self._rest_count = 0
        if self._rest_count > self.pause_frames:
            self._resting = False
        else:
            self._rest_count += 1

    def frame(self, text: str, width: int) -> str:
        """The part of ``text`` to show in ``width`` characters this frame."""
        self._frames += 1
        if width <= 0:
            return ""
        if len(text) < width:
            self._resting = False
            return text
        if self.offset >= len(text) - width:
            self._rest()
            self._direction = -1
        if self.offset < 1:
            self._rest()
            self._direction = 1
        if self._frames > self.frames_per_step:
            if not self._resting:
                self.offset += self._direction
            self._frames = 0
        return text[self.offset:self.offset + width]