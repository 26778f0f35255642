"""Playback of songs with a queue, looping and seeking."""

from __future__ import annotations

import os
from collections import deque
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

NOTHING_PLAYING = "(None)"
SEEK_STEP = 5.0

PathLike = Union[str, "os.PathLike[str]"]


class PlaybackError(Exception):
    """Raised when the audio device or a song cannot be used."""


class Backend(Protocol):
    """What the player needs from an audio output."""

    def load(self, path: PathLike) -> None: ...
    def play(self) -> None: ...
    def duration(self) -> float: ...
    def position(self) -> float: ...
    def set_position(self, seconds: float) -> None: ...
    def pause(self) -> None: ...
    def resume(self) -> None: ...
    def is_paused(self) -> bool: ...
    def is_playing(self) -> bool: ...
    def finished(self) -> bool: ...


class MixerBackend:
    """Audio output through the pygame mixer."""

    FREQUENCY = 22050
    SAMPLE_SIZE = -16
    CHANNELS = 2
    BUFFER = 4096

    def __init__(self) -> None:
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        self._pygame = pygame
        try:
            pygame.mixer.init(
                frequency=self.FREQUENCY,
                size=self.SAMPLE_SIZE,
                channels=self.CHANNELS,
                buffer=self.BUFFER,
            )
        except pygame.error as exc:
            raise PlaybackError(f"unable to open audio: {exc}") from exc
        self._music = pygame.mixer.music
        self._duration = -1.0
        self._offset = 0.0
        self._active = False
        self._paused = False

    def load(self, path: PathLike) -> None:
        """Load a song, replacing the one loaded before."""
        filename = os.fspath(path)
        try:
            self._music.load(filename)
        except self._pygame.error as exc:
            raise PlaybackError(f"cannot load {filename}: {exc}") from exc
        self._duration = self._measure(filename)
        self._active = False
        self._paused = False
        self._offset = 0.0

    def _measure(self, filename: str) -> float:
        try:
            return float(self._pygame.mixer.Sound(filename).get_length())
        except (self._pygame.error, OSError):
            return -1.0

    def play(self) -> None:
        """Play the loaded song once from its start."""
        try:
            self._music.play(0)
        except self._pygame.error as exc:
            raise PlaybackError(f"cannot play: {exc}") from exc
        self._offset = 0.0
        self._active = True
        self._paused = False

    def duration(self) -> float:
        """Length of the loaded song in seconds, or -1 if unknown."""
        return self._duration

    def position(self) -> float:
        """Seconds into the song, or -1 if nothing is playing."""
        if not self._active:
            return -1.0
        elapsed = self._music.get_pos()
        if elapsed < 0:
            return -1.0
        return self._offset + elapsed / 1000.0

    def set_position(self, seconds: float) -> None:
        try:
            self._music.set_pos(seconds)
        except self._pygame.error as exc:
            raise PlaybackError(f"cannot seek: {exc}") from exc
        self._offset = seconds - max(self._music.get_pos(), 0) / 1000.0

    def pause(self) -> None:
        self._music.pause()
        self._paused = True

    def resume(self) -> None:
        self._music.unpause()
        self._paused = False

    def is_paused(self) -> bool:
        return self._active and self._paused

    def is_playing(self) -> bool:
        """True while a song is started and not over, paused or not."""
        return self._active and (self._paused or bool(self._music.get_busy()))

    def finished(self) -> bool:
        """True once, the first time this is asked after a song has ended."""
        if self._active and not self._paused and not self._music.get_busy():
            self._active = False
            return True
        return False


class Player:
    """Plays songs by name, with a queue of songs to play next."""

    def __init__(
        self,
        resolve: Callable[[str], PathLike],
        backend: Optional[Backend] = None,
    ) -> None:
        self._resolve = resolve
        self.backend: Backend = backend if backend is not None else MixerBackend()
        self.queue: deque[str] = deque()
        self.looping = False
        self.now_playing = NOTHING_PLAYING
        self.current_path: Optional[Path] = None
        self.duration = 0.0
        self._position = -1.0

    def play(self, name: str) -> None:
        """Start playing a song from its beginning."""
        path = Path(self._resolve(name))
        self.now_playing = name
        self.current_path = path
        self.backend.load(path)
        self.backend.play()
        self.duration = self.backend.duration()
        self._position = self.backend.position()

    def enqueue(self, name: str) -> None:
        self.queue.append(name)

    def advance(self) -> Optional[str]:
        """Restart the song when looping, else play the next queued one.

        Returns the name of the song started, or None if nothing was.
        """
        if self.looping:
            if self.current_path is None:
                return None
            self.backend.play()
            return self.now_playing
        if not self.queue:
            return None
        name = self.queue.popleft()
        self.play(name)
        return name

    def toggle_loop(self) -> bool:
        self.looping = not self.looping
        return self.looping

    def toggle_pause(self) -> None:
        if self.backend.is_paused():
            self.backend.resume()
        else:
            self.backend.pause()

    def _clamp(self, seconds: float) -> float:
        if self.duration > 0:
            seconds = min(seconds, self.duration)
        return max(seconds, 0.0)

    def _seek(self, seconds: float) -> None:
        self.backend.set_position(seconds)
        self._position = seconds

    def seek_backward(self) -> None:
        """Go back five seconds; after a song ended, replay its last seconds."""
        if self.backend.is_playing():
            self._seek(self._clamp(self._position - SEEK_STEP))
        elif self.current_path is not None:
            self.backend.load(self.current_path)
            self.backend.play()
            self._seek(max(self.duration - SEEK_STEP, 0.0))

    def seek_forward(self) -> None:
        if self.current_path is None:
            return
        self._seek(self._clamp(self._position + SEEK_STEP))

    def progress(self) -> float:
        """How far through the song playback is, from 0 to 1."""
        if self.duration <= 0 or self._position < 0:
            return 0.0
        return min(max(self._position / self.duration, 0.0), 1.0)

    def tick(self) -> None:
        """Move on when a song has ended and note the playback position."""
        if self.backend.finished():
            self.advance()
        if self.backend.is_playing():
            position = self.backend.position()
            if position >= 0:
                self._position = position