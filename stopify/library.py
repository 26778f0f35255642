"""The music directory: songs, liked songs and playlists."""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from stopify.metadata import artist_of, title_of

LIKED_FILE = ".plists"
PLAYLISTS_FILE = ".play"
_RESERVED = frozenset({LIKED_FILE, PLAYLISTS_FILE})


@dataclass(frozen=True)
class Playlist:
    """A named playlist kept as a directory of links to songs."""

    name: str
    dirname: str


def _read_lines(path: Path) -> list[str]:
    try:
        with open(path, encoding="utf-8", newline="") as fh:
            text = fh.read()
    except FileNotFoundError:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _check_line(value: str, what: str) -> None:
    if "\n" in value:
        raise ValueError(f"{what} must not contain a newline: {value!r}")


class Library:
    """A music directory with its liked-songs and playlist files."""

    def __init__(self, root: Union[str, "os.PathLike[str]"]) -> None:
        self.root = Path(root)

    @property
    def liked_file(self) -> Path:
        return self.root / LIKED_FILE

    @property
    def playlists_file(self) -> Path:
        return self.root / PLAYLISTS_FILE

    def ensure_files(self) -> None:
        """Create the liked-songs and playlist files if they are missing."""
        for path in (self.liked_file, self.playlists_file):
            if not path.exists():
                path.touch()

    def song_path(self, name: str) -> Path:
        return self.root / name

    def scan_songs(self) -> list[str]:
        """List the songs of the directory.

        A file with a title tag is listed under its title, and a link named
        after the title is made next to it so the title can be played.
        """
        try:
            entries = sorted(os.scandir(self.root), key=lambda entry: entry.name)
        except FileNotFoundError:
            return []
        songs = []
        for entry in entries:
            if entry.name in _RESERVED or not entry.is_file(follow_symlinks=False):
                continue
            title = title_of(entry.path)
            if title:
                with suppress(OSError):
                    os.symlink(entry.name, self.root / title)
                songs.append(title)
            else:
                songs.append(entry.name)
        return songs

    def describe(self, name: str) -> str:
        """The text shown beside a song: its artist, if tagged."""
        artist = artist_of(self.song_path(name))
        return f" - {artist}" if artist else ""

    def liked(self) -> list[str]:
        return _read_lines(self.liked_file)

    def like(self, name: str) -> None:
        _check_line(name, "song name")
        with open(self.liked_file, "a", encoding="utf-8") as fh:
            fh.write(f"{name}\n")

    def clear_liked(self) -> None:
        self.liked_file.write_text("", encoding="utf-8")

    def playlists(self) -> list[Playlist]:
        """The playlists, read as alternating name and directory lines."""
        lines = _read_lines(self.playlists_file)
        return [Playlist(name, dirname) for name, dirname in zip(lines[::2], lines[1::2])]

    def create_playlist(self, name: str) -> Playlist:
        """Record a new playlist and create its hidden directory."""
        if not name:
            raise ValueError("playlist name must not be empty")
        _check_line(name, "playlist name")
        playlist = Playlist(name, f".{name}")
        with open(self.playlists_file, "a", encoding="utf-8") as fh:
            fh.write(f"{playlist.name}\n{playlist.dirname}\n")
        self._dir(playlist).mkdir(mode=0o755, exist_ok=True)
        return playlist

    def _dir(self, playlist: Playlist) -> Path:
        return self.root / playlist.dirname

    def add_to_playlist(self, playlist: Playlist, song: str) -> Path:
        """Link a song into a playlist; adding it twice is harmless."""
        link = self._dir(playlist) / song
        with suppress(FileExistsError):
            os.symlink(Path("..") / song, link)
        return link

    def playlist_songs(self, playlist: Playlist) -> list[str]:
        try:
            entries = list(os.scandir(self._dir(playlist)))
        except FileNotFoundError:
            return []
        return sorted(
            entry.name
            for entry in entries
            if entry.is_symlink() and entry.name != LIKED_FILE
        )

    def clear_playlist(self, playlist: Playlist) -> None:
        """Remove every entry of a playlist's directory."""
        for entry in os.scandir(self._dir(playlist)):
            if entry.is_dir(follow_symlinks=False):
                with suppress(OSError):
                    os.rmdir(entry.path)
            else:
                os.unlink(entry.path)