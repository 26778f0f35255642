"""Terminal interface: song lists, liked songs, playlists and the queue."""

from __future__ import annotations

import argparse
import curses
import signal
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from stopify.library import Library, Playlist
from stopify.marquee import Marquee
from stopify.player import PlaybackError, Player

SECTIONS = ("All", "Liked", "Playlists", "Exit")
PROMPT_LIMIT = 39
FRAME_MS = 1

HELP_TEXT = (
    "\n Global:\n"
    "  Tab: Switch between main menu and current select\n"
    "  Period: Play next song in queue (or restart if loop)\n"
    "  A/Left Arrow: Move back in song 5 seconds\n"
    "  D/Right Arrow: Move forward in song 5 seconds\n"
    "  L: Toggle loop\n"
    "  Space: Pause/Unpause\n"
    "  M: Go to main menu\n"
    "  Q: Add selected song to queue\n"
    "\n All:\n"
    "  H: Add song to liked\n"
    "  P: Add selected song to playlist\n"
    "\n Liked:\n"
    "  R: remove all songs from liked\n"
    "  P: Add selected song to playlist\n"
    "\n Playlists:\n"
    "  H: Add selected song to liked\n"
    "  N: Go to view of all playlists\n"
    "  R: When in playlist, remove all items from it"
)

_TAB = 9
_ESCAPE = 27
_ENTER_KEYS = frozenset({10, 13, curses.KEY_ENTER})
_BACKSPACE_KEYS = frozenset({8, 127, curses.KEY_BACKSPACE})
_DOWN_KEYS = frozenset({ord("s"), curses.KEY_DOWN})
_UP_KEYS = frozenset({ord("w"), curses.KEY_UP})
_ITALIC = getattr(curses, "A_ITALIC", 0)


class Mode(Enum):
    """What the keyboard is currently driving."""

    NORMAL = "normal"
    HELP = "help"
    PICK_PLAYLIST = "pick_playlist"
    PROMPT = "prompt"


@dataclass
class _Menu:
    items: list[str] = field(default_factory=list)
    index: int = 0

    @property
    def current(self) -> Optional[str]:
        return self.items[self.index] if self.items else None

    def move(self, delta: int) -> None:
        if self.items:
            self.index = min(max(self.index + delta, 0), len(self.items) - 1)

    def first(self) -> None:
        self.index = 0

    def replace(self, items: Sequence[str]) -> None:
        self.items = list(items)
        self.index = min(self.index, max(len(self.items) - 1, 0))


class App:
    """The player's screen and its key bindings."""

    def __init__(self, stdscr, library: Library, player: Player) -> None:
        self.stdscr = stdscr
        self.library = library
        self.player = player
        self.mode = Mode.NORMAL
        self.focused = False
        self.running = True
        self.in_playlist = False
        self.prompt_text = ""
        self.message = ""
        self.marquee = Marquee()
        self._sections = _Menu(list(SECTIONS))
        self._songs = _Menu(library.scan_songs())
        self._liked = _Menu(library.liked())
        self._playlists: list[Playlist] = library.playlists()
        self._playlist_names = _Menu([p.name for p in self._playlists])
        self._playlist_songs = _Menu()
        self._open_playlist: Optional[Playlist] = None
        self._pick_song: Optional[str] = None
        self._descriptions: dict[str, str] = {}
        self._title_attr = _ITALIC
        self._focus_attr = curses.A_BOLD

    # -- state seen from outside -------------------------------------

    @property
    def section(self) -> str:
        return self._sections.current or SECTIONS[0]

    @property
    def songs(self) -> list[str]:
        return list(self._songs.items)

    @property
    def liked(self) -> list[str]:
        return list(self._liked.items)

    @property
    def playlist_names(self) -> list[str]:
        return list(self._playlist_names.items)

    @property
    def playlist_songs(self) -> list[str]:
        return list(self._playlist_songs.items)

    # -- actions ------------------------------------------------------

    def _guard(self, action: Callable[[], object]) -> None:
        try:
            action()
        except PlaybackError as exc:
            self.message = str(exc)

    def _play(self, name: str) -> None:
        self._guard(lambda: self.player.play(name))

    def _like(self, name: str) -> None:
        try:
            self.library.like(name)
        except (ValueError, OSError) as exc:
            self.message = str(exc)
        self._liked.replace(self.library.liked())

    def _reload_playlists(self) -> None:
        self._playlists = self.library.playlists()
        self._playlist_names.replace([p.name for p in self._playlists])

    def _start_pick(self, song: Optional[str]) -> None:
        if song is None or not self._playlists:
            return
        self._pick_song = song
        self.mode = Mode.PICK_PLAYLIST

    def _describe(self, name: str) -> str:
        if name not in self._descriptions:
            self._descriptions[name] = self.library.describe(name)
        return self._descriptions[name]

    # -- keys ---------------------------------------------------------

    def handle_key(self, key: int) -> None:
        """Act on one key press."""
        if self.mode is Mode.HELP:
            self.mode = Mode.NORMAL
            return
        if self.mode is Mode.PICK_PLAYLIST:
            self._pick_key(key)
            return
        if self.mode is Mode.PROMPT:
            self._prompt_key(key)
            return
        self._global_key(key)
        if not self.focused:
            self._menu_key(key)
        elif self.section == "All":
            self._all_key(key)
        elif self.section == "Liked":
            self._liked_key(key)
        elif self.section == "Playlists":
            if self.in_playlist:
                self._open_playlist_key(key)
            else:
                self._playlist_list_key(key)
        else:
            self._menu_key(key)

    def _global_key(self, key: int) -> None:
        if key == _TAB:
            self.focused = not self.focused
        elif key == ord("."):
            self._guard(self.player.advance)
        elif key in (curses.KEY_LEFT, ord("a")):
            self._guard(self.player.seek_backward)
        elif key in (curses.KEY_RIGHT, ord("d")):
            self._guard(self.player.seek_forward)
        elif key == ord("l"):
            self.player.toggle_loop()
        elif key == ord(" "):
            self._guard(self.player.toggle_pause)
        elif key == ord("m"):
            self.focused = False
        elif key == ord("?"):
            self.mode = Mode.HELP

    def _menu_key(self, key: int) -> None:
        if key in _DOWN_KEYS:
            self._sections.move(1)
        elif key in _UP_KEYS:
            self._sections.move(-1)
        elif key in _ENTER_KEYS:
            if self.section == "Exit":
                self.running = False
            else:
                self.focused = not self.focused
        self.in_playlist = False

    def _song_list_key(self, key: int, menu: _Menu) -> bool:
        """Keys shared by every list of songs; True if the key was used."""
        song = menu.current
        if key in _DOWN_KEYS:
            menu.move(1)
        elif key in _UP_KEYS:
            menu.move(-1)
        elif key == ord("q"):
            if song is not None:
                self.player.enqueue(song)
        elif key in _ENTER_KEYS:
            if song is not None:
                self._play(song)
        else:
            return False
        return True

    def _all_key(self, key: int) -> None:
        if self._song_list_key(key, self._songs):
            return
        if key == ord("p"):
            self._start_pick(self._songs.current)
        elif key == ord("h") and self._songs.current is not None:
            self._like(self._songs.current)

    def _liked_key(self, key: int) -> None:
        if self._song_list_key(key, self._liked):
            return
        if key == ord("p"):
            self._start_pick(self._liked.current)
        elif key == ord("r"):
            self.library.clear_liked()
            self._liked.replace(self.library.liked())

    def _playlist_list_key(self, key: int) -> None:
        if key in _DOWN_KEYS:
            self._playlist_names.move(1)
        elif key in _UP_KEYS:
            self._playlist_names.move(-1)
        elif key == ord("c"):
            self.prompt_text = ""
            self.mode = Mode.PROMPT
        elif key in _ENTER_KEYS and self._playlists:
            self._open_playlist = self._playlists[self._playlist_names.index]
            self._playlist_songs = _Menu(self.library.playlist_songs(self._open_playlist))
            self.in_playlist = True

    def _open_playlist_key(self, key: int) -> None:
        if self._song_list_key(key, self._playlist_songs):
            return
        if key == ord("n"):
            self.in_playlist = False
            self._playlist_names.first()
        elif key == ord("r") and self._open_playlist is not None:
            try:
                self.library.clear_playlist(self._open_playlist)
            except OSError as exc:
                self.message = str(exc)
            self._playlist_songs.replace(self.library.playlist_songs(self._open_playlist))
        elif key == ord("h") and self._playlist_songs.current is not None:
            self._like(self._playlist_songs.current)

    def _pick_key(self, key: int) -> None:
        if key in _ENTER_KEYS:
            song = self._pick_song
            playlist = self._playlists[self._playlist_names.index]
            self.mode = Mode.NORMAL
            self._pick_song = None
            if song is not None:
                try:
                    self.library.add_to_playlist(playlist, song)
                except OSError as exc:
                    self.message = str(exc)
        elif key == _ESCAPE:
            self.mode = Mode.NORMAL
            self._pick_song = None
        elif key in (curses.KEY_UP, ord("w")):
            self._playlist_names.move(-1)
        elif key in (curses.KEY_DOWN, ord("d")):
            self._playlist_names.move(1)

    def _prompt_key(self, key: int) -> None:
        if key in _ENTER_KEYS:
            name = self.prompt_text
            self.prompt_text = ""
            self.mode = Mode.NORMAL
            if not name:
                return
            try:
                self.library.create_playlist(name)
            except (ValueError, OSError) as exc:
                self.message = str(exc)
            self._reload_playlists()
        elif key == _ESCAPE:
            self.prompt_text = ""
            self.mode = Mode.NORMAL
        elif key in _BACKSPACE_KEYS:
            self.prompt_text = self.prompt_text[:-1]
        elif 0 <= key < curses.KEY_MIN and chr(key).isprintable():
            if len(self.prompt_text) < PROMPT_LIMIT:
                self.prompt_text += chr(key)

    # -- drawing ------------------------------------------------------

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        rows, cols = self.stdscr.getmaxyx()
        if not text or y < 0 or y >= rows or x < 0 or x >= cols:
            return
        try:
            self.stdscr.addstr(y, x, text[: cols - x], attr)
        except curses.error:
            pass

    def _box(self, y: int, x: int, height: int, width: int, attr: int = 0, fill: bool = False) -> None:
        if height < 2 or width < 2:
            return
        edge = "+" + "-" * (width - 2) + "+"
        self._put(y, x, edge, attr)
        for row in range(y + 1, y + height - 1):
            if fill:
                self._put(row, x, "|" + " " * (width - 2) + "|", attr)
            else:
                self._put(row, x, "|", attr)
                self._put(row, x + width - 1, "|", attr)
        self._put(y + height - 1, x, edge, attr)

    def _draw_menu(self, menu: _Menu, y: int, x: int, height: int, width: int, describe: bool) -> None:
        if height <= 0 or width <= 0:
            return
        start = max(0, menu.index - height + 1)
        for row, name in enumerate(menu.items[start:start + height]):
            text = name + (self._describe(name) if describe else "")
            attr = curses.A_REVERSE if start + row == menu.index else 0
            self._put(y + row, x, text[:width], attr)

    def _content_menu(self) -> tuple[Optional[_Menu], bool]:
        section = self.section
        if section == "All":
            return self._songs, True
        if section == "Liked":
            return self._liked, True
        if section == "Playlists":
            if self.in_playlist:
                return self._playlist_songs, True
            return self._playlist_names, False
        return None, False

    def draw(self) -> None:
        """Draw the whole screen."""
        scr = self.stdscr
        scr.erase()
        rows, cols = scr.getmaxyx()
        half = cols // 3 - 2

        self._put(0, 0, "Stopify", self._title_attr)
        self._put(1, 0, "Looping    " if self.player.looping else "Not Looping")
        if self.message:
            self._put(2, 0, self.message)
        for row, name in enumerate(SECTIONS):
            attr = curses.A_REVERSE if row == self._sections.index else 0
            self._put(3 + row, 1, name, attr)

        main_y, main_x = 0, half + 4
        main_h, main_w = rows - 4, cols // 2
        self._box(main_y, main_x, main_h, main_w, self._focus_attr if self.focused else 0)
        menu, describe = self._content_menu()
        if menu is None:
            self._put(main_y + 1, main_x + 1, "Dont leave :(")
        else:
            self._draw_menu(menu, main_y + 1, main_x + 1, main_h - 2, main_w - 2, describe)

        stat_y, stat_w = rows - 4, cols - half // 2
        self._box(stat_y, 0, 4, stat_w)
        name_width = max(stat_w - 5, 0)
        self._put(stat_y + 1, 1, self.marquee.frame(self.player.now_playing, name_width))
        bar = max(stat_w - 2, 0)
        if bar:
            self._put(stat_y + 2, 1, "_" * bar)
            mark = min(int(self.player.progress() * bar), bar - 1)
            self._put(stat_y + 2, 1 + mark, "#", curses.A_REVERSE)

        queue_x, queue_w = cols - half // 2, half // 2
        self._box(0, queue_x, rows, queue_w)
        self._put(0, queue_x + 1, "Queue:")
        for row, name in enumerate(self.player.queue):
            if row >= rows - 2:
                break
            self._put(1 + row, queue_x + 1, name[: max(queue_w - 2, 0)])

        if self.mode is Mode.HELP:
            self._draw_help(rows, cols)
        elif self.mode is Mode.PICK_PLAYLIST:
            self._draw_picker(rows, cols)
        elif self.mode is Mode.PROMPT:
            self._draw_prompt(rows, cols)
        scr.refresh()

    def _draw_help(self, rows: int, cols: int) -> None:
        height, width = int(rows / 1.5), cols // 3
        y, x = rows // 2 - rows // 3, cols // 2 - cols // 6
        self._box(y, x, height, width, fill=True)
        for row, line in enumerate(HELP_TEXT.split("\n")[: max(height - 2, 0)]):
            self._put(y + 1 + row, x + 1, line[: max(width - 2, 0)])

    def _draw_picker(self, rows: int, cols: int) -> None:
        height, width = 20, cols // 5
        y, x = rows // 2 - 10, cols // 2 - cols // 10
        self._box(y, x, height, width, fill=True)
        self._draw_menu(self._playlist_names, y + 1, x + 1, height - 2, width - 2, False)

    def _draw_prompt(self, rows: int, cols: int) -> None:
        y, x = rows // 2 - 2, cols // 2 - 20
        self._box(y, x, 3, 40, fill=True)
        self._put(y + 1, x + 1, self.prompt_text)

    # -- main loop ----------------------------------------------------

    def _setup_terminal(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        try:
            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
                curses.init_pair(2, curses.COLOR_GREEN, -1)
                self._title_attr = _ITALIC | curses.color_pair(2)
        except curses.error:
            pass
        self.stdscr.keypad(True)
        self.stdscr.timeout(FRAME_MS)

    def run(self) -> None:
        """Draw and handle keys until Exit is chosen."""
        self._setup_terminal()
        while self.running:
            self._guard(self.player.tick)
            self.draw()
            key = self.stdscr.getch()
            if key != -1:
                self.handle_key(key)


def parse_args(argv: Optional[Sequence[str]] = None) -> Path:
    """The music directory named on the command line."""
    parser = argparse.ArgumentParser(prog="stopify", description="Play the music of a directory.")
    parser.add_argument("directory", type=Path, help="directory holding the songs")
    args = parser.parse_args(argv)
    if not args.directory.is_dir():
        parser.error(f"not a directory: {args.directory}")
    return args.directory


def _quit(signum, frame) -> None:
    raise SystemExit(0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    root = parse_args(argv)
    library = Library(root)
    library.ensure_files()
    try:
        player = Player(library.song_path)
    except PlaybackError as exc:
        print(exc, file=sys.stderr)
        return 1
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, _quit)
    curses.wrapper(lambda stdscr: App(stdscr, library, player).run())
    return 0


if __name__ == "__main__":
    sys.exit(main())