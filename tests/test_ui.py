from pathlib import Path

import pytest

from stopify.library import Library
from stopify.player import Player
from stopify.ui import PROMPT_LIMIT, App, Mode, parse_args

SONGS = ["a.mp3", "b.mp3", "c.mp3"]


class FakeBackend:
    def __init__(self):
        self.loaded = []
        self.seeks = []
        self.playing = False
        self.paused = False
        self.pos = 0.0

    def load(self, path):
        self.loaded.append(Path(path))
        self.playing = False

    def play(self):
        self.playing = True
        self.pos = 0.0

    def duration(self):
        return 100.0

    def position(self):
        return self.pos if self.playing else -1.0

    def set_position(self, seconds):
        self.seeks.append(seconds)
        self.pos = seconds

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def is_paused(self):
        return self.playing and self.paused

    def is_playing(self):
        return self.playing

    def finished(self):
        return False


class FakeScreen:
    def __init__(self, rows=24, cols=80, keys=()):
        self.rows, self.cols = rows, cols
        self.keys = list(keys)
        self.erase()

    def getmaxyx(self):
        return self.rows, self.cols

    def erase(self):
        self.grid = [[" "] * self.cols for _ in range(self.rows)]

    def refresh(self):
        pass

    def keypad(self, flag):
        pass

    def timeout(self, ms):
        pass

    def addstr(self, y, x, text, attr=0):
        for offset, ch in enumerate(text):
            if x + offset < self.cols:
                self.grid[y][x + offset] = ch

    def getch(self):
        if not self.keys:
            raise RuntimeError("out of keys")
        return self.keys.pop(0)

    def row(self, y):
        return "".join(self.grid[y])


def press(app, *keys):
    for key in keys:
        app.handle_key(ord(key) if isinstance(key, str) else key)


@pytest.fixture
def library(tmp_path):
    for name in SONGS:
        (tmp_path / name).write_bytes(b"x")
    lib = Library(tmp_path)
    lib.ensure_files()
    return lib


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(library, backend):
    return App(FakeScreen(), library, Player(library.song_path, backend))


def test_parse_args_returns_directory(tmp_path):
    assert parse_args([str(tmp_path)]) == tmp_path


def test_parse_args_requires_directory():
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_args_rejects_missing_directory(tmp_path):
    with pytest.raises(SystemExit):
        parse_args([str(tmp_path / "missing")])


def test_starts_on_all_section_with_songs(app):
    assert app.section == "All"
    assert app.focused is False
    assert app.songs == SONGS


def test_main_menu_moves_and_clamps(app):
    press(app, *"sssss")
    assert app.section == "Exit"
    press(app, "w")
    assert app.section == "Playlists"


def test_exit_stops_running(app):
    press(app, "s", "s", "s", "\n")
    assert app.running is False


def test_tab_toggles_focus(app):
    press(app, "\t")
    assert app.focused is True
    press(app, "\t")
    assert app.focused is False


def test_l_toggles_loop(app):
    press(app, "l")
    assert app.player.looping is True


def test_enter_plays_selected_song(app, backend, library):
    press(app, "\n", "s", "\n")
    assert app.player.now_playing == "b.mp3"
    assert backend.loaded[-1] == library.song_path("b.mp3")


def test_q_enqueues_and_period_plays_next(app):
    press(app, "\n", "q", "s", "q")
    assert list(app.player.queue) == ["a.mp3", "b.mp3"]
    press(app, ".")
    assert app.player.now_playing == "a.mp3"
    assert list(app.player.queue) == ["b.mp3"]


def test_seek_forward_moves_by_step(app, backend):
    press(app, "\n", "\n", "d")
    assert backend.seeks == [5.0]
    assert app.player.now_playing == "a.mp3"
    app.player.tick()
    assert app.player.progress() == pytest.approx(0.05)


def test_h_likes_song(app, library):
    press(app, "\n", "s", "h")
    assert library.liked() == ["b.mp3"]
    assert app.liked == ["b.mp3"]


def test_liked_r_clears(app, library):
    press(app, "\n", "h", "m", "s", "\n")
    assert app.section == "Liked"
    assert app.liked == ["a.mp3"]
    press(app, "r")
    assert app.liked == []
    assert library.liked() == []


def test_prompt_creates_playlist(app, library):
    press(app, "s", "s", "\n", "c")
    assert app.mode is Mode.PROMPT
    press(app, "m", "i", "x", "\n")
    assert app.mode is Mode.NORMAL
    assert [p.name for p in library.playlists()] == ["mix"]
    assert app.playlist_names == ["mix"]


def test_empty_prompt_creates_nothing(app, library):
    press(app, "s", "s", "\n", "c", "\n")
    assert library.playlists() == []
    assert app.mode is Mode.NORMAL


def test_prompt_is_limited(app):
    press(app, "s", "s", "\n", "c", *("x" * (PROMPT_LIMIT + 10)))
    assert len(app.prompt_text) == PROMPT_LIMIT


def test_prompt_backspace(app):
    press(app, "s", "s", "\n", "c", "a", "b", 127)
    assert app.prompt_text == "a"


def test_pick_adds_song_to_playlist(library, backend):
    playlist = library.create_playlist("mix")
    app = App(FakeScreen(), library, Player(library.song_path, backend))
    press(app, "\n", "s", "p")
    assert app.mode is Mode.PICK_PLAYLIST
    press(app, "\n")
    assert app.mode is Mode.NORMAL
    assert library.playlist_songs(playlist) == ["b.mp3"]


def test_open_playlist_play_and_leave(library, backend):
    playlist = library.create_playlist("mix")
    library.add_to_playlist(playlist, "c.mp3")
    app = App(FakeScreen(), library, Player(library.song_path, backend))
    press(app, "s", "s", "\n", "\n")
    assert app.in_playlist is True
    assert app.playlist_songs == ["c.mp3"]
    press(app, "\n")
    assert app.player.now_playing == "c.mp3"
    press(app, "n")
    assert app.in_playlist is False


def test_playlist_r_clears(library, backend):
    playlist = library.create_playlist("mix")
    library.add_to_playlist(playlist, "a.mp3")
    app = App(FakeScreen(), library, Player(library.song_path, backend))
    press(app, "s", "s", "\n", "\n", "r")
    assert app.playlist_songs == []
    assert library.playlist_songs(playlist) == []


def test_help_swallows_next_key(app):
    press(app, "?")
    assert app.mode is Mode.HELP
    press(app, "l")
    assert app.mode is Mode.NORMAL
    assert app.player.looping is False


def test_draw_shows_title_and_status(app):
    app.draw()
    screen = app.stdscr
    assert screen.row(0).startswith("Stopify")
    assert screen.row(1).startswith("Not Looping")
    assert "Queue:" in screen.row(0)
    assert "(None)" in screen.row(21)


def test_draw_shows_playing_song_and_queue(app):
    press(app, "\n", "\n", "s", "q")
    app.draw()
    screen = app.stdscr
    assert "a.mp3" in screen.row(21)
    assert "#" in screen.row(22)
    assert "b.mp3" in screen.row(1)[68:]


def test_run_stops_on_exit(library, backend):
    keys = [ord("s"), ord("s"), ord("s"), ord("\n")]
    screen = FakeScreen(keys=keys)
    app = App(screen, library, Player(library.song_path, backend))
    app.run()
    assert app.running is False
    assert screen.keys == []
    assert screen.row(0).startswith("Stopify")