import os

import pytest

from stopify.library import LIKED_FILE, PLAYLISTS_FILE, Library, Playlist


def id3_title_file(path, title, artist=""):
    def frame(frame_id, text):
        payload = b"\x00" + text.encode("latin-1")
        return frame_id.encode() + len(payload).to_bytes(4, "big") + b"\x00\x00" + payload

    frames = frame("TIT2", title)
    if artist:
        frames += frame("TPE1", artist)
    size = len(frames)
    header = b"ID3\x03\x00\x00" + bytes(
        [(size >> 21) & 0x7F, (size >> 14) & 0x7F, (size >> 7) & 0x7F, size & 0x7F]
    )
    path.write_bytes(header + frames + b"\xff\xfb" * 20)


@pytest.fixture
def library(tmp_path):
    lib = Library(tmp_path)
    lib.ensure_files()
    return lib


def test_ensure_files_creates_and_preserves(tmp_path):
    lib = Library(tmp_path)
    lib.ensure_files()
    assert (tmp_path / LIKED_FILE).read_text() == ""
    assert (tmp_path / PLAYLISTS_FILE).read_text() == ""
    (tmp_path / LIKED_FILE).write_text("kept\n")
    lib.ensure_files()
    assert (tmp_path / LIKED_FILE).read_text() == "kept\n"


def test_file_names_fixed_by_format(tmp_path):
    lib = Library(tmp_path)
    lib.ensure_files()
    lib.like("song.mp3")
    lib.create_playlist("mix")
    assert (tmp_path / ".plists").read_text() == "song.mp3\n"
    assert (tmp_path / ".play").read_text() == "mix\n.mix\n"


def test_song_path_joins_root(library, tmp_path):
    assert library.song_path("a.mp3") == tmp_path / "a.mp3"


def test_scan_lists_untagged_by_file_name_and_skips_reserved(library, tmp_path):
    (tmp_path / "b.wav").write_bytes(b"RIFF")
    (tmp_path / "a.txt").write_text("hello")
    (tmp_path / "sub").mkdir()
    assert library.scan_songs() == ["a.txt", "b.wav"]


def test_scan_uses_title_and_links_it(library, tmp_path):
    id3_title_file(tmp_path / "track01.mp3", "Nice Tune")
    songs = library.scan_songs()
    assert songs == ["Nice Tune"]
    link = tmp_path / "Nice Tune"
    assert link.is_symlink()
    assert os.readlink(link) == "track01.mp3"
    assert library.scan_songs() == songs


def test_scan_missing_root_is_empty(tmp_path):
    assert Library(tmp_path / "missing").scan_songs() == []


def test_describe_shows_artist(library, tmp_path):
    id3_title_file(tmp_path / "x.mp3", "Title", "The Band")
    (tmp_path / "plain.wav").write_bytes(b"RIFF")
    assert library.describe("x.mp3") == " - The Band"
    assert library.describe("plain.wav") == ""


def test_like_round_trip_and_order(library):
    library.like("one.mp3")
    library.like("two.mp3")
    library.like("one.mp3")
    assert library.liked() == ["one.mp3", "two.mp3", "one.mp3"]


def test_clear_liked(library):
    library.like("one.mp3")
    library.clear_liked()
    assert library.liked() == []


def test_liked_missing_file_is_empty(tmp_path):
    assert Library(tmp_path).liked() == []


def test_like_rejects_newline(library):
    with pytest.raises(ValueError):
        library.like("bad\nname")


def test_create_playlist_records_and_makes_directory(library, tmp_path):
    playlist = library.create_playlist("undertale")
    assert playlist == Playlist("undertale", ".undertale")
    assert (tmp_path / ".undertale").is_dir()
    assert (tmp_path / PLAYLISTS_FILE).read_text() == "undertale\n.undertale\n"
    assert library.playlists() == [playlist]


def test_playlists_in_file_order(library):
    first = library.create_playlist("undertale")
    second = library.create_playlist("mario")
    assert library.playlists() == [first, second]


def test_playlists_ignore_incomplete_entry(library, tmp_path):
    (tmp_path / PLAYLISTS_FILE).write_text("rock\n.rock\ndangling\n")
    assert library.playlists() == [Playlist("rock", ".rock")]


def test_create_playlist_rejects_empty_name(library):
    with pytest.raises(ValueError):
        library.create_playlist("")


def test_add_to_playlist_links_back_to_song(library, tmp_path):
    (tmp_path / "song.mp3").write_bytes(b"data")
    playlist = library.create_playlist("mix")
    link = library.add_to_playlist(playlist, "song.mp3")
    assert link == tmp_path / ".mix" / "song.mp3"
    assert os.readlink(link) == os.path.join("..", "song.mp3")
    assert link.read_bytes() == b"data"
    library.add_to_playlist(playlist, "song.mp3")
    assert library.playlist_songs(playlist) == ["song.mp3"]


def test_playlist_songs_lists_only_links(library, tmp_path):
    playlist = library.create_playlist("mix")
    library.add_to_playlist(playlist, "b.mp3")
    library.add_to_playlist(playlist, "a.mp3")
    (tmp_path / ".mix" / "regular.txt").write_text("x")
    assert library.playlist_songs(playlist) == ["a.mp3", "b.mp3"]


def test_playlist_songs_missing_directory(library):
    assert library.playlist_songs(Playlist("ghost", ".ghost")) == []


def test_clear_playlist_empties_directory(library, tmp_path):
    (tmp_path / "song.mp3").write_bytes(b"data")
    playlist = library.create_playlist("mix")
    library.add_to_playlist(playlist, "song.mp3")
    library.add_to_playlist(playlist, "other.mp3")
    library.clear_playlist(playlist)
    assert list((tmp_path / ".mix").iterdir()) == []
    assert (tmp_path / "song.mp3").read_bytes() == b"data"
    assert library.playlists() == [playlist]