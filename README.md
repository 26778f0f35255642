# stopify

A small music player for the terminal. Point it at a directory of audio
files and browse, play and queue them from the keyboard.

## Installing

```
pip install .
```

Playback goes through pygame's mixer, so pygame and a working audio
device are needed. If the audio device cannot be opened, `stopify`
prints the error and exits with status 1.

## Running

```
stopify ~/Music
```

The single argument is the music directory; `stopify` refuses anything
that is not a directory. On start it creates two plain-text files in it if
they are missing:

- `.plists`: your liked songs, one name per line
- `.play`: your playlists, as pairs of lines (the playlist name, then its
  directory name)

Each playlist is a hidden subdirectory (`.<name>`) of symbolic links of
the form `../<song>`, pointing back to the songs.

The songs are the regular files of the directory (not the two files above),
listed in name order when the program starts. When a file has a title tag,
stopify makes a symbolic link named after that title next to the file and
lists the song under its title. The artist tag, if there is one, is shown
next to each song as ` - <artist>`.

Tags are read from ID3v2 (2.2, 2.3, 2.4) and ID3v1 tags, FLAC Vorbis
comments, and Ogg Vorbis and Opus comment headers.

When a song ends, the next song in the queue starts by itself; with
looping on, the current song starts again instead.

## Keys

Global:

- `Tab`: switch between the main menu and the current list
- `m`: go back to the main menu
- `.`: play the next song in the queue (or restart the song when looping)
- `a` / Left: go back 5 seconds; if the song has already ended, play its
  last 5 seconds again
- `d` / Right: go forward 5 seconds
- `l`: toggle looping
- `Space`: pause or resume
- `?`: show help (any key closes it)

Main menu: `w` / `s` or the arrow keys move between All, Liked, Playlists
and Exit; `Enter` opens the chosen list, or quits on Exit.

In every list of songs (All, Liked, an open playlist):

- `w` / `s` or Up / Down: move
- `Enter`: play the selected song
- `q`: add the selected song to the queue

All songs:

- `h`: add the selected song to liked
- `p`: add the selected song to a playlist

Liked:

- `r`: remove every song from liked
- `p`: add the selected song to a playlist

Playlists:

- `c`: create a playlist (type its name, `Enter` to create, `Escape` to
  cancel, at most 39 characters)
- `Enter`: open the selected playlist
- `h`: inside a playlist, add the selected song to liked
- `n`: inside a playlist, go back to the list of playlists
- `r`: inside a playlist, remove every song from it

When choosing a playlist for `p`, move with `w` / Up and `d` / Down, press
`Enter` to add the song or `Escape` to cancel. Nothing happens when there
are no playlists yet.

## Using it from Python

The pieces behind the player can be used on their own:

```python
from stopify.library import Library
from stopify.metadata import read_tags

library = Library("/path/to/music")
library.ensure_files()
songs = library.scan_songs()
library.like(songs[0])
print(library.liked())
print(read_tags(library.song_path(songs[0])))

playlist = library.create_playlist("road trip")
library.add_to_playlist(playlist, songs[0])
print(library.playlist_songs(playlist))
```

- `stopify.metadata`: `read_tags(path)` returns a `TrackTags` with `title`
  and `artist` (empty strings when missing) and raises `OSError` when the
  file cannot be opened; `title_of(path)` and `artist_of(path)` return an
  empty string instead.
- `stopify.library`: `Library` and `Playlist` manage the songs, liked songs
  and playlists of a directory.
- `stopify.player`: `Player` handles the queue, looping, pausing and
  seeking. It takes a function that turns a song name into a path, and
  any backend with the methods of `MixerBackend`; by default it uses
  `MixerBackend`, which plays audio through pygame's mixer and raises
  `PlaybackError` when the device or a song cannot be used.
- `stopify.marquee`: `Marquee` scrolls a line too long for its space back
  and forth.
- `stopify.ui`: `App` is the curses screen; `main(argv=None)` is the
  `stopify` command.

## What it does not do

- Single songs cannot be removed from liked or from a playlist; only the
  whole list can be cleared. Playlists themselves cannot be deleted or
  renamed from the player.
- The song list is read once at start; files added while it runs appear
  only after a restart.
- There is no volume control, shuffle, or search.