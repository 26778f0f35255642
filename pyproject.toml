[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stopify"
version = "0.1.0"
description = "A keyboard-driven terminal music player with liked songs, playlists and a play queue"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["music", "player", "terminal", "curses", "playlist", "audio", "id3", "flac", "ogg"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
stopify = "stopify.ui:main"

[tool.hatch.build.targets.wheel]
packages = ["stopify"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
