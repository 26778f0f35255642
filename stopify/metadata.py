"""Read the title and artist tags of audio files.

Supports ID3v2 (2.2, 2.3, 2.4) and ID3v1 tags, FLAC Vorbis comments and
Ogg Vorbis/Opus comment headers.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Union

PathLike = Union[str, "os.PathLike[str]"]

_ID3V2_HEADER_SIZE = 10
_ID3V1_SIZE = 128
_TITLE_FRAMES = frozenset({"TIT2", "TT2"})
_ARTIST_FRAMES = frozenset({"TPE1", "TP1"})
_FLAC_VORBIS_COMMENT = 4
_MAX_OGG_PAGES = 64

_TEXT_ENCODINGS = {0: "latin-1", 1: "utf-16", 2: "utf-16-be", 3: "utf-8"}


@dataclass(frozen=True)
class TrackTags:
    """The tags of a track; a missing tag is an empty string."""

    title: str = ""
    artist: str = ""

    def merged(self, fallback: "TrackTags") -> "TrackTags":
        """Fill the empty fields of this set from ``fallback``."""
        return TrackTags(self.title or fallback.title, self.artist or fallback.artist)


def _syncsafe(data: bytes) -> int:
    value = 0
    for byte in data:
        value = (value << 7) | (byte & 0x7F)
    return value


def _deunsync(data: bytes) -> bytes:
    return data.replace(b"\xff\x00", b"\xff")


def _decode_text_frame(data: bytes) -> str:
    if not data:
        return ""
    encoding = _TEXT_ENCODINGS.get(data[0])
    if encoding is None:
        return ""
    text = data[1:].decode(encoding, errors="replace")
    values = [value.strip("\ufeff") for value in text.split("\x00")]
    return values[0] if values else ""


def _id3_frames(body: bytes, offset: int, major: int) -> Iterator[tuple[str, bytes]]:
    id_len, header_len = (3, 6) if major == 2 else (4, 10)
    while offset + header_len <= len(body):
        frame_id = body[offset:offset + id_len]
        if frame_id[0] == 0:
            return
        if major == 2:
            size = int.from_bytes(body[offset + 3:offset + 6], "big")
            flags = 0
        elif major == 3:
            size = int.from_bytes(body[offset + 4:offset + 8], "big")
            flags = int.from_bytes(body[offset + 8:offset + 10], "big")
        else:
            size = _syncsafe(body[offset + 4:offset + 8])
            flags = int.from_bytes(body[offset + 8:offset + 10], "big")
        start = offset + header_len
        data = body[start:start + size]
        offset = start + size
        if major == 3 and flags & 0x00C0:
            continue
        if major == 4:
            if flags & 0x000C:
                continue
            if flags & 0x0001:
                data = data[4:]
            if flags & 0x0002:
                data = _deunsync(data)
        yield frame_id.decode("latin-1"), data


def _read_id3v2(fh: BinaryIO) -> tuple[TrackTags, int]:
    """Return the ID3v2 tags at the start of the file and where the tag ends."""
    fh.seek(0)
    header = fh.read(_ID3V2_HEADER_SIZE)
    if len(header) < _ID3V2_HEADER_SIZE or header[:3] != b"ID3":
        return TrackTags(), 0
    major, flags = header[3], header[5]
    size = _syncsafe(header[6:10])
    end = _ID3V2_HEADER_SIZE + size
    if major == 4 and flags & 0x10:
        end += _ID3V2_HEADER_SIZE
    if major not in (2, 3, 4):
        return TrackTags(), end
    body = fh.read(size)
    if flags & 0x80 and major < 4:
        body = _deunsync(body)
    offset = 0
    if flags & 0x40 and major >= 3:
        if major == 3:
            offset = 4 + int.from_bytes(body[:4], "big")
        else:
            offset = _syncsafe(body[:4])
    title = artist = ""
    for frame_id, data in _id3_frames(body, offset, major):
        if frame_id in _TITLE_FRAMES and not title:
            title = _decode_text_frame(data)
        elif frame_id in _ARTIST_FRAMES and not artist:
            artist = _decode_text_frame(data)
    return TrackTags(title, artist), end


def _v1_field(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("latin-1").rstrip(" ")


def _read_id3v1(fh: BinaryIO) -> TrackTags:
    fh.seek(0, os.SEEK_END)
    size = fh.tell()
    if size < _ID3V1_SIZE:
        return TrackTags()
    fh.seek(size - _ID3V1_SIZE)
    block = fh.read(_ID3V1_SIZE)
    if block[:3] != b"TAG":
        return TrackTags()
    return TrackTags(_v1_field(block[3:33]), _v1_field(block[33:63]))


def _parse_vorbis_comment(data: bytes) -> TrackTags:
    found: dict[str, str] = {}
    try:
        (vendor_len,) = struct.unpack_from("<I", data, 0)
        pos = 4 + vendor_len
        (count,) = struct.unpack_from("<I", data, pos)
        pos += 4
        for _ in range(count):
            (length,) = struct.unpack_from("<I", data, pos)
            pos += 4
            entry = data[pos:pos + length].decode("utf-8", errors="replace")
            pos += length
            key, sep, value = entry.partition("=")
            if sep:
                found.setdefault(key.lower(), value)
    except struct.error:
        pass
    return TrackTags(found.get("title", ""), found.get("artist", ""))


def _read_flac(fh: BinaryIO) -> TrackTags:
    """Read the Vorbis comment block; the ``fLaC`` marker is already consumed."""
    while True:
        header = fh.read(4)
        if len(header) < 4:
            return TrackTags()
        is_last = header[0] & 0x80
        block_type = header[0] & 0x7F
        length = int.from_bytes(header[1:4], "big")
        if block_type == _FLAC_VORBIS_COMMENT:
            return _parse_vorbis_comment(fh.read(length))
        if is_last:
            return TrackTags()
        fh.seek(length, os.SEEK_CUR)


def _ogg_packets(fh: BinaryIO) -> Iterator[bytes]:
    """Yield the packets of the first logical stream of an Ogg file."""
    serial = None
    packet = bytearray()
    for _ in range(_MAX_OGG_PAGES):
        header = fh.read(27)
        if len(header) < 27 or header[:4] != b"OggS":
            return
        (page_serial,) = struct.unpack_from("<I", header, 14)
        lacing = fh.read(header[26])
        body = fh.read(sum(lacing))
        if serial is None:
            serial = page_serial
        elif page_serial != serial:
            continue
        pos = 0
        for lace in lacing:
            packet += body[pos:pos + lace]
            pos += lace
            if lace < 255:
                yield bytes(packet)
                packet = bytearray()


def _read_ogg(fh: BinaryIO) -> TrackTags:
    for index, packet in enumerate(_ogg_packets(fh)):
        if index == 0:
            continue
        if packet.startswith(b"\x03vorbis"):
            return _parse_vorbis_comment(packet[7:])
        if packet.startswith(b"OpusTags"):
            return _parse_vorbis_comment(packet[8:])
        break
    return TrackTags()


def read_tags(path: PathLike) -> TrackTags:
    """Read the title and artist of an audio file.

    Raises OSError if the file cannot be opened; unknown or broken formats
    give empty tags.
    """
    with open(path, "rb") as fh:
        id3v2, end = _read_id3v2(fh)
        fh.seek(end)
        magic = fh.read(4)
        if magic == b"fLaC":
            container = _read_flac(fh)
        elif magic == b"OggS":
            fh.seek(end)
            container = _read_ogg(fh)
        else:
            container = TrackTags()
        return id3v2.merged(container).merged(_read_id3v1(fh))


def title_of(path: PathLike) -> str:
    """The track's title, or an empty string if it has none or cannot be read."""
    try:
        return read_tags(path).title
    except OSError:
        return ""


def artist_of(path: PathLike) -> str:
    """The track's artist, or an empty string if it has none or cannot be read."""
    try:
        return read_tags(path).artist
    except OSError:
        return ""