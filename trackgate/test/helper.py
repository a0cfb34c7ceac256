# This file is part of trackgate.
# Copyright 2026, The trackgate developers.
#
# Permission is hereby granted, free of charge, to any person obtaining
# a copy of this software and associated documentation files (the
# "Software"), to deal in the Software without restriction, including
# without limitation the rights to use, copy, modify, merge, publish,
# distribute, sublicense, and/or sell copies of the Software, and to
# permit persons to whom the Software is furnished to do so, subject to
# the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.

"""This module includes various helpers that provide fixtures, capture
information or mock the environment.

- The `capture_log` and `capture_stdout` context managers record what the
  analyzer logs and what the user interface prints.

- `mpeg_stream`, `xing_stream`, `id3v1_tag` and `build_mp3` assemble small
  synthetic MP3 uploads: silent Layer III frames with optional ID3v2 and
  ID3v1 tags. The audio cannot be played but its headers are real.
"""

from __future__ import annotations

import os
import struct
import sys
from contextlib import contextmanager
from io import StringIO
from tempfile import mkstemp

from mutagen.id3 import APIC, COMM, ID3, TALB, TCON, TDRC, TIT2, TPE1, TXXX

from trackgate import config, logging

# Layer III bitrates (kbps) and sample rates (Hz), in header index order.
MPEG1_BITRATES = (
    0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320
)
MPEG2_BITRATES = (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160)
MPEG1_SAMPLE_RATES = (44100, 48000, 32000)
MPEG2_SAMPLE_RATES = (22050, 24000, 16000)

ID3V2_FRAME_TYPES = {
    "title": TIT2,
    "artist": TPE1,
    "album": TALB,
    "year": TDRC,
    "genre": TCON,
}

# Not a real JPEG, but Mutagen does not look inside pictures.
FAKE_JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32


class LogCapture(logging.Handler):
    def __init__(self):
        logging.Handler.__init__(self)
        self.messages = []

    def emit(self, record):
        self.messages.append(str(record.msg))


@contextmanager
def capture_log(logger="trackgate"):
    """Collect formatted log messages, including debug messages logged
    on the current thread.
    """
    capture = LogCapture()
    log = logging.getLogger(logger)
    level = log.level
    log.addHandler(capture)
    log.setLevel(logging.DEBUG)
    try:
        yield capture.messages
    finally:
        log.removeHandler(capture)
        log.setLevel(level)


@contextmanager
def capture_stdout():
    """Save stdout in a StringIO.

    >>> with capture_stdout() as output:
    ...     print('spam')
    ...
    >>> output.getvalue()
    'spam'
    """
    org = sys.stdout
    sys.stdout = capture = StringIO()
    try:
        yield sys.stdout
    finally:
        sys.stdout = org
        print(capture.getvalue())


def reset_config(**analysis):
    """Load the default configuration only, with colors turned off and
    any `analysis` settings overridden.
    """
    config.clear()
    config.read(user=False, defaults=True)
    config["ui"]["color"] = False
    for key, value in analysis.items():
        config["analysis"][key] = value


def mpeg_frame(bitrate=128, sample_rate=44100, channels=2, body=b""):
    """Return one MPEG Layer III frame of silence.

    MPEG-1 is used for 32, 44.1 and 48 kHz and MPEG-2 for the lower
    sample rates. `body` is written right after the four header bytes.
    """
    if sample_rate in MPEG1_SAMPLE_RATES:
        sync, bitrates, rates = 0xFB, MPEG1_BITRATES, MPEG1_SAMPLE_RATES
        coefficient = 144
    else:
        sync, bitrates, rates = 0xF3, MPEG2_BITRATES, MPEG2_SAMPLE_RATES
        coefficient = 72
    header = bytes(
        (
            0xFF,
            sync,
            (bitrates.index(bitrate) << 4) | (rates.index(sample_rate) << 2),
            0xC0 if channels == 1 else 0x00,
        )
    )
    length = coefficient * bitrate * 1000 // sample_rate
    return (header + body).ljust(length, b"\x00")


def mpeg_stream(count=20, bitrate=128, sample_rate=44100, channels=2):
    return mpeg_frame(bitrate, sample_rate, channels) * count


def xing_stream(count=20, bitrate=128, sample_rate=44100, channels=2):
    """A stream whose first frame carries a Xing header with a VBR
    quality indicator, as written by variable bitrate encoders.
    MPEG-1 sample rates only.
    """
    frame_length = len(mpeg_frame(bitrate, sample_rate, channels))
    side_info = b"\x00" * (32 if channels == 2 else 17)
    # Flags: frame count, byte count and VBR scale present.
    xing = b"Xing" + struct.pack(
        ">IIII", 0x0B, count - 1, count * frame_length, 50
    )
    first = mpeg_frame(bitrate, sample_rate, channels, side_info + xing)
    return first + mpeg_stream(count - 1, bitrate, sample_rate, channels)


def id3v1_tag(title="", artist="", album="", year="", comment="", genre=255):
    def field(value, size):
        return value.encode("latin-1")[:size].ljust(size, b"\x00")

    return (
        b"TAG"
        + field(title, 30)
        + field(artist, 30)
        + field(album, 30)
        + field(year, 4)
        + field(comment, 28)
        + b"\x00\x00"
        + bytes((genre,))
    )


def id3v2_tag(tags=None, artwork=False, user_text=None, extra_frames=()):
    """Build a Mutagen `ID3` object from field names to text values.
    `extra_frames` are added as given, for frames only older tag
    versions use.
    """
    id3 = ID3()
    for key, value in (tags or {}).items():
        if key == "comment":
            id3.add(COMM(encoding=3, lang="eng", desc="", text=[value]))
        else:
            id3.add(ID3V2_FRAME_TYPES[key](encoding=3, text=[value]))
    if artwork:
        id3.add(
            APIC(
                encoding=3,
                mime="image/jpeg",
                type=3,
                desc="Cover",
                data=FAKE_JPEG,
            )
        )
    for desc, value in (user_text or {}).items():
        id3.add(TXXX(encoding=3, desc=desc, text=[value]))
    for frame in extra_frames:
        id3.add(frame)
    return id3


def build_mp3(
    tags=None,
    v1=None,
    stream=None,
    artwork=False,
    user_text=None,
    extra_frames=(),
    v2_version=4,
):
    """Return the bytes of a small MP3 file.

    `tags` maps field names (title, artist, album, year, genre and
    comment) to values for an ID3v2 tag at the start of the file, saved as
    version `v2_version` (3 or 4). `v1` holds keyword arguments for
    `id3v1_tag`, appended at the end. The audio defaults to 128 kbps
    stereo frames at 44.1 kHz.
    """
    if stream is None:
        stream = mpeg_stream()

    fd, path = mkstemp(suffix=".mp3")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(stream)
        if tags or artwork or user_text or extra_frames:
            id3 = id3v2_tag(tags, artwork, user_text, extra_frames)
            id3.save(path, v1=0, v2_version=v2_version)
        with open(path, "rb") as f:
            data = f.read()
    finally:
        os.remove(path)

    if v1 is not None:
        data += id3v1_tag(**v1)
    return data
