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

"""Cheap gate that rejects payloads which are not plausibly MP3 audio.

It runs before any parsing library sees the buffer, so disguised
executables or scripts never reach the decoder.
"""

from __future__ import annotations

from .exceptions import InvalidFormat

ID3_MAGIC = b"ID3"

# MPEG-1 and MPEG-2 Layer III frame sync patterns, with and without CRC.
FRAME_SYNC_SECOND_BYTES = frozenset((0xFA, 0xFB, 0xF2, 0xF3))


def sniff(data: bytes) -> None:
    """Raise `InvalidFormat` unless `data` starts like an MP3 stream.

    An ID3v2 header is accepted as-is; frame validation after the tag is
    left to the decoder. Otherwise the first two bytes must be one of
    the Layer III frame sync patterns.
    """
    if len(data) < 3:
        raise InvalidFormat(
            reason=f"only {len(data)} bytes of data", verb="sniff"
        )

    if data[:3] == ID3_MAGIC:
        return

    if data[0] != 0xFF or data[1] not in FRAME_SYNC_SECOND_BYTES:
        raise InvalidFormat(
            reason=f"no MP3 frame sync (found {data[:2].hex()})",
            verb="sniff",
        )


def is_mp3(data: bytes) -> bool:
    try:
        sniff(data)
    except InvalidFormat:
        return False
    return True
