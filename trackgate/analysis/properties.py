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

"""Technical stream properties, reduced to range-checked numbers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from trackgate import logging
from trackgate.util import human_filesize, human_seconds_short

if TYPE_CHECKING:
    from .decode import DecodedInfo

log = logging.getLogger("trackgate")

# Anything outside these ranges did not come from a real MPEG header.
MAX_BITRATE_KBPS = 1000
MAX_SAMPLE_RATE_HZ = 192000
MAX_CHANNELS = 2
MAX_DURATION_SECONDS = 24 * 60 * 60


class BitrateMode(Enum):
    constant = "CBR"
    variable = "VBR"
    unknown = "unknown"


@dataclass(frozen=True)
class AudioProperties:
    bitrate_kbps: int = 0
    bitrate_mode: BitrateMode = BitrateMode.unknown
    sample_rate_hz: int = 0
    channels: int = 0
    duration_seconds: float = 0.0
    filesize_bytes: int = 0

    @property
    def duration_formatted(self) -> str:
        return human_seconds_short(self.duration_seconds)

    @property
    def filesize_formatted(self) -> str:
        return human_filesize(self.filesize_bytes)

    def as_dict(self) -> dict:
        return {
            "bitrate_kbps": self.bitrate_kbps,
            "bitrate_mode": self.bitrate_mode.value,
            "sample_rate_hz": self.sample_rate_hz,
            "channels": self.channels,
            "duration_seconds": round(self.duration_seconds, 2),
            "duration_formatted": self.duration_formatted,
            "filesize_bytes": self.filesize_bytes,
            "filesize_formatted": self.filesize_formatted,
        }


def _bounded(name: str, value, upper, unknown):
    """Return `value` if it lies in [0, `upper`], else `unknown`."""
    if value is None or not 0 <= value <= upper:
        log.debug("discarding out-of-range {}: {!r}", name, value)
        return unknown
    return value


def _bitrate_mode(mode: str) -> BitrateMode:
    if mode in ("vbr", "abr"):
        return BitrateMode.variable
    return BitrateMode.constant


def extract_audio(decoded: DecodedInfo) -> AudioProperties:
    """Build `AudioProperties` from decoded stream information.

    Every field is best effort: values that are missing or implausible
    become the unknown sentinel instead of an error.
    """
    bitrate_kbps = round(max(decoded.bitrate_bps, 0) / 1000)
    return AudioProperties(
        bitrate_kbps=_bounded("bitrate", bitrate_kbps, MAX_BITRATE_KBPS, 0),
        bitrate_mode=_bitrate_mode(decoded.bitrate_mode),
        sample_rate_hz=_bounded(
            "sample rate", decoded.sample_rate, MAX_SAMPLE_RATE_HZ, 0
        ),
        channels=_bounded("channel count", decoded.channels, MAX_CHANNELS, 0),
        duration_seconds=_bounded(
            "duration", decoded.length_seconds, MAX_DURATION_SECONDS, 0.0
        ),
        filesize_bytes=max(decoded.filesize, 0),
    )
