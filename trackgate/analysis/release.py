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

"""Classifies a submission batch as a Single, EP or Album."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from trackgate import logging
from trackgate.util import human_seconds_short, raw_seconds_short

if TYPE_CHECKING:
    from collections.abc import Iterable

    import confuse

log = logging.getLogger("trackgate")

ALBUM_MIN_TRACKS = 7
ALBUM_MIN_MINUTES = 30.0
EP_MIN_TRACKS = 4


class ReleaseType(Enum):
    single = "Single"
    ep = "EP"
    album = "Album"

    def __str__(self) -> str:
        return self.value


class InvalidDuration(ValueError):
    pass


class InvalidBatch(ValueError):
    pass


@dataclass(frozen=True)
class ReleaseConfig:
    """Limits on a submission batch."""

    max_tracks: int = 20
    min_track_duration: float = 30.0
    max_track_duration: float = 3600.0

    def __post_init__(self):
        if self.max_tracks < 1:
            raise ValueError("max_tracks must be at least 1")
        if not 0 <= self.min_track_duration <= self.max_track_duration:
            raise ValueError(
                "track duration bounds must satisfy "
                "0 <= min_track_duration <= max_track_duration"
            )

    @classmethod
    def from_view(cls, view: confuse.ConfigView) -> ReleaseConfig:
        return cls(
            max_tracks=view["max_tracks"].get(int),
            min_track_duration=float(view["min_track_duration"].as_number()),
            max_track_duration=float(view["max_track_duration"].as_number()),
        )


def classify(track_count: int, total_duration_minutes: float) -> ReleaseType:
    """Designate a batch of `track_count` tracks lasting
    `total_duration_minutes` in total.

    The rules are tried in order and the first match wins, so a long
    two-track batch is an album rather than an EP. An empty batch is the
    caller's mistake and raises `ValueError`.
    """
    if track_count < 1:
        raise ValueError(f"cannot classify {track_count} tracks")
    if total_duration_minutes < 0:
        raise ValueError(f"negative duration: {total_duration_minutes}")

    if (
        track_count >= ALBUM_MIN_TRACKS
        or total_duration_minutes >= ALBUM_MIN_MINUTES
    ):
        return ReleaseType.album
    if track_count >= EP_MIN_TRACKS:
        # 4 to 6 tracks and, by the rule above, under 30 minutes.
        return ReleaseType.ep
    if track_count > 1:
        return ReleaseType.ep
    return ReleaseType.single


def parse_duration(text: str) -> float:
    """Parse an ``M:SS`` track length into seconds."""
    try:
        return raw_seconds_short(text)
    except ValueError:
        raise InvalidDuration(
            f"duration {text!r} must be in mm:ss format (e.g. 3:45)"
        )


def validate_track_duration(seconds: float, config: ReleaseConfig) -> float:
    if seconds < config.min_track_duration:
        raise InvalidDuration(
            f"track duration {human_seconds_short(seconds)} is shorter than"
            f" {human_seconds_short(config.min_track_duration)}"
        )
    if seconds > config.max_track_duration:
        raise InvalidDuration(
            f"track duration {human_seconds_short(seconds)} exceeds"
            f" {human_seconds_short(config.max_track_duration)}"
        )
    return seconds


def classify_batch(
    durations: Iterable[float | None], config: ReleaseConfig | None = None
) -> ReleaseType:
    """Classify a batch from its per-track durations in seconds.

    Unknown durations (`None`) count as zero. Known durations must lie
    within the configured bounds.
    """
    config = config or ReleaseConfig()
    durations = list(durations)
    if not durations:
        raise InvalidBatch("a release needs at least one track")
    if len(durations) > config.max_tracks:
        raise InvalidBatch(
            f"{len(durations)} tracks submitted, maximum is {config.max_tracks}"
        )

    total = 0.0
    for seconds in durations:
        if seconds is None:
            continue
        total += validate_track_duration(seconds, config)

    release_type = classify(len(durations), total / 60)
    log.debug(
        "classified {} tracks ({}) as {}",
        len(durations),
        human_seconds_short(total),
        release_type,
    )
    return release_type
