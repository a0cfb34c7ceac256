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

"""Quality scoring for a decoded submission.

The score is the sum of three bounded subscores:

- metadata completeness (40 points), one fixed amount per populated tag;
- audio fidelity (30 points), a step function of the bitrate;
- production professionalism (30 points), from sample rate and channels.

Missing tags are reported by name; audio and professional shortfalls
produce recommendations in a fixed order: bitrate, sample rate,
channels, bitrate mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from trackgate.util import clamp

from .properties import BitrateMode

if TYPE_CHECKING:
    from .properties import AudioProperties
    from .tags import Metadata

MAX_SCORE = 100
MAX_METADATA_SCORE = 40
MAX_AUDIO_SCORE = 30
MAX_PROFESSIONAL_SCORE = 30

# (Metadata attribute, points, name reported when missing)
METADATA_POINTS = (
    ("artist", 10, "Artist Name"),
    ("title", 10, "Track Title"),
    ("album", 10, "Album Name"),
    ("year", 5, "Release Year"),
    ("has_artwork", 5, "Album Artwork"),
)

# (Lowest bitrate in kbps, points, recommendation). First match wins.
BITRATE_TIERS = (
    (320, 30, None),
    (256, 25, "Prefer 320 kbps CBR for best quality"),
    (192, 20, "Upgrade bitrate from {bitrate} kbps to 320 kbps CBR"),
    (128, 10, "Bitrate too low - use at least 192 kbps, prefer 320 kbps"),
    (0, 0, "Bitrate critically low - must be at least 192 kbps"),
)

CD_SAMPLE_RATE = 44100
FULL_SAMPLE_RATE_POINTS = 15
LOW_SAMPLE_RATE_POINTS = 5
STEREO_POINTS = 15
MONO_POINTS = 10

SAMPLE_RATE_ADVICE = "Use 44.1 kHz sample rate (CD quality)"
STEREO_ADVICE = "Stereo (2 channels) preferred over mono"
CBR_ADVICE = "CBR (Constant Bitrate) is preferred over VBR for streaming"

# Shown in place of an empty recommendation list.
NO_RECOMMENDATIONS = "Excellent! Your file meets all quality standards."


@dataclass(frozen=True)
class ScoreReport:
    total_score: int
    metadata_score: int
    audio_score: int
    professional_score: int
    missing_tags: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    @property
    def has_recommendations(self) -> bool:
        return bool(self.recommendations)

    def display_recommendations(self) -> tuple[str, ...]:
        """Recommendations for the submitter, or the single confirmation
        message when there are none.
        """
        return self.recommendations or (NO_RECOMMENDATIONS,)

    def as_dict(self) -> dict:
        return {
            "total_score": self.total_score,
            "metadata_score": self.metadata_score,
            "audio_score": self.audio_score,
            "professional_score": self.professional_score,
            "missing_tags": list(self.missing_tags),
            "recommendations": list(self.recommendations),
        }


def metadata_score(metadata: Metadata) -> tuple[int, list[str]]:
    """Points for populated tags and the names of the missing ones."""
    points = 0
    missing = []
    for key, value, name in METADATA_POINTS:
        if getattr(metadata, key):
            points += value
        else:
            missing.append(name)
    return points, missing


def audio_score(audio: AudioProperties) -> tuple[int, str | None]:
    for floor, points, advice in BITRATE_TIERS:
        if audio.bitrate_kbps >= floor:
            if advice:
                advice = advice.format(bitrate=audio.bitrate_kbps)
            return points, advice
    # Unreachable for non-negative bitrates.
    return 0, BITRATE_TIERS[-1][2]


def professional_score(audio: AudioProperties) -> tuple[int, list[str]]:
    points = 0
    advice = []

    if audio.sample_rate_hz >= CD_SAMPLE_RATE:
        points += FULL_SAMPLE_RATE_POINTS
    else:
        points += LOW_SAMPLE_RATE_POINTS
        advice.append(SAMPLE_RATE_ADVICE)

    if audio.channels == 2:
        points += STEREO_POINTS
    elif audio.channels == 1:
        points += MONO_POINTS
        advice.append(STEREO_ADVICE)

    # Affects advice only; the points above already add up to 30.
    if audio.bitrate_mode is BitrateMode.variable:
        advice.append(CBR_ADVICE)

    return points, advice


def score(metadata: Metadata, audio: AudioProperties) -> ScoreReport:
    """Score one file. Pure: identical inputs give identical reports."""
    meta_points, missing = metadata_score(metadata)
    audio_points, bitrate_advice = audio_score(audio)
    pro_points, pro_advice = professional_score(audio)

    recommendations = []
    if bitrate_advice:
        recommendations.append(bitrate_advice)
    recommendations.extend(pro_advice)

    meta_points = clamp(meta_points, 0, MAX_METADATA_SCORE)
    audio_points = clamp(audio_points, 0, MAX_AUDIO_SCORE)
    pro_points = clamp(pro_points, 0, MAX_PROFESSIONAL_SCORE)

    return ScoreReport(
        total_score=clamp(
            meta_points + audio_points + pro_points, 0, MAX_SCORE
        ),
        metadata_score=meta_points,
        audio_score=audio_points,
        professional_score=pro_points,
        missing_tags=tuple(missing),
        recommendations=tuple(recommendations),
    )
