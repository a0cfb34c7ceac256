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

"""Quality analysis and release classification for MP3 submissions.

The engine performs no I/O: callers hand it bytes and receive an
`AnalysisResult`. Configuration is passed in explicitly through
`AnalyzerConfig`.
"""

from .engine import (
    AnalysisResult,
    Analyzer,
    AnalyzerConfig,
    analyze,
    classify_release,
)
from .exceptions import (
    AnalysisError,
    DecodeFailed,
    DecodeTimeout,
    ErrorKind,
    InvalidFormat,
    TooLarge,
)
from .instrumental import detect_instrumental
from .properties import AudioProperties, BitrateMode, extract_audio
from .release import (
    InvalidBatch,
    InvalidDuration,
    ReleaseConfig,
    ReleaseType,
    classify,
    classify_batch,
    parse_duration,
)
from .scoring import NO_RECOMMENDATIONS, ScoreReport, score
from .sniff import is_mp3, sniff
from .tags import Metadata, TagSource, extract_metadata

__all__ = [
    "NO_RECOMMENDATIONS",
    "AnalysisError",
    "AnalysisResult",
    "Analyzer",
    "AnalyzerConfig",
    "AudioProperties",
    "BitrateMode",
    "DecodeFailed",
    "DecodeTimeout",
    "ErrorKind",
    "InvalidBatch",
    "InvalidDuration",
    "InvalidFormat",
    "Metadata",
    "ReleaseConfig",
    "ReleaseType",
    "ScoreReport",
    "TagSource",
    "TooLarge",
    "analyze",
    "classify",
    "classify_batch",
    "classify_release",
    "detect_instrumental",
    "extract_audio",
    "extract_metadata",
    "is_mp3",
    "parse_duration",
    "score",
    "sniff",
]
