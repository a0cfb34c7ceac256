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

"""Runs one upload through sniffing, decoding, extraction and scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from trackgate import logging
from trackgate.util import displayable_name, human_filesize

from .decode import run_decoder
from .exceptions import AnalysisError, TooLarge
from .instrumental import detect_instrumental
from .properties import extract_audio
from .release import classify
from .scoring import score
from .sniff import sniff
from .tags import extract_metadata

if TYPE_CHECKING:
    import confuse

    from .exceptions import ErrorKind
    from .properties import AudioProperties
    from .release import ReleaseType
    from .scoring import ScoreReport
    from .tags import Metadata

log = logging.getLogger("trackgate")

ISOLATION_MODES = ("process", "thread", "inline")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Resource limits for the analyzer, validated on construction."""

    max_size: int = 50 * 1024 * 1024
    timeout: float = 10.0
    isolation: str = "process"

    def __post_init__(self):
        if self.max_size <= 0:
            raise ValueError("max_size must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.isolation not in ISOLATION_MODES:
            raise ValueError(
                f"isolation must be one of {', '.join(ISOLATION_MODES)}"
            )

    @classmethod
    def from_view(cls, view: confuse.ConfigView) -> AnalyzerConfig:
        """Read the ``analysis`` section of a configuration."""
        return cls(
            max_size=view["max_size"].get(int),
            timeout=float(view["timeout"].as_number()),
            isolation=view["isolation"].as_choice(ISOLATION_MODES),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one analysis: either a report with the data it was
    computed from, or the kind of failure and a message.
    """

    filename: str
    report: ScoreReport | None = None
    metadata: Metadata | None = None
    audio: AudioProperties | None = None
    instrumental: bool | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def failed(cls, filename: str, exc: AnalysisError) -> AnalysisResult:
        return cls(filename=filename, error_kind=exc.kind, message=exc.args[0])

    def as_dict(self) -> dict:
        if not self.ok:
            return {
                "success": False,
                "filename": self.filename,
                "error": self.error_kind.value,
                "message": self.message,
            }
        return {
            "success": True,
            "filename": self.filename,
            "metadata": self.metadata.as_dict(),
            "audio": self.audio.as_dict(),
            "instrumental": self.instrumental,
            "score": self.report.as_dict(),
        }


class Analyzer:
    """Stateless per call; one instance can serve concurrent analyses."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def _check_size(self, data: bytes, declared_size: int | None):
        size = len(data)
        if declared_size is not None and declared_size != size:
            log.warning(
                "declared size {} does not match {} bytes received",
                declared_size,
                size,
            )
        largest = max(size, declared_size or 0)
        if largest > self.config.max_size:
            raise TooLarge(
                reason=f"{human_filesize(largest)} exceeds the "
                f"{human_filesize(self.config.max_size)} limit",
                verb="checking the size",
            )

    def analyze(
        self,
        data: bytes,
        declared_filename: bytes | str | None = None,
        declared_size: int | None = None,
    ) -> AnalysisResult:
        """Analyze one uploaded file held in memory.

        Never raises for bad input: size, format, decode and timeout
        failures come back as a failed `AnalysisResult`.
        """
        filename = displayable_name(declared_filename)
        data = bytes(data)
        log.debug("analyzing {} ({} bytes)", filename, len(data))

        try:
            self._check_size(data, declared_size)
            sniff(data)
            decoded = run_decoder(
                data, self.config.isolation, self.config.timeout
            )
        except AnalysisError as exc:
            if exc.tb:
                log.debug("{}", exc.tb)
            log.info("rejected {}: {}", filename, exc)
            return AnalysisResult.failed(filename, exc)

        metadata = extract_metadata(decoded)
        audio = extract_audio(decoded)
        report = score(metadata, audio)
        log.debug(
            "{}: score {} (metadata {}, audio {}, professional {})",
            filename,
            report.total_score,
            report.metadata_score,
            report.audio_score,
            report.professional_score,
        )
        return AnalysisResult(
            filename=filename,
            report=report,
            metadata=metadata,
            audio=audio,
            instrumental=detect_instrumental(metadata),
        )


def analyze(
    data: bytes,
    declared_filename: bytes | str | None = None,
    declared_size: int | None = None,
    config: AnalyzerConfig | None = None,
) -> AnalysisResult:
    return Analyzer(config).analyze(data, declared_filename, declared_size)


def classify_release(
    track_count: int, total_duration_minutes: float
) -> ReleaseType:
    """Designate a submission batch once all track durations are known
    (unknown durations should be passed as zero).
    """
    return classify(track_count, total_duration_minutes)
