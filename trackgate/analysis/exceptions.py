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

"""Failures that end an analysis before a score can be computed."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from trackgate.util import HumanReadableError


class ErrorKind(Enum):
    """The distinguishable reasons an upload can be rejected."""

    invalid_format = "InvalidFormat"
    too_large = "TooLarge"
    decode_failed = "DecodeFailed"
    timeout = "Timeout"


class AnalysisError(HumanReadableError):
    """Base class for terminal analysis failures.

    Every subclass carries the `ErrorKind` reported to the caller.
    """

    error_kind = "analysis failed"
    kind: ClassVar[ErrorKind]


class InvalidFormat(AnalysisError):
    """The bytes are not plausibly an MP3 and were never decoded."""

    error_kind = "invalid format"
    kind = ErrorKind.invalid_format


class TooLarge(AnalysisError):
    """The upload exceeds the configured size ceiling."""

    error_kind = "file too large"
    kind = ErrorKind.too_large


class DecodeFailed(AnalysisError):
    """The buffer passed sniffing but its frame or tag structure could
    not be parsed.
    """

    error_kind = "decode failed"
    kind = ErrorKind.decode_failed


class DecodeTimeout(AnalysisError):
    error_kind = "decode timed out"
    kind = ErrorKind.timeout
