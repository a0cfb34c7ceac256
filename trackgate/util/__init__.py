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

"""Miscellaneous utility functions."""

from __future__ import annotations

from .exceptions import HumanReadableError
from .units import human_filesize, human_seconds_short, raw_seconds_short

__all__ = [
    "HumanReadableError",
    "clamp",
    "displayable_name",
    "human_filesize",
    "human_seconds_short",
    "raw_seconds_short",
]


def displayable_name(name: bytes | str | None) -> str:
    """Attempts to decode an uploaded filename to Unicode for display.

    Submitters' browsers do not agree on filename encodings, so
    undecodable bytes are replaced rather than raising.
    """
    if name is None:
        return "<unnamed>"
    if isinstance(name, str):
        return name
    try:
        return name.decode("utf-8")
    except UnicodeError:
        return name.decode("utf-8", "ignore")


def clamp(value, low, high):
    """Restrict `value` to the closed interval [`low`, `high`]."""
    return max(low, min(high, value))
