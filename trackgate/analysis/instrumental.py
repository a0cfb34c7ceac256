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

"""Guesses whether a track is instrumental from its tags alone.

This is a hint for pre-filling the submission form. It is computed next
to the quality score and never contributes to it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tags import Metadata

KEYWORDS = ("instrumental", "instru", "karaoke", "backing track")
TRUE_VALUES = ("yes", "1", "true")


def detect_instrumental(metadata: Metadata) -> bool:
    texts = (
        metadata.title,
        metadata.genre,
        metadata.comment,
        metadata.id3v1_comment,
    )
    for text in texts:
        if text and any(word in text.lower() for word in KEYWORDS):
            return True

    # Some taggers write a TXXX:INSTRUMENTAL frame.
    flag = metadata.instrumental_tag
    return flag is not None and flag.strip().lower() in TRUE_VALUES
