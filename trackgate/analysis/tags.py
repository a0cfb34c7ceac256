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

"""Normalizes ID3v2 and ID3v1 tag maps into one `Metadata` record."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from trackgate import logging

if TYPE_CHECKING:
    from .decode import DecodedInfo

log = logging.getLogger("trackgate")

TEXT_FIELDS = ("title", "artist", "album", "year", "genre", "comment")


class TagSource(Enum):
    id3v2 = "ID3v2"
    id3v1 = "ID3v1"


@dataclass(frozen=True)
class Metadata:
    """Descriptive tags for one file.

    `None` means no tag supplied the field. A field is never the empty
    string: blank tag values are treated as not supplied.
    """

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    year: str | None = None
    genre: str | None = None
    comment: str | None = None
    has_artwork: bool = False
    instrumental_tag: str | None = None
    # Kept even when an ID3v2 comment wins `comment`.
    id3v1_comment: str | None = None
    sources: dict[str, TagSource] = field(default_factory=dict, compare=False)

    def get(self, key: str) -> str | None:
        return getattr(self, key)

    def as_dict(self) -> dict:
        out = {key: self.get(key) for key in TEXT_FIELDS}
        out["has_artwork"] = self.has_artwork
        return out


def _lookup(tags: dict[str, str], key: str) -> str | None:
    value = tags.get(key)
    if value is None or not value.strip():
        return None
    return value


def extract_metadata(decoded: DecodedInfo) -> Metadata:
    """Pick each text field from the ID3v2 tag, falling back to ID3v1.

    The winning value is used as-is; values from both tags are never
    combined, and content such as a malformed year is not validated.
    """
    values = {}
    sources = {}
    for key in TEXT_FIELDS:
        for source, tags in (
            (TagSource.id3v2, decoded.id3v2),
            (TagSource.id3v1, decoded.id3v1),
        ):
            value = _lookup(tags, key)
            if value is not None:
                values[key] = value
                sources[key] = source
                break
        else:
            if key in decoded.id3v2 or key in decoded.id3v1:
                log.debug("ignoring blank {} tag", key)

    return Metadata(
        has_artwork=decoded.has_picture,
        instrumental_tag=decoded.user_text.get("instrumental"),
        id3v1_comment=_lookup(decoded.id3v1, "comment"),
        sources=sources,
        **values,
    )
