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

"""Bounded-trust decoding of an MP3 buffer into plain data.

Mutagen does the structural parsing. Everything it returns is copied into
a `DecodedInfo` made of strings and numbers only, so nothing downstream
holds references into the original buffer or into Mutagen objects, and
the record can cross a process boundary.
"""

from __future__ import annotations

import io
import multiprocessing
import traceback
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import mutagen
from mutagen.id3 import ID3, ID3NoHeaderError, ParseID3v1
from mutagen.mp3 import BitrateMode, MPEGInfo

from trackgate import logging

from .exceptions import DecodeFailed, DecodeTimeout

if TYPE_CHECKING:
    from collections.abc import Callable
    from multiprocessing.connection import Connection

log = logging.getLogger("trackgate")

# Tag text longer than this is truncated; a hostile file can carry
# megabytes in a single comment frame.
MAX_TEXT_LENGTH = 4096

ID3V1_SIZE = 128
ID3V1_YEAR = slice(93, 97)

# v2.4 frame IDs for the fields we report. Older tags are upgraded to
# these with `update_to_v24` once the raw year has been read.
ID3V2_FRAMES = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
    "year": "TDRC",
    "genre": "TCON",
    "comment": "COMM",
}

BITRATE_MODES = {
    BitrateMode.CBR: "cbr",
    BitrateMode.VBR: "vbr",
    BitrateMode.ABR: "abr",
}


@dataclass(frozen=True)
class DecodedInfo:
    """What the decoder could read from one buffer.

    Tag maps only contain keys for fields the tag actually carried.
    Numbers are copied verbatim from the stream header and still need
    range checks before use.
    """

    id3v2: dict[str, str] = field(default_factory=dict)
    id3v1: dict[str, str] = field(default_factory=dict)
    has_picture: bool = False
    user_text: dict[str, str] = field(default_factory=dict)
    bitrate_bps: int = 0
    bitrate_mode: str = "unknown"
    sample_rate: int = 0
    channels: int = 0
    length_seconds: float = 0.0
    filesize: int = 0


def _text(value) -> str:
    return str(value)[:MAX_TEXT_LENGTH]


def _first_text(frame) -> str | None:
    """Return the first text value of a frame, unwrapping the list."""
    if frame is None:
        return None
    if frame.FrameID == "TCON":
        values = frame.genres
    else:
        values = frame.text
    if not values:
        return None
    return _text(values[0])


def _frame_for(tags, frame_id: str):
    frames = tags.getall(frame_id)
    if not frames:
        return None
    if frame_id == "COMM":
        # Several comment frames may exist; prefer the one without a
        # description, then order by hash key so the choice is stable.
        frames = sorted(frames, key=lambda f: (f.desc != "", f.HashKey))
    return frames[0]


def _raw_year(tags) -> str | None:
    """Return the v2.3 (or v2.2) year text as stored. Converting it to
    v2.4 re-parses it as a timestamp, which drops anything that is not a
    date.
    """
    for frame_id in ("TYER", "TYE"):
        value = _first_text(_frame_for(tags, frame_id))
        if value is not None:
            return value
    return None


def _id3v2_fields(tags) -> dict[str, str]:
    year = _raw_year(tags)
    tags.update_to_v24()

    fields = {}
    for name, frame_id in ID3V2_FRAMES.items():
        value = _first_text(_frame_for(tags, frame_id))
        if name == "year" and year is not None:
            value = year
        if value is not None:
            fields[name] = value
    return fields


def _copy_id3v2(tags) -> tuple[dict[str, str], bool, dict[str, str]]:
    fields = _id3v2_fields(tags)
    return fields, bool(tags.getall("APIC")), _user_text(tags)


def _user_text(tags) -> dict[str, str]:
    out = {}
    for frame in tags.getall("TXXX"):
        if frame.text:
            out.setdefault(frame.desc.lower(), _text(frame.text[0]))
    return out


def _id3v1_fields(data: bytes) -> dict[str, str]:
    tail = data[-ID3V1_SIZE:]
    if len(tail) < ID3V1_SIZE or not tail.startswith(b"TAG"):
        return {}
    frames = ParseID3v1(tail) or {}
    fields = {}
    for name, frame_id in ID3V2_FRAMES.items():
        value = _first_text(frames.get(frame_id))
        if value is not None:
            fields[name] = value

    # Mutagen stores the year as a timestamp; keep the four bytes as
    # written instead.
    year = tail[ID3V1_YEAR].split(b"\x00")[0].strip().decode("latin-1")
    if year:
        fields["year"] = year
    else:
        fields.pop("year", None)
    return fields


def _load_id3v2(fileobj):
    try:
        # Untranslated, so `_raw_year` still sees the stored TYER text.
        return ID3(fileobj, load_v1=False, translate=False)
    except ID3NoHeaderError:
        return None


def _mutagen_call(action: str, func: Callable, *args):
    """Call a Mutagen function, turning every failure into
    `DecodeFailed`. Mutagen on hostile input can raise more than
    `MutagenError`, so unexpected exceptions keep their traceback.
    """
    try:
        return func(*args)
    except mutagen.MutagenError as exc:
        log.debug("{} failed: {}", action, exc)
        raise DecodeFailed(reason=str(exc), verb=action)
    except Exception as exc:
        log.debug("{}", traceback.format_exc())
        raise DecodeFailed(
            reason=f"uncaught Mutagen exception: {exc!r}",
            verb=action,
            tb=traceback.format_exc(),
        )


def decode(data: bytes) -> DecodedInfo:
    """Parse tags and stream information out of `data`.

    Raise `DecodeFailed` when the ID3v2 structure is corrupt or no MPEG
    audio frame can be found.
    """
    fileobj = io.BytesIO(data)
    tags = _mutagen_call("reading the ID3v2 tag", _load_id3v2, fileobj)
    id3v1 = _mutagen_call("reading the ID3v1 tag", _id3v1_fields, data)

    fileobj.seek(0)
    info = _mutagen_call("finding MPEG frames", MPEGInfo, fileobj)

    if tags is not None:
        id3v2, has_picture, user_text = _mutagen_call(
            "copying ID3v2 frames", _copy_id3v2, tags
        )
    else:
        id3v2, has_picture, user_text = {}, False, {}

    return DecodedInfo(
        id3v2=id3v2,
        id3v1=id3v1,
        has_picture=has_picture,
        user_text=user_text,
        bitrate_bps=int(info.bitrate or 0),
        bitrate_mode=BITRATE_MODES.get(info.bitrate_mode, "unknown"),
        sample_rate=int(info.sample_rate or 0),
        channels=int(info.channels or 0),
        length_seconds=float(info.length or 0.0),
        filesize=len(data),
    )


# Isolation boundaries. Each call gets its own worker so a runaway decode
# never shares state with another in-flight analysis.


def _decode_in_child(conn: Connection, data: bytes) -> None:
    try:
        result = ("ok", decode(data))
    except DecodeFailed as exc:
        result = ("failed", (exc._reasonstr(), exc.verb, exc.tb))
    except Exception as exc:
        result = (
            "failed",
            (f"decoder crashed: {exc!r}", "decode", traceback.format_exc()),
        )
    conn.send(result)
    conn.close()


def _decode_in_process(data: bytes, timeout: float) -> DecodedInfo:
    ctx = multiprocessing.get_context()
    receiver, sender = ctx.Pipe(duplex=False)
    proc = ctx.Process(
        target=_decode_in_child,
        args=(sender, data),
        name="trackgate-decode",
        daemon=True,
    )
    proc.start()
    sender.close()
    try:
        if not receiver.poll(timeout):
            log.debug("killing decoder process {} after {}s", proc.pid, timeout)
            raise DecodeTimeout(
                reason=f"no result after {timeout:g} seconds",
                verb="waiting for the decoder",
            )
        try:
            status, payload = receiver.recv()
        except EOFError:
            proc.join()
            raise DecodeFailed(
                reason=f"decoder exited with status {proc.exitcode}",
                verb="decode",
            )
    finally:
        receiver.close()
        if proc.is_alive():
            proc.terminate()
        proc.join()

    if status == "ok":
        return payload
    reason, verb, tb = payload
    raise DecodeFailed(reason=reason, verb=verb, tb=tb)


def _decode_in_thread(data: bytes, timeout: float) -> DecodedInfo:
    executor = ThreadPoolExecutor(
        max_workers=1, thread_name_prefix="trackgate-decode"
    )
    future = executor.submit(decode, data)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        # The worker thread cannot be killed; its result is dropped.
        raise DecodeTimeout(
            reason=f"no result after {timeout:g} seconds",
            verb="waiting for the decoder",
        )
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def run_decoder(data: bytes, isolation: str, timeout: float) -> DecodedInfo:
    """Decode `data` inside the boundary named by `isolation`.

    ``process`` and ``thread`` enforce `timeout`; ``inline`` runs in the
    calling thread without one.
    """
    log.debug("decoding {} bytes ({})", len(data), isolation)
    if isolation == "process":
        return _decode_in_process(data, timeout)
    if isolation == "thread":
        return _decode_in_thread(data, timeout)
    return decode(data)
