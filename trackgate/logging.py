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


"""Loggers for trackgate.

`getLogger(name)` returns a logger that formats its messages with
`str.format` placeholders (``log.debug("decoding {} bytes", n)``) and
whose level belongs to the current thread, so a decode worker thread does
not inherit the verbosity the CLI set on the main thread. Everything else
is the standard library's `logging`.
"""

from __future__ import annotations

import threading
from copy import copy
from logging import (
    DEBUG,
    ERROR,
    INFO,
    NOTSET,
    WARNING,
    Handler,
    Logger,
    StreamHandler,
)

__all__ = [
    "DEBUG",
    "ERROR",
    "INFO",
    "NOTSET",
    "WARNING",
    "Handler",
    "StreamHandler",
    "TrackgateLogger",
    "getLogger",
]


def _logsafe(val):
    """Decode bytes leniently so an undecodable filename or tag value
    never makes a log call fail.
    """
    if isinstance(val, bytes):
        return val.decode("utf-8", "replace")
    return val


class _FormatMessage:
    """Deferred `str.format` of a message, done only if it is emitted."""

    def __init__(self, msg: str, args: tuple):
        self.msg = msg
        self.args = args

    def __str__(self):
        return self.msg.format(*[_logsafe(a) for a in self.args])


class TrackgateLogger(Logger):
    def __init__(self, name, level=NOTSET):
        self._thread_level = threading.local()
        self.default_level = NOTSET
        super().__init__(name, level)

    @property
    def level(self):
        return getattr(self._thread_level, "level", self.default_level)

    @level.setter
    def level(self, value):
        self._thread_level.level = value

    def set_global_level(self, level):
        """Set the level on this thread and the default for every
        thread that has not set its own.
        """
        self.default_level = level
        self.setLevel(level)

    def _log(self, level, msg, args, *rest, **kwargs):
        # Messages without arguments are logged verbatim, so tracebacks
        # containing braces come through intact.
        if isinstance(msg, str) and args:
            msg = _FormatMessage(msg, args)
            args = ()
        return super()._log(level, msg, args, *rest, **kwargs)


_manager = copy(Logger.manager)
_manager.loggerClass = TrackgateLogger


def getLogger(name=None):  # noqa: N802
    """Return the named `TrackgateLogger`, or the root logger."""
    if name:
        return _manager.getLogger(name)
    return Logger.root
