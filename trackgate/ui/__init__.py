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

"""This module contains all of the core logic for trackgate's command-line
interface. To invoke the CLI, just call trackgate.ui.main(). The actual
CLI commands are implemented in the ui.commands module.
"""

from __future__ import annotations

import errno
import optparse
import os.path
import sys
import traceback

import confuse

from trackgate import IncludeLazyConfig, config, logging, util
from trackgate.ui import commands, core
from trackgate.ui._common import UserError
from trackgate.ui.colors import colorize
from trackgate.ui.core import Subcommand, SubcommandsOptionParser, print_

# On Windows platforms, use colorama to support "ANSI" terminal colors.
if sys.platform == "win32":
    try:
        import colorama
    except ImportError:
        pass
    else:
        colorama.init()

__all__: list[str] = [
    "Subcommand",
    "SubcommandsOptionParser",
    "UserError",
    "colorize",
    "commands",
    "core",
    "main",
    "print_",
]


log: logging.TrackgateLogger = logging.getLogger("trackgate")
if not log.handlers:
    log.addHandler(logging.StreamHandler())
log.propagate = False  # Don't propagate to root handler.


# The main entry point and bootstrapping.


def _configure(options: optparse.Values) -> IncludeLazyConfig:
    """Amend the global configuration object with command line options."""
    # Add any additional config files specified with --config.
    if getattr(options, "config", None) is not None:
        overlay_path = options.config
        del options.config
        config.set_file(overlay_path)
    else:
        overlay_path = None
    config.set_args(options)

    # Configure the logger.
    if config["verbose"].get(int):
        log.set_global_level(logging.DEBUG)
    else:
        log.set_global_level(logging.INFO)

    if overlay_path:
        log.debug("overlaying configuration: {}", overlay_path)

    config_path = config.user_config_path()
    if os.path.isfile(config_path):
        log.debug("user configuration: {}", config_path)
    else:
        log.debug("no user configuration found at {}", config_path)
    return config


def _raw_main(args: list[str]) -> None:
    """A helper function for `main` without top-level exception
    handling.
    """
    parser = SubcommandsOptionParser()
    _ = parser.add_option(
        "-v",
        "--verbose",
        dest="verbose",
        action="count",
        help="log more details (use twice for even more)",
    )
    _ = parser.add_option(
        "-c", "--config", dest="config", help="path to configuration file"
    )
    parser.add_option(
        "-h",
        "--help",
        dest="help",
        action="store_true",
        help="show this help message and exit",
    )
    parser.add_option(
        "--version",
        dest="version",
        action="store_true",
        help=optparse.SUPPRESS_HELP,
    )

    options, subargs = parser.parse_global_options(args)
    _configure(options)
    parser.add_subcommand(*commands.default_commands)

    subcommand, suboptions, subargs = parser.parse_subcommand(subargs)
    subcommand.func(suboptions, subargs)


def main(args: list[str] | None = None) -> None:
    """Run the main command-line interface for trackgate. Includes
    top-level exception handlers that print friendly error messages.
    """
    try:
        _raw_main(args if args is not None else sys.argv[1:])
    except UserError as exc:
        message = exc.args[0] if exc.args else None
        log.error("error: {}", message)
        sys.exit(1)
    except util.HumanReadableError as exc:
        exc.log(log)
        sys.exit(1)
    except confuse.ConfigError as exc:
        log.error("configuration error: {}", exc)
        sys.exit(1)
    except OSError as exc:
        if exc.errno == errno.EPIPE:
            # "Broken pipe". End silently.
            sys.stderr.close()
        else:
            raise
    except KeyboardInterrupt:
        # Silently ignore ^C except in verbose mode.
        log.debug("{}", traceback.format_exc())
