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

"""This module provides the default commands for trackgate's command-line
interface.
"""

import json
import os
from platform import python_version

import yaml

import trackgate
from trackgate import config, logging
from trackgate.analysis import (
    Analyzer,
    AnalyzerConfig,
    ReleaseConfig,
    classify,
    classify_batch,
    parse_duration,
)
from trackgate.ui._common import UserError
from trackgate.ui.colors import colorize, score_color
from trackgate.ui.core import Subcommand, indent, print_
from trackgate.util import displayable_name

# Global logger.
log = logging.getLogger("trackgate")

# The list of default subcommands. This is populated with Subcommand
# objects that can be fed to a SubcommandsOptionParser.
default_commands = []

# Placeholders accepted by `classify` for a track of unknown length.
UNKNOWN_DURATIONS = ("-", "?")


# help: Print help text for commands


class HelpCommand(Subcommand):
    def __init__(self):
        super().__init__(
            "help",
            aliases=("?",),
            help="give detailed help on a specific sub-command",
        )

    def func(self, opts, args):
        if args:
            cmdname = args[0]
            helpcommand = self.root_parser._subcommand_for_name(cmdname)
            if not helpcommand:
                raise UserError(f"unknown command '{cmdname}'")
            helpcommand.print_help()
        else:
            self.root_parser.print_help()


default_commands.append(HelpCommand())


# analyze: Score MP3 files.


def read_upload(path, max_size):
    """Read a file the way the intake workflow would receive it.

    Files over `max_size` are not read at all; an empty buffer with the
    real declared size lets the analyzer reject them.
    """
    try:
        size = os.path.getsize(path)
        if size > max_size:
            return b"", size
        with open(path, "rb") as f:
            return f.read(), size
    except OSError as exc:
        raise UserError(f"could not read {displayable_name(path)}: {exc}")


def show_result(result):
    """Print a human-readable summary of one `AnalysisResult`."""
    if not result.ok:
        print_(
            f"{result.filename}:",
            colorize("text_error", result.error_kind.value),
            result.message,
        )
        return

    report, audio = result.report, result.audio
    print_(
        f"{result.filename}:",
        colorize(score_color(report.total_score), f"{report.total_score}/100"),
    )
    print_(
        f"{indent(2)}metadata {report.metadata_score}/40,"
        f" audio {report.audio_score}/30,"
        f" professional {report.professional_score}/30"
    )
    details = (
        f"{audio.duration_formatted},"
        f" {audio.bitrate_kbps} kbps {audio.bitrate_mode.value},"
        f" {audio.sample_rate_hz} Hz, {audio.channels} channel(s),"
        f" {audio.filesize_formatted}"
    )
    print_(f"{indent(2)}{colorize('text_faint', details)}")
    if report.missing_tags:
        print_(f"{indent(2)}missing tags: {', '.join(report.missing_tags)}")
    if result.instrumental:
        print_(f"{indent(2)}looks instrumental")
    for line in report.display_recommendations():
        print_(f"{indent(2)}- {line}")


def analyze_func(opts, args):
    if not args:
        raise UserError("no input files given")

    try:
        analyzer = Analyzer(AnalyzerConfig.from_view(config["analysis"]))
    except ValueError as exc:
        raise UserError(f"invalid analysis configuration: {exc}")

    results = []
    for path in args:
        data, size = read_upload(path, analyzer.config.max_size)
        results.append(
            analyzer.analyze(data, os.path.basename(path), declared_size=size)
        )

    if opts.format == "json":
        print_(json.dumps([r.as_dict() for r in results], indent=2))
    elif opts.format == "yaml":
        print_(
            yaml.safe_dump(
                [r.as_dict() for r in results],
                sort_keys=False,
                allow_unicode=True,
            ),
            end="",
        )
    else:
        for result in results:
            show_result(result)

    failed = [r for r in results if not r.ok]
    if failed:
        raise UserError(f"{len(failed)} of {len(results)} files rejected")
    if opts.min_score is not None:
        low = [r for r in results if r.report.total_score < opts.min_score]
        if low:
            raise UserError(
                f"{len(low)} of {len(results)} files scored below "
                f"{opts.min_score}"
            )


analyze_cmd = Subcommand(
    "analyze", help="score MP3 files for submission", aliases=("qc",)
)
analyze_cmd.parser.add_option(
    "-f",
    "--format",
    choices=("text", "json", "yaml"),
    default="text",
    help="output format: text, json or yaml",
)
analyze_cmd.parser.add_option(
    "-m",
    "--min-score",
    type="int",
    dest="min_score",
    help="fail when a file scores below this value",
)
analyze_cmd.parser.usage = "%prog [options] FILE..."
analyze_cmd.func = analyze_func
default_commands.append(analyze_cmd)


# classify: Designate a release as Single, EP or Album.


def classify_func(opts, args):
    if opts.tracks is not None:
        if args:
            raise UserError("give either --tracks or durations, not both")
        try:
            release_type = classify(opts.tracks, opts.minutes or 0.0)
        except ValueError as exc:
            raise UserError(str(exc))
        print_(str(release_type))
        return

    durations = []
    try:
        for arg in args:
            if arg in UNKNOWN_DURATIONS:
                durations.append(None)
            else:
                durations.append(parse_duration(arg))
        release_type = classify_batch(
            durations, ReleaseConfig.from_view(config["release"])
        )
    except ValueError as exc:
        raise UserError(str(exc))
    print_(str(release_type))


classify_cmd = Subcommand(
    "classify", help="classify a release from its track durations"
)
classify_cmd.parser.add_option(
    "-t", "--tracks", type="int", help="number of tracks in the release"
)
classify_cmd.parser.add_option(
    "-M",
    "--minutes",
    type="float",
    help="total duration in minutes (with --tracks)",
)
classify_cmd.parser.usage = "%prog [options] M:SS [M:SS...]"
classify_cmd.func = classify_func
default_commands.append(classify_cmd)


# config: Show the configuration.


def config_func(opts, args):
    # Make sure lazy configuration is loaded
    config.resolve()

    # Print paths.
    if opts.paths:
        filenames = []
        for source in config.sources:
            if not opts.defaults and source.default:
                continue
            if source.filename:
                filenames.append(source.filename)

        # In case the user config file does not exist, prepend it to the
        # list.
        user_path = config.user_config_path()
        if user_path not in filenames:
            filenames.insert(0, user_path)

        for filename in filenames:
            print_(displayable_name(filename))

    # Dump configuration.
    else:
        config_out = config.dump(full=opts.defaults)
        if config_out.strip() != "{}":
            print_(config_out)
        else:
            print_(
                "Empty configuration. Use --defaults to show the full"
                " default configuration."
            )


config_cmd = Subcommand("config", help="show the configuration")
config_cmd.parser.add_option(
    "-p",
    "--paths",
    action="store_true",
    help="show files that configuration was loaded from",
)
config_cmd.parser.add_option(
    "-d",
    "--defaults",
    action="store_true",
    help="include the default configuration",
)
config_cmd.func = config_func
default_commands.append(config_cmd)


# version: Show current trackgate version.


def show_version(opts, args):
    print_(f"trackgate version {trackgate.__version__}")
    print_(f"Python version {python_version()}")


version_cmd = Subcommand("version", help="output version information")
version_cmd.func = show_version
default_commands.append(version_cmd)
