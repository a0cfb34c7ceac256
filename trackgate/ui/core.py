from __future__ import annotations

import optparse
import sys
import textwrap
from typing import TYPE_CHECKING

from trackgate import config
from trackgate.ui._common import UserError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any, TextIO

if not sys.version_info < (3, 12):
    from typing import override  # pyright: ignore[reportUnreachable]
else:
    from typing_extensions import override


# Encoding utilities.


def _out_encoding() -> str:
    """Get the encoding to use for *outputting* strings to the console."""
    return _stream_encoding(sys.stdout)


def _stream_encoding(stream: TextIO | Any, default: str = "utf-8") -> str:
    """A helper for `_out_encoding`: get the stream's preferred encoding,
    using a configured override or a default fallback if neither is
    available.
    """
    # Configured override?
    encoding = config["terminal_encoding"].get()
    if encoding:
        return encoding

    # For testing: When sys.stdout or sys.stdin is a StringIO under the
    # test harness, it doesn't have an `encoding` attribute. Just use
    # UTF-8.
    if not hasattr(stream, "encoding"):
        return default

    # Python's guessed output stream encoding, or UTF-8 as a fallback
    # (e.g., when piped to a file).
    return stream.encoding or default


def print_(*strings: str, end: str = "\n") -> None:
    """Like print, but rather than raising an error when a character
    is not in the terminal's encoding's character set, just silently
    replaces it.

    The `end` keyword argument behaves similarly to the built-in `print`
    (it defaults to a newline).
    """
    txt: str = f"{' '.join(strings or ('',))}{end}"

    # Encode the string and write it to stdout. To avoid throwing
    # errors and use our configurable encoding override, we use the
    # underlying bytes buffer instead.
    if hasattr(sys.stdout, "buffer"):
        out: bytes = txt.encode(_out_encoding(), "replace")
        _ = sys.stdout.buffer.write(out)
        _ = sys.stdout.buffer.flush()
    else:
        # In our test harnesses (e.g., StringIO), sys.stdout.buffer
        # does not exist. We instead just record the text string.
        _ = sys.stdout.write(txt)


def indent(count: int) -> str:
    """Returns a string with `count` many spaces."""
    return " " * count


# Subcommand parsing infrastructure.
#
# This is a fairly generic subcommand parser for optparse. It is
# maintained externally here:
# https://gist.github.com/462717
# There you will also find a better description of the code and a more
# succinct example program.


class Subcommand:
    """A subcommand of a root command-line application that may be
    invoked by a SubcommandOptionParser.
    """

    def __init__(
        self,
        name: str,
        func: Callable[[optparse.Values, list[str]], Any] | None = None,
        parser: optparse.OptionParser | None = None,
        help: str = "",
        aliases: tuple[str, ...] = (),
        hide: bool = False,
    ) -> None:
        """Creates a new subcommand. name is the primary way to invoke
        the subcommand; aliases are alternate names. parser is an
        OptionParser responsible for parsing the subcommand's options.
        help is a short description of the command. If no parser is
        given, it defaults to a new, empty OptionParser.
        """
        self.name: str = name
        self.func: Callable[[optparse.Values, list[str]], Any]
        if func:
            self.func = func

        self.parser: optparse.OptionParser = parser or optparse.OptionParser()
        self.aliases: tuple[str, ...] = aliases
        self.help: str = help
        self.hide: bool = hide
        self._root_parser: optparse.OptionParser | None = None

    def print_help(self) -> None:
        self.parser.print_help()

    def parse_args(self, args: list[str]) -> tuple[optparse.Values, list[str]]:
        return self.parser.parse_args(args)

    @property
    def root_parser(self) -> optparse.OptionParser | None:
        return self._root_parser

    @root_parser.setter
    def root_parser(self, root_parser: optparse.OptionParser) -> None:
        self._root_parser = root_parser
        self.parser.prog = f"{root_parser.get_prog_name()} {self.name}"


class SubcommandsOptionParser(optparse.OptionParser):
    """A variant of OptionParser that parses subcommands and their
    arguments.
    """

    def __init__(self, **kwargs) -> None:
        """Create a new subcommand-aware option parser. All of the
        options to OptionParser.__init__ are supported in addition
        to subcommands, a sequence of Subcommand objects.
        """
        # A more helpful default usage.
        if "usage" not in kwargs:
            kwargs["usage"] = """
    %prog COMMAND [ARGS...]
    %prog help COMMAND"""
        kwargs["add_help_option"] = False

        super().__init__(**kwargs)

        # Our root parser needs to stop on the first unrecognized argument.
        self.disable_interspersed_args()

        self.subcommands: list[Subcommand] = []

    def add_subcommand(self, *cmds: Subcommand) -> None:
        """Adds a Subcommand object to the parser's list of commands."""
        for cmd in cmds:
            cmd.root_parser = self
            self.subcommands.append(cmd)

    # Add the list of subcommands to the help message.
    @override
    def format_help(
        self, formatter: optparse.HelpFormatter | None = None
    ) -> str:
        out: str = super().format_help(formatter)
        if formatter is None:
            formatter = self.formatter

        result: list[str] = ["\n" + formatter.format_heading("Commands")]
        formatter.indent()

        # Generate the display names (including aliases).
        # Also determine the help position.
        disp_names: list[str] = []
        help_position: int = 0
        subcommands: list[Subcommand] = [
            c for c in self.subcommands if not c.hide
        ]
        subcommands.sort(key=lambda c: c.name)
        for subcommand in subcommands:
            name = subcommand.name
            if subcommand.aliases:
                name += f" ({', '.join(subcommand.aliases)})"
            disp_names.append(name)

            # Set the help position based on the max width.
            proposed_help_position: int = (
                len(name) + formatter.current_indent + 2
            )
            if proposed_help_position <= formatter.max_help_position:
                help_position = max(help_position, proposed_help_position)

        # Add each subcommand to the output.
        for subcommand, name in zip(subcommands, disp_names):
            # Lifted directly from optparse.py.
            name_width: int = help_position - formatter.current_indent - 2
            indent_first: int
            if len(name) > name_width:
                name = f"{indent(formatter.current_indent)}{name}\n"
                indent_first = help_position
            else:
                name = f"{indent(formatter.current_indent)}{name:<{name_width}}\n"
                indent_first = 0
            result.append(name)
            help_width: int = formatter.width - help_position
            help_lines: list[str] = textwrap.wrap(subcommand.help, help_width)
            help_line: str = help_lines[0] if help_lines else ""
            result.append(f"{indent(indent_first)}{help_line}\n")
            result.extend(
                [f"{indent(help_position)}{line}\n" for line in help_lines[1:]]
            )
        formatter.dedent()

        return f"{out}{''.join(result)}"

    def _subcommand_for_name(self, name: str) -> Subcommand | None:
        """Return the subcommand in self.subcommands matching the
        given name. The name may either be the name of a subcommand or
        an alias. If no subcommand matches, returns None.
        """
        return next(
            (
                subcommand
                for subcommand in self.subcommands
                if name == subcommand.name or name in subcommand.aliases
            ),
            None,
        )

    def parse_global_options(self, args: list[str]):
        """Parse options up to the subcommand argument. Returns a tuple
        of the options object and the remaining arguments.
        """
        options, subargs = self.parse_args(args)

        # Force the help command
        if options.help:
            subargs = ["help"]
        elif options.version:
            subargs = ["version"]
        return options, subargs

    def parse_subcommand(self, args: list[str]):
        """Given the `args` left unused by a `parse_global_options`,
        return the invoked subcommand, the subcommand options, and the
        subcommand arguments.
        """
        # Help is default command
        if not args:
            args = ["help"]

        cmdname: str = args.pop(0)
        subcommand: Subcommand | None = self._subcommand_for_name(cmdname)
        if not subcommand:
            raise UserError(f"unknown command '{cmdname}'")

        suboptions, subargs = subcommand.parse_args(args)
        return subcommand, suboptions, subargs
