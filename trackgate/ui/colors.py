from __future__ import annotations

import os
from functools import cache
from itertools import chain
from typing import Final, Literal

from trackgate import config
from trackgate.ui._common import UserError

# ANSI terminal colorization code heavily inspired by pygments:
# https://bitbucket.org/birkenfeld/pygments-main/src/default/pygments/console.py
# (pygments is by Tim Hatch, Armin Ronacher, et al.)

COLOR_ESCAPE: Final = "\x1b"
CODE_BY_COLOR: Final = {
    # Styles.
    "normal": 0,
    "bold": 1,
    "faint": 2,
    "underline": 4,
    "inverse": 7,
    # Text colors.
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}
RESET_COLOR: Final = f"{COLOR_ESCAPE}[39;49;00m"
ColorName = Literal[
    "text_success",
    "text_warning",
    "text_error",
    "text_faint",
]


@cache
def get_color_config() -> dict[ColorName, str]:
    """Parse and validate color configuration, converting names to ANSI
    codes. Raises a `UserError` for unknown color names.
    """
    colors_by_color_name: dict[ColorName, list[str]] = {
        k: (v if isinstance(v, list) else [v])
        for k, v in config["ui"]["colors"].flatten().items()
    }

    if invalid_colors := (
        set(chain.from_iterable(colors_by_color_name.values()))
        - CODE_BY_COLOR.keys()
    ):
        raise UserError(
            f"Invalid color(s) in configuration: {', '.join(invalid_colors)}"
        )

    return {
        n: ";".join(str(CODE_BY_COLOR[c]) for c in colors)
        for n, colors in colors_by_color_name.items()
    }


def colorize(color_name: ColorName, text: str) -> str:
    """Apply ANSI color formatting to text based on configuration settings.

    Returns colored text when color output is enabled and NO_COLOR environment
    variable is not set, otherwise returns plain text unchanged.
    """
    if config["ui"]["color"].get(bool) and "NO_COLOR" not in os.environ:
        color_code: str = get_color_config()[color_name]
        return f"{COLOR_ESCAPE}[{color_code}m{text}{RESET_COLOR}"
    return text


def score_color(total: int) -> ColorName:
    """Pick the color used to display a total score."""
    if total >= 80:
        return "text_success"
    if total >= 50:
        return "text_warning"
    return "text_error"
