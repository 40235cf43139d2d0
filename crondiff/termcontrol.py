# Copyright Red Hat
#
# crondiff/termcontrol.py - Cron job differ terminal color control
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Terminal color control
"""
from typing import List, Optional, TextIO
import curses
import sys

#: Valid values for the ``color`` argument of ``TermControl``.
COLOR_MODES = ["auto", "always", "never"]

#: ANSI SGR sequences used when color is forced without terminfo support.
_ANSI_CODES = {
    "BLACK": "\033[30m",
    "RED": "\033[31m",
    "GREEN": "\033[32m",
    "YELLOW": "\033[33m",
    "BLUE": "\033[34m",
    "MAGENTA": "\033[35m",
    "CYAN": "\033[36m",
    "WHITE": "\033[37m",
}

_ANSI_RESET = "\033[0m"


class TermControl:
    """
    A class for portable terminal color output.

    Uses the curses package to set up appropriate terminal control
    sequences for the current terminal.

    Inspired by and adapted from:

      https://code.activestate.com/recipes/475116-using-terminfo-for-portable-color-output-cursor-co/

      Copyright Edward Loper and released under the PSF license.

    `TermControl` defines a set of instance variables whose values are
    initialized to the control sequence necessary to set a given color or
    mode. These can be simply included in normal output to the terminal:

        >>> term = TermControl()
        >>> print('This is ' + term.GREEN + 'green' + term.NORMAL)

    Alternatively, the `colorize()` method wraps a string in the
    sequences for a named color:

        >>> term = TermControl()
        >>> print(term.colorize("green", "GREEN"))

    If the terminal doesn't support a given action, or color is disabled,
    then the value of the corresponding instance variable is ''. As a
    result the above code still works on terminals that do not support
    color, except that the output will not be colored.
    """

    # Output modes:
    NORMAL: str = ""  #: Turn off all modes

    # Foreground colors:
    BLACK: str = ""  #: Black foreground color
    BLUE: str = ""  #: Blue foreground color
    GREEN: str = ""  #: Green foreground color
    CYAN: str = ""  #: Cyan foreground color
    RED: str = ""  #: Red foreground color
    MAGENTA: str = ""  #: Magenta foreground color
    YELLOW: str = ""  #: Yellow foreground color
    WHITE: str = ""  #: White foreground color

    # Terminal size:
    columns: Optional[int] = None  #: Terminal width

    _STRING_CAPABILITIES: List[str] = "NORMAL:sgr0".split()
    _LEGACY_COLORS: List[str] = (
        """BLACK BLUE GREEN CYAN RED MAGENTA YELLOW WHITE""".split()
    )
    _ANSI_COLORS: List[str] = "BLACK RED GREEN YELLOW BLUE MAGENTA CYAN WHITE".split()

    def _force_ansi(self):
        for color, code in _ANSI_CODES.items():
            setattr(self, color, code)
        setattr(self, "NORMAL", _ANSI_RESET)

    def _init_colors(self):
        """
        Initialize terminal color codes.
        """
        set_fg = self._tigetstr("setf")
        if set_fg:
            set_fg = set_fg.encode("utf8")
            for i, color in enumerate(self._LEGACY_COLORS):
                setattr(self, color, curses.tparm(set_fg, i).decode("utf8") or "")
        set_fg_ansi = self._tigetstr("setaf")
        if set_fg_ansi:
            set_fg_ansi = set_fg_ansi.encode("utf8")
            for i, color in enumerate(self._ANSI_COLORS):
                setattr(self, color, curses.tparm(set_fg_ansi, i).decode("utf8") or "")

    def __init__(self, term_stream: Optional[TextIO] = None, color: str = "auto"):
        """
        Initialize terminal capabilities.

        If the output stream is not a tty, color is "never", or terminal
        setup fails, the instance will have no terminal capabilities (all
        control attributes remain empty strings). With color "always" ANSI
        color sequences are used if terminfo cannot provide them.

        :param term_stream: Output stream to probe for capabilities.
        :type term_stream: ``Optional[TextIO]``
        :param color: A string to control color rendering: "auto", "always", or
                      "never".
        :type color: ``str``
        """
        if color not in COLOR_MODES:
            raise ValueError(f"Invalid color mode: {color}")

        # Default to stdout
        if term_stream is None:
            term_stream = sys.stdout

        self.term_stream = term_stream
        self.color = color

        if color == "never":
            return

        # If the stream isn't a tty, then assume it has no capabilities.
        if color != "always":
            if not hasattr(term_stream, "isatty") or not term_stream.isatty():
                return

        # Check the terminal type.  If we fail, then assume that the
        # terminal has no capabilities.
        try:
            curses.setupterm()
        # curses.error does not reliably behave as an Exception subclass
        # when caught directly.
        except BaseException as err:  # pylint: disable=broad-exception-caught
            # Preserve normal interruption/termination semantics.
            if isinstance(err, (KeyboardInterrupt, SystemExit)):
                raise
            if color == "always":
                self._force_ansi()
            return

        cols = curses.tigetnum("cols")
        self.columns = cols if cols > 0 else None

        for capability in self._STRING_CAPABILITIES:
            (attr, cap_name) = capability.split(":")
            setattr(self, attr, self._tigetstr(cap_name) or "")

        self._init_colors()

        if color == "always" and not self.RED:
            self._force_ansi()

    @property
    def enabled(self) -> bool:
        """
        ``True`` if this instance emits color sequences.
        """
        return bool(self.RED)

    def _tigetstr(self, cap_name):
        # String capabilities can include "delays" of the form "$<2>".
        # For any modern terminal, we should be able to just ignore
        # these, so strip them out.
        cap = curses.tigetstr(cap_name)
        cap = cap.decode(encoding="utf8") if cap else ""
        return cap.split("$", maxsplit=1)[0]

    def colorize(self, text: str, color: str) -> str:
        """
        Wrap ``text`` in the control sequences for ``color``.

        :param text: The text to color.
        :type text: ``str``
        :param color: The name of a color attribute, e.g. "RED".
        :type color: ``str``
        :returns: The colored text, or ``text`` unchanged if color is not
                  available.
        :rtype: ``str``
        """
        code = getattr(self, color, "")
        if not code:
            return text
        return code + text + self.NORMAL
