"""Console output that remembers verbosity and colour preferences."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TextIO, TypeVar, Union

T = TypeVar("T")

_RESET = "\x1b[0m"
_ERASE_LINE = "\x1b[K"
_STATUS_WIDTH = 12


class Color(Enum):
    """Terminal foreground colours."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class Verbosity(Enum):
    """The requested verbosity of output."""

    VERY_VERBOSE = "very_verbose"
    VERBOSE = "verbose"
    NORMAL = "normal"
    QUIET = "quiet"


class ColorChoice(Enum):
    """Whether messages should use colour output."""

    ALWAYS = "always"
    NEVER = "never"
    CARGO_AUTO = "auto"


@dataclass(frozen=True)
class TtyWidth:
    """Terminal width: unknown (no tty), known exactly, or a guess."""

    width: Optional[int] = None
    guessed: bool = False

    def diagnostic_terminal_width(self) -> Optional[int]:
        """The width to use for diagnostics; only an exactly known width counts."""
        if self.width is None or self.guessed:
            return None
        return self.width

    def progress_max_width(self) -> Optional[int]:
        """The width used by progress bars, known or guessed."""
        return self.width


def _sgr(color: Optional[Color] = None, *, bold: bool = False, intense: bool = False) -> str:
    codes = [_RESET]
    if bold:
        codes.append("\x1b[1m")
    if color is not None:
        if intense:
            codes.append(f"\x1b[38;5;{color.value + 8}m")
        else:
            codes.append(f"\x1b[{30 + color.value}m")
    return "".join(codes)


def _isatty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError, OSError):
        return False


def _env_allows_color() -> bool:
    if "NO_COLOR" in os.environ:
        return False
    term = os.environ.get("TERM")
    if os.name == "nt":
        return term != "dumb"
    return term is not None and term != "dumb"


def _uses_color(choice: ColorChoice, stream: Any) -> bool:
    if choice is ColorChoice.ALWAYS:
        return True
    if choice is ColorChoice.NEVER:
        return False
    return _isatty(stream) and _env_allows_color()


def _as_text(message: Union[str, bytes]) -> str:
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return message


class Shell:
    """Writes status messages to stderr and data to stdout.

    Created with streams it uses colour according to its colour choice;
    created with :meth:`from_write` everything goes to one plain writer.
    """

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self._write: Optional[TextIO] = None
        self._stdout: TextIO = sys.stdout if stdout is None else stdout
        self._stderr: TextIO = sys.stderr if stderr is None else stderr
        self._stderr_tty = _isatty(self._stderr)
        self._color_choice = ColorChoice.CARGO_AUTO
        self._out_color = False
        self._err_color = False
        self._apply_color_choice(ColorChoice.CARGO_AUTO)
        self.verbosity = Verbosity.VERBOSE
        self._needs_clear = False

    @classmethod
    def from_write(cls, out: TextIO) -> "Shell":
        """A shell writing everything, uncoloured, to a single writer."""
        shell = cls(stdout=out, stderr=out)
        shell._write = out
        shell._stderr_tty = False
        shell._out_color = False
        shell._err_color = False
        return shell

    def __repr__(self) -> str:
        if self._write is not None:
            return f"Shell(verbosity={self.verbosity})"
        return f"Shell(verbosity={self.verbosity}, color_choice={self._color_choice})"

    def _apply_color_choice(self, choice: ColorChoice) -> None:
        self._color_choice = choice
        self._out_color = _uses_color(choice, self._stdout)
        self._err_color = _uses_color(choice, self._stderr)

    def _clear_if_needed(self) -> None:
        if self._needs_clear:
            self.err_erase_line()

    def _message_stderr(
        self, status: Any, message: Any, color: Color, justified: bool
    ) -> None:
        status_text = str(status).rjust(_STATUS_WIDTH) if justified else str(status)
        if self._write is not None:
            w = self._write
            w.write(status_text)
            w.write(f" {message}\n" if message is not None else " ")
            w.write("\n")
            return

        err = self._stderr
        paint = self._err_color

        def style(code: str) -> None:
            if paint:
                err.write(code)

        style(_RESET)
        style(_sgr(color, bold=True))
        err.write(status_text)
        if not justified:
            style(_sgr(bold=True))
        style(_RESET)
        if message is not None:
            err.write(f" {message}")
            style(_sgr(Color.BLACK, intense=True))
            err.write("\n")
        else:
            style(_sgr(Color.BLACK, intense=True))
        style(_RESET)
        if hasattr(err, "flush"):
            err.flush()

    def print(self, status: Any, message: Any, color: Color, justified: bool) -> None:
        """Print a coloured status followed by an optional plain message."""
        if self.verbosity is Verbosity.QUIET:
            return
        self._clear_if_needed()
        self._message_stderr(status, message, color, justified)

    def set_needs_clear(self, needs_clear: bool) -> None:
        """Set whether the next print should clear the current line first."""
        self._needs_clear = needs_clear

    def is_cleared(self) -> bool:
        """True if the current line does not need clearing."""
        return not self._needs_clear

    def err_width(self) -> TtyWidth:
        """The width of the terminal stderr is attached to, if any."""
        if self._write is not None or not self._stderr_tty:
            return TtyWidth()
        try:
            columns = os.get_terminal_size(self._stderr.fileno()).columns
        except (AttributeError, ValueError, OSError):
            return TtyWidth()
        return TtyWidth(columns) if columns > 0 else TtyWidth()

    def is_err_tty(self) -> bool:
        """True if stderr is a terminal."""
        return self._write is None and self._stderr_tty

    def out(self) -> TextIO:
        """The underlying stdout writer."""
        self._clear_if_needed()
        return self._stdout

    def err(self) -> TextIO:
        """The underlying stderr writer."""
        self._clear_if_needed()
        return self._stderr

    def err_erase_line(self) -> None:
        """Erase from the cursor to the end of the line on stderr."""
        if self.err_supports_color():
            self._stderr.write(_ERASE_LINE)
            self._needs_clear = False

    def status(self, status: Any, message: Any) -> None:
        """Right-aligned green status with a message."""
        self.print(status, message, Color.GREEN, True)

    def status_header(self, status: Any) -> None:
        """Right-aligned cyan status without a message."""
        self.print(status, None, Color.CYAN, True)

    def status_with_color(self, status: Any, message: Any, color: Color) -> None:
        """Right-aligned status in the given colour with a message."""
        self.print(status, message, color, True)

    def very_verbose(self, callback: Callable[["Shell"], T]) -> Optional[T]:
        """Run the callback only in very verbose mode."""
        if self.verbosity is Verbosity.VERY_VERBOSE:
            return callback(self)
        return None

    def verbose(self, callback: Callable[["Shell"], T]) -> Optional[T]:
        """Run the callback only in verbose or very verbose mode."""
        if self.verbosity in (Verbosity.VERBOSE, Verbosity.VERY_VERBOSE):
            return callback(self)
        return None

    def concise(self, callback: Callable[["Shell"], T]) -> Optional[T]:
        """Run the callback only when not in verbose mode."""
        if self.verbosity in (Verbosity.VERBOSE, Verbosity.VERY_VERBOSE):
            return None
        return callback(self)

    def error(self, message: Any) -> None:
        """Print a red error message, whatever the verbosity."""
        self._clear_if_needed()
        self._message_stderr("Error:", message, Color.RED, False)

    def set_color_choice(self, color: Optional[str]) -> None:
        """Set colour use from ``always``, ``never``, ``auto`` or None."""
        if self._write is not None:
            return
        choices = {
            "always": ColorChoice.ALWAYS,
            "never": ColorChoice.NEVER,
            "auto": ColorChoice.CARGO_AUTO,
            None: ColorChoice.CARGO_AUTO,
        }
        if color not in choices:
            raise ValueError(
                "argument for --color must be auto, always, or never, "
                f"but found `{color}`"
            )
        self._apply_color_choice(choices[color])

    @property
    def color_choice(self) -> ColorChoice:
        """The colour choice; always NEVER for a plain writer."""
        if self._write is not None:
            return ColorChoice.NEVER
        return self._color_choice

    def err_supports_color(self) -> bool:
        """True if colour codes are written to stderr."""
        return self._write is None and self._err_color

    def out_supports_color(self) -> bool:
        """True if colour codes are written to stdout."""
        return self._write is None and self._out_color

    def _write_styled(self, stream: TextIO, paint: bool, fragment: Any, style: Optional[Color]) -> None:
        if self._write is not None or not paint:
            stream.write(str(fragment))
            return
        stream.write(_RESET)
        stream.write(_sgr(style))
        stream.write(str(fragment))
        stream.write(_RESET)

    def write_stdout(self, fragment: Any, style: Optional[Color]) -> None:
        """Write a fragment to stdout in the given colour; verbosity is not checked."""
        self._write_styled(self._stdout, self._out_color, fragment, style)

    def write_stderr(self, fragment: Any, style: Optional[Color]) -> None:
        """Write a fragment to stderr in the given colour; verbosity is not checked."""
        self._write_styled(self._stderr, self._err_color, fragment, style)

    def print_ansi_stderr(self, message: Union[str, bytes]) -> None:
        """Write a message that may hold ANSI escapes to stderr."""
        self._clear_if_needed()
        self.err().write(_as_text(message))

    def print_ansi_stdout(self, message: Union[str, bytes]) -> None:
        """Write a message that may hold ANSI escapes to stdout."""
        self._clear_if_needed()
        self.out().write(_as_text(message))