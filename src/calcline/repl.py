"""Interactive read-eval-print loop.

The loop accumulates lines into a buffer and hands the whole buffer to
`calcline.evaluate` after every line. An incomplete expression switches to the
continuation prompt; a syntax error prints the buffer with a caret under the
offending character and starts over.
"""

from __future__ import annotations

import enum
import logging
import math
import re
from collections.abc import Callable
from decimal import Decimal
from typing import IO

from rich.console import Console
from rich.text import Text

from calcline.config import CalcConfig, DisplayConfig
from calcline.diagnostics import caret_lines, flatten
from calcline.errors import CalcIncompleteError, CalcSyntaxError
from calcline.evaluator import evaluate

try:
    import readline
except ImportError:  # pragma: no cover - e.g. Windows without pyreadline
    readline = None  # type: ignore[assignment]

logger = logging.getLogger("calcline.repl")

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

BANNER = "Evaluate math expressions using + - * / % ^ ()"


class Outcome(enum.Enum):
    SKIPPED = "skipped"
    VALUE = "value"
    ERROR = "error"
    INCOMPLETE = "incomplete"


def format_value(value: float) -> str:
    """Render a result without exponent notation; integral values drop `.0`."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        sign = "-" if math.copysign(1.0, value) < 0 else ""
        return sign + str(abs(int(value)))
    return format(Decimal(repr(value)), "f")


def make_console(
    display: DisplayConfig, *, no_color: bool = False, file: IO[str] | None = None
) -> Console:
    """Build the console used for prompts, results and error carets."""

    if no_color or display.color == "never":
        return Console(file=file, color_system=None, highlight=False)
    if display.color == "always":
        return Console(file=file, force_terminal=True, highlight=False)
    return Console(file=file, highlight=False)


class Repl:
    def __init__(self, config: CalcConfig | None = None, console: Console | None = None) -> None:
        self.config = config if config is not None else CalcConfig()
        self.console = console if console is not None else make_console(self.config.display)
        self.buffer = ""
        self.history: list[str] = []
        self._readline_history = False

    @property
    def prompt(self) -> str:
        if self.buffer:
            return self.config.repl.continuation_prompt
        return self.config.repl.prompt

    def _record(self, entry: str) -> None:
        if not self.config.repl.history:
            return
        entry = flatten(entry)
        self.history.append(entry)
        if self._readline_history:
            readline.add_history(entry)

    def _print_error(self, text: str, err: CalcSyntaxError) -> None:
        display = self.config.display
        source, pointer = caret_lines(text, err.position, display.error_indent)
        self.console.print()
        # Wrapping would break the caret alignment.
        self.console.print(Text(source), soft_wrap=True)
        self.console.print(
            Text(pointer, style=display.error_style) + Text(err.message), soft_wrap=True
        )

    def feed(self, line: str) -> Outcome:
        """Submit one line of input and act on the evaluation result."""

        if not self.buffer and not line.strip():
            return Outcome.SKIPPED

        text = f"{self.buffer}\n{line}" if self.buffer else line
        try:
            value = evaluate(text)
        except CalcIncompleteError:
            logger.debug("Incomplete input, waiting for more: %r", text)
            self.buffer = text
            return Outcome.INCOMPLETE
        except CalcSyntaxError as e:
            logger.debug("Syntax error at %d: %s", e.position, e.message)
            self.buffer = ""
            self._print_error(text, e)
            self._record(text)
            return Outcome.ERROR

        self.buffer = ""
        self._record(text)
        self.console.print(Text(format_value(value)))
        return Outcome.VALUE

    def render_prompt(self, prompt: str) -> str:
        """Style `prompt` for `input()`.

        With readline loaded, escape sequences are wrapped in \\001/\\002 so
        readline leaves them out of the prompt width when redrawing the line.
        """

        with self.console.capture() as capture:
            self.console.print(Text(prompt, style=self.config.display.prompt_style), end="")
        rendered = capture.get()
        if readline is not None:
            rendered = _ANSI_ESCAPE.sub(lambda m: f"\001{m.group(0)}\002", rendered)
        return rendered

    def _read_line(self, prompt: str) -> str:
        return input(self.render_prompt(prompt))

    def run(self, read_line: Callable[[str], str] | None = None) -> None:
        """Read and evaluate lines until end of input or interrupt."""

        if read_line is None:
            read_line = self._read_line
            if readline is not None and self.config.repl.history:
                # History entries are whole buffers, added by _record().
                readline.set_auto_history(False)
                self._readline_history = True

        while True:
            try:
                line = read_line(self.prompt)
            except (EOFError, KeyboardInterrupt):
                logger.debug("End of session")
                self.console.print()
                return
            self.feed(line)
