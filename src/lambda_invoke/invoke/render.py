"""
Rendering of invocation replies.

The reply payload is printed as returned, followed by the tail of the
execution log. Every log line is classified by its prefix and printed in the
color of its category:

    START / END / REPORT lines          grey
    "Process exited before completing"  red
    anything else (user output)         green
"""
from __future__ import annotations

import base64
import binascii
import enum
import logging
import sys
import threading
from typing import Iterator, NamedTuple, Optional, TextIO

from rich.color import ColorSystem
from rich.style import Style

from lambda_invoke.errors import InvocationFailedError
from lambda_invoke.invoke.client import InvocationReply

logger = logging.getLogger(__name__)

CRASH_PHRASE = "Process exited before completing request"
SEPARATOR = "-" * 68

# Output of one reply is written as a unit.
_output_lock = threading.Lock()


class LogCategory(enum.Enum):
    START = "start"
    END = "end"
    REPORT = "report"
    CRASH = "crash"
    CUSTOM = "custom"


class LogLine(NamedTuple):
    text: str
    category: LogCategory


GREY = Style(color="bright_black")
CATEGORY_STYLES = {
    LogCategory.START: GREY,
    LogCategory.END: GREY,
    LogCategory.REPORT: GREY,
    LogCategory.CRASH: Style(color="red"),
    LogCategory.CUSTOM: Style(color="green"),
}

_PREFIXES = (
    ("START ", LogCategory.START),
    ("END ", LogCategory.END),
    ("REPORT ", LogCategory.REPORT),
)


def classify_log_line(text: str) -> LogCategory:
    for prefix, category in _PREFIXES:
        if text.startswith(prefix):
            return category
    if CRASH_PHRASE in text:
        return LogCategory.CRASH
    return LogCategory.CUSTOM


def colorize(text: str, style: Style) -> str:
    """Wrap text in ANSI codes for style without touching its content."""
    return style.render(text, color_system=ColorSystem.STANDARD)


def decode_log_result(log_result: Optional[str]) -> Iterator[LogLine]:
    """Decode a base64 log tail into classified, non-empty lines."""
    if not log_result:
        return
    try:
        text = base64.b64decode(log_result).decode("utf-8", errors="replace")
    except binascii.Error as e:
        logger.warning(f"Log result is not valid base64, printing it as received: {e}")
        text = log_result
    for line in text.split("\n"):
        if line:
            yield LogLine(line, classify_log_line(line))


class ResultRenderer:
    def __init__(self, out: Optional[TextIO] = None):
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def render(self, reply: InvocationReply) -> None:
        """
        Print the reply and its log tail, then raise InvocationFailedError if
        the function reported an error.
        """
        with _output_lock:
            self._print(reply.payload)
            self._print(colorize(SEPARATOR, GREY))
            for line in decode_log_result(reply.log_result):
                self._print(colorize(line.text, CATEGORY_STYLES[line.category]))
            self.out.flush()

        if reply.function_error:
            raise InvocationFailedError()

    def _print(self, text: str) -> None:
        print(text, file=self.out)
