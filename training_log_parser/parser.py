"""Training log line parser — frozen dataclass + token split."""

import math
import re
from dataclasses import dataclass

from training_log_parser.config import LineFormat

# Token positions within a qualifying line.
MARKER_INDEX = 2
TIME_INDEX = 3
ACTION_INDEX = 4
DETAILS_INDEX = 5

# Plain decimal or exponent notation; no nan, inf, or digit separators.
TIME_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class MalformedLineError(ValueError):
    """A line carried the log marker but its tokens could not be parsed."""

    def __init__(self, message: str, raw: str):
        super().__init__(f"{message}: {raw!r}")
        self.raw = raw


@dataclass(frozen=True)
class LogLine:
    timestamp_ms: float
    action: str
    details: str
    raw: str


def is_qualifying(tokens: list[str], line_format: LineFormat) -> bool:
    """True if the split line has the marker at its expected position."""
    return len(tokens) > MARKER_INDEX and tokens[MARKER_INDEX] == line_format.marker


def parse_time(time_token: str, line_format: LineFormat) -> float:
    """Return epoch milliseconds from a ``Time=<number>`` token.

    Raises ValueError for anything but a finite decimal number.
    """
    value = time_token.replace(line_format.time_prefix, "").strip()
    if not TIME_PATTERN.match(value):
        raise ValueError(f"not a timestamp: {value!r}")
    timestamp = float(value)
    if not math.isfinite(timestamp):
        raise ValueError(f"timestamp out of range: {value!r}")
    return timestamp


def parse_line(line: str, line_format: LineFormat | None = None) -> LogLine | None:
    """Parse a single raw line into a LogLine.

    Returns None for lines that fail the shape check. Raises MalformedLineError
    when the marker is present but the remaining tokens are missing or the
    timestamp is not a number.
    """
    line_format = line_format or LineFormat()
    stripped = line.rstrip("\r\n")
    tokens = stripped.split(line_format.token_delimiter)
    # trailing empty tokens do not count, so ".../CLICKED/" has no details token
    while tokens and tokens[-1] == "":
        tokens.pop()
    if not is_qualifying(tokens, line_format):
        return None

    if len(tokens) <= DETAILS_INDEX:
        raise MalformedLineError(
            f"expected {DETAILS_INDEX + 1} tokens, got {len(tokens)}", stripped
        )

    try:
        timestamp_ms = parse_time(tokens[TIME_INDEX], line_format)
    except ValueError:
        raise MalformedLineError("unparsable timestamp", stripped) from None

    return LogLine(
        timestamp_ms=timestamp_ms,
        action=tokens[ACTION_INDEX],
        details=tokens[DETAILS_INDEX],
        raw=stripped,
    )


def split_details(details: str, separator: str = "--") -> tuple[str, tuple[str, ...]]:
    """Split a details string into (primary, sub_details).

    Trailing empty segments are dropped; the primary is always present.
    """
    parts = details.split(separator)
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts[0], tuple(parts[1:])
