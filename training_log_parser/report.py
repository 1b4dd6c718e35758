"""Plain-text report rendering and the output stream that receives it."""

import os
from datetime import datetime
from typing import TextIO

from training_log_parser.config import ParserConfig
from training_log_parser.segmenter import (
    ActionEvent,
    ActionLogged,
    SegmenterEvent,
    SequenceEnded,
    SequenceStarted,
)

BANNER = "==================================="
FILE_RULE = "-----------------------------------"
SEQUENCE_RULE = "\t-------------------------------"
TOOL_LINE = "Use with ODK trainingLogger.js"


def format_seconds(seconds: float) -> str:
    """Millisecond precision, trailing zeros removed: 0, 2.5, 12.345."""
    text = f"{seconds:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_run_header(now: datetime) -> str:
    return "\n".join([
        BANNER,
        "\tPARSED TRAINING LOGS",
        f"\t{now.isoformat()}",
        f"\t{TOOL_LINE}",
        BANNER,
    ])


def format_file_header(file_name: str) -> str:
    return f"\n{FILE_RULE}\nParsing New File: {file_name}"


def format_sequence_header() -> str:
    return f"\n\tLogging New Action Sequence...\n{SEQUENCE_RULE}"


def format_action(action: ActionEvent) -> str:
    lines = [
        f"\t{action.action} [{format_seconds(action.elapsed_seconds)} (s)]:",
        f"\t * {action.primary_detail}",
    ]
    lines.extend(f"\t\t-- {sub}" for sub in action.sub_details)
    return "\n".join(lines)


def format_sequence_footer(duration_seconds: float) -> str:
    return f"{SEQUENCE_RULE}\n\tAction sequence took {format_seconds(duration_seconds)} (s)"


def format_event(event: SegmenterEvent) -> str:
    if isinstance(event, SequenceStarted):
        return f"{format_sequence_header()}\n{format_action(event.action)}"
    if isinstance(event, ActionLogged):
        return format_action(event.action)
    if isinstance(event, SequenceEnded):
        return format_sequence_footer(event.duration_seconds)
    raise TypeError(f"Unknown segmenter event: {event!r}")


def output_path(config: ParserConfig, now: datetime | None = None) -> str:
    """Report path: keyed by date when combining per day, else by full timestamp."""
    now = now or datetime.now()
    if config.combine_day_output:
        stamp = now.date().isoformat()
    else:
        # colons are not allowed in file names on every platform
        stamp = now.isoformat().replace(":", ".")
    return os.path.join(config.output_folder, f"{config.output_prefix}{stamp}")


class ReportWriter:
    """Report file writer with immediate flushing.

    Owns the stream for the whole run; callers must close() it, also when the
    run aborts.
    """

    def __init__(self, path: str, append: bool = False):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self.path = path
        self._file: TextIO | None = open(path, "a" if append else "w", encoding="utf-8")

    def write(self, text: str) -> None:
        if self._file is None:
            raise RuntimeError("ReportWriter is closed")
        self._file.write(text + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def write_run_header(self, now: datetime | None = None) -> None:
        self.write(format_run_header(now or datetime.now()))

    def write_file_header(self, file_name: str) -> None:
        self.write(format_file_header(file_name))

    def write_event(self, event: SegmenterEvent) -> None:
        self.write(format_event(event))
