"""Driver: enumerate log files, segment each one, write the report."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime

from training_log_parser.config import ParserConfig
from training_log_parser.reader import enumerate_files, read_lines
from training_log_parser.report import ReportWriter, output_path
from training_log_parser.segmenter import (
    Segmenter,
    SegmenterState,
    SequenceEnded,
    SequenceStarted,
)

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    files_parsed: int = 0
    files_failed: int = 0
    lines_matched: int = 0
    sequences_opened: int = 0
    sequences_closed: int = 0
    left_open: bool = False


def process_file(
    path: str,
    segmenter: Segmenter,
    writer: ReportWriter,
    summary: RunSummary | None = None,
    echo: bool = False,
) -> SegmenterState:
    """Segment one file into the report and return the updated state.

    Errors propagate; output already written for the
    file stays in the report.
    """
    summary = summary if summary is not None else RunSummary()
    writer.write_file_header(os.path.basename(path))

    for line in read_lines(path):
        events = segmenter.observe_line(line)
        if not events:
            continue
        summary.lines_matched += 1
        if echo:
            print(line)
        for event in events:
            writer.write_event(event)
            if isinstance(event, SequenceStarted):
                summary.sequences_opened += 1
            elif isinstance(event, SequenceEnded):
                summary.sequences_closed += 1

    return segmenter.state


def parse_log_files(
    config: ParserConfig,
    writer: ReportWriter,
    segmenter: Segmenter | None = None,
) -> RunSummary:
    """Process every file under the configured log folder, in sorted order.

    Any error raised while a file is processed is logged and the file
    skipped. Listing errors propagate and abort the run.
    """
    segmenter = segmenter or Segmenter(config)
    summary = RunSummary()

    for path in enumerate_files(config.log_folder):
        if config.reset_between_files:
            dropped = segmenter.reset()
            if dropped is not None:
                logger.info("Dropped unfinished action sequence before %s", path)
        try:
            process_file(path, segmenter, writer, summary, echo=config.echo_lines)
            summary.files_parsed += 1
        except Exception as e:
            summary.files_failed += 1
            logger.error("There was an error parsing %s: %s", os.path.basename(path), e)

    summary.left_open = segmenter.state.is_open
    if summary.left_open:
        logger.warning(
            "Input ended inside an action sequence (%d action(s) without a footer)",
            len(segmenter.state.open_sequence.actions),
        )
    return summary


def run(config: ParserConfig, now: datetime | None = None) -> RunSummary:
    """Create the report file, write its header, and parse the log folder into it."""
    now = now or datetime.now()
    path = output_path(config, now)
    logger.info("Writing report to %s", path)

    writer = ReportWriter(path, append=config.combine_day_output)
    try:
        writer.write_run_header(now)
        summary = parse_log_files(config, writer)
    finally:
        writer.close()

    logger.info(
        "Parsed %d file(s), %d failed, %d sequence(s) closed",
        summary.files_parsed, summary.files_failed, summary.sequences_closed,
    )
    return summary
