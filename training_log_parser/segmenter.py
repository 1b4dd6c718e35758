"""Action-sequence segmentation.

Turns LogLines into a stream of events: a sequence opens on the first
qualifying line seen while idle, collects one ActionEvent per line, and
closes when a line's raw details exactly equal an end-of-flow keyword.

State lives in an explicit SegmenterState so the caller decides whether an
unfinished sequence carries over into the next file (the default) or is
dropped. A sequence still open when input runs out never gets a footer.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

from training_log_parser.config import ParserConfig
from training_log_parser.parser import LogLine, parse_line, split_details


@dataclass(frozen=True)
class ActionEvent:
    elapsed_seconds: float
    action: str
    primary_detail: str
    sub_details: tuple[str, ...] = ()


@dataclass
class ActionSequence:
    start_timestamp_ms: float
    actions: list[ActionEvent] = field(default_factory=list)
    total_duration_seconds: Optional[float] = None


@dataclass
class SegmenterState:
    open_sequence: Optional[ActionSequence] = None
    previous_timestamp_ms: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.open_sequence is not None


@dataclass(frozen=True)
class SequenceStarted:
    sequence: ActionSequence
    action: ActionEvent


@dataclass(frozen=True)
class ActionLogged:
    action: ActionEvent


@dataclass(frozen=True)
class SequenceEnded:
    sequence: ActionSequence
    duration_seconds: float


SegmenterEvent = Union[SequenceStarted, ActionLogged, SequenceEnded]


class Segmenter:
    """Line-by-line state machine grouping log lines into action sequences."""

    def __init__(self, config: ParserConfig | None = None, state: SegmenterState | None = None):
        self.config = config or ParserConfig()
        self.state = state if state is not None else SegmenterState()

    def observe_line(self, raw_line: str) -> list[SegmenterEvent]:
        """Feed one raw line and return the events it produced.

        Non-qualifying lines return [] and leave the state untouched.
        MalformedLineError propagates, also without touching the state.
        """
        log_line = parse_line(raw_line, self.config.line_format)
        if log_line is None:
            return []
        return self.observe(log_line)

    def observe(self, log_line: LogLine) -> list[SegmenterEvent]:
        state = self.state
        events: list[SegmenterEvent] = []

        if state.open_sequence is None:
            action = self._action_event(0.0, log_line)
            sequence = ActionSequence(start_timestamp_ms=log_line.timestamp_ms, actions=[action])
            state.open_sequence = sequence
            events.append(SequenceStarted(sequence=sequence, action=action))
        else:
            sequence = state.open_sequence
            elapsed = (log_line.timestamp_ms - state.previous_timestamp_ms) / 1000
            action = self._action_event(elapsed, log_line)
            sequence.actions.append(action)
            events.append(ActionLogged(action=action))
        state.previous_timestamp_ms = log_line.timestamp_ms

        # Exact match on the unsplit details string.
        if log_line.details in self.config.end_of_flow:
            duration = (log_line.timestamp_ms - sequence.start_timestamp_ms) / 1000
            sequence.total_duration_seconds = duration
            state.open_sequence = None
            events.append(SequenceEnded(sequence=sequence, duration_seconds=duration))

        return events

    def observe_lines(self, lines: Iterable[str]) -> Iterator[SegmenterEvent]:
        for line in lines:
            yield from self.observe_line(line)

    def reset(self) -> Optional[ActionSequence]:
        """Drop any open sequence without a footer. Returns the dropped sequence."""
        dropped = self.state.open_sequence
        self.state.open_sequence = None
        return dropped

    def _action_event(self, elapsed: float, log_line: LogLine) -> ActionEvent:
        primary, subs = split_details(log_line.details, self.config.line_format.details_separator)
        return ActionEvent(
            elapsed_seconds=elapsed,
            action=log_line.action,
            primary_detail=primary,
            sub_details=subs,
        )
