"""Data models for textfile-resumable."""

from dataclasses import dataclass, field

from .exceptions import PersistenceError
from .lines import LineSource


@dataclass
class CheckpointRecord:
    """Persisted resume state for one source file.

    Attributes:
        line: Number of lines already fully processed, which is also the
            0-indexed line to deliver next
    """

    line: int = 0


@dataclass
class ReaderSession:
    """Transient state of one read() invocation.

    Attributes:
        resume_target: Checkpoint line at session start; earlier lines are skipped
        cursor: 0-indexed position of the next line coming from the source
        delivered: Number of lines handed to the callback
        stop_requested: Set by stop(); checked before each line
        persist_error: First checkpoint write failure seen during the session
        source: Line source while the file is open
    """

    resume_target: int
    cursor: int = 0
    delivered: int = 0
    stop_requested: bool = False
    persist_error: PersistenceError | None = None
    source: LineSource | None = field(default=None, repr=False)

    @property
    def skipped(self) -> int:
        """Lines passed over because they were before the resume target."""
        return min(self.cursor, self.resume_target)


@dataclass(frozen=True, slots=True)
class ReadResult:
    """Outcome of a successful read session.

    Attributes:
        line: Checkpoint line persisted when the session ended
        delivered: Number of lines passed to the callback
        skipped: Number of lines skipped because they were already processed
        stopped: True if the session ended through stop() rather than EOF
    """

    line: int
    delivered: int
    skipped: int
    stopped: bool
