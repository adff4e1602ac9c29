"""textfile-resumable: line-by-line processing of large text files that picks up where it stopped.

Example:
    >>> from textfile_resumable import TextFileReader
    >>> reader = TextFileReader(save_every=10)
    >>> reader.open("events.txt")
    >>>
    >>> # Resumes after the last checkpointed line
    >>> async def handle(line, line_number):
    ...     await process(line)
    ...     if line_number == 1000:
    ...         reader.stop()
    >>> result = await reader.read(handle)
    >>>
    >>> # Start over on the next read
    >>> reader.reset_checkpoint()
    >>>
    >>> total = await reader.count_lines()
"""

from .checkpoint import checkpoint_path_for, load_checkpoint, save_checkpoint
from .exceptions import (
    AlreadyOpenError,
    AlreadyReadingError,
    MalformedCheckpointError,
    NotOpenedError,
    PersistenceError,
    ReadError,
    ReaderError,
    ReadInProgressError,
    SourceNotFoundError,
)
from .lines import LineSource, count_lines
from .models import CheckpointRecord, ReadResult
from .reader import TextFileReader

__version__ = "0.1.0"
__all__ = [
    # Core
    "TextFileReader",
    "ReadResult",
    # Checkpoints
    "CheckpointRecord",
    "checkpoint_path_for",
    "load_checkpoint",
    "save_checkpoint",
    # Lines
    "LineSource",
    "count_lines",
    # Exceptions
    "ReaderError",
    "AlreadyOpenError",
    "SourceNotFoundError",
    "NotOpenedError",
    "AlreadyReadingError",
    "ReadInProgressError",
    "MalformedCheckpointError",
    "PersistenceError",
    "ReadError",
]
