"""Custom exceptions for textfile-resumable."""

from pathlib import Path


class ReaderError(Exception):
    """Base class for all textfile-resumable errors.

    Lets callers catch every failure raised by the reader with a single
    except clause.
    """


# ─────────────────────────────────────────────────────────────────────
# Precondition Errors
# ─────────────────────────────────────────────────────────────────────


class AlreadyOpenError(ReaderError):
    """Raised when open() is called on a reader that already has a file.

    Attributes:
        file_path: Path of the file that is already open
    """

    def __init__(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path)
        super().__init__(f"File already opened: {self.file_path}")


class SourceNotFoundError(ReaderError, FileNotFoundError):
    """Raised when the path given to open() is not an existing, readable file.

    Attributes:
        file_path: The path that could not be opened
    """

    def __init__(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path)
        super().__init__(f"File does not exist or is not readable: {self.file_path}")


class NotOpenedError(ReaderError):
    """Raised when an operation needs an open file but none was opened."""

    def __init__(self) -> None:
        super().__init__("File not opened")


class AlreadyReadingError(ReaderError):
    """Raised when read() is called while a read session is active."""

    def __init__(self) -> None:
        super().__init__("A read session is already in progress")


class ReadInProgressError(ReaderError):
    """Raised when the checkpoint is reset while a read session is active."""

    def __init__(self) -> None:
        super().__init__("Cannot reset the checkpoint while reading")


# ─────────────────────────────────────────────────────────────────────
# Checkpoint Errors
# ─────────────────────────────────────────────────────────────────────


class MalformedCheckpointError(ReaderError):
    """Checkpoint file exists but does not hold a valid record.

    The record is never silently reset; delete the file or call
    reset_checkpoint() to start over.

    Attributes:
        checkpoint_path: Path to the offending checkpoint file
        reason: Short description of what is wrong with it
    """

    def __init__(self, checkpoint_path: Path | str, reason: str) -> None:
        self.checkpoint_path = Path(checkpoint_path)
        self.reason = reason
        super().__init__(f"Malformed checkpoint {self.checkpoint_path}: {reason}")


class PersistenceError(ReaderError):
    """Checkpoint could not be written (permission denied, disk full, ...).

    The underlying OSError is available as ``__cause__``.

    Also raised when an existing checkpoint file cannot be read at all.

    Attributes:
        checkpoint_path: Where the record was being written
        line: The line value that failed to persist (None for read failures)
    """

    def __init__(self, checkpoint_path: Path | str, line: int | None = None) -> None:
        self.checkpoint_path = Path(checkpoint_path)
        self.line = line
        if line is None:
            message = f"Failed to read checkpoint {self.checkpoint_path}"
        else:
            message = f"Failed to save checkpoint line={line} to {self.checkpoint_path}"
        super().__init__(message)


# ─────────────────────────────────────────────────────────────────────
# Streaming Errors
# ─────────────────────────────────────────────────────────────────────


class ReadError(ReaderError):
    """I/O or decoding failure while streaming the source file.

    The checkpoint has already been persisted when this is raised. The
    original exception is available as ``__cause__``.

    Attributes:
        file_path: Path of the file being read
    """

    def __init__(self, file_path: Path | str, reason: str) -> None:
        self.file_path = Path(file_path)
        super().__init__(f"Error while reading {self.file_path}: {reason}")
