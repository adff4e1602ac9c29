"""Checkpointed line-by-line reader."""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Coroutine, Union

from .checkpoint import checkpoint_path_for, load_checkpoint, save_checkpoint
from .exceptions import (
    AlreadyOpenError,
    AlreadyReadingError,
    NotOpenedError,
    PersistenceError,
    ReadError,
    ReadInProgressError,
    SourceNotFoundError,
)
from .lines import LineSource, count_lines
from .models import CheckpointRecord, ReaderSession, ReadResult

logger = logging.getLogger(__name__)

LineCallback = Callable[[str, int], Union[Awaitable[Any], Any]]


class TextFileReader:
    """Resumable line reader that remembers how far it got.

    Each delivered line advances a checkpoint stored next to the file
    (``name.txt`` -> ``name.settings.json``). The checkpoint is saved every
    ``save_every`` lines and again whenever a read session ends, so the next
    session picks up after the last processed line.

    Example:
        >>> reader = TextFileReader(save_every=10)
        >>> reader.open("events.txt")
        >>> async def handle(line, line_number):
        ...     await process(line)
        ...     if line_number == 500:
        ...         reader.stop()
        >>> result = await reader.read(handle)
        >>> print(f"Stopped at line {result.line}")
    """

    def __init__(
        self,
        save_every: int = 10,
        *,
        encoding: str = "utf-8",
        batch_size: int = 100,
    ) -> None:
        """Create a reader with no file attached.

        Args:
            save_every: Persist the checkpoint every N delivered lines
            encoding: Text encoding of the source file
            batch_size: Number of lines read per worker-thread hop (higher =
                fewer hops, more lines buffered; does not affect checkpoints)
        """
        if save_every < 1:
            raise ValueError(f"save_every must be >= 1, got {save_every}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self._save_every = save_every
        self._encoding = encoding
        self._batch_size = batch_size

        self._file_path: Path | None = None
        self._checkpoint_path: Path | None = None
        self._record: CheckpointRecord | None = None
        self._session: ReaderSession | None = None

    def open(self, file_path: Union[str, Path]) -> None:
        """Attach the reader to a file.

        Args:
            file_path: Path to an existing, readable text file

        Raises:
            AlreadyOpenError: If a file is already attached
            SourceNotFoundError: If the path is not an existing readable file
        """
        if self._file_path is not None:
            raise AlreadyOpenError(self._file_path)

        path = Path(file_path)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise SourceNotFoundError(path)

        self._file_path = path
        self._checkpoint_path = checkpoint_path_for(path)

    @property
    def is_open(self) -> bool:
        """Whether a file has been opened."""
        return self._file_path is not None

    @property
    def is_reading(self) -> bool:
        """Whether a read session is active."""
        return self._session is not None

    @property
    def path(self) -> Path:
        """Path to the opened file, as given to open()."""
        return self._require_open()

    @property
    def checkpoint_path(self) -> Path:
        """Path to the checkpoint file for the opened file."""
        self._require_open()
        assert self._checkpoint_path is not None
        return self._checkpoint_path

    @property
    def save_every(self) -> int:
        """Number of delivered lines between checkpoint saves."""
        return self._save_every

    @property
    def checkpoint(self) -> CheckpointRecord:
        """Current checkpoint record (loaded from disk if none is cached)."""
        self._require_open()
        if self._record is None:
            self._record = load_checkpoint(self.checkpoint_path)
        return replace(self._record)

    def _require_open(self) -> Path:
        if self._file_path is None:
            raise NotOpenedError()
        return self._file_path

    # ─────────────────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────────────────

    def read(self, callback: LineCallback) -> Coroutine[Any, Any, ReadResult]:
        """Start a read session that resumes from the stored checkpoint.

        Preconditions are checked when read() is called. The session itself
        becomes active when the returned coroutine starts running, so a
        coroutine that is cancelled before its first step, or never awaited,
        leaves the reader idle.

        Args:
            callback: Called as ``callback(line, line_number)`` for each line
                after the checkpoint, with a 1-indexed line number. If it
                returns an awaitable, the next line waits for it.

        Returns:
            Coroutine resolving to a ReadResult once the file is exhausted or
            stop() was called

        Raises:
            NotOpenedError: If no file is open
            AlreadyReadingError: If a session is already active
            MalformedCheckpointError: If the stored checkpoint is invalid
        """
        self._require_open()
        if self._session is not None:
            raise AlreadyReadingError()

        # Validate now so a malformed record fails the call itself
        load_checkpoint(self.checkpoint_path)
        return self._run(callback)

    async def _run(self, callback: LineCallback) -> ReadResult:
        """Drive one session; the finally block is the only teardown path."""
        assert self._file_path is not None
        # Another coroutine from read() may have started first
        if self._session is not None:
            raise AlreadyReadingError()

        record = load_checkpoint(self.checkpoint_path)
        self._record = record
        session = ReaderSession(resume_target=record.line)
        self._session = session
        read_error: ReadError | None = None
        logger.debug(
            "Starting read of %s from line %d", self._file_path, session.resume_target
        )

        try:
            try:
                session.source = LineSource(
                    open(self._file_path, "rb"), encoding=self._encoding
                )
            except OSError as e:
                raise ReadError(self._file_path, str(e)) from e

            while not session.stop_requested:
                try:
                    batch = await asyncio.to_thread(
                        session.source.read_batch, self._batch_size
                    )
                except (OSError, ValueError) as e:
                    raise ReadError(self._file_path, str(e)) from e

                if not batch:
                    break

                for line in batch:
                    if session.stop_requested:
                        break

                    if session.cursor < session.resume_target:
                        session.cursor += 1
                        continue

                    result = callback(line, session.cursor + 1)
                    if inspect.isawaitable(result):
                        await result

                    session.cursor += 1
                    session.delivered += 1
                    record.line = session.cursor

                    if session.cursor % self._save_every == 0:
                        self._persist(session)
        except ReadError as e:
            read_error = e
            logger.error("Error while reading %s: %s", self._file_path, e.__cause__)
        finally:
            if session.source is not None:
                try:
                    session.source.end()
                except ValueError:
                    # Cancelled while a worker thread still holds the generator
                    logger.debug("Line source for %s busy at teardown", self._file_path)
            self._persist(session)
            self._session = None
            logger.debug(
                "Finished read of %s at line %d (%d delivered)",
                self._file_path,
                record.line,
                session.delivered,
            )

        if read_error is not None:
            raise read_error
        if session.persist_error is not None:
            raise session.persist_error

        return ReadResult(
            line=record.line,
            delivered=session.delivered,
            skipped=session.skipped,
            stopped=session.stop_requested,
        )

    def _persist(self, session: ReaderSession) -> None:
        """Save the cached record, remembering the first failure."""
        assert self._checkpoint_path is not None and self._record is not None
        try:
            save_checkpoint(self._checkpoint_path, self._record)
        except PersistenceError as e:
            logger.warning("%s (%s)", e, e.__cause__)
            if session.persist_error is None:
                session.persist_error = e

    def stop(self) -> None:
        """Request the active read session to end.

        The session finishes the current line, saves the checkpoint and
        resolves normally. Safe to call from inside the callback. Does
        nothing if no session is active.
        """
        if self._session is None:
            return
        self._session.stop_requested = True

    # ─────────────────────────────────────────────────────────────────────
    # Checkpoint Management
    # ─────────────────────────────────────────────────────────────────────

    def reset_checkpoint(self) -> None:
        """Reset the checkpoint so the next read starts at the first line.

        Raises:
            NotOpenedError: If no file is open
            ReadInProgressError: If a read session is active
            PersistenceError: If the reset record could not be written
        """
        self._require_open()
        if self._session is not None:
            raise ReadInProgressError()

        self._record = CheckpointRecord(line=0)
        save_checkpoint(self.checkpoint_path, self._record)

    def count_lines(self) -> Coroutine[Any, Any, int]:
        """Count all lines in the file, ignoring the checkpoint.

        Returns:
            Coroutine resolving to the total number of lines

        Raises:
            NotOpenedError: If no file is open (raised on call)
            ReadError: If the file cannot be read (raised when awaited)
        """
        return self._count(self._require_open())

    async def _count(self, path: Path) -> int:
        try:
            return await asyncio.to_thread(count_lines, path)
        except OSError as e:
            raise ReadError(path, str(e)) from e

    def __repr__(self) -> str:
        if self._file_path is None:
            return f"TextFileReader(save_every={self._save_every})"
        return (
            f"TextFileReader({str(self._file_path)!r}, "
            f"save_every={self._save_every}, reading={self.is_reading})"
        )
