"""Lazy line source over a binary stream."""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import IO, Iterator, Union


def _strip_terminator(raw: bytes) -> bytes:
    """Remove exactly one line terminator from a raw line."""
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n") or raw.endswith(b"\r"):
        return raw[:-1]
    return raw


class LineSource:
    """Lazy, bounded-memory sequence of decoded lines.

    Lines are split on ``\\n`` (``\\r\\n`` is handled as one terminator) and
    returned without their terminator. A stream ending in a newline does not
    produce a trailing empty line, so a 10-line file always yields 10 lines
    whether or not its last line is terminated.

    Example:
        >>> with open("data.txt", "rb") as f:
        ...     source = LineSource(f)
        ...     for line in source:
        ...         print(line)
    """

    def __init__(
        self,
        stream: IO[bytes],
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        """Wrap an open binary stream.

        Args:
            stream: Binary file object positioned at the first line
            encoding: Text encoding used to decode each line
            errors: Decode error handling, as for bytes.decode()
        """
        self._stream = stream
        self._encoding = encoding
        self._errors = errors
        self._lines = self._generate()
        self._lines_read = 0
        self._ended = False
        self._pending_error: Exception | None = None

    def _generate(self) -> Iterator[str]:
        for raw in self._stream:
            yield _strip_terminator(raw).decode(self._encoding, self._errors)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._ended:
            raise StopIteration
        try:
            line = next(self._lines)
        except StopIteration:
            self.end()
            raise
        self._lines_read += 1
        return line

    def read_batch(self, size: int) -> list[str]:
        """Pull up to ``size`` lines.

        If reading fails part way through a batch, the lines read before the
        failure are returned and the error is raised by the next call.

        Returns:
            The next lines in order; an empty list once the stream is exhausted

        Raises:
            OSError: If the underlying stream fails
            UnicodeDecodeError: If a line cannot be decoded
        """
        if self._pending_error is not None:
            error, self._pending_error = self._pending_error, None
            raise error

        batch: list[str] = []
        try:
            for line in islice(self, size):
                batch.append(line)
        except (OSError, ValueError) as e:
            if not batch:
                raise
            self._pending_error = e
        return batch

    def end(self) -> None:
        """Stop producing lines and close the underlying stream.

        Safe to call more than once.
        """
        if self._ended:
            return
        self._ended = True
        try:
            self._lines.close()
        finally:
            self._stream.close()

    @property
    def ended(self) -> bool:
        """Whether the source is exhausted or was ended early."""
        return self._ended

    @property
    def lines_read(self) -> int:
        """Number of lines produced so far."""
        return self._lines_read


def count_lines(file_path: Union[str, Path], *, chunk_size: int = 1_048_576) -> int:
    """Count lines in a file using the same rules as LineSource.

    Counts newline bytes in fixed-size chunks; nothing is decoded, so the
    count does not depend on the file's encoding being valid.

    Args:
        file_path: Path to the text file
        chunk_size: Bytes read per chunk

    Returns:
        Total number of lines
    """
    total = 0
    last = b""
    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            total += chunk.count(b"\n")
            last = chunk[-1:]
    # An unterminated last line still counts
    if last and last != b"\n":
        total += 1
    return total
