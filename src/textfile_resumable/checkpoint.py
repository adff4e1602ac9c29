"""Checkpoint persistence (save/load the resume line to disk)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Union

from .exceptions import MalformedCheckpointError, PersistenceError
from .models import CheckpointRecord

logger = logging.getLogger(__name__)

# Replaces the source's final extension: data.txt -> data.settings.json
CHECKPOINT_SUFFIX = ".settings.json"


def checkpoint_path_for(file_path: Union[str, Path]) -> Path:
    """Derive the checkpoint location for a source file.

    The checkpoint lives next to the source with its final extension replaced,
    so ``logs/app.txt`` maps to ``logs/app.settings.json``. Files that differ
    only in their final extension share a checkpoint.
    """
    path = Path(file_path)
    return path.with_name(path.stem + CHECKPOINT_SUFFIX)


def load_checkpoint(checkpoint_path: Path) -> CheckpointRecord:
    """Load a checkpoint record from disk.

    Args:
        checkpoint_path: Path to the checkpoint file

    Returns:
        The stored record, or a record at line 0 if the file does not exist

    Raises:
        MalformedCheckpointError: If the file exists but holds no valid record
        PersistenceError: If the file exists but cannot be read
    """
    try:
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return CheckpointRecord(line=0)
    except json.JSONDecodeError as e:
        raise MalformedCheckpointError(checkpoint_path, f"invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise MalformedCheckpointError(checkpoint_path, "not UTF-8 text") from e
    except OSError as e:
        raise PersistenceError(checkpoint_path) from e

    if not isinstance(data, dict) or "line" not in data:
        raise MalformedCheckpointError(checkpoint_path, "missing 'line' field")

    line = data["line"]
    # bool is an int subclass; reject it explicitly
    if not isinstance(line, int) or isinstance(line, bool):
        raise MalformedCheckpointError(
            checkpoint_path, f"'line' must be an integer, got {line!r}"
        )
    if line < 0:
        raise MalformedCheckpointError(
            checkpoint_path, f"'line' must be non-negative, got {line}"
        )

    return CheckpointRecord(line=line)


def save_checkpoint(checkpoint_path: Path, record: CheckpointRecord) -> None:
    """Save a checkpoint record, replacing any previous one atomically.

    The record is written to a temporary sibling file which then replaces
    the target, so readers see either the old or the new record.

    Args:
        checkpoint_path: Where to save the checkpoint
        record: The record to persist

    Raises:
        PersistenceError: If the record could not be written
    """
    tmp_path = checkpoint_path.with_name(checkpoint_path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"line": record.line}, f, separators=(",", ":"))
        os.replace(tmp_path, checkpoint_path)
    except OSError as e:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temporary checkpoint %s", tmp_path)
        raise PersistenceError(checkpoint_path, record.line) from e

    logger.debug("Saved checkpoint line=%d to %s", record.line, checkpoint_path)
