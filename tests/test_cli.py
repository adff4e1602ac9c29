"""Tests for CLI interface."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from textfile_resumable import CheckpointRecord, load_checkpoint, save_checkpoint
from textfile_resumable.cli import main


@pytest.fixture
def sample_txt(tmp_path: Path) -> Path:
    """Create a sample text file with 50 lines."""
    file_path = tmp_path / "test.txt"
    with open(file_path, "w") as f:
        for i in range(50):
            f.write(f"item_{i + 1}\n")
    return file_path


def run_cli(args: list[str]) -> tuple[int, str, str]:
    """Run CLI via main() and capture output."""
    import io
    from contextlib import redirect_stderr, redirect_stdout

    stdout = io.StringIO()
    stderr = io.StringIO()

    try:
        with redirect_stdout(stdout), redirect_stderr(stderr):
            main(args)
        exit_code = 0
    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0

    return exit_code, stdout.getvalue(), stderr.getvalue()


def checkpoint_of(path: Path) -> Path:
    return path.with_name(path.stem + ".settings.json")


class TestReadCommand:
    """Tests for 'read' subcommand."""

    def test_read_all(self, sample_txt: Path):
        """read prints every line with its number."""
        exit_code, stdout, stderr = run_cli(["read", str(sample_txt)])

        assert exit_code == 0
        lines = stdout.strip().split("\n")
        assert len(lines) == 50
        assert lines[0] == "1 : item_1"
        assert lines[-1] == "50 : item_50"
        assert "Checkpoint at line 50" in stderr
        assert load_checkpoint(checkpoint_of(sample_txt)).line == 50

    def test_stop_after(self, sample_txt: Path):
        """--stop-after limits delivered lines and stores the checkpoint."""
        exit_code, stdout, _ = run_cli(["read", str(sample_txt), "--stop-after", "3"])

        assert exit_code == 0
        assert stdout.strip().split("\n") == ["1 : item_1", "2 : item_2", "3 : item_3"]
        assert load_checkpoint(checkpoint_of(sample_txt)).line == 3

    def test_resumes(self, sample_txt: Path):
        """A second run continues after the previous one."""
        run_cli(["read", str(sample_txt), "--stop-after", "1"])
        _, stdout, _ = run_cli(["read", str(sample_txt), "--stop-after", "1"])

        assert stdout.strip() == "2 : item_2"

    def test_reset_flag(self, sample_txt: Path):
        """--reset starts from the first line."""
        save_checkpoint(checkpoint_of(sample_txt), CheckpointRecord(line=40))
        _, stdout, _ = run_cli(
            ["read", str(sample_txt), "--reset", "--stop-after", "1"]
        )

        assert stdout.strip() == "1 : item_1"

    def test_invalid_save_every(self, sample_txt: Path):
        """Non-positive cadence is rejected by the argument parser."""
        exit_code, _, stderr = run_cli(["read", str(sample_txt), "--save-every", "0"])

        assert exit_code == 2
        assert "must be >= 1" in stderr

    @pytest.mark.parametrize("value", ["0", "-3"])
    def test_invalid_stop_after(self, sample_txt: Path, value: str):
        """--stop-after below 1 is rejected before any line is printed."""
        exit_code, stdout, stderr = run_cli(
            ["read", str(sample_txt), "--stop-after", value]
        )

        assert exit_code == 2
        assert stdout == ""
        assert "must be >= 1" in stderr
        assert not checkpoint_of(sample_txt).exists()

    def test_malformed_checkpoint(self, sample_txt: Path):
        """Malformed checkpoint is reported, not reset."""
        checkpoint_of(sample_txt).write_text("oops")
        exit_code, _, stderr = run_cli(["read", str(sample_txt)])

        assert exit_code == 1
        assert "Malformed checkpoint" in stderr
        assert checkpoint_of(sample_txt).read_text() == "oops"


class TestCountCommand:
    """Tests for 'count' subcommand."""

    def test_count(self, sample_txt: Path):
        exit_code, stdout, _ = run_cli(["count", str(sample_txt)])

        assert exit_code == 0
        assert stdout.strip() == "50"

    def test_count_leaves_checkpoint_alone(self, sample_txt: Path):
        run_cli(["count", str(sample_txt)])
        assert not checkpoint_of(sample_txt).exists()


class TestStatusCommand:
    """Tests for 'status' subcommand."""

    def test_status_basic(self, sample_txt: Path):
        save_checkpoint(checkpoint_of(sample_txt), CheckpointRecord(line=12))
        exit_code, stdout, _ = run_cli(["status", str(sample_txt)])

        assert exit_code == 0
        assert f"File: {sample_txt.resolve()}" in stdout
        assert "Line: 12 of 50" in stdout

    def test_status_json(self, sample_txt: Path):
        exit_code, stdout, _ = run_cli(["status", str(sample_txt), "--json"])

        assert exit_code == 0
        data = json.loads(stdout)
        assert data["line"] == 0
        assert data["total_lines"] == 50
        assert data["checkpoint_exists"] is False
        assert data["checkpoint_file"].endswith("test.settings.json")


class TestResetCommand:
    """Tests for 'reset' subcommand."""

    def test_reset(self, sample_txt: Path):
        save_checkpoint(checkpoint_of(sample_txt), CheckpointRecord(line=33))
        exit_code, stdout, _ = run_cli(["reset", str(sample_txt)])

        assert exit_code == 0
        assert "Checkpoint reset" in stdout
        assert load_checkpoint(checkpoint_of(sample_txt)).line == 0


class TestErrorHandling:
    """Tests for CLI error handling."""

    def test_file_not_found(self, tmp_path: Path):
        exit_code, _, stderr = run_cli(["count", str(tmp_path / "missing.txt")])

        assert exit_code == 1
        assert "Error:" in stderr
        assert "does not exist" in stderr

    def test_no_command(self):
        """Missing subcommand is an argparse error."""
        exit_code, _, _ = run_cli([])
        assert exit_code == 2

    def test_help(self):
        exit_code, stdout, _ = run_cli(["--help"])
        assert exit_code == 0
        assert "textfile-resume" in stdout


class TestModuleExecution:
    """Tests for running the CLI as a module."""

    def test_python_m(self, sample_txt: Path):
        """python -m textfile_resumable.cli works."""
        result = subprocess.run(
            [sys.executable, "-m", "textfile_resumable.cli", "count", str(sample_txt)],
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0
        assert result.stdout.strip() == "50"
