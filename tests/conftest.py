"""Shared fixtures for textfile-resumable tests."""

from pathlib import Path

import pytest

FRUITS = [
    "apple",
    "banana",
    "cherry",
    "date",
    "elderberry",
    "fig",
    "grape",
    "honeydew",
    "kiwi",
    "lemon",
    "mango",
    "nectarine",
    "orange",
    "papaya",
    "quince",
    "raspberry",
    "strawberry",
    "tangerine",
    "ugli",
    "watermelon",
]


@pytest.fixture
def fruit_lines() -> list[str]:
    """Lines of the 235-line fruit fixture (6th line is "fig")."""
    return [
        FRUITS[i] if i < len(FRUITS) else f"{FRUITS[i % len(FRUITS)]} {i + 1}"
        for i in range(235)
    ]


@pytest.fixture
def test_txt(tmp_path: Path, fruit_lines: list[str]) -> Path:
    """Create test.txt with 235 newline-terminated lines."""
    file_path = tmp_path / "test.txt"
    with open(file_path, "w", encoding="utf-8", newline="") as f:
        for line in fruit_lines:
            f.write(line + "\n")
    return file_path


@pytest.fixture
def small_txt(tmp_path: Path) -> Path:
    """Create a 10-line file without a trailing newline."""
    file_path = tmp_path / "small.txt"
    file_path.write_bytes("\n".join(f"line {i + 1}" for i in range(10)).encode())
    return file_path


@pytest.fixture
def empty_txt(tmp_path: Path) -> Path:
    """Create an empty file."""
    file_path = tmp_path / "empty.txt"
    file_path.touch()
    return file_path
