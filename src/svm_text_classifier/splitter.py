"""Train/test routing around a single shared rescaling pass.

The external rescaler must see train and test rows together so both
partitions are scaled against one reference range. Rows are therefore
written to one combined file, rescaled once, and cut back into train
and test by position.

Positional reconstruction is only sound because the combined sequence
is always ``train_lines + test_lines``: every train row precedes every
test row, whatever order documents were routed in. The scaled output
must have exactly as many rows as went in, otherwise reconstruction
fails with ``IntegrityError``.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Optional, Sequence

from .exceptions import IntegrityError, StorageError
from .models import Split

DEFAULT_TRAIN_RATIO = 0.8


class CorpusSplitter:
    """Assign encoded lines to train or test and rebuild scaled partitions.

    Args:
        train_ratio: Probability that a line is routed to train.
        rng: Random source for the per-line draw. Pass a seeded
            ``random.Random`` for reproducible splits.
    """

    def __init__(
        self,
        train_ratio: float = DEFAULT_TRAIN_RATIO,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= train_ratio <= 1.0:
            raise ValueError(f"train_ratio must be in [0, 1], got {train_ratio}")
        self.train_ratio = train_ratio
        self._rng = rng or random.Random()
        self._train: list[str] = []
        self._test: list[str] = []

    @property
    def train_lines(self) -> list[str]:
        return list(self._train)

    @property
    def test_lines(self) -> list[str]:
        return list(self._test)

    def __len__(self) -> int:
        return len(self._train) + len(self._test)

    def draw(self) -> Split:
        """Independent draw: train with probability ``train_ratio``."""
        return Split.TRAIN if self._rng.random() < self.train_ratio else Split.TEST

    def add(self, line: str, split: Optional[Split] = None) -> Split:
        """Route one encoded line, drawing its split unless given."""
        if "\n" in line:
            raise ValueError("Instance lines must not contain newlines.")
        split = split or self.draw()
        if split is Split.TRAIN:
            self._train.append(line)
        else:
            self._test.append(line)
        return split

    def combined_lines(self) -> list[str]:
        """All lines grouped by partition: train first, then test."""
        return self._train + self._test

    def write_combined(self, path: str | Path) -> Path:
        """Persist the combined sequence for the external rescaler."""
        return write_lines(path, self.combined_lines())

    def reconstruct(self, scaled_lines: Sequence[str]) -> tuple[list[str], list[str]]:
        """Cut scaled combined output back into (train, test).

        Raises:
            IntegrityError: If the row count differs from the number of
                lines that went into the combined file.
        """
        expected = len(self._train) + len(self._test)
        if len(scaled_lines) != expected:
            raise IntegrityError(
                f"Scaled corpus has {len(scaled_lines)} rows, expected {expected} "
                f"({len(self._train)} train + {len(self._test)} test)"
            )
        cut = len(self._train)
        return list(scaled_lines[:cut]), list(scaled_lines[cut:])

    def reconstruct_files(
        self,
        scaled_path: str | Path,
        train_path: str | Path,
        test_path: str | Path,
    ) -> tuple[int, int]:
        """Read the scaled combined file and write the two partitions.

        Returns:
            ``(train_count, test_count)``.
        """
        train, test = self.reconstruct(read_lines(scaled_path))
        write_lines(train_path, train)
        write_lines(test_path, test)
        return len(train), len(test)


def read_lines(path: str | Path) -> list[str]:
    """Read non-blank lines from a text file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StorageError("read", path, str(exc)) from exc
    return [line for line in text.splitlines() if line.strip()]


def write_lines(path: str | Path, lines: Sequence[str]) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(f"{line}\n")
    except OSError as exc:
        raise StorageError("write", path, str(exc)) from exc
    return path
