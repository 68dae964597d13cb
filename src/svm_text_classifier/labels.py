"""Label bookkeeping for the build and inference paths.

Two identifiers exist for a label and they must not be confused:

- the *occurrence count* returned by ``LabelRegistry.observe`` (how many
  documents carried that label so far), used only for reporting;
- the *class id*, the 1-based position of the label in the sorted
  ``LabelTable``. Training lines carry the class id, and prediction
  columns are decoded against the same table order.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator

from .exceptions import IntegrityError, StorageError


class LabelTable:
    """Ordered, read-only list of labels (sorted alphabetically on build).

    Raises:
        IntegrityError: If ``labels`` is empty or has duplicates.
    """

    def __init__(self, labels: Iterable[str]) -> None:
        self._labels = list(labels)
        if not self._labels:
            raise IntegrityError("Label table is empty.")
        if len(set(self._labels)) != len(self._labels):
            raise IntegrityError(f"Label table has duplicate entries: {self._labels}")
        self._positions = {label: i for i, label in enumerate(self._labels)}

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._positions

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    def position(self, label: str) -> int:
        """0-based column position of ``label``."""
        try:
            return self._positions[label]
        except KeyError:
            raise KeyError(f"Unknown label: {label!r}") from None

    def class_id(self, label: str) -> int:
        """Stable 1-based class id written into training lines."""
        return self.position(label) + 1

    def label_for(self, class_id: int) -> str:
        if not 1 <= class_id <= len(self._labels):
            raise KeyError(f"Unknown class id: {class_id}")
        return self._labels[class_id - 1]

    def save(self, path: str | Path) -> None:
        """Write one label per line, in table order."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("".join(f"{label}\n" for label in self._labels), encoding="utf-8")
        except OSError as exc:
            raise StorageError("write label table", path, str(exc)) from exc

    @classmethod
    def load(cls, path: str | Path) -> "LabelTable":
        """Load a label table, preserving file order.

        Raises:
            StorageError: If the file cannot be read.
            IntegrityError: If the file holds no labels.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError("read label table", path, str(exc)) from exc
        labels = [line for line in text.splitlines() if line.strip()]
        if not labels:
            raise IntegrityError(f"Label table {path} is empty.")
        return cls(labels)


class LabelRegistry:
    """Labels seen while traversing a corpus, with occurrence counts."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def observe(self, label: str) -> int:
        """Record one document for ``label`` and return its running count."""
        if not label:
            raise ValueError("Label must be a non-empty string.")
        self._counts[label] += 1
        return self._counts[label]

    def count(self, label: str) -> int:
        return self._counts[label]

    @property
    def counts(self) -> dict[str, int]:
        return {label: self._counts[label] for label in sorted(self._counts)}

    def __len__(self) -> int:
        return len(self._counts)

    def freeze(self) -> LabelTable:
        """Return the alphabetically sorted table of distinct labels."""
        return LabelTable(sorted(self._counts))

    def save(self, path: str | Path) -> LabelTable:
        """Persist the sorted label table and return it."""
        table = self.freeze()
        table.save(path)
        return table
