"""Token to feature-id mapping.

A ``VocabularyIndex`` is either *growing* (corpus build: unseen tokens get
the next id, starting at 1) or *frozen* (inference: loaded from disk,
unknown tokens resolve to ``None``). Ids are dense, ``1..N``, assigned
in first-seen order and never reused.

On disk the table is one ``<id>\\t<word>`` record per line, ascending by id.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional

from .exceptions import IntegrityError, StorageError


class VocabularyIndex:
    """Bidirectional mapping between tokens and positive integer ids."""

    def __init__(self, words: Iterable[str] = (), frozen: bool = False) -> None:
        self._ids: dict[str, int] = {}
        self._words: list[str] = []
        for word in words:
            self._insert(word)
        self._frozen = frozen

    @classmethod
    def growing(cls) -> "VocabularyIndex":
        """Create an empty index that assigns ids on first sight."""
        return cls()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, token: object) -> bool:
        return token in self._ids

    def __iter__(self) -> Iterator[tuple[int, str]]:
        """Iterate ``(id, word)`` pairs in ascending id order."""
        return ((i, word) for i, word in enumerate(self._words, start=1))

    def lookup(self, token: str) -> Optional[int]:
        """Return the id for ``token`` or ``None`` if it is unknown."""
        return self._ids.get(token)

    def lookup_or_insert(self, token: str) -> int:
        """Return the id for ``token``, assigning the next id if new.

        Raises:
            RuntimeError: If the index is frozen.
        """
        existing = self._ids.get(token)
        if existing is not None:
            return existing
        if self._frozen:
            raise RuntimeError("Cannot insert into a frozen vocabulary.")
        return self._insert(token)

    def word_for(self, feature_id: int) -> str:
        """Return the word for ``feature_id``.

        Raises:
            KeyError: If the id is outside ``1..N``.
        """
        if not 1 <= feature_id <= len(self._words):
            raise KeyError(f"Unknown feature id: {feature_id}")
        return self._words[feature_id - 1]

    def freeze(self) -> "VocabularyIndex":
        """Stop accepting new tokens. Returns self for chaining."""
        self._frozen = True
        return self

    def _insert(self, token: str) -> int:
        if not token:
            raise ValueError("Empty tokens cannot be added to the vocabulary.")
        if token in self._ids:
            raise IntegrityError(f"Duplicate vocabulary entry: {token!r}")
        self._words.append(token)
        feature_id = len(self._words)
        self._ids[token] = feature_id
        return feature_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> None:
        """Write the table as ``<id>\\t<word>`` lines, ascending by id."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                for feature_id, word in self:
                    f.write(f"{feature_id}\t{word}\n")
        except OSError as exc:
            raise StorageError("write vocabulary", path, str(exc)) from exc

    @classmethod
    def load(cls, path: str | Path) -> "VocabularyIndex":
        """Load a persisted table as a frozen index.

        Raises:
            StorageError: If the file cannot be read.
            IntegrityError: If a record is malformed or ids are not
                dense and ascending from 1.
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as exc:
            raise StorageError("read vocabulary", path, str(exc)) from exc

        words: list[str] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            raw_id, sep, word = line.partition("\t")
            if not sep or not word:
                raise IntegrityError(f"{path}:{lineno}: expected '<id>\\t<word>', got {line!r}")
            try:
                feature_id = int(raw_id)
            except ValueError:
                raise IntegrityError(f"{path}:{lineno}: invalid id {raw_id!r}") from None
            if feature_id != len(words) + 1:
                raise IntegrityError(
                    f"{path}:{lineno}: expected id {len(words) + 1}, got {feature_id}"
                )
            words.append(word)

        return cls(words, frozen=True)
