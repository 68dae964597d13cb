"""Bag-of-words feature vectors in LIBSVM sparse format.

A ``SparseFeatureVector`` maps vocabulary ids to token counts. It is
serialized as space-separated ``id:count`` pairs with ids ascending; an
empty vector serializes to an empty string, which callers treat as "no
recognized tokens".
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional

from .vocabulary import VocabularyIndex


@dataclass(frozen=True)
class SparseFeatureVector:
    """Immutable mapping of feature id to positive count."""

    counts: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for feature_id, count in self.counts.items():
            if feature_id < 1:
                raise ValueError(f"Feature ids must be positive, got {feature_id}")
            if count < 0:
                raise ValueError(f"Counts must be non-negative, got {count} for id {feature_id}")
        # Drop zero entries and fix iteration order to ascending ids.
        ordered = {i: c for i, c in sorted(self.counts.items()) if c}
        object.__setattr__(self, "counts", ordered)

    @property
    def is_empty(self) -> bool:
        return not self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.counts.items())

    def get(self, feature_id: int) -> int:
        return self.counts.get(feature_id, 0)

    @property
    def total(self) -> int:
        """Total number of resolved tokens."""
        return sum(self.counts.values())

    def to_libsvm(self) -> str:
        """Serialize as ``id:count`` pairs, ids ascending."""
        return " ".join(f"{i}:{c}" for i, c in self.counts.items())

    @classmethod
    def parse(cls, text: str) -> "SparseFeatureVector":
        """Parse space-separated ``id:count`` pairs.

        Raises:
            ValueError: On a malformed pair, a repeated id, or ids that
                are not strictly ascending.
        """
        counts: dict[int, int] = {}
        previous = 0
        for pair in text.split():
            raw_id, sep, raw_count = pair.partition(":")
            if not sep:
                raise ValueError(f"Malformed feature pair: {pair!r}")
            try:
                feature_id = int(raw_id)
                count = int(raw_count)
            except ValueError:
                raise ValueError(f"Malformed feature pair: {pair!r}") from None
            if feature_id <= previous:
                raise ValueError(
                    f"Feature ids must be strictly ascending: {feature_id} after {previous}"
                )
            counts[feature_id] = count
            previous = feature_id
        return cls(counts)


def format_instance_line(class_id: int | str, vector: SparseFeatureVector) -> str:
    """Build one LIBSVM line: ``<class_id> <id:count> ...``."""
    features = vector.to_libsvm()
    return f"{class_id} {features}" if features else str(class_id)


def parse_instance_line(line: str) -> tuple[str, SparseFeatureVector]:
    """Split a LIBSVM line into its label token and feature vector."""
    label, _, rest = line.strip().partition(" ")
    if not label:
        raise ValueError("Empty instance line")
    return label, SparseFeatureVector.parse(rest)


class FeatureEncoder:
    """Turn token sequences into sparse count vectors.

    With a growing vocabulary unseen tokens are inserted; with a frozen
    one they are silently dropped.

    Example::

        vocab = VocabularyIndex.growing()
        encoder = FeatureEncoder(vocab)
        encoder.encode(["cat", "dog", "cat"]).to_libsvm()  # "1:2 2:1"
    """

    def __init__(self, vocabulary: VocabularyIndex) -> None:
        self._vocabulary = vocabulary

    @property
    def vocabulary(self) -> VocabularyIndex:
        return self._vocabulary

    def resolve(self, token: str) -> Optional[int]:
        if self._vocabulary.frozen:
            return self._vocabulary.lookup(token)
        return self._vocabulary.lookup_or_insert(token)

    def encode(self, tokens: Iterable[str]) -> SparseFeatureVector:
        counts: Counter[int] = Counter()
        for token in tokens:
            feature_id = self.resolve(token)
            if feature_id is not None:
                counts[feature_id] += 1
        return SparseFeatureVector(dict(counts))
