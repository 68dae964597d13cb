"""Data models shared by the build and inference paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .features import SparseFeatureVector


class Split(str, Enum):
    """Partition a corpus instance is routed to."""

    TRAIN = "train"
    TEST = "test"


@dataclass(frozen=True)
class CorpusDocument:
    """A labeled document discovered on disk, not yet read."""

    label: str
    path: Path


@dataclass(frozen=True)
class CorpusInstance:
    """One encoded document. Immutable once its vector is computed."""

    text: str
    label: str
    vector: SparseFeatureVector
    split: Split
    source: Optional[Path] = None


@dataclass(frozen=True)
class RankedPrediction:
    """A single (label, probability) entry of a classification."""

    label: str
    probability: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(
                f"Probability for '{self.label}' must be in [0, 1], got {self.probability}"
            )

    def to_dict(self) -> dict:
        return {"label": self.label, "probability": round(self.probability, 6)}


@dataclass
class ClassificationResult:
    """Ranked output of one classification request.

    An empty result means none of the input tokens were present in the
    vocabulary; scaling and prediction were skipped.
    """

    predictions: list[RankedPrediction] = field(default_factory=list)
    token_count: int = 0
    matched_features: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.predictions

    @property
    def top(self) -> Optional[RankedPrediction]:
        """Highest-probability prediction, or ``None`` for an empty result."""
        return self.predictions[0] if self.predictions else None

    def limit(self, n: int | None) -> "ClassificationResult":
        """Return a copy holding only the first ``n`` predictions."""
        if n is None:
            return self
        return ClassificationResult(
            predictions=self.predictions[:n],
            token_count=self.token_count,
            matched_features=self.matched_features,
        )

    def to_dict(self) -> dict:
        return {
            "empty": self.is_empty,
            "token_count": self.token_count,
            "matched_features": self.matched_features,
            "predictions": [p.to_dict() for p in self.predictions],
        }


@dataclass
class BuildReport:
    """Summary of one corpus build."""

    index_dir: Path
    document_count: int = 0
    vocabulary_size: int = 0
    labels: list[str] = field(default_factory=list)
    label_counts: dict[str, int] = field(default_factory=dict)
    train_count: int = 0
    test_count: int = 0
    empty_documents: int = 0
    model_trained: bool = False
    artifacts: dict[str, Path] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "index_dir": str(self.index_dir),
            "document_count": self.document_count,
            "vocabulary_size": self.vocabulary_size,
            "labels": self.labels,
            "label_counts": self.label_counts,
            "train_count": self.train_count,
            "test_count": self.test_count,
            "empty_documents": self.empty_documents,
            "model_trained": self.model_trained,
            "artifacts": {name: str(path) for name, path in self.artifacts.items()},
        }
