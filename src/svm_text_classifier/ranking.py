"""Decoding of external probability estimates into ranked labels."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .exceptions import IntegrityError
from .labels import LabelTable
from .models import RankedPrediction

# svm-predict -b 1 writes "labels <id> <id> ..." as its first line.
_LABELS_HEADER = "labels"


@dataclass(frozen=True)
class PredictionOutput:
    """Parsed contents of one single-instance prediction file."""

    predicted: str
    probabilities: list[float]
    column_ids: Optional[list[int]] = None


def parse_prediction_output(text: str) -> PredictionOutput:
    """Parse the output of one probability-estimation run.

    Line 1 identifies the predicted label; line 2 holds one probability
    per label column. When line 1 is a LIBSVM ``labels`` header, it
    gives the class id of each column and line 2 starts with the
    predicted class id.

    Raises:
        IntegrityError: If the output is truncated or non-numeric.
    """
    lines = [line.split() for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise IntegrityError(
            f"Prediction output needs a header and a probability row, got {len(lines)} line(s)"
        )
    header, row = lines[0], lines[1]

    column_ids: Optional[list[int]] = None
    if header[0] == _LABELS_HEADER:
        try:
            column_ids = [int(token) for token in header[1:]]
        except ValueError:
            raise IntegrityError(f"Invalid labels header: {' '.join(header)}") from None
        predicted, row = row[0], row[1:]
    else:
        predicted = header[0]

    try:
        probabilities = [float(token) for token in row]
    except ValueError:
        raise IntegrityError(f"Non-numeric probability row: {' '.join(row)}") from None

    return PredictionOutput(predicted=predicted, probabilities=probabilities, column_ids=column_ids)


class PredictionRanker:
    """Pair probability columns with table labels and sort them.

    Ties keep table order: ``sorted`` is stable and the input is laid
    out in table order before sorting.

    Raises:
        IntegrityError: If the label table is empty.
    """

    def __init__(self, table: LabelTable | Sequence[str]) -> None:
        labels = list(table)
        if not labels:
            raise IntegrityError("Cannot rank predictions against an empty label table.")
        self._labels = labels

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    def rank(self, probabilities: Sequence[float]) -> list[RankedPrediction]:
        """Rank a probability row whose k-th column is the k-th label."""
        if len(probabilities) != len(self._labels):
            raise IntegrityError(
                f"Got {len(probabilities)} probability columns for {len(self._labels)} labels"
            )
        for value in probabilities:
            if math.isnan(value) or not 0.0 <= value <= 1.0:
                raise IntegrityError(f"Probability out of range: {value}")

        pairs = [RankedPrediction(label, p) for label, p in zip(self._labels, probabilities)]
        return sorted(pairs, key=lambda pred: pred.probability, reverse=True)

    def rank_output(self, text: str) -> list[RankedPrediction]:
        """Parse raw prediction output and rank it."""
        output = parse_prediction_output(text)
        if output.column_ids is None:
            return self.rank(output.probabilities)
        return self.rank(self._align(output))

    def _align(self, output: PredictionOutput) -> list[float]:
        """Reorder header-labelled columns into table order."""
        column_ids = output.column_ids or []
        if len(column_ids) != len(output.probabilities):
            raise IntegrityError(
                f"Header lists {len(column_ids)} classes but row has "
                f"{len(output.probabilities)} probabilities"
            )
        aligned = [0.0] * len(self._labels)
        for class_id, probability in zip(column_ids, output.probabilities):
            if not 1 <= class_id <= len(self._labels):
                raise IntegrityError(
                    f"Class id {class_id} is outside the label table (1..{len(self._labels)})"
                )
            aligned[class_id - 1] = probability
        return aligned
