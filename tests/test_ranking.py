"""Tests for prediction parsing and ranking."""

from __future__ import annotations

import pytest

from svm_text_classifier.exceptions import IntegrityError
from svm_text_classifier.labels import LabelTable
from svm_text_classifier.models import RankedPrediction
from svm_text_classifier.ranking import PredictionRanker, parse_prediction_output


def _pairs(predictions: list[RankedPrediction]) -> list[tuple[str, float]]:
    return [(p.label, p.probability) for p in predictions]


class TestPredictionRanker:
    def test_sorted_descending(self) -> None:
        ranker = PredictionRanker(["A", "B", "C"])
        assert _pairs(ranker.rank([0.2, 0.7, 0.1])) == [("B", 0.7), ("A", 0.2), ("C", 0.1)]

    def test_ties_keep_table_order(self) -> None:
        ranker = PredictionRanker(["A", "B"])
        assert _pairs(ranker.rank([0.5, 0.5])) == [("A", 0.5), ("B", 0.5)]

    def test_ties_among_many(self) -> None:
        ranker = PredictionRanker(["a", "b", "c", "d"])
        ranked = ranker.rank([0.1, 0.4, 0.1, 0.4])
        assert [p.label for p in ranked] == ["b", "d", "a", "c"]

    def test_accepts_label_table(self) -> None:
        ranker = PredictionRanker(LabelTable(["x", "y"]))
        assert ranker.rank([0.1, 0.9])[0].label == "y"

    def test_empty_labels_fatal(self) -> None:
        with pytest.raises(IntegrityError):
            PredictionRanker([])

    def test_column_count_mismatch(self) -> None:
        with pytest.raises(IntegrityError):
            PredictionRanker(["A", "B"]).rank([1.0])

    def test_out_of_range_probability(self) -> None:
        with pytest.raises(IntegrityError):
            PredictionRanker(["A", "B"]).rank([1.2, -0.2])


class TestParsePredictionOutput:
    def test_plain_positional(self) -> None:
        output = parse_prediction_output("2\n0.2 0.7 0.1\n")
        assert output.predicted == "2"
        assert output.probabilities == [0.2, 0.7, 0.1]
        assert output.column_ids is None

    def test_libsvm_labels_header(self) -> None:
        output = parse_prediction_output("labels 3 1 2\n3 0.6 0.3 0.1\n")
        assert output.predicted == "3"
        assert output.column_ids == [3, 1, 2]
        assert output.probabilities == [0.6, 0.3, 0.1]

    def test_truncated(self) -> None:
        with pytest.raises(IntegrityError):
            parse_prediction_output("labels 1 2\n")

    def test_non_numeric(self) -> None:
        with pytest.raises(IntegrityError):
            parse_prediction_output("1\n0.5 abc\n")


class TestRankOutput:
    def test_positional_output(self) -> None:
        ranker = PredictionRanker(["A", "B", "C"])
        assert _pairs(ranker.rank_output("1\n0.2 0.7 0.1\n"))[0] == ("B", 0.7)

    def test_header_realigns_columns(self) -> None:
        ranker = PredictionRanker(["A", "B", "C"])
        ranked = ranker.rank_output("labels 3 1 2\n3 0.6 0.3 0.1\n")
        assert _pairs(ranked) == [("C", 0.6), ("A", 0.3), ("B", 0.1)]

    def test_header_missing_class_gets_zero(self) -> None:
        ranker = PredictionRanker(["A", "B", "C"])
        ranked = ranker.rank_output("labels 2 1\n2 0.8 0.2\n")
        assert _pairs(ranked) == [("B", 0.8), ("A", 0.2), ("C", 0.0)]

    def test_header_unknown_class_id(self) -> None:
        with pytest.raises(IntegrityError):
            PredictionRanker(["A"]).rank_output("labels 1 5\n1 0.5 0.5\n")

    def test_header_row_length_mismatch(self) -> None:
        with pytest.raises(IntegrityError):
            PredictionRanker(["A", "B"]).rank_output("labels 1 2\n1 0.5\n")
