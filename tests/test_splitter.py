"""Tests for train/test routing and reconstruction after rescaling."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from svm_text_classifier.exceptions import IntegrityError
from svm_text_classifier.models import Split
from svm_text_classifier.splitter import CorpusSplitter, read_lines, write_lines


def _marker_rescale(lines: list[str]) -> list[str]:
    """Stand-in rescaler: rewrites every row but keeps its marker token."""
    return [f"{line.split()[0]} scaled" for line in lines]


class TestRouting:
    def test_draw_respects_extremes(self) -> None:
        assert CorpusSplitter(1.0).draw() is Split.TRAIN
        assert CorpusSplitter(0.0).draw() is Split.TEST

    def test_ratio_roughly_respected(self) -> None:
        splitter = CorpusSplitter(0.8, rng=random.Random(0))
        draws = [splitter.draw() for _ in range(5000)]
        share = draws.count(Split.TRAIN) / len(draws)
        assert 0.77 < share < 0.83

    def test_seeded_draws_reproducible(self) -> None:
        a = CorpusSplitter(rng=random.Random(11))
        b = CorpusSplitter(rng=random.Random(11))
        assert [a.draw() for _ in range(50)] == [b.draw() for _ in range(50)]

    def test_invalid_ratio(self) -> None:
        with pytest.raises(ValueError):
            CorpusSplitter(1.5)

    def test_explicit_split(self) -> None:
        splitter = CorpusSplitter()
        splitter.add("1 1:1", Split.TEST)
        splitter.add("2 2:1", Split.TRAIN)
        assert splitter.train_lines == ["2 2:1"]
        assert splitter.test_lines == ["1 1:1"]

    def test_newline_in_line_rejected(self) -> None:
        with pytest.raises(ValueError):
            CorpusSplitter().add("1 1:1\n2 2:1")


class TestCombinedOrdering:
    def test_combined_groups_train_before_test(self) -> None:
        splitter = CorpusSplitter()
        for i, split in enumerate([Split.TEST, Split.TRAIN, Split.TEST, Split.TRAIN]):
            splitter.add(f"{split.value}{i}", split)
        assert splitter.combined_lines() == ["train1", "train3", "test0", "test2"]

    def test_write_combined(self, tmp_path: Path) -> None:
        splitter = CorpusSplitter()
        splitter.add("b", Split.TEST)
        splitter.add("a", Split.TRAIN)
        path = splitter.write_combined(tmp_path / "combined.txt")
        assert path.read_text(encoding="utf-8") == "a\nb\n"


class TestReconstruction:
    @pytest.mark.parametrize("seed", range(10))
    def test_rows_return_to_their_partition(self, seed: int) -> None:
        rng = random.Random(seed)
        splitter = CorpusSplitter(0.6, rng=rng)
        routed: dict[str, Split] = {}
        for i in range(rng.randint(1, 60)):
            marker = f"doc{i}"
            routed[marker] = splitter.add(f"{marker} 1:{i + 1}")

        scaled = _marker_rescale(splitter.combined_lines())
        train, test = splitter.reconstruct(scaled)

        assert len(scaled) == len(train) + len(test)
        assert all(routed[line.split()[0]] is Split.TRAIN for line in train)
        assert all(routed[line.split()[0]] is Split.TEST for line in test)
        assert len(train) == sum(1 for s in routed.values() if s is Split.TRAIN)

    def test_short_output_is_fatal(self) -> None:
        splitter = CorpusSplitter()
        splitter.add("a", Split.TRAIN)
        splitter.add("b", Split.TEST)
        with pytest.raises(IntegrityError):
            splitter.reconstruct(["a"])

    def test_long_output_is_fatal(self) -> None:
        splitter = CorpusSplitter()
        splitter.add("a", Split.TRAIN)
        with pytest.raises(IntegrityError):
            splitter.reconstruct(["a", "b"])

    def test_reconstruct_files(self, tmp_path: Path) -> None:
        splitter = CorpusSplitter()
        splitter.add("1 1:1", Split.TEST)
        splitter.add("2 2:1", Split.TRAIN)
        splitter.add("1 3:1", Split.TRAIN)
        scaled = write_lines(tmp_path / "combined.scaled", ["2 2:0.5", "1 3:0.5", "1 1:0.5"])

        counts = splitter.reconstruct_files(scaled, tmp_path / "train", tmp_path / "test")

        assert counts == (2, 1)
        assert read_lines(tmp_path / "train") == ["2 2:0.5", "1 3:0.5"]
        assert read_lines(tmp_path / "test") == ["1 1:0.5"]
