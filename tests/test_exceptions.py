"""Tests for the error taxonomy."""

from __future__ import annotations

from pathlib import Path

import pytest

from svm_text_classifier.exceptions import (
    ConfigurationError,
    ExternalToolError,
    IntegrityError,
    StorageError,
    SvmTextError,
)
from svm_text_classifier.labels import LabelTable


class TestStorageError:
    def test_is_os_error(self, tmp_path: Path) -> None:
        error = StorageError("read label table", tmp_path / "labels.txt", "missing")
        assert isinstance(error, OSError)
        assert isinstance(error, SvmTextError)
        assert str(error) == f"Failed to read label table {tmp_path / 'labels.txt'}: missing"
        assert error.path == tmp_path / "labels.txt"

    def test_caught_as_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError) as info:
            LabelTable.load(tmp_path / "labels.txt")
        assert isinstance(info.value, StorageError)
        assert isinstance(info.value.__cause__, FileNotFoundError)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, builtin",
        [
            (ConfigurationError("bad"), ValueError),
            (IntegrityError("bad"), RuntimeError),
            (ExternalToolError("svm-train", ["svm-train"], returncode=1), RuntimeError),
        ],
    )
    def test_builtin_bases(self, error: SvmTextError, builtin: type) -> None:
        assert isinstance(error, SvmTextError)
        assert isinstance(error, builtin)
