"""Shared test fixtures for svm-text-classifier tests."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import pytest

from svm_text_classifier.config import PACKAGE_LOGGER, ToolConfig


class FakeTools:
    """In-process stand-in for ``LibsvmTools``.

    Rescaling copies rows unchanged (so positional identity can be
    checked) and prediction returns a canned output.
    """

    def __init__(self, prediction: str = "labels 1 2\n1 0.7 0.3\n") -> None:
        self.prediction = prediction
        self.calls: list[tuple] = []
        self.last_instance: Optional[str] = None

    def rescale(self, input_path, output_path, range_path, restore: bool = False) -> Path:
        self.calls.append(("rescale", Path(input_path), Path(output_path), Path(range_path), restore))
        if not restore:
            Path(range_path).write_text("x\n-1 1\n", encoding="utf-8")
        Path(output_path).write_text(Path(input_path).read_text(encoding="utf-8"), encoding="utf-8")
        return Path(output_path)

    def train(self, scaled_path, model_path, extra_args=()) -> Path:
        self.calls.append(("train", Path(scaled_path), Path(model_path)))
        Path(model_path).write_text("svm_type c_svc\n", encoding="utf-8")
        return Path(model_path)

    def predict(self, scaled_instance_path, model_path, output_path) -> str:
        self.calls.append(("predict", Path(scaled_instance_path), Path(model_path)))
        self.last_instance = Path(scaled_instance_path).read_text(encoding="utf-8")
        return self.prediction

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_tools() -> FakeTools:
    return FakeTools()


@pytest.fixture
def restore_package_logger():
    """Undo handler, level and propagation changes made by ``configure()``."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def write_corpus(root: Path, documents: dict[str, dict[str, str | bytes]]) -> Path:
    """Create ``root/<label>/<name>`` files from a nested mapping."""
    for label, files in documents.items():
        for name, content in files.items():
            path = root / label / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def weather_corpus(tmp_path: Path) -> Path:
    """Small two-label corpus."""
    return write_corpus(tmp_path / "corpus", {
        "sports": {
            "a.txt": "The home team won the match in extra time.",
            "b.txt": "A late goal decided the cup final.",
            "c.txt": "The striker scored twice in the match.",
        },
        "weather": {
            "a.txt": "Heavy rain and strong wind expected tonight.",
            "b.txt": "Sunny skies with a light breeze tomorrow.",
            "c.txt": "Snow showers will turn to rain by noon.",
        },
    })


# ---------------------------------------------------------------------------
# Fake LIBSVM executables, run through the current interpreter
# ---------------------------------------------------------------------------

FAKE_SCALE = '''
import sys
args = sys.argv[1:]
flag, range_path, data_path = args
if flag == "-s":
    with open(range_path, "w") as f:
        f.write("x\\n-1 1\\n")
else:
    open(range_path).read()
sys.stdout.write(open(data_path).read())
'''

FAKE_TRAIN = '''
import sys
args = sys.argv[1:]
assert args[:2] == ["-b", "1"], args
with open(args[-1], "w") as f:
    f.write("svm_type c_svc\\n")
'''

FAKE_PREDICT = '''
import sys
args = sys.argv[1:]
assert args[:2] == ["-b", "1"], args
with open(args[-1], "w") as f:
    f.write("labels 2 1\\n2 0.75 0.25\\n")
'''

FAKE_FAIL = '''
import sys
sys.stderr.write("boom: bad input\\n")
sys.exit(3)
'''

FAKE_SLEEP = '''
import time
time.sleep(30)
'''


def _script(directory: Path, name: str, body: str) -> tuple[str, ...]:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return (sys.executable, str(path))


@pytest.fixture
def fake_tool_config(tmp_path: Path) -> ToolConfig:
    """ToolConfig whose commands are small Python scripts."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return ToolConfig(
        scale=_script(bin_dir, "scale.py", FAKE_SCALE),
        train=_script(bin_dir, "train.py", FAKE_TRAIN),
        predict=_script(bin_dir, "predict.py", FAKE_PREDICT),
        timeout=60,
    )


@pytest.fixture
def failing_tool_config(tmp_path: Path) -> ToolConfig:
    bin_dir = tmp_path / "failbin"
    bin_dir.mkdir()
    fail = _script(bin_dir, "fail.py", FAKE_FAIL)
    return ToolConfig(scale=fail, train=fail, predict=fail)


@pytest.fixture
def sleeping_tool_config(tmp_path: Path) -> ToolConfig:
    bin_dir = tmp_path / "sleepbin"
    bin_dir.mkdir()
    sleep = _script(bin_dir, "sleep.py", FAKE_SLEEP)
    return ToolConfig(scale=sleep, train=sleep, predict=sleep, timeout=0.5)


def tool_env(config: ToolConfig, monkeypatch: pytest.MonkeyPatch, timeout: Optional[float] = None) -> None:
    """Expose a ToolConfig through the SVMTEXT_* environment variables."""
    import shlex

    monkeypatch.setenv("SVMTEXT_SCALE", shlex.join(config.scale))
    monkeypatch.setenv("SVMTEXT_TRAIN", shlex.join(config.train))
    monkeypatch.setenv("SVMTEXT_PREDICT", shlex.join(config.predict))
    if timeout is not None:
        monkeypatch.setenv("SVMTEXT_TIMEOUT", str(timeout))
