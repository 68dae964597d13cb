"""Configuration objects for building an index and classifying text.

All settings are passed explicitly; nothing here is process-global
except the handler ``LoggingConfig.configure`` installs on the package
logger. Tool locations can be overridden from the environment (or a
``.env`` file) via ``ToolConfig.from_env``.
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from rich.logging import RichHandler

from .exceptions import ConfigurationError
from .splitter import DEFAULT_TRAIN_RATIO

PACKAGE_LOGGER = "svm_text_classifier"

ENV_SCALE = "SVMTEXT_SCALE"
ENV_TRAIN = "SVMTEXT_TRAIN"
ENV_PREDICT = "SVMTEXT_PREDICT"
ENV_TIMEOUT = "SVMTEXT_TIMEOUT"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggingConfig:
    """Verbosity for one run. 0 = warnings, 1 = info, 2+ = debug."""

    verbosity: int = 0

    @property
    def level(self) -> int:
        if self.verbosity >= 2:
            return logging.DEBUG
        if self.verbosity == 1:
            return logging.INFO
        return logging.WARNING

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def configure(self) -> logging.Logger:
        """Attach a rich handler to the package logger (once) and set its level."""
        root = logging.getLogger(PACKAGE_LOGGER)
        root.setLevel(self.level)
        if not any(isinstance(h, RichHandler) for h in root.handlers):
            root.addHandler(RichHandler(show_path=False, rich_tracebacks=False))
            root.propagate = False
        return root


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IndexLayout:
    """File names of every artifact inside an index directory."""

    index_dir: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "index_dir", Path(self.index_dir))

    @property
    def vocabulary(self) -> Path:
        return self.index_dir / "vocabulary.tsv"

    @property
    def labels(self) -> Path:
        return self.index_dir / "labels.txt"

    @property
    def scale_range(self) -> Path:
        return self.index_dir / "scale.range"

    @property
    def model(self) -> Path:
        return self.index_dir / "model"

    @property
    def combined(self) -> Path:
        return self.index_dir / "combined.txt"

    @property
    def combined_scaled(self) -> Path:
        return self.index_dir / "combined.scaled"

    @property
    def train(self) -> Path:
        return self.index_dir / "train.scaled"

    @property
    def test(self) -> Path:
        return self.index_dir / "test.scaled"

    def inference_artifacts(self) -> dict[str, Path]:
        return {
            "vocabulary": self.vocabulary,
            "labels": self.labels,
            "scale_range": self.scale_range,
            "model": self.model,
        }

    def require_inference_artifacts(self) -> None:
        """Raise ``ConfigurationError`` naming every missing artifact."""
        if not self.index_dir.is_dir():
            raise ConfigurationError(f"Index directory not found: {self.index_dir}")
        missing = [
            f"{name} ({path})"
            for name, path in self.inference_artifacts().items()
            if not path.is_file()
        ]
        if missing:
            raise ConfigurationError(
                f"Index {self.index_dir} is incomplete, missing: {', '.join(missing)}"
            )


# ---------------------------------------------------------------------------
# External tools
# ---------------------------------------------------------------------------

def _command_from_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    argv = tuple(shlex.split(value))
    if not argv:
        raise ConfigurationError(f"{name} must name a command, got {value!r}")
    return argv


@dataclass(frozen=True)
class ToolConfig:
    """Argv prefixes of the LIBSVM command-line tools.

    Each command is a tuple so a tool can be a wrapper, e.g.
    ``("python", "fake_scale.py")``. ``timeout`` is in seconds;
    ``None`` waits indefinitely.
    """

    scale: tuple[str, ...] = ("svm-scale",)
    train: tuple[str, ...] = ("svm-train",)
    predict: tuple[str, ...] = ("svm-predict",)
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("scale", "train", "predict"):
            if not getattr(self, name):
                raise ConfigurationError(f"Tool command '{name}' is empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"Tool timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "ToolConfig":
        """Read overrides from ``SVMTEXT_*`` variables, loading ``.env`` first.

        Without ``dotenv_path`` the ``.env`` file is searched for from the
        current working directory upwards.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        defaults = cls()
        timeout = os.getenv(ENV_TIMEOUT)
        try:
            parsed_timeout = float(timeout) if timeout else None
        except ValueError:
            raise ConfigurationError(f"{ENV_TIMEOUT} must be a number, got {timeout!r}") from None
        return cls(
            scale=_command_from_env(ENV_SCALE, defaults.scale),
            train=_command_from_env(ENV_TRAIN, defaults.train),
            predict=_command_from_env(ENV_PREDICT, defaults.predict),
            timeout=parsed_timeout,
        )


# ---------------------------------------------------------------------------
# Run configurations
# ---------------------------------------------------------------------------

class TextSource(str, Enum):
    """Where the classify command reads its text from."""

    INLINE = "inline"
    STDIN = "stdin"


@dataclass(frozen=True)
class BuildConfig:
    """Settings for one corpus build."""

    corpus_dir: Path
    index_dir: Path
    train_ratio: float = DEFAULT_TRAIN_RATIO
    seed: Optional[int] = None
    train_model: bool = True
    tools: ToolConfig = field(default_factory=ToolConfig)
    log_config: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "corpus_dir", Path(self.corpus_dir))
        object.__setattr__(self, "index_dir", Path(self.index_dir))
        if not 0.0 < self.train_ratio <= 1.0:
            raise ConfigurationError(f"train_ratio must be in (0, 1], got {self.train_ratio}")

    @property
    def layout(self) -> IndexLayout:
        return IndexLayout(self.index_dir)


@dataclass(frozen=True)
class ClassifyConfig:
    """Settings for classifying text against a built index."""

    index_dir: Path
    text_source: TextSource = TextSource.INLINE
    top: Optional[int] = None
    tools: ToolConfig = field(default_factory=ToolConfig)
    log_config: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "index_dir", Path(self.index_dir))
        if self.top is not None and self.top < 1:
            raise ConfigurationError(f"top must be at least 1, got {self.top}")

    @property
    def layout(self) -> IndexLayout:
        return IndexLayout(self.index_dir)
