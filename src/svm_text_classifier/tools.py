"""Blocking wrappers around the LIBSVM command-line tools.

``svm-scale``, ``svm-train`` and ``svm-predict`` are run as argument
vectors (never through a shell). A non-zero exit, a missing executable
or an expired timeout raises ``ExternalToolError`` carrying the tool
name, the full command and its stderr. Nothing is retried.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .config import ToolConfig
from .exceptions import ExternalToolError, StorageError


class LibsvmTools:
    """Rescale, train and predict through external LIBSVM binaries.

    Example::

        tools = LibsvmTools(ToolConfig.from_env())
        tools.rescale("combined.txt", "combined.scaled", "scale.range")
        tools.train("train.scaled", "model")
    """

    def __init__(
        self,
        config: Optional[ToolConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or ToolConfig()
        self._log = logger or logging.getLogger(__name__)

    def rescale(
        self,
        input_path: str | Path,
        output_path: str | Path,
        range_path: str | Path,
        restore: bool = False,
    ) -> Path:
        """Scale ``input_path`` into ``output_path``.

        With ``restore=False`` the scaling range is computed from the
        input and saved to ``range_path`` (``-s``); with ``restore=True``
        an existing range is reused (``-r``) so inference rows are
        scaled exactly like the training corpus.
        """
        flag = "-r" if restore else "-s"
        argv = [*self.config.scale, flag, str(range_path), str(input_path)]
        output_path = Path(output_path)
        try:
            with open(output_path, "wb") as out:
                self._run("svm-scale", argv, stdout=out)
        except OSError as exc:
            raise StorageError("write scaled output", output_path, str(exc)) from exc
        return output_path

    def train(
        self,
        scaled_path: str | Path,
        model_path: str | Path,
        extra_args: Sequence[str] = (),
    ) -> Path:
        """Train a model with probability estimates enabled."""
        argv = [*self.config.train, "-b", "1", *extra_args, str(scaled_path), str(model_path)]
        self._run("svm-train", argv)
        return Path(model_path)

    def predict(
        self,
        scaled_instance_path: str | Path,
        model_path: str | Path,
        output_path: str | Path,
    ) -> str:
        """Run probability estimation and return the prediction file's text."""
        argv = [
            *self.config.predict,
            "-b",
            "1",
            str(scaled_instance_path),
            str(model_path),
            str(output_path),
        ]
        self._run("svm-predict", argv)
        output_path = Path(output_path)
        try:
            return output_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError("read prediction output", output_path, str(exc)) from exc

    def _run(self, tool: str, argv: list[str], stdout=None) -> subprocess.CompletedProcess:
        self._log.debug("Running %s: %s", tool, argv)
        try:
            result = subprocess.run(
                argv,
                stdout=stdout if stdout is not None else subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.config.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(tool, argv, reason=f"executable not found ({exc})") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(
                tool, argv, reason=f"timed out after {self.config.timeout}s"
            ) from exc

        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        if result.returncode != 0:
            raise ExternalToolError(tool, argv, returncode=result.returncode, stderr=stderr)
        return result
