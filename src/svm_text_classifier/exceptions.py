"""Error taxonomy for index building and classification.

Every fatal condition raised by this package derives from ``SvmTextError``
so callers (the CLI, a long-running service) can abort the current
operation with one ``except`` clause while still reporting which stage
failed. An empty feature vector is *not* an error; see
``ClassificationResult.is_empty``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class SvmTextError(Exception):
    """Base class for all errors raised by svm-text-classifier."""


class ConfigurationError(SvmTextError, ValueError):
    """A required path or setting is missing or invalid."""


class StorageError(SvmTextError, OSError):
    """An artifact could not be read or written.

    The originating ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, action: str, path: Path | str, reason: str = "") -> None:
        self.action = action
        self.path = Path(path)
        message = f"Failed to {action} {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ExternalToolError(SvmTextError, RuntimeError):
    """An external LIBSVM tool could not run or exited non-zero."""

    def __init__(
        self,
        tool: str,
        argv: Sequence[str],
        returncode: int | None = None,
        stderr: str = "",
        reason: str = "",
    ) -> None:
        self.tool = tool
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr.strip()

        detail = reason or f"exited with status {returncode}"
        message = f"{tool} {detail} (command: {' '.join(self.argv)})"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


class IntegrityError(SvmTextError, RuntimeError):
    """Persisted or intermediate data violates an invariant."""
