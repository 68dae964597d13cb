"""Discovery of labeled documents on disk.

A corpus is a directory with one sub-directory per label::

    corpus/
        sports/
            match-report.txt
            2024/final.txt
        weather/
            forecast.txt

Every regular, non-hidden file below a label directory is one document
of that label. Traversal is sorted (labels, then relative paths) so the
vocabulary ids assigned during a build are reproducible across runs and
platforms.
"""

from __future__ import annotations

from pathlib import Path

from .exceptions import ConfigurationError, StorageError
from .models import CorpusDocument


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_documents(corpus_dir: str | Path) -> list[CorpusDocument]:
    """List every document in a corpus directory, in sorted order.

    Raises:
        ConfigurationError: If ``corpus_dir`` does not exist, is not a
            directory, or contains no documents.
    """
    root = Path(corpus_dir)
    if not root.exists():
        raise ConfigurationError(f"Corpus directory not found: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Corpus path is not a directory: {root}")

    documents: list[CorpusDocument] = []
    label_dirs = sorted(p for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))
    for label_dir in label_dirs:
        files = sorted(
            (p for p in label_dir.rglob("*") if p.is_file() and not _is_hidden(p, label_dir)),
            key=lambda p: p.relative_to(label_dir).as_posix(),
        )
        documents.extend(CorpusDocument(label=label_dir.name, path=p) for p in files)

    if not documents:
        raise ConfigurationError(
            f"No documents found in {root}. Expected one sub-directory per label."
        )
    return documents


def read_document(path: str | Path) -> bytes:
    """Read a document's raw bytes; decoding is the normalizer's job."""
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as exc:
        raise StorageError("read document", path, str(exc)) from exc
