"""Text normalization and tokenization.

Both the build path and the inference path run documents through the
same two steps, so the vocabulary built from a corpus matches the
tokens seen at classification time:

- ``normalize_text``: decode bytes (UTF-8, falling back to Latin-1),
  turn escaped and raw line/tab controls into real ``\\n``/``\\t``,
  and lowercase.
- ``tokenize``: split on every run of non-alphabetic characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

CANONICAL_ENCODING = "utf-8"
FALLBACK_ENCODING = "latin-1"

# Literal two-character escapes first, so "\\r\\n" collapses to one newline.
_ESCAPE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("\\r\\n", "\n"),
    ("\\n", "\n"),
    ("\\r", "\n"),
    ("\\t", "\t"),
    ("\r\n", "\n"),
    ("\r", "\n"),
)

# A letter is any word character that is neither a digit nor "_".
_NON_ALPHA_RE = re.compile(r"[\W\d_]+")


def decode_payload(payload: bytes | str) -> str:
    """Decode raw bytes to text. Never fails.

    Invalid UTF-8 is reinterpreted as Latin-1, which maps every byte
    to a code point.
    """
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode(CANONICAL_ENCODING)
    except UnicodeDecodeError:
        return payload.decode(FALLBACK_ENCODING)


def normalize_text(payload: bytes | str) -> str:
    """Decode, normalize line/tab escapes and lowercase a payload."""
    text = decode_payload(payload)
    for source, target in _ESCAPE_REPLACEMENTS:
        text = text.replace(source, target)
    return text.lower()


def tokenize(text: str) -> list[str]:
    """Split normalized text into alphabetic tokens, in order.

    Duplicates are kept; counting happens in the feature encoder.
    """
    return [token for token in _NON_ALPHA_RE.split(text) if token]


@dataclass(frozen=True)
class TextPreprocessor:
    """Normalizer and tokenizer bundled as one reusable step."""

    def normalize(self, payload: bytes | str) -> str:
        return normalize_text(payload)

    def tokenize(self, text: str) -> list[str]:
        """Tokenize already-normalized text."""
        return tokenize(text)

    def tokens(self, payload: bytes | str) -> list[str]:
        """Normalize ``payload`` and return its tokens."""
        return self.tokenize(normalize_text(payload))
