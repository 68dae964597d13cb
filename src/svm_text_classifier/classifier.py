"""Classification of a single text against a built index.

``TextClassifier`` loads the frozen vocabulary and label table once and
can then serve any number of ``classify`` calls. Each call works in its
own temporary directory, so concurrent callers never share files.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional

from .config import ClassifyConfig, IndexLayout, LoggingConfig, ToolConfig
from .features import FeatureEncoder, SparseFeatureVector, format_instance_line
from .labels import LabelTable
from .models import ClassificationResult
from .preprocessing import TextPreprocessor
from .ranking import PredictionRanker
from .splitter import write_lines
from .tools import LibsvmTools
from .vocabulary import VocabularyIndex

# Label token written in front of inference rows; the predictor ignores it.
PLACEHOLDER_LABEL = "0"


class TextClassifier:
    """Encode text, run the external predictor, and rank the labels.

    Example::

        classifier = TextClassifier.load("index/")
        result = classifier.classify("Rain is expected over the weekend")
        if not result.is_empty:
            print(result.top.label, result.top.probability)

    Args:
        layout: Artifact locations of the index.
        vocabulary: Frozen vocabulary of the index.
        labels: Label table whose order matches the model's columns.
        tools: External tool runner.
        preprocessor: Must match the one used at build time.
        log_config: Logging settings for this classifier.
    """

    def __init__(
        self,
        layout: IndexLayout,
        vocabulary: VocabularyIndex,
        labels: LabelTable,
        tools: Optional[LibsvmTools] = None,
        preprocessor: Optional[TextPreprocessor] = None,
        log_config: Optional[LoggingConfig] = None,
    ) -> None:
        if not vocabulary.frozen:
            raise ValueError("TextClassifier requires a frozen vocabulary.")
        log_config = log_config or LoggingConfig()
        self.layout = layout
        self._log = log_config.get_logger(__name__)
        self._encoder = FeatureEncoder(vocabulary)
        self._ranker = PredictionRanker(labels)
        self._labels = labels
        self._tools = tools or LibsvmTools(logger=log_config.get_logger(LibsvmTools.__module__))
        self._preprocessor = preprocessor or TextPreprocessor()

    @classmethod
    def load(
        cls,
        index_dir: str | Path,
        tools: Optional[LibsvmTools] = None,
        tool_config: Optional[ToolConfig] = None,
        log_config: Optional[LoggingConfig] = None,
    ) -> "TextClassifier":
        """Load a classifier from an index directory.

        Raises:
            ConfigurationError: If any inference artifact is missing.
            IntegrityError: If the vocabulary or label table is corrupt
                or the label table is empty.
        """
        layout = IndexLayout(Path(index_dir))
        layout.require_inference_artifacts()
        log_config = log_config or LoggingConfig()
        if tools is None:
            tools = LibsvmTools(tool_config, logger=log_config.get_logger(LibsvmTools.__module__))
        return cls(
            layout=layout,
            vocabulary=VocabularyIndex.load(layout.vocabulary),
            labels=LabelTable.load(layout.labels),
            tools=tools,
            log_config=log_config,
        )

    @classmethod
    def from_config(cls, config: ClassifyConfig) -> "TextClassifier":
        return cls.load(config.index_dir, tool_config=config.tools, log_config=config.log_config)

    @property
    def labels(self) -> list[str]:
        return self._labels.labels

    @property
    def vocabulary_size(self) -> int:
        return len(self._encoder.vocabulary)

    def encode(self, payload: bytes | str) -> tuple[int, SparseFeatureVector]:
        """Return ``(token_count, vector)`` for a raw payload."""
        tokens = self._preprocessor.tokens(payload)
        return len(tokens), self._encoder.encode(tokens)

    def classify(self, payload: bytes | str) -> ClassificationResult:
        """Classify one text and return every label ranked by probability.

        A text with no vocabulary tokens yields an empty result without
        invoking any external tool.
        """
        token_count, vector = self.encode(payload)
        if vector.is_empty:
            self._log.info("No known tokens among %d; skipping prediction", token_count)
            return ClassificationResult(token_count=token_count)

        with tempfile.TemporaryDirectory(prefix="svmtext-") as workdir:
            work = Path(workdir)
            instance = write_lines(
                work / "instance.txt", [format_instance_line(PLACEHOLDER_LABEL, vector)]
            )
            scaled = self._tools.rescale(
                instance, work / "instance.scaled", self.layout.scale_range, restore=True
            )
            output = self._tools.predict(scaled, self.layout.model, work / "prediction.txt")

        predictions = self._ranker.rank_output(output)
        self._log.info(
            "Classified %d tokens (%d features): %s %.4f",
            token_count, len(vector), predictions[0].label, predictions[0].probability,
        )
        return ClassificationResult(
            predictions=predictions,
            token_count=token_count,
            matched_features=len(vector),
        )
