"""Corpus build: documents in, scaled train/test files and an index out.

``IndexBuilder.build`` runs the whole build path:

1. discover labeled documents (sorted traversal);
2. normalize, tokenize and encode each one against a growing vocabulary;
3. freeze the label table and prefix each vector with its class id;
4. route every line to train or test, write them combined
   (train first), rescale once, and cut the scaled rows back apart;
5. persist the vocabulary and label table, and optionally train a model.
"""

from __future__ import annotations

import random
from typing import Optional

from .config import BuildConfig
from .corpus import discover_documents, read_document
from .exceptions import ConfigurationError, IntegrityError
from .features import FeatureEncoder, format_instance_line
from .labels import LabelRegistry
from .models import BuildReport, CorpusInstance
from .preprocessing import TextPreprocessor
from .splitter import CorpusSplitter
from .tools import LibsvmTools
from .vocabulary import VocabularyIndex


class IndexBuilder:
    """Build a classification index from a labeled corpus directory.

    Example::

        config = BuildConfig(corpus_dir="corpus", index_dir="index", seed=7)
        report = IndexBuilder(config).build()
        print(report.vocabulary_size, report.train_count, report.test_count)

    Args:
        config: Build settings.
        tools: External tool runner; defaults to ``LibsvmTools`` built
            from ``config.tools``.
        preprocessor: Normalizer/tokenizer shared with inference.
    """

    def __init__(
        self,
        config: BuildConfig,
        tools: Optional[LibsvmTools] = None,
        preprocessor: Optional[TextPreprocessor] = None,
    ) -> None:
        self.config = config
        self._log = config.log_config.get_logger(__name__)
        self._tools = tools or LibsvmTools(
            config.tools, logger=config.log_config.get_logger(LibsvmTools.__module__)
        )
        self._preprocessor = preprocessor or TextPreprocessor()

    def build(self) -> BuildReport:
        """Run the build path and return a summary of what was written."""
        layout = self.config.layout
        documents = discover_documents(self.config.corpus_dir)
        self._log.info("Found %d documents in %s", len(documents), self.config.corpus_dir)

        vocabulary = VocabularyIndex.growing()
        encoder = FeatureEncoder(vocabulary)
        registry = LabelRegistry()
        splitter = CorpusSplitter(self.config.train_ratio, rng=random.Random(self.config.seed))

        instances: list[CorpusInstance] = []
        empty = 0
        for document in documents:
            text = self._preprocessor.normalize(read_document(document.path))
            vector = encoder.encode(self._preprocessor.tokenize(text))
            seen = registry.observe(document.label)
            self._log.debug(
                "%s: %s document #%d, %d features", document.path, document.label, seen, len(vector)
            )
            if vector.is_empty:
                empty += 1
                self._log.info("Skipping %s: no alphabetic tokens", document.path)
                continue
            instances.append(
                CorpusInstance(
                    text=text,
                    label=document.label,
                    vector=vector,
                    split=splitter.draw(),
                    source=document.path,
                )
            )

        if not instances:
            raise ConfigurationError(
                f"Corpus {self.config.corpus_dir} has no documents with alphabetic tokens"
            )

        table = registry.freeze()
        for instance in instances:
            line = format_instance_line(table.class_id(instance.label), instance.vector)
            splitter.add(line, instance.split)

        train_count, test_count = len(splitter.train_lines), len(splitter.test_lines)
        self._log.info(
            "Vocabulary: %d words, %d labels, split %d train / %d test",
            len(vocabulary), len(table), train_count, test_count,
        )

        splitter.write_combined(layout.combined)
        self._tools.rescale(layout.combined, layout.combined_scaled, layout.scale_range)
        train_count, test_count = splitter.reconstruct_files(
            layout.combined_scaled, layout.train, layout.test
        )

        vocabulary.freeze().save(layout.vocabulary)
        table.save(layout.labels)

        model_trained = False
        if self.config.train_model:
            if train_count == 0:
                raise IntegrityError("No documents were routed to train; cannot train a model.")
            self._tools.train(layout.train, layout.model)
            model_trained = True
            self._log.info("Model written to %s", layout.model)

        artifacts = {
            "vocabulary": layout.vocabulary,
            "labels": layout.labels,
            "scale_range": layout.scale_range,
            "combined": layout.combined,
            "combined_scaled": layout.combined_scaled,
            "train": layout.train,
            "test": layout.test,
        }
        if model_trained:
            artifacts["model"] = layout.model

        return BuildReport(
            index_dir=layout.index_dir,
            document_count=len(documents),
            vocabulary_size=len(vocabulary),
            labels=table.labels,
            label_counts=registry.counts,
            train_count=train_count,
            test_count=test_count,
            empty_documents=empty,
            model_trained=model_trained,
            artifacts=artifacts,
        )
