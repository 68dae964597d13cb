"""SVM Text Classifier -- bag-of-words features and ranked labels for LIBSVM."""

__version__ = "0.1.0"

from .builder import IndexBuilder
from .classifier import TextClassifier
from .config import (
    BuildConfig,
    ClassifyConfig,
    IndexLayout,
    LoggingConfig,
    TextSource,
    ToolConfig,
)
from .corpus import discover_documents, read_document
from .exceptions import (
    ConfigurationError,
    ExternalToolError,
    IntegrityError,
    StorageError,
    SvmTextError,
)
from .features import (
    FeatureEncoder,
    SparseFeatureVector,
    format_instance_line,
    parse_instance_line,
)
from .labels import LabelRegistry, LabelTable
from .models import (
    BuildReport,
    ClassificationResult,
    CorpusDocument,
    CorpusInstance,
    RankedPrediction,
    Split,
)
from .preprocessing import TextPreprocessor, normalize_text, tokenize
from .ranking import PredictionRanker, parse_prediction_output
from .splitter import CorpusSplitter
from .tools import LibsvmTools
from .vocabulary import VocabularyIndex

__all__ = [
    # Pipelines
    "IndexBuilder",
    "TextClassifier",
    "BuildReport",
    "ClassificationResult",
    # Configuration
    "BuildConfig",
    "ClassifyConfig",
    "IndexLayout",
    "LoggingConfig",
    "TextSource",
    "ToolConfig",
    # Text and features
    "TextPreprocessor",
    "normalize_text",
    "tokenize",
    "VocabularyIndex",
    "FeatureEncoder",
    "SparseFeatureVector",
    "format_instance_line",
    "parse_instance_line",
    # Corpus
    "CorpusDocument",
    "CorpusInstance",
    "CorpusSplitter",
    "Split",
    "discover_documents",
    "read_document",
    # Labels and ranking
    "LabelRegistry",
    "LabelTable",
    "PredictionRanker",
    "RankedPrediction",
    "parse_prediction_output",
    # External tools
    "LibsvmTools",
    # Errors
    "SvmTextError",
    "ConfigurationError",
    "StorageError",
    "ExternalToolError",
    "IntegrityError",
]
