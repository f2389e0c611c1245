"""Core modules for academic integrity analysis."""

from .config import Config
from .errors import (
    IntegrityError,
    InputError,
    EmptyInputError,
    InputTooShortError,
    DimensionMismatchError,
    MalformedCorpusEntryError,
    ProviderUnavailableError,
    InvalidModelResponseError,
)
from .types import (
    TextDocument,
    SourceRecord,
    SimilarityMatch,
    RankedSources,
    PlagiarismSignal,
    PlagiarismReport,
    AcademicLevel,
    WritingQuality,
    AnalysisResult,
    IntegrityReport,
)
from .embeddings import (
    EmbeddingProvider,
    HashEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)
from .similarity import cosine_similarity, batch_cosine_similarity
from .ranker import SourceRanker
from .heuristics import HeuristicScorer
from .client import ChatClient
from .synthesizer import AnalysisSynthesizer, fallback_analysis
from .corpus import load_corpus, build_corpus, save_corpus
from .engine import IntegrityEngine, read_text_file
from .report import ReportGenerator

__all__ = [
    "Config",
    "IntegrityError",
    "InputError",
    "EmptyInputError",
    "InputTooShortError",
    "DimensionMismatchError",
    "MalformedCorpusEntryError",
    "ProviderUnavailableError",
    "InvalidModelResponseError",
    "TextDocument",
    "SourceRecord",
    "SimilarityMatch",
    "RankedSources",
    "PlagiarismSignal",
    "PlagiarismReport",
    "AcademicLevel",
    "WritingQuality",
    "AnalysisResult",
    "IntegrityReport",
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
    "cosine_similarity",
    "batch_cosine_similarity",
    "SourceRanker",
    "HeuristicScorer",
    "ChatClient",
    "AnalysisSynthesizer",
    "fallback_analysis",
    "load_corpus",
    "build_corpus",
    "save_corpus",
    "IntegrityEngine",
    "read_text_file",
    "ReportGenerator",
]
