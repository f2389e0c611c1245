"""Academic integrity analysis engine."""

from pathlib import Path
from typing import Optional, Sequence

import chardet

from .config import Config
from .embeddings import EmbeddingProvider, create_embedding_provider
from .heuristics import HeuristicScorer
from .log import base_logger
from .ranker import SourceRanker
from .synthesizer import AnalysisSynthesizer
from .errors import ProviderUnavailableError
from .types import IntegrityReport, RankedSources, SourceRecord, TextDocument

logger = base_logger.getChild('engine')


def read_text_file(file_path: str) -> str:
    """
    Read a text file with automatic encoding detection.

    Args:
        file_path: Path to the file

    Returns:
        File contents as string
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    raw_data = path.read_bytes()
    result = chardet.detect(raw_data)
    encoding = result['encoding'] or 'utf-8'
    confidence = result['confidence'] or 0

    logger.debug(f"Detected encoding for {file_path}: {encoding} (confidence: {confidence:.2f})")

    for enc in (encoding, 'utf-8', 'latin-1'):
        try:
            return raw_data.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue

    raise ValueError(f"Could not decode file {file_path} with any known encoding")


class IntegrityEngine:
    """Runs embedding, ranking, heuristic scoring and synthesis for one document."""

    def __init__(
        self,
        config: Optional[Config] = None,
        embedder: Optional[EmbeddingProvider] = None,
        synthesizer: Optional[AnalysisSynthesizer] = None
    ):
        """
        Initialize the engine.

        Args:
            config: Configuration object (uses defaults if not provided)
            embedder: Embedding provider (picked from config if not provided)
            synthesizer: Analysis synthesizer (built from config if not provided)
        """
        self.config = config or Config()
        self.embedder = embedder or create_embedding_provider(self.config)
        self.ranker = SourceRanker(self.config)
        self.scorer = HeuristicScorer(self.config)
        self.synthesizer = synthesizer or AnalysisSynthesizer(self.config)

    def analyze(self, text: str, corpus: Sequence[SourceRecord]) -> IntegrityReport:
        """
        Analyze a document against a corpus.

        Args:
            text: Extracted plain text of the submission
            corpus: Source records with stored embeddings

        Returns:
            IntegrityReport combining sources, heuristic score and analysis

        Raises:
            EmptyInputError: text is empty or whitespace-only
            InputTooShortError: text is too short to analyze
        """
        document = TextDocument.from_text(text)
        logger.info(f"Analyzing document: {document.word_count} words, "
                    f"{len(document.sentences)} sentences, {len(corpus)} corpus sources")

        plagiarism = self.scorer.score(document.text)

        try:
            embedding = self.embedder.embed(document.text)
        except ProviderUnavailableError as e:
            logger.warning(f"Embedding provider unavailable ({e.reason}): {e}. Skipping source ranking")
            embedding = []
            ranked = RankedSources(threshold=self.config.similarity_threshold)
        else:
            ranked = self.ranker.rank(embedding, corpus)
        analysis = self.synthesizer.synthesize(document.text, ranked.matches, plagiarism)

        top_similarity = ranked.matches[0].similarity if ranked.matches else 0.0

        report = IntegrityReport(
            word_count=document.word_count,
            char_count=document.char_count,
            suggested_sources=ranked.matches,
            source_similarity_score=round(top_similarity * 100, 2),
            plagiarism=plagiarism,
            analysis=analysis,
            metadata={
                "embedding_provider": self.embedder.name,
                "embedding_dimension": len(embedding),
                "similarity_threshold": ranked.threshold,
                "sources_scored": len(ranked.ranked),
                "sources_skipped": ranked.skipped,
                "chat_model": self.config.chat_model if self.synthesizer.model_enabled else None,
            }
        )

        logger.info(f"Analysis complete: {len(report.suggested_sources)} sources, "
                    f"plagiarism score {plagiarism.score:.0f}, analysis by {analysis.generated_by}")
        return report
