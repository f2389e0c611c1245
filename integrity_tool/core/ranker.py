"""Ranking of corpus sources against a document embedding."""

import json
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import Config
from .errors import DimensionMismatchError, MalformedCorpusEntryError
from .log import base_logger
from .similarity import cosine_similarity
from .types import RankedSources, SimilarityMatch, SourceRecord

logger = base_logger.getChild('ranker')


def parse_embedding(record: SourceRecord, dimension: Optional[int] = None) -> np.ndarray:
    """
    Decode the stored embedding of a corpus record.

    Args:
        record: Corpus record
        dimension: Expected vector length (not checked when None)

    Returns:
        1-D float array

    Raises:
        MalformedCorpusEntryError: the embedding is missing, unparsable,
            non-numeric, non-finite or of the wrong length
    """
    raw = record.embedding
    if raw is None:
        raise MalformedCorpusEntryError(record.id, "no stored embedding")

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise MalformedCorpusEntryError(record.id, f"invalid embedding format: {e}") from e

    if not isinstance(raw, (list, tuple, np.ndarray)):
        raise MalformedCorpusEntryError(record.id, f"embedding is a {type(raw).__name__}, not an array")
    if any(isinstance(value, bool) for value in raw):
        raise MalformedCorpusEntryError(record.id, "embedding contains non-numeric values")

    try:
        vector = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedCorpusEntryError(record.id, f"embedding contains non-numeric values: {e}") from e

    if vector.ndim != 1 or vector.size == 0:
        raise MalformedCorpusEntryError(record.id, "embedding must be a flat non-empty array")
    if not np.all(np.isfinite(vector)):
        raise MalformedCorpusEntryError(record.id, "embedding contains non-finite values")
    if dimension is not None and vector.size != dimension:
        raise MalformedCorpusEntryError(
            record.id, f"embedding has {vector.size} dimensions, expected {dimension}")

    return vector


class SourceRanker:
    """Scores a document embedding against every source in a corpus."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the ranker.

        Args:
            config: Configuration object (uses defaults if not provided)
        """
        self.config = config or Config()
        self.threshold = self.config.similarity_threshold
        self.top_k = self.config.top_k
        self.workers = self.config.ranker_workers

    def _score(self, doc_embedding: np.ndarray, record: SourceRecord) -> Tuple[Optional[SimilarityMatch], Optional[str]]:
        try:
            vector = parse_embedding(record, dimension=len(doc_embedding))
            similarity = cosine_similarity(doc_embedding, vector)
        except (MalformedCorpusEntryError, DimensionMismatchError) as e:
            return None, str(e)

        match = SimilarityMatch(
            source_id=record.id,
            title=record.title,
            authors=record.authors,
            abstract=record.abstract,
            similarity=round(similarity, 4)
        )
        return match, None

    def rank(self, doc_embedding: np.ndarray, corpus: Sequence[SourceRecord]) -> RankedSources:
        """
        Rank corpus sources by similarity to a document.

        Args:
            doc_embedding: Embedding of the submitted document
            corpus: Source records with stored embeddings

        Returns:
            RankedSources with the top matches above the threshold and the
            full ranked list
        """
        doc_embedding = np.asarray(doc_embedding, dtype=np.float64)

        if self.workers > 1 and len(corpus) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(lambda record: self._score(doc_embedding, record), corpus))
        else:
            results = [self._score(doc_embedding, record) for record in corpus]

        scored: List[SimilarityMatch] = []
        skipped = []
        for record, (match, error) in zip(corpus, results):
            if match is None:
                logger.warning(f"Skipping source {record.id}: {error}")
                skipped.append(record.id)
                continue
            scored.append(match)

        # sorted() is stable, so ties keep corpus order
        ranked = sorted(scored, key=lambda m: m.similarity, reverse=True)
        above = [m for m in ranked if m.similarity > self.threshold]

        logger.info(f"Ranked {len(ranked)} sources ({len(skipped)} skipped), "
                    f"{len(above)} above threshold {self.threshold:.2f}")

        return RankedSources(
            matches=above[:self.top_k],
            ranked=ranked,
            skipped=skipped,
            threshold=self.threshold
        )
