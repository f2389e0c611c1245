"""Loading and building reference corpora of academic sources."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from .embeddings import EmbeddingProvider
from .log import base_logger
from .types import SourceRecord

logger = base_logger.getChild('corpus')


def load_corpus(path: str) -> List[SourceRecord]:
    """
    Load source records from a JSON file.

    The file holds an array of objects with ``id``, ``title``, ``authors``,
    ``abstract``, optional ``publication_year`` and ``embedding`` (a list or
    its JSON encoding). Embeddings are not validated here; the ranker skips
    malformed ones.

    Args:
        path: Path to the corpus file

    Returns:
        List of SourceRecord objects
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Corpus file {path} must contain a JSON array")

    records = []
    for index, entry in enumerate(data):
        try:
            records.append(SourceRecord(**entry))
        except (ValidationError, TypeError) as e:
            logger.warning(f"Skipping corpus entry #{index}: {e}")

    logger.info(f"Loaded {len(records)} sources from {path}")
    return records


def build_corpus(entries: Iterable[Dict[str, Any]], provider: EmbeddingProvider) -> List[SourceRecord]:
    """
    Compute embeddings for source entries.

    Each entry is embedded from its title and abstract. Entries without an
    ``id`` are numbered from 1.

    Args:
        entries: Source dictionaries without embeddings
        provider: Embedding provider used for the whole corpus

    Returns:
        List of SourceRecord objects with embeddings as float lists
    """
    records = []
    for index, entry in enumerate(entries, 1):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping source entry #{index}: expected an object, got {type(entry).__name__}")
            continue
        try:
            record = SourceRecord(**{**entry, "id": entry.get("id", index)})
        except ValidationError as e:
            logger.warning(f"Skipping source entry #{index}: {e}")
            continue
        content = f"{record.title} {record.abstract}".strip()
        if not content:
            logger.warning(f"Skipping source entry #{index}: no title or abstract to embed")
            continue
        record.embedding = provider.embed(content).tolist()
        records.append(record)

    logger.info(f"Embedded {len(records)} sources with the {provider.name} provider")
    return records


def save_corpus(records: List[SourceRecord], path: str) -> None:
    """Write source records to a JSON corpus file."""
    Path(path).write_text(
        json.dumps([record.model_dump() for record in records], ensure_ascii=False, indent=2),
        encoding='utf-8'
    )
