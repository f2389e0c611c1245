"""Tests for corpus loading and indexing."""

import json
import logging

import pytest

from integrity_tool.core.corpus import build_corpus, load_corpus, save_corpus
from integrity_tool.core.embeddings import HashEmbeddingProvider
from integrity_tool.core.ranker import SourceRanker

ENTRIES = [
    {"title": "Wetland Restoration", "authors": "Doe, J.", "abstract": "Methods for restoring river wetlands."},
    {"id": "s-2", "title": "Urban Heat", "authors": "Roe, A.", "abstract": "Heat islands in dense cities.",
     "publication_year": 2019},
]


def test_build_corpus_assigns_ids_and_embeddings():
    records = build_corpus(ENTRIES, HashEmbeddingProvider())

    assert [r.id for r in records] == [1, "s-2"]
    assert all(len(r.embedding) == 100 for r in records)
    assert records[1].publication_year == 2019


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "corpus.json"
    records = build_corpus(ENTRIES, HashEmbeddingProvider())
    save_corpus(records, str(path))

    loaded = load_corpus(str(path))
    assert loaded == records


def test_indexed_source_matches_its_own_text(config):
    """Text identical to a source's title and abstract ranks that source first."""
    provider = HashEmbeddingProvider()
    records = build_corpus(ENTRIES, provider)
    query = provider.embed("Urban Heat Heat islands in dense cities.")

    result = SourceRanker(config).rank(query, records)
    assert result.matches[0].source_id == "s-2"


def test_load_skips_invalid_entries(tmp_path, caplog):
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps([
        {"id": 1, "title": "Valid", "embedding": [0.1, 0.2]},
        {"id": 2},
        "not an object",
        {"id": 3, "title": "Also valid", "embedding": "[0.3, 0.4]"},
    ]), encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        records = load_corpus(str(path))

    assert [r.id for r in records] == [1, 3]
    assert "#1" in caplog.text
    assert "#2" in caplog.text


def test_load_requires_array(tmp_path):
    path = tmp_path / "corpus.json"
    path.write_text('{"id": 1}', encoding="utf-8")

    with pytest.raises(ValueError):
        load_corpus(str(path))


def test_build_corpus_skips_unusable_entries(caplog):
    entries = [
        "not an object",
        {"title": "Wetland Restoration", "abstract": "Methods for restoring river wetlands."},
        {"authors": "Nobody"},
        {"title": "   ", "abstract": ""},
        42,
    ]

    with caplog.at_level(logging.WARNING):
        records = build_corpus(entries, HashEmbeddingProvider())

    assert [r.id for r in records] == [2]
    assert records[0].title == "Wetland Restoration"
    for index in ("#1", "#3", "#4", "#5"):
        assert index in caplog.text
