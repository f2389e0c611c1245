"""End-to-end tests for the integrity engine."""

import json
import logging

import pytest

from integrity_tool.core.embeddings import HashEmbeddingProvider
from integrity_tool.core.engine import IntegrityEngine, read_text_file
from integrity_tool.core.errors import EmptyInputError, InputTooShortError, ProviderUnavailableError
from integrity_tool.core.synthesizer import AnalysisSynthesizer, fallback_analysis
from integrity_tool.core.types import SourceRecord, TextDocument

from conftest import FakeChatClient


def corpus_for(text):
    """A corpus with one exact copy of text, one unrelated source and one corrupted entry."""
    provider = HashEmbeddingProvider()
    return [
        SourceRecord(id=1, title="Unrelated", authors="Roe, A.",
                     embedding=provider.embed("Quantum computing with trapped ions and lasers").tolist()),
        SourceRecord(id=2, title="Broken", embedding="[0.1, 0.2"),
        SourceRecord(id=3, title="River Study", authors="Doe, J.",
                     embedding=json.dumps(provider.embed(text).tolist())),
    ]


class TestIntegrityEngine:
    """Test cases for IntegrityEngine.analyze."""

    def test_full_run_offline(self, config, filler_text):
        report = IntegrityEngine(config).analyze(filler_text, corpus_for(filler_text))

        assert report.word_count == len(filler_text.split())
        assert report.char_count == len(filler_text)
        assert [s.source_id for s in report.suggested_sources] == [3]
        assert report.suggested_sources[0].similarity == pytest.approx(1.0)
        assert report.source_similarity_score == pytest.approx(100.0)
        assert report.plagiarism.score == 0
        assert report.analysis == fallback_analysis(report.word_count)
        assert report.metadata["sources_skipped"] == [2]
        assert report.metadata["embedding_provider"] == "hash"
        assert report.metadata["chat_model"] is None

    def test_no_matches(self, config, filler_text):
        report = IntegrityEngine(config).analyze(filler_text, [])

        assert report.suggested_sources == []
        assert report.source_similarity_score == 0.0

    def test_empty_text(self, config):
        with pytest.raises(EmptyInputError):
            IntegrityEngine(config).analyze("", [])
        with pytest.raises(EmptyInputError):
            IntegrityEngine(config).analyze("   \n  ", [])

    def test_short_text(self, config):
        with pytest.raises(InputTooShortError) as exc_info:
            IntegrityEngine(config).analyze("A brief note.", [])
        assert exc_info.value.minimum == 50

    def test_model_garbage_falls_back(self, config, filler_text):
        """Non-JSON from the model still yields a complete report."""
        client = FakeChatClient("Sorry, I cannot help with that.")
        synthesizer = AnalysisSynthesizer(config, client=client)
        report = IntegrityEngine(config, synthesizer=synthesizer).analyze(filler_text, corpus_for(filler_text))

        assert report.analysis.generated_by == "fallback"
        assert report.metadata["chat_model"] == config.chat_model
        assert "River Study" in client.calls[0].user

    def test_plagiarism_flows_into_prompt(self, config, filler_text):
        client = FakeChatClient("{}")
        synthesizer = AnalysisSynthesizer(config, client=client)
        text = filler_text + "\nCopyright 2020 Example Press. All rights reserved."
        report = IntegrityEngine(config, synthesizer=synthesizer).analyze(text, [])

        assert report.plagiarism.score == 75
        assert "75/100" in client.calls[0].user


class TestTextDocument:
    """Test cases for derived document statistics."""

    def test_from_text(self):
        document = TextDocument.from_text("First sentence here. Second one!  Third?")

        assert document.word_count == 6
        assert document.sentences == ["First sentence here", "Second one", "Third"]
        assert document.char_count == 40

    def test_empty(self):
        document = TextDocument.from_text("")
        assert document.word_count == 0
        assert document.sentences == []


def test_read_text_file(tmp_path):
    path = tmp_path / "essay.txt"
    path.write_text("Coffee culture in Paris shaped modern essays.", encoding="utf-8")
    assert read_text_file(str(path)) == "Coffee culture in Paris shaped modern essays."


def test_read_text_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_text_file(str(tmp_path / "missing.txt"))


class FailingEmbedder(HashEmbeddingProvider):
    name = "failing"

    def _embed(self, text):
        raise ProviderUnavailableError("connection", "embedding service unreachable")


def test_embedding_outage_skips_ranking(config, filler_text, caplog):
    engine = IntegrityEngine(config, embedder=FailingEmbedder())

    with caplog.at_level(logging.WARNING):
        report = engine.analyze(filler_text, corpus_for(filler_text))

    assert report.suggested_sources == []
    assert report.metadata["embedding_dimension"] == 0
    assert report.analysis.generated_by == "fallback"
    assert "Skipping source ranking" in caplog.text
