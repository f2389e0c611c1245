"""Shared data types and models for the integrity analysis engine."""

import re
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, computed_field

SENTENCE_SPLIT = re.compile(r'[.!?]+')


class TextDocument(BaseModel):
    """Submitted text with derived statistics."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Extracted plain text")
    word_count: int = Field(ge=0, description="Number of whitespace-delimited words")
    sentences: List[str] = Field(default_factory=list, description="Sentences in document order")

    @classmethod
    def from_text(cls, text: str) -> 'TextDocument':
        """Build a document, deriving word count and sentences."""
        sentences = [s.strip() for s in SENTENCE_SPLIT.split(text)]
        return cls(
            text=text,
            word_count=len(text.split()),
            sentences=[s for s in sentences if s]
        )

    @property
    def char_count(self) -> int:
        return len(self.text)


class SourceRecord(BaseModel):
    """A corpus entry with its stored embedding."""

    id: Union[int, str] = Field(description="Identifier assigned by the corpus owner")
    title: str = Field(description="Source title")
    authors: str = Field(default="", description="Author list as stored")
    abstract: str = Field(default="", description="Source abstract")
    publication_year: Optional[int] = Field(default=None, description="Year of publication")
    embedding: Any = Field(
        default=None,
        description="Stored embedding: a flat numeric list or its JSON encoding"
    )


class SimilarityMatch(BaseModel):
    """A corpus source scored against the submitted document."""

    source_id: Union[int, str] = Field(description="Identifier of the matched source")
    title: str = Field(description="Source title")
    authors: str = Field(default="", description="Source authors")
    abstract: str = Field(default="", description="Source abstract")
    similarity: float = Field(ge=-1.0, le=1.0, description="Cosine similarity")


class RankedSources(BaseModel):
    """Result of ranking a document against a corpus."""

    matches: List[SimilarityMatch] = Field(
        default_factory=list,
        description="Matches above the threshold, best first, capped at top_k"
    )
    ranked: List[SimilarityMatch] = Field(
        default_factory=list,
        description="Every scored source, best first"
    )
    skipped: List[Union[int, str]] = Field(
        default_factory=list,
        description="Ids of sources with malformed embeddings"
    )
    threshold: float = Field(description="Similarity threshold applied")


class PlagiarismSignal(BaseModel):
    """One triggered heuristic category."""

    category: str = Field(description="Signal category tag")
    weight: float = Field(ge=0.0, description="Score contribution")
    occurrences: int = Field(default=1, ge=0, description="Matches found for this category")
    description: str = Field(description="Human-readable explanation")


class PlagiarismReport(BaseModel):
    """Heuristic plagiarism estimate for a document."""

    score: float = Field(ge=0.0, le=100.0, description="Aggregate score, capped")
    signals: List[PlagiarismSignal] = Field(default_factory=list, description="Triggered signals")
    significant_words: int = Field(default=0, ge=0, description="Words longer than 3 characters")

    @computed_field
    @property
    def flagged_sections(self) -> List[str]:
        return [signal.description for signal in self.signals]


class AcademicLevel(str, Enum):
    HIGH_SCHOOL = "High School"
    UNDERGRADUATE = "Undergraduate"
    GRADUATE = "Master/Graduate"
    PHD = "PhD"


class WritingQuality(str, Enum):
    POOR = "Poor"
    AVERAGE = "Average"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class AnalysisResult(BaseModel):
    """Structured academic-quality analysis of a document."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    topic: str = Field(min_length=1, description="Main topic")
    academic_level: AcademicLevel = Field(description="Estimated academic level")
    key_themes: List[str] = Field(min_length=2, max_length=5, description="Main themes")
    writing_quality: Optional[WritingQuality] = Field(default=None, description="Writing quality")
    research_suggestions: str = Field(min_length=1, description="Suggestions for further research")
    citation_recommendations: str = Field(default="", description="Recommended citation styles")
    strengths: Optional[List[str]] = Field(default=None, description="Main strengths")
    improvement_areas: Optional[List[str]] = Field(default=None, description="Areas needing work")
    confidence_score: float = Field(default=0.5, ge=0.0, le=1.0, description="Confidence (0-1)")
    generated_by: Literal["model", "fallback"] = Field(
        default="model",
        description="Whether the language model or the rule-based fallback produced this"
    )


class IntegrityReport(BaseModel):
    """Complete output of one engine run."""

    word_count: int = Field(ge=0, description="Words in the submitted text")
    char_count: int = Field(ge=0, description="Characters in the submitted text")
    suggested_sources: List[SimilarityMatch] = Field(default_factory=list, description="Top matches")
    source_similarity_score: float = Field(
        default=0.0,
        description="Highest source similarity as a percentage (0 when nothing matched)"
    )
    plagiarism: PlagiarismReport = Field(description="Heuristic plagiarism estimate")
    analysis: AnalysisResult = Field(description="Synthesized analysis")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Run details")
