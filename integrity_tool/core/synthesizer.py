"""Analysis synthesis: model-backed structured feedback with a rule-based fallback."""

import json
import re
from typing import Any, Dict, List, Optional, Sequence

import tiktoken
from pydantic import ValidationError

from .client import ChatClient
from .config import Config
from .errors import InputTooShortError, InvalidModelResponseError, ProviderUnavailableError
from .log import base_logger
from .types import AcademicLevel, AnalysisResult, PlagiarismReport, SimilarityMatch

logger = base_logger.getChild('synthesizer')

REQUIRED_FIELDS = ('topic', 'academic_level', 'key_themes', 'research_suggestions')
TRUNCATION_MARKER = "\n[...truncated]"
FALLBACK_LEVEL_WORDS = 2000
FALLBACK_CONFIDENCE = 0.6
MAX_THEMES = 5

SYSTEM_PROMPT = """You are an academic expert analyzing student assignments. Respond with a single JSON object with the following fields:
- "topic": main topic of the assignment
- "academic_level": "High School", "Undergraduate", "Master/Graduate", or "PhD"
- "key_themes": array of 2-5 main themes
- "research_suggestions": specific suggestions for improvement
- "citation_recommendations": recommended citation styles
- "writing_quality": "Poor", "Average", "Good", or "Excellent"
- "strengths": array of 2-3 main strengths
- "improvement_areas": array of 2-3 areas needing improvement
- "confidence_score": your confidence in this analysis (0-1)

Be objective, constructive, and focus on academic improvement. Return ONLY valid JSON."""

LEVEL_ALIASES = {
    "high school": AcademicLevel.HIGH_SCHOOL,
    "undergraduate": AcademicLevel.UNDERGRADUATE,
    "bachelor": AcademicLevel.UNDERGRADUATE,
    "master": AcademicLevel.GRADUATE,
    "masters": AcademicLevel.GRADUATE,
    "master's": AcademicLevel.GRADUATE,
    "graduate": AcademicLevel.GRADUATE,
    "master/graduate": AcademicLevel.GRADUATE,
    "phd": AcademicLevel.PHD,
    "ph.d.": AcademicLevel.PHD,
    "doctoral": AcademicLevel.PHD,
}

CODE_FENCE = re.compile(r'^```(?:json)?\s*(.*?)\s*```$', re.DOTALL)

# USD per 1K prompt tokens
CHAT_PRICING = {
    "gpt-4": 0.03,
    "gpt-4o": 0.0025,
    "gpt-4o-mini": 0.00015,
    "gpt-3.5-turbo": 0.0005,
    "deepseek-chat": 0.00027,
}


def fallback_analysis(word_count: int) -> AnalysisResult:
    """Deterministic analysis used when the model is unavailable or unusable."""
    level = (AcademicLevel.UNDERGRADUATE if word_count > FALLBACK_LEVEL_WORDS
             else AcademicLevel.HIGH_SCHOOL)
    return AnalysisResult(
        topic="Academic Assignment",
        academic_level=level,
        key_themes=["Academic writing", "Research content", "Critical analysis"],
        writing_quality="Good",
        research_suggestions=("Consider expanding your research with additional academic sources "
                              "and providing more detailed analysis of key concepts."),
        citation_recommendations="APA, MLA, Chicago",
        strengths=["Clear structure", "Good topic coverage"],
        improvement_areas=["Could use more specific examples", "Consider adding references"],
        confidence_score=FALLBACK_CONFIDENCE,
        generated_by="fallback"
    )


def _normalize_level(value: Any) -> Any:
    if isinstance(value, str):
        key = value.strip().lower()
        if key in LEVEL_ALIASES:
            return LEVEL_ALIASES[key]
        if key.startswith("master"):
            return AcademicLevel.GRADUATE
    return value


def _optional_list(key: str, value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise InvalidModelResponseError(f"{key} must be an array of strings, got {type(value).__name__}")
    return [str(item) for item in value]


def parse_model_response(content: str) -> AnalysisResult:
    """
    Validate raw model output and convert it to an AnalysisResult.

    Args:
        content: Message content returned by the model

    Returns:
        AnalysisResult marked as model-generated

    Raises:
        InvalidModelResponseError: content is not a JSON object, misses a
            required field, or holds values of the wrong shape
    """
    text = (content or "").strip()
    fenced = CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except ValueError as e:
        raise InvalidModelResponseError(f"Model returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidModelResponseError("Model response is not a JSON object")

    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise InvalidModelResponseError(f"Missing required field: {field}")

    themes = data['key_themes']
    if not isinstance(themes, list):
        raise InvalidModelResponseError("key_themes must be an array")

    fields: Dict[str, Any] = {
        'topic': data['topic'],
        'academic_level': _normalize_level(data['academic_level']),
        'key_themes': [str(theme) for theme in themes][:MAX_THEMES],
        'research_suggestions': data['research_suggestions'],
        'generated_by': "model",
    }
    citations = data.get('citation_recommendations')
    if citations:
        fields['citation_recommendations'] = (
            ", ".join(map(str, citations)) if isinstance(citations, list) else citations)
    if data.get('writing_quality'):
        fields['writing_quality'] = str(data['writing_quality']).strip().capitalize()
    for key in ('strengths', 'improvement_areas'):
        if data.get(key) is not None:
            fields[key] = _optional_list(key, data[key])
    if data.get('confidence_score') is not None:
        fields['confidence_score'] = data['confidence_score']

    try:
        return AnalysisResult(**fields)
    except (ValidationError, TypeError) as e:
        raise InvalidModelResponseError(f"Model response failed validation: {e}") from e


class AnalysisSynthesizer:
    """Builds the structured analysis of a submitted document."""

    def __init__(self, config: Optional[Config] = None, client: Optional[ChatClient] = None):
        """
        Initialize the synthesizer.

        Args:
            config: Configuration object (uses defaults if not provided)
            client: Chat client; built from config when an API key is set,
                otherwise every analysis uses the fallback
        """
        self.config = config or Config()
        if client is None and self.config.validate_api_key():
            client = ChatClient(self.config)
        self.client = client
        self._encoding = None

    @property
    def model_enabled(self) -> bool:
        return self.client is not None

    def build_prompts(
        self,
        text: str,
        sources: Sequence[SimilarityMatch],
        plagiarism_report: Optional[PlagiarismReport] = None
    ) -> Dict[str, str]:
        """
        Build the system and user prompts for the model.

        Args:
            text: Submitted text
            sources: Ranked sources, best first
            plagiarism_report: Heuristic report to mention in the prompt

        Returns:
            Dict with 'system' and 'user' prompts
        """
        limit = self.config.analysis_max_chars
        analysis_text = text[:limit] + TRUNCATION_MARKER if len(text) > limit else text

        top_sources = list(sources)[:self.config.prompt_sources]
        if top_sources:
            source_lines = "\n\n".join(
                f'Source {i}: "{s.title}" by {s.authors or "Unknown"}\n'
                f'Relevance: {s.similarity * 100:.1f}%'
                for i, s in enumerate(top_sources, 1)
            )
        else:
            source_lines = "No highly relevant sources found."

        integrity_lines = ""
        if plagiarism_report is not None:
            integrity_lines = f"\n\nINTEGRITY CHECK:\nHeuristic plagiarism score: {plagiarism_report.score:.0f}/100"
            for description in plagiarism_report.flagged_sections:
                integrity_lines += f"\n- {description}"

        user_prompt = (
            f'ASSIGNMENT TEXT FOR ANALYSIS:\n"""{analysis_text}"""\n\n'
            f'RELEVANT ACADEMIC SOURCES FOUND:\n{source_lines}'
            f'{integrity_lines}\n\n'
            f'Please analyze this assignment and provide feedback in the specified JSON format.'
        )
        return {"system": SYSTEM_PROMPT, "user": user_prompt}

    def synthesize(
        self,
        text: str,
        ranked_sources: Sequence[SimilarityMatch],
        plagiarism_report: Optional[PlagiarismReport] = None
    ) -> AnalysisResult:
        """
        Produce the analysis for a document.

        Args:
            text: Submitted text
            ranked_sources: Ranked sources, best first
            plagiarism_report: Heuristic plagiarism report

        Returns:
            AnalysisResult from the model, or the rule-based fallback

        Raises:
            InputTooShortError: text is shorter than the configured minimum
        """
        stripped = (text or "").strip()
        if len(stripped) < self.config.min_analysis_chars:
            raise InputTooShortError(len(stripped), self.config.min_analysis_chars)

        word_count = len(stripped.split())
        if not self.model_enabled:
            logger.info("No model credentials configured, using fallback analysis")
            return fallback_analysis(word_count)

        prompts = self.build_prompts(text, ranked_sources, plagiarism_report)
        try:
            content = self.client.complete(prompts["system"], prompts["user"])
            result = parse_model_response(content)
        except ProviderUnavailableError as e:
            logger.warning(f"Model provider unavailable ({e.reason}): {e}. Using fallback analysis")
            return fallback_analysis(word_count)
        except InvalidModelResponseError as e:
            logger.warning(f"{e}. Using fallback analysis")
            return fallback_analysis(word_count)

        logger.info(f"Model analysis complete: topic={result.topic!r}, level={result.academic_level}")
        return result

    def count_tokens(self, text: str) -> int:
        """Count chat-model tokens in text."""
        if self._encoding is None:
            try:
                self._encoding = tiktoken.encoding_for_model(self.config.chat_model)
            except KeyError:
                logger.warning(f"Unknown model {self.config.chat_model}, using cl100k_base encoding")
                self._encoding = tiktoken.get_encoding("cl100k_base")
        return len(self._encoding.encode(text))

    def estimate_cost(self, text: str, sources: Sequence[SimilarityMatch] = ()) -> Dict[str, Any]:
        """
        Estimate the prompt cost of analyzing a text.

        Args:
            text: Submitted text
            sources: Ranked sources that would be quoted

        Returns:
            Dictionary with token count and USD estimate
        """
        prompts = self.build_prompts(text, sources)
        total_tokens = self.count_tokens(prompts["system"]) + self.count_tokens(prompts["user"])
        price_per_thousand = CHAT_PRICING.get(self.config.chat_model, 0.002)

        return {
            "total_tokens": total_tokens,
            "estimated_cost_usd": total_tokens / 1000 * price_per_thousand,
            "model": self.config.chat_model,
            "price_per_thousand_tokens": price_per_thousand
        }
