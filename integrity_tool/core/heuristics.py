"""
Heuristic plagiarism scoring from textual patterns.

The score is built from independent signal categories evaluated on the
lower-cased text:

- definite indicators (copyright lines, DOIs, ISBNs, ...) count once per
  category, however often they occur
- suspicious citation patterns are weighted per occurrence
- every raw URL adds a fixed weight
- a high variance of sentence lengths suggests text stitched from several
  sources
- heavy use of academic boilerplate phrases
- many long unwrapped lines suggest pasted source text

The sum is capped below 100 so the scorer never claims certainty.
"""

import re
from typing import List, NamedTuple, Optional

import numpy as np

from .config import Config
from .log import base_logger
from .types import PlagiarismReport, PlagiarismSignal

logger = base_logger.getChild('heuristics')


class Pattern(NamedTuple):
    category: str
    regex: re.Pattern
    weight: float
    label: str


# Presence-only: weight is added once per category
DEFINITE_INDICATORS = [
    Pattern("copyright", re.compile(r'copyright\s*(?:©|\(c\))?\s*\d{4}|©\s*\d{4}'), 40,
            "Copyright notice"),
    Pattern("rights-reserved", re.compile(r'all rights reserved'), 35,
            "'All rights reserved' statement"),
    Pattern("doi", re.compile(r'\bdoi\s*:\s*10\.\d{4,9}/\S+|doi\.org/10\.\d{4,9}/\S+'), 30,
            "DOI reference"),
    Pattern("retrieved-from", re.compile(r'retrieved from\s+(?:https?://|www\.)\S+'), 30,
            "'Retrieved from <url>' reference"),
    Pattern("isbn", re.compile(r'\bisbn(?:-1[03])?\s*:?\s*(?:97[89][\s-]?)?\d[\d\s-]{8,}[\dx]'), 30,
            "ISBN"),
    Pattern("volume-issue", re.compile(r'\bvol(?:ume)?\.?\s*\d+\s*[,(]?\s*(?:no\.?|issue|iss\.?)\s*\d+'), 25,
            "Journal volume/issue reference"),
    Pattern("published", re.compile(r'\bpublished (?:in|by)\b'), 25,
            "'Published in/by' statement"),
    Pattern("journal", re.compile(r'\bjournal of [a-z]'), 20,
            "Journal reference"),
]

# Weighted per occurrence
SUSPICIOUS_PATTERNS = [
    Pattern("author-year-citation",
            re.compile(r"\([a-z][a-z'\-]+(?: (?:et al\.|and|&) ?[a-z'\-]*)?,? \d{4}[a-z]?(?:, p+\. ?\d+)?\)"), 3,
            "Parenthetical author-year citation"),
    Pattern("bracket-citation", re.compile(r'\[\d+(?:\s*[,\-–]\s*\d+)*\]'), 2,
            "Numbered bracket citation"),
    Pattern("et-al", re.compile(r'\bet al\.'), 2,
            "'et al.' reference"),
    Pattern("page-reference", re.compile(r'\bpp\.\s*\d+'), 3,
            "Page reference"),
    Pattern("according-to",
            re.compile(r'\baccording to (?!(?:the|a|an|this|that|these|those|our|their|its|his|her|some|many|most)\b)[a-z]+'), 2,
            "'According to <name>' attribution"),
    Pattern("as-cited-in", re.compile(r'\bas cited in\b'), 5,
            "'As cited in' secondary citation"),
    Pattern("cf-reference", re.compile(r'\bcf\.\s+[a-z]+'), 2,
            "'cf.' cross-reference"),
]

URL_PATTERN = re.compile(r'https?://[^\s<>"\')\]]+|www\.[^\s<>"\')\]]+')
URL_WEIGHT = 15

SHORT_WORD_CHARS = 3
SENTENCE_BREAK = re.compile(r'[.!?]')

MIN_SENTENCE_CHARS = 20
MIN_SENTENCES_FOR_VARIANCE = 5
VARIANCE_THRESHOLD = 500
VARIANCE_WEIGHT = 15

ACADEMIC_PHRASES = [
    "in conclusion",
    "the results indicate that",
    "previous research has shown",
    "it is important to note",
    "it is widely accepted",
    "studies have shown",
    "research suggests that",
    "in recent years",
    "plays a crucial role",
    "a growing body of",
    "the findings suggest",
    "on the other hand",
    "in addition to",
    "furthermore",
    "moreover",
    "in this paper",
    "the purpose of this study",
    "this study aims to",
    "it can be concluded that",
    "further research is needed",
]
PHRASE_OVERUSE_THRESHOLD = 8
PHRASE_WEIGHT = 2
PHRASE_WEIGHT_CAP = 20

LONG_LINE_CHARS = 120
LONG_LINE_MIN_WORDS = 5
LONG_LINE_THRESHOLD = 5
FORMATTING_WEIGHT = 10


def count_significant_words(text: str) -> int:
    """Count whitespace-delimited words longer than 3 characters."""
    return sum(1 for word in text.split() if len(word) > SHORT_WORD_CHARS)


def split_sentences(text: str, min_chars: int = MIN_SENTENCE_CHARS) -> List[str]:
    """Split on sentence terminators, keeping sentences longer than min_chars."""
    sentences = (s.strip() for s in SENTENCE_BREAK.split(text))
    return [s for s in sentences if len(s) > min_chars]


class HeuristicScorer:
    """Estimates plagiarism likelihood from text patterns alone."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the scorer.

        Args:
            config: Configuration object (uses defaults if not provided)
        """
        self.config = config or Config()
        self.min_words = self.config.min_significant_words
        self.max_score = self.config.max_plagiarism_score

    def score(self, text: str) -> PlagiarismReport:
        """
        Score a document.

        Args:
            text: Extracted plain text

        Returns:
            PlagiarismReport with the capped score and triggered signals
        """
        significant = count_significant_words(text or "")
        if significant < self.min_words:
            logger.debug(f"Only {significant} significant words, skipping heuristic scoring")
            return PlagiarismReport(score=0.0, signals=[], significant_words=significant)

        lowered = text.lower()
        signals: List[PlagiarismSignal] = []
        signals.extend(self._definite_indicators(lowered))
        signals.extend(self._suspicious_patterns(lowered))
        signals.extend(self._urls(lowered))
        signals.extend(self._sentence_variance(lowered))
        signals.extend(self._phrase_overuse(lowered))
        signals.extend(self._formatting(lowered))

        total = sum(signal.weight for signal in signals)
        score = float(min(total, self.max_score))

        logger.info(f"Heuristic score {score:.0f} from {len(signals)} signals (raw {total:.0f})")

        return PlagiarismReport(score=score, signals=signals, significant_words=significant)

    def _definite_indicators(self, text: str) -> List[PlagiarismSignal]:
        signals = []
        for pattern in DEFINITE_INDICATORS:
            occurrences = len(pattern.regex.findall(text))
            if occurrences:
                signals.append(PlagiarismSignal(
                    category=pattern.category,
                    weight=pattern.weight,
                    occurrences=occurrences,
                    description=f"{pattern.label} found"
                ))
        return signals

    def _suspicious_patterns(self, text: str) -> List[PlagiarismSignal]:
        signals = []
        for pattern in SUSPICIOUS_PATTERNS:
            occurrences = len(pattern.regex.findall(text))
            if occurrences:
                signals.append(PlagiarismSignal(
                    category=pattern.category,
                    weight=pattern.weight * occurrences,
                    occurrences=occurrences,
                    description=f"{pattern.label} ({occurrences} occurrence{'s' if occurrences != 1 else ''})"
                ))
        return signals

    def _urls(self, text: str) -> List[PlagiarismSignal]:
        occurrences = len(URL_PATTERN.findall(text))
        if not occurrences:
            return []
        return [PlagiarismSignal(
            category="url",
            weight=URL_WEIGHT * occurrences,
            occurrences=occurrences,
            description=f"Raw URL ({occurrences} occurrence{'s' if occurrences != 1 else ''})"
        )]

    def _sentence_variance(self, text: str) -> List[PlagiarismSignal]:
        sentences = split_sentences(text)
        if len(sentences) < MIN_SENTENCES_FOR_VARIANCE:
            return []

        lengths = np.array([len(s.split()) for s in sentences], dtype=np.float64)
        variance = float(np.var(lengths))
        if variance <= VARIANCE_THRESHOLD:
            return []
        return [PlagiarismSignal(
            category="sentence-variance",
            weight=VARIANCE_WEIGHT,
            occurrences=len(sentences),
            description=f"Inconsistent sentence lengths (variance {variance:.0f}), "
                        f"possibly combined from multiple sources"
        )]

    def _phrase_overuse(self, text: str) -> List[PlagiarismSignal]:
        count = sum(text.count(phrase) for phrase in ACADEMIC_PHRASES)
        if count <= PHRASE_OVERUSE_THRESHOLD:
            return []
        return [PlagiarismSignal(
            category="phrase-overuse",
            weight=min(count * PHRASE_WEIGHT, PHRASE_WEIGHT_CAP),
            occurrences=count,
            description=f"Overuse of common academic phrases ({count} occurrences)"
        )]

    def _formatting(self, text: str) -> List[PlagiarismSignal]:
        long_lines = [
            line for line in text.splitlines()
            if len(line.strip()) > LONG_LINE_CHARS and len(line.split()) >= LONG_LINE_MIN_WORDS
        ]
        if len(long_lines) <= LONG_LINE_THRESHOLD:
            return []
        return [PlagiarismSignal(
            category="formatting-anomaly",
            weight=FORMATTING_WEIGHT,
            occurrences=len(long_lines),
            description=f"{len(long_lines)} unwrapped lines over {LONG_LINE_CHARS} characters, "
                        f"possibly pasted source text"
        )]
