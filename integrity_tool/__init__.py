"""Academic integrity analysis: source similarity, heuristic plagiarism scoring and report synthesis."""

__version__ = "0.1.0"
