"""Rich-based display module for integrity analysis results."""

from typing import Optional

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from ..core.report import risk_level
from ..core.types import AnalysisResult, IntegrityReport, PlagiarismReport, SimilarityMatch

RISK_STYLES = {"high": "bold red", "medium": "bold yellow", "low": "bold green"}


def create_console() -> Console:
    """Create a rich Console instance."""
    return Console()


def get_similarity_style(similarity: float) -> Style:
    """
    Get color style based on similarity score.

    Args:
        similarity: Similarity score (0-1)

    Returns:
        Rich Style object
    """
    if similarity >= 0.95:
        return Style(color="red", bold=True)
    elif similarity >= 0.85:
        return Style(color="yellow", bold=True)
    else:
        return Style(color="cyan", bold=True)


def sources_table(sources: list[SimilarityMatch]) -> Table:
    """Build a table of suggested sources."""
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("#", width=3)
    table.add_column("Title", ratio=3)
    table.add_column("Authors", ratio=2)
    table.add_column("Similarity", justify="right")

    for i, source in enumerate(sources, 1):
        table.add_row(
            str(i),
            source.title,
            source.authors,
            Text(f"{source.similarity:.1%}", style=get_similarity_style(source.similarity))
        )
    return table


def display_plagiarism(console: Console, report: PlagiarismReport):
    """
    Display the heuristic score and its signals.

    Args:
        console: Rich Console instance
        report: PlagiarismReport object
    """
    level = risk_level(report.score)
    console.print("  Heuristic plagiarism score: ", end="")
    console.print(f"{report.score:.0f}/100 ({level})", style=RISK_STYLES[level])

    if not report.signals:
        console.print("  No indicators triggered.", style="dim")
        return

    for signal in report.signals:
        line = Text("    ")
        line.append(f"+{signal.weight:g}", style="yellow")
        line.append(f" {signal.description}")
        console.print(line)


def display_analysis(console: Console, analysis: AnalysisResult):
    """
    Display the synthesized analysis.

    Args:
        console: Rich Console instance
        analysis: AnalysisResult object
    """
    console.print(f"  Topic: {analysis.topic}", style="bold")
    console.print(f"  Academic level: {analysis.academic_level}")
    if analysis.writing_quality:
        console.print(f"  Writing quality: {analysis.writing_quality}")
    console.print(f"  Key themes: {', '.join(analysis.key_themes)}")
    console.print(f"  Suggestions: {analysis.research_suggestions}")
    if analysis.citation_recommendations:
        console.print(f"  Citation styles: {analysis.citation_recommendations}")

    source_note = "model" if analysis.generated_by == "model" else "rule-based fallback"
    console.print(f"  Confidence: {analysis.confidence_score:.0%} ({source_note})", style="dim")


def display_report(report: IntegrityReport, output_path: Optional[str] = None, console: Optional[Console] = None):
    """
    Display an integrity report with rich formatting.

    Args:
        report: IntegrityReport object
        output_path: Path where the report was saved
        console: Console to print to (a new one if omitted)
    """
    console = console or create_console()

    console.print("Analysis complete!", style="bold green")
    console.print(f"  {report.word_count:,} words, {report.char_count:,} characters", style="dim")
    console.print()

    display_analysis(console, report.analysis)
    console.print()

    display_plagiarism(console, report.plagiarism)
    console.print()

    if report.suggested_sources:
        console.print(f"Top {len(report.suggested_sources)} sources:", style="bold")
        console.print(sources_table(report.suggested_sources))
    else:
        console.print("No sources above the similarity threshold.", style="dim")
    console.print()

    if output_path:
        console.print(f"Full report saved to: {output_path}", style="cyan")
