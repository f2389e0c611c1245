"""Report generation module for integrity analysis results."""

import html
from datetime import datetime
from pathlib import Path

from .types import IntegrityReport


def risk_level(score: float) -> str:
    """Bucket a heuristic plagiarism score."""
    if score >= 50:
        return "high"
    if score >= 20:
        return "medium"
    return "low"


RISK_COLORS = {"high": "#dc3545", "medium": "#ffc107", "low": "#28a745"}


class ReportGenerator:
    """Generates various report formats for integrity analysis results."""

    def generate_json(self, report: IntegrityReport, indent: int = 2) -> str:
        """
        Generate JSON format report.

        Args:
            report: IntegrityReport object
            indent: JSON indentation level

        Returns:
            JSON string
        """
        return report.model_dump_json(indent=indent)

    def generate_text(self, report: IntegrityReport) -> str:
        """
        Generate plain text format report.

        Args:
            report: IntegrityReport object

        Returns:
            Plain text report
        """
        analysis = report.analysis
        plagiarism = report.plagiarism

        lines = []
        lines.append("=" * 60)
        lines.append("ACADEMIC INTEGRITY REPORT")
        lines.append("=" * 60)
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append(f"Length: {report.word_count:,} words, {report.char_count:,} characters")
        lines.append("")

        lines.append("ANALYSIS:")
        lines.append(f"  Topic: {analysis.topic}")
        lines.append(f"  Academic Level: {analysis.academic_level}")
        if analysis.writing_quality:
            lines.append(f"  Writing Quality: {analysis.writing_quality}")
        lines.append(f"  Key Themes: {', '.join(analysis.key_themes)}")
        lines.append(f"  Confidence: {analysis.confidence_score:.0%} ({analysis.generated_by})")
        lines.append("")
        lines.append(f"  Research Suggestions: {analysis.research_suggestions}")
        if analysis.citation_recommendations:
            lines.append(f"  Citation Styles: {analysis.citation_recommendations}")
        for title, items in (("Strengths", analysis.strengths),
                             ("Areas to Improve", analysis.improvement_areas)):
            if items:
                lines.append(f"  {title}:")
                lines.extend(f"    - {item}" for item in items)
        lines.append("")

        lines.append("PLAGIARISM INDICATORS:")
        lines.append(f"  Heuristic Score: {plagiarism.score:.0f}/100 ({risk_level(plagiarism.score)} risk)")
        if plagiarism.signals:
            for signal in plagiarism.signals:
                lines.append(f"    [+{signal.weight:g}] {signal.description}")
        else:
            lines.append("    No indicators triggered.")
        lines.append("")

        lines.append("SUGGESTED SOURCES:")
        if report.suggested_sources:
            lines.append("-" * 60)
            for i, source in enumerate(report.suggested_sources, 1):
                lines.append(f"#{i} {source.title} ({source.similarity:.1%})")
                if source.authors:
                    lines.append(f"   {source.authors}")
        else:
            lines.append("  No sources above the similarity threshold.")

        return "\n".join(lines)

    def generate_html(self, report: IntegrityReport) -> str:
        """
        Generate HTML format report with styling.

        Args:
            report: IntegrityReport object

        Returns:
            HTML string
        """
        analysis = report.analysis
        level = risk_level(report.plagiarism.score)
        color = RISK_COLORS[level]

        signals_html = "".join(
            f'<li><span class="weight">+{signal.weight:g}</span> {html.escape(signal.description)}</li>'
            for signal in report.plagiarism.signals
        ) or '<li>No indicators triggered.</li>'

        sources_html = "".join(
            f"""
            <tr>
                <td>{html.escape(source.title)}</td>
                <td>{html.escape(source.authors)}</td>
                <td>{source.similarity:.1%}</td>
            </tr>"""
            for source in report.suggested_sources
        ) or '<tr><td colspan="3">No sources above the similarity threshold.</td></tr>'

        themes_html = "".join(
            f'<span class="theme">{html.escape(theme)}</span>' for theme in analysis.key_themes
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Academic Integrity Report</title>
    <style>
        body {{ font-family: -apple-system, "Segoe UI", Roboto, Arial, sans-serif; max-width: 960px;
               margin: 0 auto; padding: 20px; color: #333; background: #f5f5f5; }}
        section {{ background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px; }}
        .score {{ font-size: 2em; font-weight: bold; color: {color}; }}
        .theme {{ display: inline-block; background: #e8eaf6; padding: 2px 8px; margin: 2px;
                  border-radius: 4px; }}
        .weight {{ font-weight: bold; color: {color}; }}
        table {{ width: 100%; border-collapse: collapse; }}
        td, th {{ text-align: left; padding: 6px; border-bottom: 1px solid #eee; }}
    </style>
</head>
<body>
    <section>
        <h1>Academic Integrity Report</h1>
        <p>Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
        <p>{report.word_count:,} words &middot; {report.char_count:,} characters</p>
    </section>

    <section>
        <h2>{html.escape(analysis.topic)}</h2>
        <p>Academic level: <strong>{html.escape(str(analysis.academic_level))}</strong></p>
        <p>{themes_html}</p>
        <p>{html.escape(analysis.research_suggestions)}</p>
        <p>Citation styles: {html.escape(analysis.citation_recommendations)}</p>
        <p>Confidence: {analysis.confidence_score:.0%} ({analysis.generated_by})</p>
    </section>

    <section>
        <h2>Plagiarism Indicators</h2>
        <div class="score">{report.plagiarism.score:.0f}/100 &middot; {level.upper()}</div>
        <ul>{signals_html}</ul>
    </section>

    <section>
        <h2>Suggested Sources</h2>
        <table>
            <tr><th>Title</th><th>Authors</th><th>Similarity</th></tr>{sources_html}
        </table>
    </section>
</body>
</html>"""

    def save_report(
        self,
        report: IntegrityReport,
        output_path: str,
        format: str = "json"
    ):
        """
        Save report to file.

        Args:
            report: IntegrityReport object
            output_path: Path to save the report
            format: Output format (json, html, text)
        """
        path = Path(output_path)

        if format == "json":
            content = self.generate_json(report)
        elif format == "html":
            content = self.generate_html(report)
        elif format == "text":
            content = self.generate_text(report)
        else:
            raise ValueError(f"Unsupported format: {format}")

        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
