"""Report generators for selection runs.

Provides Markdown and JSON renderings of a SelectionReport so a day's
selection can be audited after the fact.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from dailyquiz.models import SelectionReport

PERCENTILES = [25, 50, 75, 95]


@runtime_checkable
class Reporter(Protocol):
    """Protocol for rendering selection reports."""

    def generate(self, report: SelectionReport) -> str:
        """Render the report as a string."""
        ...

    def save(self, report: SelectionReport, path: str | Path) -> None:
        """Write the rendered report to a file."""
        ...


def _calculate_percentiles(values: list[float], percentiles: list[int]) -> dict[str, float]:
    """Percentiles by linear interpolation between closest ranks.

    Example:
        >>> _calculate_percentiles([1, 2, 3, 4, 5], [25, 50, 75])
        {'P25': 2.0, 'P50': 3.0, 'P75': 4.0}
    """
    if not values:
        return {f"P{p}": 0.0 for p in percentiles}

    ordered = sorted(values)
    last = len(ordered) - 1
    result = {}

    for p in percentiles:
        position = p / 100 * last
        low = int(position)
        high = min(low + 1, last)
        weight = position - low
        result[f"P{p}"] = round(ordered[low] + (ordered[high] - ordered[low]) * weight, 4)

    return result


def _cell(text: str | None, limit: int = 80) -> str:
    """Make text safe for a Markdown table cell."""
    if not text:
        return "-"
    text = " ".join(text.split()).replace("|", "\\|")
    return text if len(text) <= limit else text[: limit - 3] + "..."


class MarkdownReporter:
    """Generates human-readable Markdown reports.

    Example:
        >>> reporter = MarkdownReporter()
        >>> reporter.save(report, "report.md")
    """

    def __init__(self, include_distribution: bool = True, max_text_length: int = 80) -> None:
        """Initialize the Markdown reporter.

        Args:
            include_distribution: Include the score percentiles section.
            max_text_length: Question texts in the table are cut to this length.
        """
        self.include_distribution = include_distribution
        self.max_text_length = max_text_length

    def generate(self, report: SelectionReport) -> str:
        sections = [
            "# Daily Question Selection Report\n",
            self._generate_summary(report),
        ]
        if self.include_distribution:
            sections.append(self._generate_distribution(report))
        sections.append(self._generate_candidates(report))
        return "\n".join(sections)

    def save(self, report: SelectionReport, path: str | Path) -> None:
        Path(path).write_text(self.generate(report), encoding="utf-8")

    def _generate_summary(self, report: SelectionReport) -> str:
        lines = [
            "## Summary",
            f"- **Generated**: {report.generated_at.isoformat()}",
            f"- **Mode**: {report.mode}",
        ]
        if report.target_count is not None:
            lines.append(f"- **Target count**: {report.target_count}")
        if report.threshold is not None:
            lines.append(f"- **Threshold**: {report.threshold:.2f}")
        lines.extend([
            f"- **Candidates**: {report.candidate_count}",
            f"- **Recent questions**: {report.corpus_size}",
            f"- **Selected**: {report.selected_count}",
            "",
        ])
        return "\n".join(lines)

    def _generate_distribution(self, report: SelectionReport) -> str:
        lines = ["## Similarity Distribution", ""]

        if not report.scores:
            lines.append("*No candidates scored.*\n")
            return "\n".join(lines)

        pcts = _calculate_percentiles([s.max_similarity for s in report.scores], PERCENTILES)
        for label, value in pcts.items():
            lines.append(f"- **{label}**: {value:.4f}")
        lines.append("")
        return "\n".join(lines)

    def _generate_candidates(self, report: SelectionReport) -> str:
        lines = ["## Candidates", ""]

        if not report.scores:
            lines.append("*No candidates.*\n")
            return "\n".join(lines)

        lines.extend([
            "| # | Selected | Max similarity | Question | Closest recent question |",
            "|---|----------|----------------|----------|-------------------------|",
        ])
        for s in report.scores:
            lines.append(
                f"| {s.index} | {'yes' if s.selected else 'no'} | {s.max_similarity:.3f} "
                f"| {_cell(s.content, self.max_text_length)} "
                f"| {_cell(s.closest_match, self.max_text_length)} |"
            )
        lines.append("")
        return "\n".join(lines)


class JSONReporter:
    """Generates machine-readable JSON reports.

    Adds ``selected_count`` and ``selected_indices`` next to the model fields.
    """

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def generate(self, report: SelectionReport) -> str:
        data = report.model_dump(mode="json")
        data["selected_count"] = report.selected_count
        data["selected_indices"] = report.selected_indices()
        return json.dumps(data, indent=self.indent, ensure_ascii=False)

    def save(self, report: SelectionReport, path: str | Path) -> None:
        Path(path).write_text(self.generate(report), encoding="utf-8")
