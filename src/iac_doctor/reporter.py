"""Diagnostic report generators."""

import json
from abc import ABC, abstractmethod
from io import StringIO

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from iac_doctor.models import Severity, ValidationReport


class ReportGenerator(ABC):
    """Abstract base class for report generators."""

    @abstractmethod
    def generate(self, report: ValidationReport) -> str:
        """Generate output from a validation report.

        Args:
            report: The report to render.

        Returns:
            Formatted report as a string.
        """
        pass


class JSONReporter(ReportGenerator):
    """Generate JSON format reports."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def generate(self, report: ValidationReport) -> str:
        """Generate JSON report."""
        return json.dumps(report.to_dict(), indent=self.indent)


class YAMLReporter(ReportGenerator):
    """Generate YAML format reports."""

    def generate(self, report: ValidationReport) -> str:
        """Generate YAML report."""
        return yaml.safe_dump(report.to_dict(), sort_keys=False)


class TableReporter(ReportGenerator):
    """Generate rich table format reports for CLI output."""

    SEVERITY_COLORS = {
        Severity.CRITICAL: "red bold",
        Severity.HIGH: "red",
        Severity.MEDIUM: "yellow",
        Severity.LOW: "blue",
    }

    SEVERITY_ORDER = {
        Severity.CRITICAL: 0,
        Severity.HIGH: 1,
        Severity.MEDIUM: 2,
        Severity.LOW: 3,
    }

    def __init__(self, show_details: bool = True, width: int = 120) -> None:
        """Initialize table reporter.

        Args:
            show_details: Whether to include suggestions and the checklist.
            width: Console width used for rendering.
        """
        self.show_details = show_details
        # Render into a buffer; callers decide where the text goes
        self.console = Console(record=True, file=StringIO(), width=width)

    def generate(self, report: ValidationReport) -> str:
        """Generate table report."""
        self._render_summary(report)

        if report.findings:
            self._render_findings(report)

        if self.show_details:
            if report.suggestions:
                self._render_suggestions(report)
            self._render_checklist(report)

        self._render_recommendations(report.recommendations)

        return self.console.export_text()

    def _score_style(self, score: int) -> str:
        if score >= 90:
            return "green bold"
        if score >= 70:
            return "yellow bold"
        return "red bold"

    def _render_summary(self, report: ValidationReport) -> None:
        """Render summary panel."""
        summary_text = Text()
        summary_text.append("Security Score: ")
        summary_text.append(f"{report.score}/100\n", style=self._score_style(report.score))
        summary_text.append(f"Target: {report.provider or '-'}/{report.resource_type or '-'}\n\n")

        summary_text.append("By Severity:\n", style="bold")
        for severity in Severity:
            count = report.summary[severity.value]
            summary_text.append(f"  {severity.value}: ", style=self.SEVERITY_COLORS[severity])
            summary_text.append(f"{count}\n")

        panel = Panel(
            summary_text,
            title="Diagnostic Summary",
            border_style="blue",
        )
        self.console.print(panel)

    def _render_findings(self, report: ValidationReport) -> None:
        """Render findings table."""
        table = Table(
            title="Security Issues",
            show_header=True,
            header_style="bold cyan",
        )

        table.add_column("Severity", width=10)
        table.add_column("Rule ID", width=26, no_wrap=True)
        table.add_column("Title")
        table.add_column("Recommendation")

        for finding in sorted(report.findings, key=lambda f: self.SEVERITY_ORDER[f.severity]):
            table.add_row(
                Text(finding.severity.value, style=self.SEVERITY_COLORS[finding.severity]),
                finding.rule_id,
                finding.title,
                finding.recommendation,
            )

        self.console.print(table)

    def _render_suggestions(self, report: ValidationReport) -> None:
        """Render best-practice suggestions table."""
        table = Table(
            title="Best Practices",
            show_header=True,
            header_style="bold cyan",
        )

        table.add_column("Impact", width=8)
        table.add_column("Category", width=12)
        table.add_column("Title")
        table.add_column("Implementation")

        for suggestion in report.suggestions:
            table.add_row(
                suggestion.impact.value,
                suggestion.category.value,
                suggestion.title,
                suggestion.implementation,
            )

        self.console.print(table)

    def _render_checklist(self, report: ValidationReport) -> None:
        """Render compliance checklist panel."""
        text = Text()
        for entry in report.compliance_checklist:
            if entry.compliant:
                text.append("✓ ", style="green")
                text.append(f"{entry.category.value}\n")
            else:
                text.append("✗ ", style="red")
                text.append(f"{entry.category.value}", style="red")
                text.append(f" ({', '.join(entry.violating_titles)})\n", style="dim")

        panel = Panel(
            text,
            title="Compliance Checklist",
            border_style="cyan",
        )
        self.console.print(panel)

    def _render_recommendations(self, recommendations: list[str]) -> None:
        """Render recommendations panel."""
        text = Text()
        for item in recommendations:
            text.append(f"• {item}\n")

        panel = Panel(
            text,
            title="Recommendations",
            border_style="green",
        )
        self.console.print(panel)


def create_reporter(format: str, show_details: bool = True) -> ReportGenerator:
    """Create a reporter for the specified format.

    Args:
        format: Output format ('json', 'yaml', 'table').
        show_details: Whether to show full details (for table format).

    Returns:
        Appropriate ReportGenerator instance.

    Raises:
        ValueError: If format is not supported.
    """
    if format == "json":
        return JSONReporter()
    elif format == "yaml":
        return YAMLReporter()
    elif format == "table":
        return TableReporter(show_details=show_details)
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'json', 'yaml', or 'table'.")
