"""Command-line interface for iac-doctor."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from iac_doctor import __version__
from iac_doctor.challenges import CHALLENGES, ChallengeValidator
from iac_doctor.config import ConfigError, DoctorConfig, load_config
from iac_doctor.engine import DiagnosticEngine
from iac_doctor.models import Provider
from iac_doctor.reporter import create_reporter
from iac_doctor.rules.registry import default_registry

console = Console()


def _configure_logging(verbose: bool, level: str = "WARNING") -> None:
    """Route library logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config_or_exit(path: str | None) -> DoctorConfig:
    """Load configuration, exiting with code 2 when it is invalid."""
    try:
        return load_config(Path(path) if path else None)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(2)


def _write_or_echo(content: str, output: str | None) -> None:
    """Write output to a file or to stdout."""
    if output:
        Path(output).write_text(content, encoding="utf-8")
        console.print(f"[green]Report written to {output}[/green]")
    else:
        click.echo(content)


@click.group()
@click.version_option(version=__version__, prog_name="iac-doctor")
def main() -> None:
    """iac-doctor - Rule-based diagnostics for infrastructure-as-code snippets."""
    pass


@main.command()
def version() -> None:
    """Show version information."""
    click.echo(f"iac-doctor version {__version__}")


@main.command()
@click.argument("text_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--provider",
    "-p",
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    help="Cloud provider of the snippet",
)
@click.option(
    "--resource-type",
    "-r",
    help="Resource type of the snippet, e.g. s3 or ec2",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json", "yaml"]),
    default=None,
    help="Output format (default: table)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="Write output to file",
)
@click.option(
    "--fail-under",
    type=click.IntRange(0, 100),
    default=None,
    help="Exit with code 1 when the score is below this value",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a config file (default: .iac-doctor.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def scan(
    text_file: str,
    provider: str | None,
    resource_type: str | None,
    format: str | None,
    output: str | None,
    fail_under: int | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Scan a configuration snippet and print its security report.

    TEXT_FILE is the snippet to diagnose.
    """
    config = _load_config_or_exit(config_path)
    _configure_logging(verbose, config.log_level)

    provider = provider or config.provider
    resource_type = resource_type or config.resource_type
    format = format or config.format
    if fail_under is None:
        fail_under = config.fail_under

    if not provider or not resource_type:
        console.print("[red]Both --provider and --resource-type are required[/red]")
        sys.exit(2)

    text = Path(text_file).read_text(encoding="utf-8")
    engine = DiagnosticEngine(disabled_rules=config.disabled_rules)
    report = engine.scan(text, provider, resource_type)

    reporter = create_reporter(format)
    _write_or_echo(reporter.generate(report), output)

    if fail_under is not None and not report.passed(fail_under):
        if format == "table":
            console.print(f"\n[red]Score {report.score} is below {fail_under}[/red]")
        sys.exit(1)


@main.command()
@click.option(
    "--provider",
    "-p",
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    help="Only list rules for this provider",
)
@click.option(
    "--resource-type",
    "-r",
    help="Only list rules for this resource type",
)
def rules(provider: str | None, resource_type: str | None) -> None:
    """List the built-in diagnostic rules."""
    registry = default_registry()

    table = Table(
        title="Diagnostic Rules",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Rule ID")
    table.add_column("Provider")
    table.add_column("Resource")
    table.add_column("Severity")
    table.add_column("Title")

    for rule in registry.get_all():
        if provider and rule.PROVIDER != Provider.parse(provider):
            continue
        if resource_type and not rule.applies_to(rule.PROVIDER, resource_type):
            continue
        table.add_row(
            rule.RULE_ID,
            rule.PROVIDER.value,
            ", ".join(rule.RESOURCE_TYPES),
            rule.SEVERITY.value,
            rule.TITLE,
        )

    console.print(table)


# =============================================================================
# Challenge Commands
# =============================================================================


@main.group()
def challenge() -> None:
    """Work through Kubernetes troubleshooting challenges."""
    pass


@challenge.command("list")
def challenge_list() -> None:
    """List the challenges with dedicated checks."""
    table = Table(
        title="Challenges",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Checks", justify="right")

    for challenge_id in sorted(CHALLENGES):
        spec = CHALLENGES[challenge_id]
        table.add_row(str(challenge_id), spec.title, str(len(spec.checks)))

    console.print(table)


@challenge.command("show")
@click.argument("challenge_id", type=int)
@click.option("--hints", is_flag=True, help="Show hints")
@click.option("--solution", is_flag=True, help="Show the reference solution")
def challenge_show(challenge_id: int, hints: bool, solution: bool) -> None:
    """Show the broken manifest of a challenge."""
    spec = CHALLENGES.get(challenge_id)
    if spec is None:
        console.print(f"[red]Unknown challenge: {challenge_id}[/red]")
        sys.exit(2)

    console.print(f"[bold]Challenge {spec.challenge_id}: {spec.title}[/bold]")
    console.print(Syntax(spec.broken_text, "yaml"))

    if hints:
        for number, hint in enumerate(spec.hints, 1):
            console.print(f"[cyan]Hint {number}:[/cyan] {hint}")

    if solution:
        solved = spec.solved_text()
        if solved is None:
            console.print("[yellow]No reference solution for this challenge[/yellow]")
        else:
            console.print(Panel(Syntax(solved, "yaml"), title="Solution", border_style="green"))


@challenge.command("check")
@click.argument("challenge_id", type=int)
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--original",
    type=click.Path(exists=True, dir_okay=False),
    help="Broken manifest to compare against (challenges without dedicated checks)",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def challenge_check(
    challenge_id: int, file: str, original: str | None, format: str
) -> None:
    """Check a fixed manifest against a challenge.

    FILE holds the edited manifest.
    """
    text = Path(file).read_text(encoding="utf-8")
    original_text = Path(original).read_text(encoding="utf-8") if original else None

    outcome = ChallengeValidator().validate(challenge_id, text, original_text)

    if format == "json":
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    elif outcome.passed:
        console.print(f"[green]✓ {outcome.message}[/green]")
    else:
        console.print(f"[red]✗ {outcome.message}[/red]")
        for issue in outcome.issues:
            console.print(f"  • {issue}")

    if not outcome.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
