"""Console output utilities for `--pretty` mode.

JSON output never goes through this module; it is written with typer.echo
so scripts can parse it. These helpers render the same documents as rich
tables and panels for humans.

Usage:
    from cli.console import console, render_audit, print_success

    render_audit(result.to_dict())
    print_success("Scaffolded 12 artifacts")
"""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

STATUS_STYLES = {
    "pass": "[green]✓ pass[/green]",
    "fail": "[red]✗ fail[/red]",
    "warn": "[yellow]⚠ warn[/yellow]",
}


def print_success(message: str, out: Console | None = None) -> None:
    """Print a success message (green checkmark)."""
    (out or console).print(f"[green]✓[/green] {message}")


def print_panel(title: str, content: str, style: str = "blue", out: Console | None = None) -> None:
    """Print content in a panel/box."""
    (out or console).print(Panel(content, title=title, border_style=style))


def _score_style(score: int, maximum: int) -> str:
    if score >= maximum:
        return "green"
    if score == 0:
        return "red"
    return "yellow"


def render_audit(audit: dict[str, Any], out: Console | None = None) -> None:
    """Render an audit document as a score table plus recommendations."""
    out = out or console
    table = Table(title=f"Audit: {audit['project']}")
    table.add_column("Dimension", style="bold")
    table.add_column("Score", justify="center")
    table.add_column("Findings")

    for dimension, score in audit["scores"].items():
        style = _score_style(score["score"], score["max"])
        table.add_row(
            dimension.replace("_", " ").title(),
            f"[{style}]{score['score']}/{score['max']}[/{style}]",
            "\n".join(score["findings"]),
        )
    out.print(table)

    print_panel(
        "Maturity",
        f"[bold]{audit['maturity_level']}[/bold]  "
        f"({audit['total_score']}/{audit['max_score']})",
        out=out,
    )
    out.print("\n[bold]Recommendations[/bold]")
    for recommendation in audit["recommendations"]:
        out.print(f"  - {recommendation}")


def render_doctor(report: dict[str, Any], out: Console | None = None) -> None:
    """Render a doctor report as a checklist table."""
    out = out or console
    table = Table(title=f"Doctor: {report['project']}")
    table.add_column("Status", justify="center")
    table.add_column("Check")
    table.add_column("Fix", style="dim")

    for check in report["checks"]:
        table.add_row(STATUS_STYLES.get(check["status"], check["status"]), check["check"], check["fix"])
    out.print(table)

    summary = report["summary"]
    style = "red" if summary["failed"] else "yellow" if summary["warnings"] else "green"
    print_panel(
        "Summary",
        f"{summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['warnings']} warnings ({summary['total']} checks)",
        style=style,
        out=out,
    )


def render_evolution(plan: dict[str, Any], out: Console | None = None) -> None:
    """Render an evolution document: steps, weakest dimensions and applied changes."""
    out = out or console
    if "message" in plan:
        print_panel(plan["current_level"], plan["message"], style="green", out=out)
        return

    print_panel(
        f"{plan['current_level']} -> {plan['next_level']}",
        f"[bold]{plan['goal']}[/bold]\n\nSuccess: {plan['success_criteria']}",
        out=out,
    )

    steps = Table(title="Steps")
    steps.add_column("#", justify="right")
    steps.add_column("Action", style="bold")
    steps.add_column("Description")
    steps.add_column("Automated", justify="center")
    for step in plan["steps"]:
        steps.add_row(
            str(step["step"]),
            step["action"],
            step["description"],
            "[green]yes[/green]" if step["automated"] else "no",
        )
    out.print(steps)

    weakest = Table(title="Weakest dimensions")
    weakest.add_column("Dimension")
    weakest.add_column("Score", justify="center")
    for dimension in plan["weakest_dimensions"]:
        weakest.add_row(dimension["dimension"], f"{dimension['score']}/{dimension['max']}")
    out.print(weakest)

    pack = plan["pack_recommendation"]
    out.print(f"\n[bold]Automation pack:[/bold] {pack['recommended'] or 'none'} - {pack['reason']}")
    for applied in plan["applied"]:
        print_success(applied, out=out)
