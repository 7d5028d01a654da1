from typing import Any, Dict, List
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel

from .types import InventoryEntry, ValidationResult
from .prompt_analyzer import PromptAnalysisResult

console = Console()

SEVERITY_STYLE = {"error": "red", "warning": "yellow"}


def print_header(path: str, verbosity: str) -> None:
    if verbosity == "quiet":
        return
    console.print(
        Panel(f"[bold cyan]Running Persona Lint[/bold cyan]\nTarget: {escape(path)}", expand=False)
    )


def print_inventory(inventory: Dict[str, InventoryEntry], verbosity: str) -> None:
    """
    Prints the document inventory table.

    Args:
        inventory (Dict[str, InventoryEntry]): Per-kind directory and counts.
        verbosity (str): Output verbosity level.

    Returns:
        None
    """
    if verbosity != "detailed" or not inventory:
        return

    table = Table(title="Inventory")
    table.add_column("Kind", style="cyan")
    table.add_column("Directory")
    table.add_column("Documents", justify="right")

    for kind, entry in inventory.items():
        count = str(entry["count"]) if entry["exists"] else "[dim]missing[/dim]"
        table.add_row(kind, entry["directory"], count)

    console.print(table)
    console.print("")


def print_findings(result: ValidationResult, verbosity: str) -> None:
    """
    Prints the findings table.

    Args:
        result (ValidationResult): Validation results.
        verbosity (str): Output verbosity level.

    Returns:
        None
    """
    if verbosity == "quiet" or not result["findings"]:
        return

    table = Table(title="Findings")
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Check", style="magenta")
    table.add_column("Message")

    for f in result["findings"]:
        style = SEVERITY_STYLE.get(f["severity"], "white")
        table.add_row(
            escape(f["file"]),
            str(f["line"]) if f["line"] else "-",
            f"[{style}]{f['severity'].upper()}[/{style}]",
            f["check"],
            escape(f["message"]),
        )
    console.print(table)


def print_file_scores(result: ValidationResult, verbosity: str) -> None:
    """Per-document scores, shown only in detailed mode."""
    if verbosity != "detailed" or not result["file_results"]:
        return

    table = Table(title="Documents")
    table.add_column("File", style="cyan")
    table.add_column("Kind")
    table.add_column("Score", justify="right")
    table.add_column("Tokens", justify="right")

    for r in result["file_results"]:
        color = "green" if r["errors"] == 0 else "red"
        table.add_row(
            escape(r["file"]), r["kind"] or "-", f"[{color}]{r['score']}[/{color}]", f"{r['tokens']:,}"
        )
    console.print(table)


def print_status(result: ValidationResult) -> None:
    """Prints the final score and the pass/fail line."""
    score_color = "green" if result["passed"] else "red"
    console.print(
        f"\n[bold]Final Score: [{score_color}]{result['final_score']:.1f}/100[/{score_color}][/bold]"
    )
    if result["passed"]:
        console.print("[bold green]✅ All validation checks passed![/bold green]")
    else:
        console.print(
            f"[bold red]❌ Validation failed with {result['error_count']} error(s) "
            f"and {result['warning_count']} warning(s)[/bold red]"
        )


def print_plain(result: ValidationResult) -> None:
    """One line per finding, for CI logs and editor problem matchers."""
    for f in result["findings"]:
        location = f"{f['file']}:{f['line']}" if f["line"] else f["file"]
        click.echo(f"{location}: {f['severity'].upper()} [{f['check']}] {f['message']}")

    click.echo(f"Score: {result['final_score']:.1f}/100")
    if result["passed"]:
        click.echo("All validation checks passed!")
    else:
        click.echo(f"Validation failed with {result['error_count']} error(s)")


def print_prompt_analysis(path: str, result: PromptAnalysisResult, plain: bool) -> None:
    """
    Prints the prompt analysis result.

    Args:
        path (str): Path to the prompt file.
        result (PromptAnalysisResult): The analysis result.
        plain (bool): Whether to use plain output for CI.

    Returns:
        None
    """
    if plain:
        click.echo(f"Prompt Analysis: {path}")
        click.echo(f"Score: {result['score']}/100\n")
        for k, passed in result["results"].items():
            click.echo(f"{k.replace('_', ' ').title()}: {'PASS' if passed else 'FAIL'}")

        if result["improvements"]:
            click.echo("\nRefactored Suggestions:")
            for imp in result["improvements"]:
                click.echo(f"- {imp}")

        if result["score"] >= 80:
            click.echo("PASSED: Prompt is optimized!")
        else:
            click.echo("FAILED: Prompt score too low.")
        return

    console.print(Panel(f"[bold cyan]Prompt Analysis: {escape(path)}[/bold cyan]", expand=False))
    style = "green" if result["score"] >= 80 else "red"
    console.print(f"Score: [bold {style}]{result['score']}/100[/bold {style}]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Heuristic")
    table.add_column("Status")
    for k, passed in result["results"].items():
        status = "[green]PASS[/green]" if passed else "[red]FAIL[/red]"
        table.add_row(k.replace("_", " ").title(), status)
    console.print(table)

    if result["improvements"]:
        console.print("\n[bold yellow]Suggestions:[/bold yellow]")
        for imp in result["improvements"]:
            console.print(f"💡 {imp}")

    if result["score"] >= 80:
        console.print("\n[bold green]PASSED: Prompt is optimized![/bold green]")
    else:
        console.print("\n[bold red]FAILED: Prompt score too low.[/bold red]")


def print_document_list(rows: List[Dict[str, Any]]) -> None:
    """Prints discovered documents with the front matter the host reads."""
    if not rows:
        console.print("[yellow]No customization documents found.[/yellow]")
        return

    table = Table(title="Customization Documents")
    table.add_column("Kind", style="cyan")
    table.add_column("File")
    table.add_column("Description")
    table.add_column("Tools")
    table.add_column("Model")

    for row in rows:
        table.add_row(
            row["kind"],
            escape(row["file"]),
            escape(row["description"]),
            escape(row["tools"]),
            escape(row["model"]),
        )
    console.print(table)
