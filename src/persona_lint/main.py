import os
import sys
import click
from rich.markup import escape
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Dict, List, Optional, Tuple

from . import auditor, console as output
from .config import load_config, VERBOSITY_LEVELS
from .constants import CHECK_IDS
from .fix import apply_fixes
from .frontmatter import FrontMatterError, load_document, relative_path
from .prompt_analyzer import PromptAnalyzer
from .report import generate_markdown_report
from .scoring import generate_badge
from .types import ValidationResult
from .validator import perform_validation

console = output.console

# --- VERSION SETUP ---
try:
    __version__ = version("persona-lint")
except PackageNotFoundError:
    __version__ = "0.0.0"


# --- CLI DEFINITION ---
class DefaultGroup(click.Group):
    def resolve_command(self, ctx: click.Context, args: List[str]) -> Any:
        """Resolves the command, defaulting to 'validate' if no command matches."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            if not args or not args[0].startswith("-"):
                args.insert(0, "validate")
            return super().resolve_command(ctx, args)


@click.group(cls=DefaultGroup)
@click.version_option(version=__version__)
def cli() -> None:
    """Validates AI-assistant agent, prompt, chat mode and instructions files."""
    pass


# --- HELPERS ---


def _generate_artifacts(result: ValidationResult, badge: bool, report_path: Optional[str], verbosity: str) -> None:
    """Writes the badge and Markdown report when requested."""
    if badge:
        output_path = "persona_lint.svg"
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(generate_badge(result["final_score"]))
        if verbosity != "quiet":
            console.print(f"[bold green][Generated][/bold green] Badge saved to ./{output_path}")

    if report_path:
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(generate_markdown_report(result))
        if verbosity != "quiet":
            console.print(f"[bold green]Report saved to {report_path}[/bold green]")


def _document_rows(path: str) -> List[Dict[str, str]]:
    settings = load_config(path)
    rows: List[Dict[str, str]] = []
    for kind, files in auditor.collect_kind_files(path, settings).items():
        for doc_path in files:
            rel = relative_path(doc_path, path)
            try:
                fm = load_document(doc_path, path, kind)["front_matter"]
            except FrontMatterError as exc:
                rows.append({"kind": kind, "file": rel, "description": f"(invalid front matter: {exc.message})", "tools": "", "model": ""})
                continue
            tools = fm.get("tools")
            rows.append(
                {
                    "kind": kind,
                    "file": rel,
                    "description": str(fm.get("description") or ""),
                    "tools": ", ".join(str(t) for t in tools) if isinstance(tools, list) else str(tools or ""),
                    "model": str(fm.get("model") or ""),
                }
            )
    return rows


# --- COMMANDS ---


@cli.command(name="validate")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--verbosity", type=click.Choice(VERBOSITY_LEVELS), help="Override verbosity.")
@click.option("--plain", is_flag=True, help="One line per finding for CI logs.")
@click.option("--strict", is_flag=True, help="Fail on warnings as well as errors.")
@click.option("--ignore", "ignore", multiple=True, type=click.Choice(CHECK_IDS), help="Skip a check (repeatable).")
@click.option("--report", "report_path", type=click.Path(), help="Save Markdown report.")
@click.option("--badge", is_flag=True, help="Generate SVG badge.")
def validate(
    path: str,
    verbosity: Optional[str],
    plain: bool,
    strict: bool,
    ignore: Tuple[str, ...],
    report_path: Optional[str],
    badge: bool,
) -> None:
    """Validates customization documents under PATH (a repository root or a single file)."""
    settings = load_config(auditor.find_root(path))
    final_verbosity = verbosity or settings.get("verbosity", "summary")

    result = perform_validation(path, settings, ignore=list(ignore), strict=strict or None)

    if plain:
        output.print_plain(result)
    else:
        output.print_header(path, final_verbosity)
        output.print_inventory(result["inventory"], final_verbosity)
        output.print_findings(result, final_verbosity)
        output.print_file_scores(result, final_verbosity)
        output.print_status(result)

    _generate_artifacts(result, badge, report_path, "quiet" if plain else final_verbosity)

    if not result["passed"]:
        sys.exit(1)


@cli.command(name="check-prompts")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--plain", is_flag=True, help="Output raw score and suggestions for CI.")
def check_prompts(input_path: str, plain: bool) -> None:
    """Grades the prose of a persona document for role, structure, checklists and examples."""
    if input_path == "-":
        content = sys.stdin.read()
    else:
        with open(input_path, "r", encoding="utf-8") as f:
            content = f.read()

    result = PromptAnalyzer().analyze(content)
    output.print_prompt_analysis("Stdin" if input_path == "-" else input_path, result, plain)

    if result["score"] < 80:
        sys.exit(1)


@cli.command(name="fix")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--dry-run", is_flag=True, help="Show what would change without writing.")
def fix(path: str, dry_run: bool) -> None:
    """Adds missing front matter skeletons and rewrites repository links."""
    settings = load_config(auditor.find_root(path))
    actions = apply_fixes(path, settings, dry_run=dry_run)

    label = "[Would fix]" if dry_run else "[Fixed]"
    for action in actions:
        console.print(f"[bold green]{label}[/bold green] {escape(action)}")

    if not actions:
        console.print("[green]Nothing to fix.[/green]")
    elif not dry_run:
        console.print(f"[bold green]{len(actions)} fix(es) applied![/bold green]")
    if not settings.get("repo_url") and not dry_run:
        console.print("[dim]Set repo_url under \\[tool.persona-lint] to also rewrite relative links.[/dim]")


@cli.command(name="list")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
def list_documents(path: str) -> None:
    """Lists discovered documents with their description, tools and model."""
    output.print_document_list(_document_rows(os.path.normpath(path)))


if __name__ == "__main__":
    cli()
