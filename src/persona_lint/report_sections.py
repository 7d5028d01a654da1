from collections import defaultdict
from typing import Dict, List
from .constants import PASS_SCORE, REMEDIATION
from .types import Finding, InventoryEntry, ValidationResult


def generate_summary_section(result: ValidationResult) -> str:
    """Creates the executive summary section of the report."""
    summary = "# Persona Lint Report\n\n"
    summary += f"**Repository:** `{result['root']}`\n"
    summary += f"**Overall Score: {result['final_score']:.1f}/100** - {'PASS' if result['passed'] else 'FAIL'}\n"
    summary += f"**Documents Checked:** {len(result['file_results'])}\n"
    summary += f"**Errors:** {result['error_count']}  **Warnings:** {result['warning_count']}\n\n"

    if result["passed"]:
        summary += "✅ **Status: PASSED** - All validation checks passed.\n\n"
    else:
        summary += "❌ **Status: FAILED** - Fix the errors below before submitting.\n\n"
    return summary


def generate_inventory_section(inventory: Dict[str, InventoryEntry]) -> str:
    """Lists each document kind with its directory and document count."""
    if not inventory:
        return ""

    section = "## 📋 Inventory\n\n"
    section += "| Kind | Directory | Documents |\n"
    section += "|------|-----------|-----------|\n"
    for kind, entry in inventory.items():
        count = str(entry["count"]) if entry["exists"] else "missing"
        section += f"| {kind} | `{entry['directory']}` | {count} |\n"
    return section + "\n"


def generate_findings_section(findings: List[Finding]) -> str:
    """Groups findings by check, with one piece of guidance per group."""
    section = "## 🔍 Findings\n\n"
    if not findings:
        return section + "✅ No issues found.\n\n"

    grouped: Dict[str, List[Finding]] = defaultdict(list)
    for f in findings:
        grouped[f["check"]].append(f)

    # Errors first, then by volume
    order = sorted(
        grouped,
        key=lambda c: (all(f["severity"] != "error" for f in grouped[c]), -len(grouped[c]), c),
    )
    for check in order:
        items = grouped[check]
        icon = "❌" if any(f["severity"] == "error" for f in items) else "⚠️"
        section += f"### {icon} `{check}` ({len(items)})\n\n"
        if check in REMEDIATION:
            section += f"> {REMEDIATION[check]}\n\n"
        for f in items:
            location = f"{f['file']}:{f['line']}" if f["line"] else f["file"]
            section += f"- `{location}` {f['message']}\n"
        section += "\n"
    return section


def generate_file_table_section(result: ValidationResult) -> str:
    """Per-document score table."""
    section = "## 📄 Documents\n\n"
    if not result["file_results"]:
        return section + "No documents were checked.\n"

    section += "| File | Kind | Score | Errors | Warnings | Tokens |\n"
    section += "|------|------|-------|--------|----------|--------|\n"
    for r in result["file_results"]:
        status = "✅" if r["score"] >= PASS_SCORE and r["errors"] == 0 else "❌"
        section += (
            f"| `{r['file']}` | {r['kind'] or '-'} | {status} {r['score']} | "
            f"{r['errors']} | {r['warnings']} | {r['tokens']:,} |\n"
        )
    return section + "\n"
