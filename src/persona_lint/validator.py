import os
from typing import Dict, Iterable, List, Optional, Set, Tuple
from . import auditor, checks
from .config import load_config
from .frontmatter import FrontMatterError, load_document, relative_path
from .scoring import count_severities, score_findings
from .types import FileResult, Finding, KindSpec, Settings, ValidationResult


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read().replace("\r\n", "\n")


def check_kind_document(
    path: str, root: str, kind: str, spec: KindSpec, settings: Settings
) -> Tuple[List[Finding], int]:
    """Runs every per-document check for a single customization document and returns its token count."""
    rel_path = relative_path(path, root)
    text = _read_text(path)
    tokens = auditor.count_tokens(text)
    findings: List[Finding] = []

    try:
        doc = load_document(path, root, kind)
    except FrontMatterError as exc:
        findings.extend(checks.front_matter_error(rel_path, exc))
    else:
        findings.extend(checks.check_front_matter_present(doc))
        findings.extend(checks.check_required_fields(doc, spec))
        findings.extend(checks.check_field_types(doc))
        findings.extend(checks.check_mode_value(doc))

    findings.extend(checks.check_placeholders(rel_path, text, settings.get("placeholders", [])))
    findings.extend(checks.check_code_fences(rel_path, text))
    findings.extend(checks.check_token_budget(rel_path, tokens, settings.get("token_budget", 0)))
    return findings, tokens


def check_kind_dir_extra(path: str, root: str, settings: Settings) -> List[Finding]:
    """Placeholder and fence checks for READMEs and notes sitting in a kind directory."""
    rel_path = relative_path(path, root)
    text = _read_text(path)
    findings = checks.check_placeholders(rel_path, text, settings.get("placeholders", []))
    findings.extend(checks.check_code_fences(rel_path, text))
    return findings


def check_markdown_file(path: str, root: str, settings: Settings) -> List[Finding]:
    """Link and secret checks that apply to every Markdown file."""
    rel_path = relative_path(path, root)
    text = _read_text(path)
    findings: List[Finding] = []
    findings.extend(checks.check_urls(rel_path, text, settings.get("branch", "master")))
    findings.extend(checks.check_relative_links(rel_path, text))
    findings.extend(checks.check_secrets(rel_path, text))
    return findings


def _filter_ignored(findings: Iterable[Finding], ignored: Iterable[str]) -> List[Finding]:
    ignored_set = set(ignored)
    return [f for f in findings if f["check"] not in ignored_set]


def perform_validation(
    path: str,
    settings: Optional[Settings] = None,
    ignore: Optional[List[str]] = None,
    strict: Optional[bool] = None,
) -> ValidationResult:
    """Orchestrates discovery, checks and scoring for a repository or a single file."""
    if settings is None:
        settings = load_config(auditor.find_root(path))

    specs = auditor.kind_specs(settings)
    by_file: Dict[str, List[Finding]] = {}
    kinds: Dict[str, Optional[str]] = {}
    tokens: Dict[str, int] = {}

    def record(rel: str, kind: Optional[str], found: List[Finding]) -> None:
        by_file.setdefault(rel, []).extend(found)
        kinds.setdefault(rel, kind)

    if os.path.isfile(path):
        root = auditor.find_root(path, settings)
        rel = relative_path(path, root)
        kind = auditor.detect_kind(path)
        if kind:
            spec = specs[kind]
            found, tokens[rel] = check_kind_document(path, root, kind, spec, settings)
            record(rel, kind, found)
            if auditor.kind_directory_of(path, settings) == kind:
                record(rel, kind, checks.check_naming(rel, spec))
        else:
            record(rel, None, checks.check_code_fences(rel, _read_text(path)))
        record(rel, kind, check_markdown_file(path, root, settings))
        inventory = {}
    else:
        root = path
        kind_files = auditor.collect_kind_files(root, settings)
        kind_paths: Set[str] = set()
        for kind, files in kind_files.items():
            for kind_path in files:
                rel = relative_path(kind_path, root)
                found, tokens[rel] = check_kind_document(kind_path, root, kind, specs[kind], settings)
                record(rel, kind, found)
                kind_paths.add(kind_path)

        for kind, files in auditor.collect_kind_dir_markdown(root, settings).items():
            for md_path in files:
                found = checks.check_naming(relative_path(md_path, root), specs[kind])
                if md_path not in kind_paths:
                    found.extend(check_kind_dir_extra(md_path, root, settings))
                if found:
                    record(found[0]["file"], auditor.detect_kind(md_path), found)

        for docs_path in auditor.collect_docs_files(root, settings):
            rel = relative_path(docs_path, root)
            fences = checks.check_code_fences(rel, _read_text(docs_path))
            if fences:
                record(rel, None, fences)

        for md_path in auditor.collect_markdown_files(root):
            found = check_markdown_file(md_path, root, settings)
            if found:
                record(relative_path(md_path, root), auditor.detect_kind(md_path), found)

        inventory = auditor.check_inventory(root, settings)
        if not any(kind_files.values()):
            record(
                ".",
                None,
                [
                    {
                        "file": ".",
                        "line": 0,
                        "check": "inventory",
                        "severity": "warning",
                        "message": "No customization documents found",
                    }
                ],
            )

    ignored = list(settings.get("ignore", [])) + list(ignore or [])
    file_results: List[FileResult] = []
    all_findings: List[Finding] = []

    for rel in sorted(by_file, key=lambda r: (kinds[r] is None, r)):
        found = sorted(_filter_ignored(by_file[rel], ignored), key=lambda f: f["line"])
        # Plain Markdown files only appear when they have something to report
        if kinds[rel] is None and not found and not os.path.isfile(path):
            continue
        errors, warnings = count_severities(found)
        file_results.append(
            {
                "file": rel,
                "kind": kinds[rel],
                "score": score_findings(found),
                "errors": errors,
                "warnings": warnings,
                "tokens": tokens.get(rel, 0),
                "findings": found,
            }
        )
        all_findings.extend(found)

    error_count, warning_count = count_severities(all_findings)
    final_score = (
        sum(r["score"] for r in file_results) / len(file_results) if file_results else 100.0
    )
    strict_mode = settings.get("strict", False) if strict is None else strict

    return {
        "root": root,
        "file_results": file_results,
        "findings": all_findings,
        "error_count": error_count,
        "warning_count": warning_count,
        "final_score": final_score,
        "inventory": inventory,
        "passed": error_count == 0 and not (strict_mode and warning_count > 0),
    }
