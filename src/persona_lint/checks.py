import os
import re
from typing import Any, List, Optional
from .constants import (
    KNOWN_MODES,
    LIST_FIELDS,
    NAMING_EXEMPT,
    SECRET_PATTERNS,
    STRING_FIELDS,
)
from .frontmatter import FrontMatterError
from .types import Document, Finding, KindSpec

GITHUB_REF_URL = re.compile(
    r"https?://github\.com/[\w.-]+/[\w.-]+/(?P<view>blob|tree)/(?P<ref>[^/\s)\]>\"'#?]+)"
)
RELATIVE_LINK = re.compile(r"\]\((?P<target>\.\./[^)\s]*)")
FENCE = "```"

_COMPILED_SECRETS = [(name, re.compile(pattern)) for name, pattern in SECRET_PATTERNS]


def _finding(file: str, line: int, check: str, severity: str, message: str) -> Finding:
    return {"file": file, "line": line, "check": check, "severity": severity, "message": message}


def _field_line(doc: Document, key: str) -> int:
    """Line of a top-level front matter key, or 1 (the opening delimiter)."""
    pattern = re.compile(rf"^{re.escape(key)}\s*:")
    lines = doc["text"].split("\n")
    for idx in range(1, max(doc["body_start"] - 2, 1)):
        if idx < len(lines) and pattern.match(lines[idx]):
            return idx + 1
    return 1


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


# --- FRONT MATTER ---


def front_matter_error(rel_path: str, exc: FrontMatterError) -> List[Finding]:
    """Converts a parser failure into a finding."""
    return [_finding(rel_path, exc.line, "front-matter", "error", exc.message)]


def check_front_matter_present(doc: Document) -> List[Finding]:
    """Kind documents must open with a front matter block."""
    if doc["kind"] and not doc["has_front_matter"]:
        return [_finding(doc["rel_path"], 1, "front-matter", "error", "Missing front matter")]
    return []


def check_required_fields(doc: Document, spec: KindSpec) -> List[Finding]:
    """Flags required keys that are absent (error) or blank (warning)."""
    if not doc["has_front_matter"]:
        return []

    findings: List[Finding] = []
    fm = doc["front_matter"]
    for field in spec["required_fields"]:
        if field not in fm:
            findings.append(
                _finding(doc["rel_path"], 1, "required-field", "error", f"Missing '{field}' field")
            )
            continue
        value = fm[field]
        if value is None or (isinstance(value, str) and not value.strip()):
            findings.append(
                _finding(
                    doc["rel_path"],
                    _field_line(doc, field),
                    "empty-field",
                    "warning",
                    f"Field '{field}' is empty",
                )
            )
    return findings


def check_field_types(doc: Document) -> List[Finding]:
    """Known keys must carry the types the host reads them as."""
    findings: List[Finding] = []
    fm = doc["front_matter"]

    for field in STRING_FIELDS:
        value = fm.get(field)
        if value is not None and not isinstance(value, str):
            findings.append(
                _finding(
                    doc["rel_path"],
                    _field_line(doc, field),
                    "field-type",
                    "error",
                    f"Field '{field}' must be a string, got {_type_name(value)}",
                )
            )

    for field in LIST_FIELDS:
        value = fm.get(field)
        if value is None:
            continue
        if not isinstance(value, list):
            findings.append(
                _finding(
                    doc["rel_path"],
                    _field_line(doc, field),
                    "field-type",
                    "error",
                    f"Field '{field}' must be a list of strings, got {_type_name(value)}",
                )
            )
            continue
        bad = [item for item in value if not isinstance(item, str)]
        if bad:
            findings.append(
                _finding(
                    doc["rel_path"],
                    _field_line(doc, field),
                    "field-type",
                    "error",
                    f"Field '{field}' must only contain strings, found {', '.join(_type_name(b) for b in bad)}",
                )
            )
    return findings


def check_mode_value(doc: Document) -> List[Finding]:
    mode = doc["front_matter"].get("mode")
    if isinstance(mode, str) and mode.strip() and mode not in KNOWN_MODES:
        return [
            _finding(
                doc["rel_path"],
                _field_line(doc, "mode"),
                "mode-value",
                "warning",
                f"Unknown mode '{mode}'; expected one of {', '.join(KNOWN_MODES)}",
            )
        ]
    return []


# --- NAMING ---


def check_naming(rel_path: str, spec: KindSpec) -> List[Finding]:
    """Files in a kind directory follow that kind's naming pattern."""
    name = os.path.basename(rel_path)
    if name in NAMING_EXEMPT:
        return []
    if re.match(spec["naming_pattern"], name):
        return []
    return [
        _finding(
            rel_path, 0, "naming", "error", f"Should follow pattern: {spec['naming_hint']}"
        )
    ]


# --- LINKS ---


def check_urls(rel_path: str, text: str, branch: str = "master") -> List[Finding]:
    """GitHub links must target the default branch, preferably as tree/ links."""
    findings: List[Finding] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        for match in GITHUB_REF_URL.finditer(line):
            view, ref = match.group("view"), match.group("ref")
            if ref in ("main", "master") and ref != branch:
                findings.append(
                    _finding(
                        rel_path,
                        lineno,
                        "url-branch",
                        "error",
                        f"Found '{view}/{ref}' URL. Should use 'tree/{branch}'",
                    )
                )
            elif view == "blob" and ref == branch:
                findings.append(
                    _finding(
                        rel_path,
                        lineno,
                        "url-blob",
                        "warning",
                        f"Found 'blob/{branch}' URL. Consider using 'tree/{branch}' for directory links",
                    )
                )
    return findings


def check_relative_links(rel_path: str, text: str) -> List[Finding]:
    """Documents get copied out of the repository, so parent-relative links break."""
    findings: List[Finding] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        for match in RELATIVE_LINK.finditer(line):
            findings.append(
                _finding(
                    rel_path,
                    lineno,
                    "relative-link",
                    "error",
                    f"Found relative link '{match.group('target')}'. Should use full GitHub URLs",
                )
            )
    return findings


# --- CONTENT ---


def check_placeholders(rel_path: str, text: str, placeholders: List[str]) -> List[Finding]:
    """Unfilled template placeholders left in a non-template document."""
    if "template" in rel_path.lower():
        return []
    findings: List[Finding] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        hits = [p for p in placeholders if p in line]
        if hits:
            findings.append(
                _finding(
                    rel_path,
                    lineno,
                    "placeholder",
                    "warning",
                    f"Contains unfilled placeholders: {', '.join(hits)}",
                )
            )
    return findings


def check_code_fences(rel_path: str, text: str) -> List[Finding]:
    """Every line opening a fenced block has a closing partner."""
    count = 0
    open_line: Optional[int] = None
    for lineno, line in enumerate(text.split("\n"), start=1):
        if line.startswith(FENCE):
            count += 1
            open_line = lineno if open_line is None else None

    if count % 2 == 0:
        return []
    return [
        _finding(
            rel_path,
            open_line or 0,
            "code-fence",
            "error",
            f"Unmatched code fences (found {count})",
        )
    ]


def _mask(value: str) -> str:
    return value[:4] + "*" * min(max(len(value) - 4, 4), 12)


def check_secrets(rel_path: str, text: str) -> List[Finding]:
    """Lines that look like they carry a live credential."""
    findings: List[Finding] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        for name, pattern in _COMPILED_SECRETS:
            match = pattern.search(line)
            if match:
                findings.append(
                    _finding(
                        rel_path,
                        lineno,
                        "secret",
                        "error",
                        f"Possible {name}: {_mask(match.group(0))}",
                    )
                )
                break
    return findings


def check_token_budget(rel_path: str, tokens: int, budget: int) -> List[Finding]:
    if budget > 0 and tokens > budget:
        return [
            _finding(
                rel_path,
                0,
                "token-budget",
                "warning",
                f"Document is {tokens:,} tokens, over the {budget:,} token budget",
            )
        ]
    return []
