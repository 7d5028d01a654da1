from typing import Any, Dict, List, Optional, TypedDict


class KindSpec(TypedDict):
    directory: str
    suffix: str
    required_fields: List[str]
    naming_pattern: str
    naming_hint: str


class Settings(TypedDict, total=False):
    verbosity: str
    repo_url: Optional[str]
    branch: str
    token_budget: int
    ignore: List[str]
    placeholders: List[str]
    docs_dirs: List[str]
    directories: Dict[str, str]
    strict: bool


class Finding(TypedDict):
    file: str
    line: int
    check: str
    severity: str
    message: str


class Document(TypedDict):
    path: str
    rel_path: str
    kind: Optional[str]
    text: str
    has_front_matter: bool
    front_matter: Dict[str, Any]
    body: str
    body_start: int


class FileResult(TypedDict):
    file: str
    kind: Optional[str]
    score: int
    errors: int
    warnings: int
    tokens: int
    findings: List[Finding]


class InventoryEntry(TypedDict):
    directory: str
    exists: bool
    count: int


class ValidationResult(TypedDict):
    root: str
    file_results: List[FileResult]
    findings: List[Finding]
    error_count: int
    warning_count: int
    final_score: float
    inventory: Dict[str, InventoryEntry]
    passed: bool
