"""Front matter parsing for customization documents.

A document may open with a YAML block fenced by ``---`` lines. The block is
loaded with ruamel.yaml's safe loader so that tags in a document can never
construct arbitrary objects.
"""

import os
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from .types import Document

DELIMITER = "---"


class FrontMatterError(ValueError):
    """Raised when a front matter block exists but cannot be used."""

    def __init__(self, message: str, line: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.line = line


def _new_yaml() -> YAML:
    return YAML(typ="safe", pure=True)


def parse_document(text: str) -> Tuple[bool, Dict[str, Any], str, int]:
    """
    Splits text into front matter and body.

    Returns:
        (has_front_matter, mapping, body, body_start) where body_start is the
        1-based line number of the first body line.
    """
    normalized = text.replace("\r\n", "\n")
    if normalized.startswith("\ufeff"):
        normalized = normalized[1:]

    lines = normalized.split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        return False, {}, normalized, 1

    end_idx: Optional[int] = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        raise FrontMatterError("Unterminated front matter block", line=1)

    block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1:])

    try:
        data = _new_yaml().load(block) if block.strip() else None
    except MarkedYAMLError as exc:
        # Mark lines are 0-based within the block, which starts on file line 2.
        mark = exc.problem_mark or exc.context_mark
        line = mark.line + 2 if mark is not None else 1
        raise FrontMatterError(f"Invalid YAML: {exc.problem or exc}", line=line) from exc
    except YAMLError as exc:
        raise FrontMatterError(f"Invalid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping of keys, got {type(data).__name__}"
        )

    return True, dict(data), body, end_idx + 2


def load_document(path: str, root: str, kind: Optional[str]) -> Document:
    """Reads a Markdown file and parses its front matter."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as exc:
        raise FrontMatterError("File is not valid UTF-8") from exc

    has_fm, mapping, body, body_start = parse_document(text)
    return {
        "path": path,
        "rel_path": relative_path(path, root),
        "kind": kind,
        "text": text.replace("\r\n", "\n"),
        "has_front_matter": has_fm,
        "front_matter": mapping,
        "body": body,
        "body_start": body_start,
    }


def relative_path(path: str, root: str) -> str:
    """POSIX path of *path* relative to *root* (or the file name for a file root)."""
    base = root if os.path.isdir(root) else os.path.dirname(os.path.abspath(root))
    rel = os.path.relpath(os.path.abspath(path), start=os.path.abspath(base))
    return rel.replace(os.sep, "/")
