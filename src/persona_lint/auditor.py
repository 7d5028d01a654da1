import os
import copy
import tiktoken
from typing import Dict, List, Optional
from .constants import KINDS, SKIP_DIRS
from .types import KindSpec, InventoryEntry, Settings


def kind_specs(settings: Optional[Settings] = None) -> Dict[str, KindSpec]:
    """Returns the kind table with any configured directory overrides applied."""
    specs = copy.deepcopy(KINDS)
    overrides = (settings or {}).get("directories") or {}
    for kind, directory in overrides.items():
        if kind in specs and directory:
            specs[kind]["directory"] = str(directory).strip("/")
    return specs


def detect_kind(path: str) -> Optional[str]:
    """Infers the document kind from the filename suffix."""
    name = os.path.basename(path)
    for kind, spec in KINDS.items():
        if name.endswith(spec["suffix"]):
            return kind
    return None


def kind_directory_of(path: str, settings: Optional[Settings] = None) -> Optional[str]:
    """Returns the kind whose directory directly holds path, if any."""
    parent = os.path.dirname(os.path.abspath(path))
    for kind, spec in kind_specs(settings).items():
        if parent.endswith(os.sep + os.path.normpath(spec["directory"])):
            return kind
    return None


def find_root(path: str, settings: Optional[Settings] = None) -> str:
    """
    Resolves the repository root for a target. A directory is its own root;
    a file inside a kind directory resolves to the directory holding
    `.github/...`; any other file resolves to its parent.
    """
    if not os.path.isfile(path):
        return path
    parent = os.path.dirname(os.path.abspath(path))
    kind = kind_directory_of(path, settings)
    if kind is None:
        return parent
    directory = os.path.normpath(kind_specs(settings)[kind]["directory"])
    return parent[: -len(directory)].rstrip(os.sep) or os.sep


def _list_markdown(directory: str) -> List[str]:
    if not os.path.isdir(directory):
        return []
    return sorted(
        os.path.join(directory, f)
        for f in os.listdir(directory)
        if f.endswith(".md") and os.path.isfile(os.path.join(directory, f))
    )


def collect_kind_files(root: str, settings: Optional[Settings] = None) -> Dict[str, List[str]]:
    """Collects documents of each kind from their kind directories."""
    found: Dict[str, List[str]] = {}
    for kind, spec in kind_specs(settings).items():
        directory = os.path.join(root, spec["directory"])
        found[kind] = [p for p in _list_markdown(directory) if p.endswith(spec["suffix"])]
    return found


def collect_kind_dir_markdown(root: str, settings: Optional[Settings] = None) -> Dict[str, List[str]]:
    """Every Markdown file directly inside each kind directory."""
    return {
        kind: _list_markdown(os.path.join(root, spec["directory"]))
        for kind, spec in kind_specs(settings).items()
    }


def collect_docs_files(root: str, settings: Optional[Settings] = None) -> List[str]:
    """Markdown files directly inside the configured docs directories."""
    docs_dirs = (settings or {}).get("docs_dirs") or ["docs"]
    files: List[str] = []
    for d in docs_dirs:
        files.extend(_list_markdown(os.path.join(root, d)))
    return files


def collect_markdown_files(root: str) -> List[str]:
    """Walks the tree for Markdown files, skipping VCS, dependency and cache directories."""
    if os.path.isfile(root):
        return [root] if root.endswith(".md") else []

    md_files: List[str] = []
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
        for file in sorted(files):
            if file.endswith(".md"):
                md_files.append(os.path.join(current, file))
    return md_files


def count_tokens(text: str) -> int:
    """Calculates the token count of a document using tiktoken."""
    try:
        enc = tiktoken.get_encoding("cl100k_base")
    except Exception:
        # Encoding files are fetched on first use; offline runs report no count
        return 0
    return len(enc.encode(text, disallowed_special=()))


def check_inventory(root: str, settings: Optional[Settings] = None) -> Dict[str, InventoryEntry]:
    """Reports, per kind, whether its directory exists and how many documents it holds."""
    base_dir = root if os.path.isdir(root) else os.path.dirname(os.path.abspath(root))
    kind_files = collect_kind_files(base_dir, settings)
    inventory: Dict[str, InventoryEntry] = {}
    for kind, spec in kind_specs(settings).items():
        directory = os.path.join(base_dir, spec["directory"])
        inventory[kind] = {
            "directory": spec["directory"],
            "exists": os.path.isdir(directory),
            "count": len(kind_files[kind]),
        }
    return inventory
