import os
import posixpath
import re
from typing import List, Optional, Tuple
from rich.console import Console
from . import auditor
from .checks import GITHUB_REF_URL, RELATIVE_LINK
from .constants import FRONT_MATTER_TEMPLATES
from .frontmatter import FrontMatterError, parse_document, relative_path
from .types import Settings

console = Console()


def fix_urls(text: str, branch: str) -> Tuple[str, int]:
    """Rewrites GitHub blob/tree URLs that point at the wrong ref to tree/<branch>."""
    count = 0

    def _replace(match: "re.Match[str]") -> str:
        nonlocal count
        view, ref = match.group("view"), match.group("ref")
        if (ref in ("main", "master") and ref != branch) or (view == "blob" and ref == branch):
            count += 1
            start, end = match.span("view")[0] - match.start(), match.span("ref")[1] - match.start()
            original = match.group(0)
            return original[:start] + f"tree/{branch}" + original[end:]
        return match.group(0)

    return GITHUB_REF_URL.sub(_replace, text), count


def fix_relative_links(text: str, rel_path: str, repo_url: str, branch: str) -> Tuple[str, int]:
    """Turns `](../x)` links into absolute repository URLs."""
    count = 0
    base = posixpath.dirname(rel_path)

    def _replace(match: "re.Match[str]") -> str:
        nonlocal count
        target = match.group("target")
        resolved = posixpath.normpath(posixpath.join(base, target))
        if resolved.startswith(".."):
            # Points outside the repository; leave it for a human
            return match.group(0)
        count += 1
        return f"]({repo_url}/tree/{branch}/{resolved}"

    return RELATIVE_LINK.sub(_replace, text), count


def add_front_matter(text: str, kind: str) -> Optional[str]:
    """Prepends the kind's skeleton block when the document has none."""
    try:
        has_fm, _, _, _ = parse_document(text)
    except FrontMatterError:
        return None
    if has_fm:
        return None
    return FRONT_MATTER_TEMPLATES[kind] + text


def fix_file(path: str, root: str, settings: Settings, kind: Optional[str], dry_run: bool = False) -> List[str]:
    """Applies every safe fix to one file and returns the actions taken."""
    with open(path, "r", encoding="utf-8") as f:
        original = f.read()

    rel = relative_path(path, root)
    branch = settings.get("branch", "master")
    repo_url = settings.get("repo_url")
    text = original
    actions: List[str] = []

    if kind:
        updated = add_front_matter(text, kind)
        if updated is not None:
            text = updated
            actions.append(f"{rel}: added {kind} front matter skeleton")

    text, url_count = fix_urls(text, branch)
    if url_count:
        actions.append(f"{rel}: rewrote {url_count} URL(s) to tree/{branch}")

    if repo_url:
        text, link_count = fix_relative_links(text, rel, repo_url, branch)
        if link_count:
            actions.append(f"{rel}: replaced {link_count} relative link(s) with repository URLs")

    if text != original and not dry_run:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    return actions


def apply_fixes(path: str, settings: Settings, dry_run: bool = False) -> List[str]:
    """Applies fixes to every Markdown file under path (or to the single file given)."""
    root = auditor.find_root(path, settings)
    if os.path.isfile(path):
        targets = [path]
    else:
        targets = auditor.collect_markdown_files(root)

    kind_paths = {
        os.path.abspath(p)
        for files in auditor.collect_kind_files(root, settings).values()
        for p in files
    }

    actions: List[str] = []
    for target in targets:
        kind = auditor.detect_kind(target)
        # Skeletons only go into documents that sit where the host looks for them
        if kind and os.path.abspath(target) not in kind_paths:
            kind = None
        try:
            file_actions = fix_file(target, root, settings, kind, dry_run=dry_run)
        except UnicodeDecodeError:
            console.print(f"[yellow][Skipped][/yellow] {relative_path(target, root)}: not valid UTF-8")
            continue
        actions.extend(file_actions)
    return actions
