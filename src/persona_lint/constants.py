from typing import Dict, List, Tuple
from .types import KindSpec

# --- DOCUMENT KINDS ---
KINDS: Dict[str, KindSpec] = {
    "instructions": {
        "directory": ".github/instructions",
        "suffix": ".instructions.md",
        "required_fields": ["applyTo", "description"],
        "naming_pattern": r"^[a-z]+\.instructions\.md$",
        "naming_hint": "{language}.instructions.md",
    },
    "prompt": {
        "directory": ".github/prompts",
        "suffix": ".prompt.md",
        "required_fields": ["mode", "description", "tools"],
        "naming_pattern": r"^[a-z]+\.[a-z.-]+\.prompt\.md$",
        "naming_hint": "{scope}.{purpose}.prompt.md or {scope}.{platform}.{purpose}.prompt.md",
    },
    "chatmode": {
        "directory": ".github/chatmodes",
        "suffix": ".chatmode.md",
        "required_fields": ["description", "tools"],
        "naming_pattern": r"^[a-z]+\.[a-z-]+\.chatmode\.md$",
        "naming_hint": "{language}.{mode}.chatmode.md",
    },
    "agent": {
        "directory": ".github/agents",
        "suffix": ".agent.md",
        "required_fields": ["description"],
        "naming_pattern": r"^[a-z0-9]+([.-][a-z0-9]+)*\.agent\.md$",
        "naming_hint": "{name}.agent.md",
    },
}

NAMING_EXEMPT = ["README.md"]

# Known front matter keys and the type the host expects for each.
STRING_FIELDS = ["description", "model", "mode", "applyTo"]
LIST_FIELDS = ["tools"]
KNOWN_MODES = ["agent", "ask", "edit"]

DEFAULT_PLACEHOLDERS: List[str] = [
    "{Language}",
    "{Version}",
    "{Purpose}",
    "{Mode}",
    "{extension}",
]

# Directories never worth walking for Markdown.
SKIP_DIRS = {".git", "node_modules", ".venv", "venv", "__pycache__", ".tox", ".mypy_cache", ".pytest_cache"}

# --- SECRET PATTERNS ---
SECRET_PATTERNS: List[Tuple[str, str]] = [
    ("AWS access key id", r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
    ("GitHub token", r"\bgh[pousr]_[A-Za-z0-9]{36,}\b"),
    ("GitHub fine-grained token", r"\bgithub_pat_[A-Za-z0-9_]{40,}\b"),
    ("Slack token", r"\bxox[abprs]-[A-Za-z0-9-]{10,}\b"),
    ("OpenAI API key", r"\bsk-[A-Za-z0-9]{32,}\b"),
    ("Private key block", r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP )?PRIVATE KEY( BLOCK)?-----"),
    (
        "Hardcoded credential",
        r"(?i)\b\w*(?:api[_-]?key|secret|password|passwd|token)\w*[\"']?\s*[:=]\s*[\"'](?!\$\{|<)[^\"'\s]{12,}[\"']",
    ),
]

# --- SCORING ---
ERROR_PENALTY = 20
WARNING_PENALTY = 5
PASS_SCORE = 70

DEFAULT_TOKEN_BUDGET = 8000

# --- FRONT MATTER SKELETONS ---
FRONT_MATTER_TEMPLATES: Dict[str, str] = {
    "instructions": '---\napplyTo: "**"\ndescription: ""\n---\n\n',
    "prompt": '---\nmode: agent\ndescription: ""\ntools: []\n---\n\n',
    "chatmode": '---\ndescription: ""\ntools: []\n---\n\n',
    "agent": '---\ndescription: ""\ntools: []\n---\n\n',
}

# Guidance shown next to each check in reports.
REMEDIATION: Dict[str, str] = {
    "front-matter": "Start the file with a `---` delimited YAML block holding plain keys.",
    "required-field": "Add the missing key to the front matter; the host ignores documents without it.",
    "empty-field": "Fill in the value. An empty description hides the document in the host's picker.",
    "field-type": "`tools` is a YAML list of strings; `description`, `model`, `mode` and `applyTo` are strings.",
    "mode-value": "Use one of `agent`, `ask` or `edit`.",
    "naming": "Rename the file to follow the directory's naming pattern.",
    "url-branch": "Point repository links at the default branch using `tree/<branch>`.",
    "url-blob": "Prefer `tree/<branch>` links, which also resolve for directories.",
    "relative-link": "Replace `../` links with full repository URLs; documents are copied out of the repository.",
    "placeholder": "Replace template placeholders with concrete values.",
    "code-fence": "Close every fenced code block.",
    "secret": "Remove the credential and rotate it. Use an environment variable reference instead.",
    "token-budget": "Split the document or trim it; large documents crowd out the conversation context.",
    "inventory": "Add customization documents under `.github/`.",
}

CHECK_IDS: List[str] = list(REMEDIATION.keys())
