import os
import pytest
from unittest.mock import patch


class WhitespaceEncoding:
    """Stand-in for a tiktoken encoding: one token per whitespace-separated word."""

    def encode(self, text, disallowed_special=()):
        return text.split()


@pytest.fixture(autouse=True)
def offline_tokenizer():
    """Keeps tests from downloading tiktoken's BPE files."""
    with patch("persona_lint.auditor.tiktoken.get_encoding", return_value=WhitespaceEncoding()):
        yield


def write_file(root: str, rel_path: str, content: str) -> str:
    """Writes content under root, creating parent directories."""
    path = os.path.join(root, rel_path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


VALID_PROMPT = """---
mode: agent
description: Plan a database migration
tools: ['codebase', 'search']
---

You are a migration planner.
"""

VALID_CHATMODE = """---
description: Security reviewer
tools: ['codebase']
model: GPT-4.1
---

You are a security reviewer.
"""

VALID_INSTRUCTIONS = """---
applyTo: "**/*.py"
description: Python coding standards
---

Use type hints.
"""

VALID_AGENT = """---
description: Module builder
tools: ['edit', 'runCommands']
---

You are a module builder.
"""


@pytest.fixture
def good_repo(tmp_path):
    """A repository with one valid document of each kind."""
    root = str(tmp_path)
    write_file(root, ".github/prompts/python.migration-plan.prompt.md", VALID_PROMPT)
    write_file(root, ".github/chatmodes/python.security-review.chatmode.md", VALID_CHATMODE)
    write_file(root, ".github/instructions/python.instructions.md", VALID_INSTRUCTIONS)
    write_file(root, ".github/agents/module-builder.agent.md", VALID_AGENT)
    write_file(root, "README.md", "# Standards\n\nSee https://github.com/acme/standards/tree/master/.github\n")
    return root
