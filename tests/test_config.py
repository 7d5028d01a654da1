import os
import tempfile
from persona_lint.config import load_config, DEFAULT_CONFIG


def test_load_config_defaults():
    # Test loading from a directory with no pyproject.toml
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(tmpdir)
        assert config["verbosity"] == DEFAULT_CONFIG["verbosity"]
        assert config["branch"] == "master"
        assert config["repo_url"] is None
        assert config["placeholders"] == DEFAULT_CONFIG["placeholders"]


def test_load_config_with_pyproject():
    with tempfile.TemporaryDirectory() as tmpdir:
        pyproject_content = """
[tool.persona-lint]
verbosity = "detailed"
repo_url = "https://github.com/acme/standards/"
branch = "main"
ignore = ["placeholder"]
token_budget = 500
[tool.persona-lint.directories]
agent = ".github/copilot/agents"
"""
        with open(os.path.join(tmpdir, "pyproject.toml"), "w") as f:
            f.write(pyproject_content)

        config = load_config(tmpdir)
        assert config["verbosity"] == "detailed"
        assert config["repo_url"] == "https://github.com/acme/standards"
        assert config["branch"] == "main"
        assert config["ignore"] == ["placeholder"]
        assert config["token_budget"] == 500
        assert config["directories"] == {"agent": ".github/copilot/agents"}
        assert config["docs_dirs"] == DEFAULT_CONFIG["docs_dirs"]


def test_load_config_from_file_path_uses_parent_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "pyproject.toml"), "w") as f:
            f.write('[tool.persona-lint]\nbranch = "trunk"\n')
        target = os.path.join(tmpdir, "doc.md")
        with open(target, "w") as f:
            f.write("# Doc")

        assert load_config(target)["branch"] == "trunk"


def test_load_config_invalid_toml():
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "pyproject.toml"), "w") as f:
            f.write("invalid = [")

        config = load_config(tmpdir)
        assert config == DEFAULT_CONFIG


def test_load_config_normalizes_bad_values():
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "pyproject.toml"), "w") as f:
            f.write('[tool.persona-lint]\nverbosity = "loud"\ntoken_budget = "lots"\nignore = "secret"\n')

        config = load_config(tmpdir)
        assert config["verbosity"] == "summary"
        assert config["token_budget"] == DEFAULT_CONFIG["token_budget"]
        assert config["ignore"] == []
