import os
from click.testing import CliRunner
from persona_lint.main import cli, _document_rows
from conftest import write_file, VALID_PROMPT, VALID_CHATMODE


def test_cli_happy_path():
    """Standard CLI execution on a valid repository (smoke test)."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT)
        write_file(".", ".github/chatmodes/python.review.chatmode.md", VALID_CHATMODE)

        result = runner.invoke(cli, ["validate", "."])
        assert result.exit_code == 0
        assert "Running Persona Lint" in result.output
        assert "Final Score" in result.output
        assert "All validation checks passed!" in result.output


def test_cli_defaults_to_validate():
    """A bare path is routed to the validate command."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT)
        result = runner.invoke(cli, ["."])
        assert result.exit_code == 0
        assert "All validation checks passed!" in result.output


def test_cli_fails_on_errors():
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", "# No front matter\n")

        result = runner.invoke(cli, ["validate", "."])
        assert result.exit_code == 1
        assert "Validation failed with 1 error(s)" in result.output


def test_cli_plain_output():
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/chatmodes/python.review.chatmode.md", "---\ndescription: x\n---\n")
        write_file(".", "README.md", "https://github.com/acme/std/blob/main/README.md\n")

        result = runner.invoke(cli, ["validate", ".", "--plain"])
        assert result.exit_code == 1
        assert ".github/chatmodes/python.review.chatmode.md:1: ERROR [required-field] Missing 'tools' field" in result.output
        assert "README.md:1: ERROR [url-branch] Found 'blob/main' URL. Should use 'tree/master'" in result.output
        assert "Validation failed with 2 error(s)" in result.output
        assert "Running Persona Lint" not in result.output


def test_cli_ignore_and_strict():
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT + "\n{Language}\n")

        assert runner.invoke(cli, ["validate", ".", "--plain"]).exit_code == 0
        assert runner.invoke(cli, ["validate", ".", "--plain", "--strict"]).exit_code == 1
        result = runner.invoke(cli, ["validate", ".", "--plain", "--strict", "--ignore", "placeholder"])
        assert result.exit_code == 0
        assert "All validation checks passed!" in result.output


def test_cli_rejects_unknown_check():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["validate", ".", "--ignore", "spelling"])
        assert result.exit_code == 2


def test_cli_single_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        path = write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT)
        result = runner.invoke(cli, ["validate", path, "--plain"])
        assert result.exit_code == 0


def test_cli_badge_and_report_generation():
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT)

        result = runner.invoke(cli, ["validate", ".", "--badge", "--report", "lint.md"])
        assert result.exit_code == 0
        assert os.path.exists("persona_lint.svg")
        assert "Badge saved" in result.output
        with open("lint.md", encoding="utf-8") as f:
            assert f.read().startswith("# Persona Lint Report")


def test_cli_list_command():
    runner = CliRunner()
    with runner.isolated_filesystem():
        write_file(".", ".github/prompts/python.plan.prompt.md", VALID_PROMPT)
        write_file(".", ".github/agents/broken.agent.md", "---\ndescription: [x\n---\n")

        result = runner.invoke(cli, ["list", "."])
        assert result.exit_code == 0
        assert "Customization Documents" in result.output

        rows = {row["file"]: row for row in _document_rows(".")}
        assert rows[".github/prompts/python.plan.prompt.md"]["tools"] == "codebase, search"
        assert rows[".github/prompts/python.plan.prompt.md"]["description"] == "Plan a database migration"
        assert rows[".github/agents/broken.agent.md"]["description"].startswith("(invalid front matter")


def test_cli_list_empty():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["list", "."])
        assert result.exit_code == 0
        assert "No customization documents found." in result.output


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output
