from persona_lint.prompt_analyzer import PromptAnalyzer


def test_prompt_analyzer_perfect():
    """Test a persona that satisfies all positive heuristics without penalties."""
    analyzer = PromptAnalyzer()
    text = """---
description: Security reviewer
tools: ['codebase']
---
You are a senior application security reviewer.

## Phase 1: Preparation
1. Read the diff.
2. Identify entry points.

## Checklist
- [ ] Inputs are validated
- [ ] Secrets come from the environment

## Example
```python
query = db.execute("SELECT * FROM t WHERE id = ?", (user_id,))
```
"""
    results = analyzer.analyze(text)

    assert results["score"] == 100
    assert results["results"]["role_definition"] is True
    assert results["results"]["workflow_structure"] is True
    assert results["results"]["checklists"] is True
    assert results["results"]["examples"] is True
    # True means no issue was found
    assert results["results"]["negative_constraints"] is True
    assert results["improvements"] == []


def test_front_matter_is_not_graded():
    """Keys in the front matter must not count toward the prose heuristics."""
    analyzer = PromptAnalyzer()
    text = "---\ndescription: 'You are a reviewer. Example: x'\ntools:\n  - codebase\n---\nPlain words only."
    results = analyzer.analyze(text)

    assert results["results"]["role_definition"] is False
    assert results["results"]["examples"] is False
    assert results["results"]["checklists"] is False
    assert results["score"] == 0


def test_prompt_analyzer_low_score_clamping():
    """Scores are clamped to 0 when penalties exceed positive points."""
    analyzer = PromptAnalyzer()
    text = "x" * 100 + "\n* Don't fail."
    results = analyzer.analyze(text)

    # Only the checklist heuristic passes (+25), the prohibition costs 10
    assert results["results"]["checklists"] is True
    assert results["results"]["negative_constraints"] is False
    assert results["score"] == 15
    assert len(results["improvements"]) == 4


def test_negative_constraints_context_awareness():
    """Prohibitions only count as list items, and only when they dominate the list."""
    analyzer = PromptAnalyzer()

    assert analyzer.analyze("* Do not fail.")["results"]["negative_constraints"] is False
    assert analyzer.analyze("- Never commit secrets.")["results"]["negative_constraints"] is False
    assert analyzer.analyze("1. You must not skip review.")["results"]["negative_constraints"] is False

    # Prose and descriptions of current behaviour are not rules
    assert analyzer.analyze("I do not like this.")["results"]["negative_constraints"] is True
    assert analyzer.analyze("- Currently this does not work.")["results"]["negative_constraints"] is True


def test_negative_constraints_balance_against_positive_items():
    analyzer = PromptAnalyzer()
    balanced = "## Checklist\n- Never commit secrets.\n- Use parameterised queries.\n- [ ] Run the test suite.\n"
    heavy = "## Checklist\n- Never commit secrets.\n- Avoid global state.\n- Use type hints.\n"

    assert analyzer._check_negative_constraints(balanced) is False
    assert analyzer._check_negative_constraints(heavy) is True
    assert analyzer._check_negative_constraints("No list here, never.") is False


def test_examples_detection_variants():
    analyzer = PromptAnalyzer()
    assert analyzer._check_examples("Input: a\nmore\nOutput: b") is True
    assert analyzer._check_examples("### Examples\ntext") is True
    assert analyzer._check_examples("For example:\n\n```bash\nls\n```") is True
    assert analyzer._check_examples("No samples here\n\n\n\n```\n```") is False


def test_broken_front_matter_grades_whole_text():
    analyzer = PromptAnalyzer()
    results = analyzer.analyze("---\ndescription: x\nYou are a reviewer.\n")
    assert results["results"]["role_definition"] is True


def test_empty_prompt():
    """Empty or whitespace-only documents score zero."""
    analyzer = PromptAnalyzer()
    for text in ["", "   \n  ", "---\ndescription: x\n---\n"]:
        results = analyzer.analyze(text)
        assert results["score"] == 0
        assert results["improvements"] == ["Prompt is empty."]
