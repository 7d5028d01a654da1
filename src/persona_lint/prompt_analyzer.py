import re
from typing import List, Dict, TypedDict, cast
from .frontmatter import FrontMatterError, parse_document

LIST_ITEM = re.compile(r"^\s*(?:[-*]|\d+\.)\s+(?:\[[ xX]\]\s+)?(?P<item>\S.*)$")


class HeuristicConfig(TypedDict, total=False):
    pattern: str
    improvement: str
    weight: int
    penalty: int


class PromptAnalysisResult(TypedDict):
    score: int
    results: Dict[str, bool]
    improvements: List[str]


class PromptAnalyzer:
    """Grades the prose of an agent, prompt or chat mode document with structural heuristics."""

    HEURISTICS: Dict[str, HeuristicConfig] = {
        "role_definition": {
            "pattern": r"(?i)(you are|act as|your role|as an? (expert|senior|specialist))",
            "improvement": "Open with a clear persona (e.g., 'You are a security reviewer') so the assistant knows whose judgement to apply.",
            "weight": 25,
        },
        "workflow_structure": {
            "pattern": r"(?im)(^#+\s*(phase|step|stage|workflow|process)\b|\b(phase|step) \d+|^\s*\d+\.\s+\S)",
            "improvement": "Break the task into phases or numbered steps so the assistant can follow and report progress.",
            "weight": 25,
        },
        "checklists": {
            "pattern": r"(?m)^\s*([-*]\s+\[[ xX]\]|[-*]\s+\S)",
            "improvement": "Add a checklist of concrete items to verify; bullets are easier to act on than paragraphs.",
            "weight": 25,
        },
        "examples": {
            "pattern": r"(?i)(example:|input:.*?output:)",
            "improvement": "Include a short example of the expected output or an annotated code sample.",
            "weight": 25,
        },
        "negative_constraints": {
            "pattern": r"(?i)\b(never|avoid|don't|do not|must not|mustn't|should not|shouldn't)\b",
            "improvement": "Most checklist items are prohibitions; rephrase them as positive instructions ('Always do Y') so the assistant knows what to do instead.",
            "penalty": 10,
        },
    }

    def analyze(self, text: str) -> PromptAnalysisResult:
        """Evaluates a document body against persona-writing dimensions."""
        body = self._strip_front_matter(text)
        results: Dict[str, bool] = {}
        improvements: List[str] = []
        score = 0

        if not body or not body.strip():
            return {"score": 0, "results": {}, "improvements": ["Prompt is empty."]}

        # 1. Simple pattern heuristics
        for key in ["role_definition", "workflow_structure", "checklists"]:
            h = self.HEURISTICS[key]
            if re.search(cast(str, h["pattern"]), body):
                results[key] = True
                score += cast(int, h["weight"])
            else:
                results[key] = False
                improvements.append(cast(str, h["improvement"]))

        # 2. Examples need context awareness
        if self._check_examples(body):
            results["examples"] = True
            score += cast(int, self.HEURISTICS["examples"]["weight"])
        else:
            results["examples"] = False
            improvements.append(cast(str, self.HEURISTICS["examples"]["improvement"]))

        # 3. Prohibition-heavy checklists
        if self._check_negative_constraints(body):
            results["negative_constraints"] = False
            score -= cast(int, self.HEURISTICS["negative_constraints"]["penalty"])
            improvements.append(cast(str, self.HEURISTICS["negative_constraints"]["improvement"]))
        else:
            results["negative_constraints"] = True

        score = max(0, min(100, score))
        return {"score": score, "results": results, "improvements": improvements}

    @staticmethod
    def _strip_front_matter(text: str) -> str:
        try:
            _, _, body, _ = parse_document(text)
        except FrontMatterError:
            # A broken block is the validator's concern; grade the whole text
            return text
        return body

    def _check_examples(self, text: str) -> bool:
        """Example markers, example headings, or a code fence right after a line mentioning one."""
        if re.search(cast(str, self.HEURISTICS["examples"]["pattern"]), text, re.DOTALL):
            return True

        if re.search(r"(?im)^#+.*\b(example|examples|sample)\b", text):
            return True

        lines = text.splitlines()
        for i, line in enumerate(lines):
            if re.search(r"(?i)(example|sample|e\.g\.)", line):
                for j in range(i + 1, min(i + 3, len(lines))):
                    if lines[j].strip().startswith("```"):
                        return True
        return False

    def _check_negative_constraints(self, text: str) -> bool:
        """
        True when prohibitions make up most of the list items, so the checklist
        tells the assistant what to avoid rather than what to do. Items that
        describe current behaviour ("currently it does not...") are not rules.
        """
        pattern = cast(str, self.HEURISTICS["negative_constraints"]["pattern"])
        items = [m.group("item") for m in map(LIST_ITEM.match, text.splitlines()) if m]
        rules = [item for item in items if not re.search(r"(?i)\bcurrently\b", item)]
        prohibitions = [item for item in rules if re.search(pattern, item)]
        return bool(prohibitions) and len(prohibitions) * 2 > len(rules)
