from typing import List, Tuple
from .constants import ERROR_PENALTY, WARNING_PENALTY
from .types import Finding


def count_severities(findings: List[Finding]) -> Tuple[int, int]:
    """Returns (errors, warnings)."""
    errors = sum(1 for f in findings if f["severity"] == "error")
    warnings = sum(1 for f in findings if f["severity"] == "warning")
    return errors, warnings


def score_findings(findings: List[Finding]) -> int:
    """
    Scores a document from its findings.
    -20 per error, -5 per warning, floored at 0.
    """
    errors, warnings = count_severities(findings)
    return max(0, 100 - errors * ERROR_PENALTY - warnings * WARNING_PENALTY)


def generate_badge(score: float) -> str:
    """Generates an SVG badge based on the final lint score."""
    if score >= 90:
        color = "#4c1"  # Bright Green
    elif score >= 70:
        color = "#97ca00"  # Green
    elif score >= 50:
        color = "#dfb317"  # Yellow
    else:
        color = "#e05d44"  # Red

    score_str = f"{int(score)}/100"
    left_width = 80
    right_width = 50
    total_width = left_width + right_width
    height = 20
    border_radius = 3

    svg_template = f"""
<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="{height}" role="img" aria-label="Persona Lint: {score_str}">
    <title>Persona Lint: {score_str}</title>
    <linearGradient id="s" x2="0" y2="100%">
        <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
        <stop offset="1" stop-opacity=".1"/>
    </linearGradient>
    <clipPath id="r">
        <rect width="{total_width}" height="{height}" rx="{border_radius}" fill="#fff"/>
    </clipPath>
    <g clip-path="url(#r)">
        <rect width="{left_width}" height="{height}" fill="#555"/>
        <rect x="{left_width}" width="{right_width}" height="{height}" fill="{color}"/>
        <rect width="{total_width}" height="{height}" fill="url(#s)"/>
    </g>
    <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" font-size="110">
        <text x="{left_width * 5}" y="140" transform="scale(.1)">Persona Lint</text>
        <text x="{(left_width + right_width / 2) * 10}" y="140" transform="scale(.1)">{score_str}</text>
    </g>
</svg>
"""
    return svg_template.strip()
