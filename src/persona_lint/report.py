from .report_sections import (
    generate_file_table_section,
    generate_findings_section,
    generate_inventory_section,
    generate_summary_section,
)
from .types import ValidationResult


def generate_markdown_report(result: ValidationResult) -> str:
    """Generates a Markdown report from a validation result."""
    return (
        generate_summary_section(result)
        + generate_inventory_section(result["inventory"])
        + generate_findings_section(result["findings"])
        + generate_file_table_section(result)
    )
