"""JSON output formatter."""

import json
from typing import Any

from aiimg.models import ImageReport


def format_json(report: ImageReport, indent: int = 2) -> str:
    """Format a report as JSON string.

    Args:
        report: ImageReport object
        indent: JSON indentation level

    Returns:
        JSON formatted string
    """
    return json.dumps(to_dict(report), indent=indent, ensure_ascii=False, default=str)


def format_json_list(reports: list[ImageReport], indent: int = 2) -> str:
    """Format multiple reports as JSON array.

    Args:
        reports: List of ImageReport objects
        indent: JSON indentation level

    Returns:
        JSON array formatted string
    """
    data = [to_dict(r) for r in reports]
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def to_dict(report: ImageReport) -> dict[str, Any]:
    """Convert a report to dictionary.

    Computed scores (total score) are included next to the model fields.

    Args:
        report: ImageReport object

    Returns:
        Dictionary representation
    """
    data = report.model_dump(mode="json")
    data["verdict"]["total_score"] = report.verdict.total_score
    return data
