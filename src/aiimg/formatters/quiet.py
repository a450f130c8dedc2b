"""Quiet output formatter - one-line summary."""

from aiimg.models import ImageReport


def format_quiet(report: ImageReport) -> str:
    """Format a report as one-line summary.

    Format: filename | resolution | verdict | AI: n% | Edit: n% | identity
    """
    parts = []

    parts.append(report.file_info.filename)

    info = report.file_info
    if info.width and info.height:
        parts.append(f"{info.width}x{info.height}")
    else:
        parts.append("N/A")

    verdict = report.verdict
    parts.append(verdict.verdict.value)
    parts.append(f"AI: {verdict.ai_score}%")
    parts.append(f"Edit: {verdict.edit_score}%")

    if verdict.is_identity_confirmed:
        parts.append("Identity: confirmed")
    else:
        parts.append("Identity: no")

    return " | ".join(parts)


def format_quiet_list(reports: list[ImageReport]) -> str:
    """Format multiple reports as one-line summaries.

    Args:
        reports: List of ImageReport objects

    Returns:
        Multiple lines, one per file
    """
    return "\n".join(format_quiet(r) for r in reports)
