"""Default output formatter - verdict and per-detector breakdown."""

from aiimg.models import DetectorResult, ImageReport, SequenceReport

BAR_WIDTH = 20

SEVERITY_ICONS = {"low": " ", "medium": "!", "high": "!!"}


def _bar(score: int, width: int = BAR_WIDTH) -> str:
    filled = round(score / 100 * width)
    return "#" * filled + "-" * (width - filled)


def _badge(report: ImageReport) -> str:
    if report.verdict.identity_verified:
        return "[IDENTITY VERIFIED (C2PA/SynthID)]"
    return "[UNVERIFIED ORIGIN]"


def format_default(report: ImageReport) -> str:
    """Format a report as the default verdict output.

    Shows:
    - Final verdict with description
    - Generation probability and processing intensity
    - Forensic summary
    - One bar per detector with its markers
    """
    lines = []
    verdict = report.verdict

    lines.append("=" * 70)
    lines.append(f"File: {report.file_info.filename}")
    lines.append("=" * 70)

    lines.append("")
    lines.append("## FINAL VERDICT")
    lines.append(f"  {verdict.verdict.value}")
    lines.append(f"  {verdict.description}")

    lines.append("")
    lines.append(f"  Generation Probability:  {verdict.ai_score:>3}%  [{_bar(verdict.ai_score)}]")
    lines.append(f"  Processing Intensity:    {verdict.edit_score:>3}%  [{_bar(verdict.edit_score)}]")

    lines.append("")
    lines.append("## FORENSIC SUMMARY")
    lines.append(f"  {verdict.summary.strip()}")

    lines.append("")
    lines.append(f"## METHOD BREAKDOWN  {_badge(report)}")
    for row in verdict.per_detector:
        icon = SEVERITY_ICONS[row.severity]
        lines.append(f"  {row.label:<30s} {row.score:>3}% [{_bar(row.score)}] {icon}".rstrip())
        for marker in row.markers:
            lines.append(f"      - {marker}")

    # Experimental, never scored
    if report.lineage is not None:
        lines.append("")
        lines.append("## MODEL LINEAGE (EXPERIMENTAL)")
        lines.append(f"  Score:        {report.lineage.score}%")
        for marker in report.lineage.markers:
            lines.append(f"      - {marker}")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)


def _format_temporal(label: str, result: DetectorResult) -> list[str]:
    lines = [f"  {label:<30s} {result.score:>3}% [{_bar(result.score)}]"]
    for marker in result.markers:
        lines.append(f"      - {marker}")
    return lines


def format_sequence(report: SequenceReport) -> str:
    """Format a frame sequence analysis."""
    lines = []

    lines.append("=" * 70)
    lines.append(f"Sequence: {len(report.frames)} frame(s)")
    lines.append("=" * 70)
    for frame in report.frames:
        lines.append(f"  {frame}")

    lines.append("")
    lines.append("## TEMPORAL ANALYSIS")
    lines.extend(_format_temporal("Inter-Frame Correlation", report.correlation))
    lines.extend(_format_temporal("Temporal Coherence", report.coherence))

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)
