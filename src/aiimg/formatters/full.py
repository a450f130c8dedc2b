"""Full output formatter - verdict plus the raw file data stream."""

from typing import Any

from aiimg.formatters.default import format_default
from aiimg.models import FileInfo, ImageReport

# Binary dumps and thumbnail pointers
SKIPPED_TAGS = {"MakerNote", "UserComment", "thumbnail"}

GPS_REFS = {"GPSLatitude": "GPSLatitudeRef", "GPSLongitude": "GPSLongitudeRef"}

MAX_ARRAY_ITEMS = 20
MAX_VALUE_LENGTH = 50


def _num(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _gps_decimal(value: list[Any], ref: str) -> str:
    """Convert (degrees, minutes, seconds) to signed decimal degrees."""
    d, m, s = (float(v) for v in value[:3])
    dd = d + m / 60 + s / 3600
    if ref in ("S", "W"):
        dd = -dd
    return f"{dd:.6f} ({ref} {_num(value[0])}° {_num(value[1])}' {_num(value[2])}\")"


def format_tag_value(tag: str, value: Any, tags: dict[str, Any]) -> str:
    """Render one tag value for the raw data table."""
    if isinstance(value, (list, tuple, bytes, bytearray)):
        if tag in GPS_REFS and len(value) >= 3:
            value = _gps_decimal(list(value), str(tags.get(GPS_REFS[tag]) or ""))
        elif len(value) > MAX_ARRAY_ITEMS:
            value = f"[Binary Data: {len(value)} bytes]"
        else:
            value = ", ".join(_num(v) for v in value)
    elif isinstance(value, dict):
        value = "[Binary Data]"
    else:
        value = _num(value)

    if len(value) > MAX_VALUE_LENGTH:
        value = value[:MAX_VALUE_LENGTH] + "..."
    return value


def format_raw_data(file_info: FileInfo, tags: dict[str, Any]) -> list[str]:
    """Format the file details and every extracted tag as table rows."""
    lines = []
    width = 28

    lines.append("## RAW FILE DATA STREAM")
    lines.append(f"  {'File Name':<{width}s} {file_info.filename or 'Unknown'}")
    lines.append(
        f"  {'Resolution':<{width}s} {file_info.width} x {file_info.height} "
        f"({file_info.megapixels:.1f} MP)"
    )
    lines.append(f"  {'MIME Type':<{width}s} {file_info.mime_type}")
    lines.append(f"  {'Encoding':<{width}s} {file_info.encoding}")
    lines.append(f"  {'File Size':<{width}s} {file_info.size_bytes / 1024:.1f} KB")
    if file_info.captured:
        lines.append(f"  {'Captured':<{width}s} {file_info.captured.isoformat()}")
    if file_info.is_smartphone:
        lines.append(f"  {'Device Class':<{width}s} Smartphone")

    if not tags:
        lines.append("  No EXIF data found in stream")
        return lines

    for tag, value in tags.items():
        if tag in SKIPPED_TAGS:
            continue
        lines.append(f"  {tag:<{width}s} {format_tag_value(tag, value, tags)}")

    return lines


def format_full(report: ImageReport) -> str:
    """Format a report as comprehensive full output.

    Includes the default verdict output followed by the raw file data table.
    """
    lines = [format_default(report).rstrip("=").rstrip()]

    lines.append("")
    lines.extend(format_raw_data(report.file_info, report.raw_data))

    # Heatmap overlay hints
    heatmap = report.verdict.heatmap
    lines.append("")
    lines.append("## OVERLAY HINTS")
    lines.append(f"  intensity: {heatmap.intensity:.2f}")
    lines.append(f"  bloom_hotspot: {heatmap.bloom_hotspot}")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)
