"""aiimg - AI Image Forensics.

Score images for signs of generative synthesis and post-processing.

Usage:
    from aiimg import analyze_file

    # Analyze an image file
    report = analyze_file("photo.jpg")

    # Final verdict
    print(report.verdict.verdict.value)
    print(f"AI: {report.verdict.ai_score}%  Edit: {report.verdict.edit_score}%")

    # Per-detector results
    for name, result in report.results.items():
        print(name.label, result.score, result.markers)

    # Export as JSON
    print(format_json(report))
"""

from aiimg._version import __version__
from aiimg.aggregate import aggregate
from aiimg.analyze import (
    ScanError,
    analyze_file,
    analyze_files,
    analyze_image,
    analyze_image_async,
    get_file_info,
    scan,
    scan_async,
)
from aiimg.extractors import (
    extract_tags,
    get_available_extractors,
    get_extractor_status,
    print_extractor_status,
)
from aiimg.formatters import (
    format_default,
    format_full,
    format_json,
    format_quiet,
    to_dict,
)
from aiimg.imaging import PixelSample, PixelSource
from aiimg.models import (
    DetectorName,
    DetectorResult,
    FileInfo,
    ImageReport,
    MetadataResult,
    ResultsMap,
    SequenceReport,
    Verdict,
    VerdictReport,
)
from aiimg.sequence import analyze_sequence
from aiimg.utils import (
    check_all_dependencies,
    print_dependency_status,
)

__all__ = [
    # Version
    "__version__",
    # Main functions
    "analyze_file",
    "analyze_files",
    "analyze_image",
    "analyze_image_async",
    "analyze_sequence",
    "scan",
    "scan_async",
    "aggregate",
    "get_file_info",
    "ScanError",
    # Pixels
    "PixelSource",
    "PixelSample",
    # Models
    "ImageReport",
    "SequenceReport",
    "VerdictReport",
    "Verdict",
    "ResultsMap",
    "DetectorName",
    "DetectorResult",
    "MetadataResult",
    "FileInfo",
    # Formatters
    "format_default",
    "format_full",
    "format_json",
    "format_quiet",
    "to_dict",
    # Extractor functions
    "extract_tags",
    "get_available_extractors",
    "get_extractor_status",
    "print_extractor_status",
    # Dependency functions
    "check_all_dependencies",
    "print_dependency_status",
]
