"""Core analysis functions."""

from __future__ import annotations

import asyncio
import logging
import os
import warnings
from datetime import datetime
from typing import Any

from aiimg.aggregate import aggregate
from aiimg.config import AiimgConfig, get_config
from aiimg.detectors import (
    LineageDetector,
    MetadataDetector,
    get_pixel_detectors,
    safe_invoke,
)
from aiimg.imaging import PixelSource
from aiimg.models import DetectorResult, FileInfo, ImageReport, MetadataResult, ResultsMap

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """A scan failed outside any individual detector; no report is produced."""


def get_file_info(path: str, source: PixelSource | None = None) -> FileInfo:
    """Get basic file information.

    Args:
        path: Path to the file
        source: Decoded image, used for the declared dimensions and MIME type

    Returns:
        FileInfo object with file details
    """
    stat = os.stat(path)

    # Get timestamps
    modified = datetime.fromtimestamp(stat.st_mtime)
    accessed = datetime.fromtimestamp(stat.st_atime)

    info: dict[str, Any] = {}
    if source is not None:
        info["width"] = source.width
        info["height"] = source.height
        if source.mime_type:
            info["mime_type"] = source.mime_type

    return FileInfo(
        path=os.path.abspath(path),
        filename=os.path.basename(path),
        extension=os.path.splitext(path)[1].lower(),
        size_bytes=stat.st_size,
        modified=modified,
        accessed=accessed,
        **info,
    )


async def _run_metadata(detector: MetadataDetector, **kwargs: Any) -> MetadataResult | DetectorResult:
    try:
        return await detector.detect(**kwargs)
    except Exception:
        logger.exception("Tool failure [%s]", detector.tool_name)
        return DetectorResult.fault(detector.tool_name)


async def scan_async(
    source: PixelSource,
    file: str | None = None,
    *,
    file_info: FileInfo | None = None,
    tags: dict[str, Any] | None = None,
    config: AiimgConfig | None = None,
) -> ResultsMap:
    """Run all ten detectors over an image.

    The metadata detector is awaited first; the nine pixel detectors then run
    one after another, yielding to the event loop between them so that a
    cancelled scan stops before the next detector starts.

    Args:
        source: Decoded image
        file: Path of the image file, used for tag extraction and the filename
        file_info: Basic file details to attach to the metadata result
        tags: Tag dictionary to use instead of extracting from ``file``
        config: Configuration; defaults to the global configuration

    Returns:
        ResultsMap with one entry per detector

    Raises:
        ScanError: If the scan fails outside an individual detector
    """
    try:
        config = config or get_config()
        metadata = MetadataDetector(
            config=config.metadata,
            timeout=config.detection.metadata_timeout_seconds,
        )
        filename = os.path.basename(file or source.origin)
        if file is None and tags is None:
            tags = {}

        entries: dict = {}
        entries[metadata.name] = await _run_metadata(
            metadata, path=file, tags=tags, filename=filename, file_info=file_info
        )

        for detector in get_pixel_detectors():
            await asyncio.sleep(0)
            logger.debug("Running %s", detector.tool_name)
            entries[detector.name] = safe_invoke(
                detector.tool_name, lambda d=detector: d.detect(source)
            )

        return ResultsMap(entries=entries)
    except Exception as e:
        raise ScanError(f"Scan failed: {e}") from e


def _run_sync(coro: Any, entry: str) -> Any:
    """Run a coroutine to completion from synchronous code."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        coro.close()
        raise ScanError(
            f"{entry}() cannot be called from a running event loop; await {entry}_async() instead"
        )
    return asyncio.run(coro)


def scan(
    source: PixelSource,
    file: str | None = None,
    *,
    file_info: FileInfo | None = None,
    tags: dict[str, Any] | None = None,
    config: AiimgConfig | None = None,
) -> ResultsMap:
    """Synchronous wrapper around :func:`scan_async`.

    Raises:
        ScanError: If the scan fails or an event loop is already running
    """
    return _run_sync(
        scan_async(source, file, file_info=file_info, tags=tags, config=config), "scan"
    )


async def analyze_image_async(
    source: PixelSource,
    file: str | None = None,
    *,
    file_info: FileInfo | None = None,
    tags: dict[str, Any] | None = None,
    lineage: bool | None = None,
    config: AiimgConfig | None = None,
) -> ImageReport:
    """Scan an already decoded image and aggregate the verdict.

    Use this from async code (web handlers, notebooks); :func:`analyze_image`
    is the blocking equivalent.
    """
    config = config or get_config()
    if file_info is None:
        file_info = FileInfo(
            path=source.origin,
            filename=os.path.basename(source.origin),
            extension=os.path.splitext(source.origin)[1].lower(),
            size_bytes=0,
            mime_type=source.mime_type or "image/jpeg",
            width=source.width,
            height=source.height,
        )

    results = await scan_async(source, file, file_info=file_info, tags=tags, config=config)
    report = aggregate(results)

    # The metadata detector fills in smartphone and capture-date details
    if results.metadata is not None and results.metadata.file_info is not None:
        file_info = results.metadata.file_info

    lineage_result = None
    if lineage if lineage is not None else config.detection.enable_lineage:
        detector = LineageDetector()
        lineage_result = safe_invoke(detector.tool_name, lambda: detector.detect(source))

    return ImageReport(file_info=file_info, results=results, verdict=report, lineage=lineage_result)


def analyze_image(
    source: PixelSource,
    file: str | None = None,
    *,
    file_info: FileInfo | None = None,
    tags: dict[str, Any] | None = None,
    lineage: bool | None = None,
    config: AiimgConfig | None = None,
) -> ImageReport:
    """Blocking wrapper around :func:`analyze_image_async`."""
    return _run_sync(
        analyze_image_async(
            source, file, file_info=file_info, tags=tags, lineage=lineage, config=config
        ),
        "analyze_image",
    )


def analyze_file(
    path: str,
    *,
    tags: dict[str, Any] | None = None,
    lineage: bool | None = None,
    config: AiimgConfig | None = None,
) -> ImageReport:
    """Analyze an image file and produce a full forensic report.

    This is the main entry point for image analysis. It:
    1. Decodes the image
    2. Gets basic file information
    3. Runs the metadata detector and the nine pixel detectors
    4. Aggregates the results into a verdict
    5. Optionally attaches the experimental model lineage guess

    Args:
        path: Path to the image file
        tags: Tag dictionary to use instead of extracting from the file
        lineage: Attach the model lineage guess (defaults to config)
        config: Configuration; defaults to the global configuration

    Returns:
        ImageReport with file info, per-detector results and verdict

    Raises:
        FileNotFoundError: If the file does not exist
        ScanError: If the image cannot be decoded or the scan fails
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    try:
        source = PixelSource.open(path)
    except Exception as e:
        raise ScanError(f"Cannot decode image {path}: {e}") from e

    file_info = get_file_info(path, source)
    logger.info("Analyzing %s (%dx%d)", file_info.filename, source.width, source.height)
    return analyze_image(
        source, path, file_info=file_info, tags=tags, lineage=lineage, config=config
    )


def analyze_files(paths: list[str], lineage: bool | None = None) -> list[ImageReport]:
    """Analyze multiple image files.

    Args:
        paths: List of file paths
        lineage: Attach the model lineage guess (defaults to config)

    Returns:
        List of ImageReport objects
    """
    results = []
    for path in paths:
        try:
            results.append(analyze_file(path, lineage=lineage))
        except Exception as e:
            warnings.warn(f"Failed to analyze {path}: {e}", stacklevel=2)
    return results
