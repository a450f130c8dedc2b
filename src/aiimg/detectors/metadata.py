"""Metadata forensics detector.

Checks the embedded tags and the filename for "smoking guns": generator
names, content credentials, stripped camera identity and AI software
signatures.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, ClassVar

from aiimg.config import MetadataConfig, get_config
from aiimg.detectors.base import BaseDetector
from aiimg.extractors import extract_tags, parse_date
from aiimg.models import C2PA_EDIT_SIGNAL, DetectorName, FileInfo, MetadataResult

logger = logging.getLogger(__name__)

# (substrings that must all appear in the filename, label)
IDENTITY_PATTERNS = [
    (("gemini", "generated"), "Google Gemini"),
    (("chatgpt",), "OpenAI ChatGPT/DALL-E"),
    (("dall", "e"), "OpenAI DALL-E"),
    (("midjourney",), "Midjourney"),
    (("stable", "diffusion"), "Stable Diffusion"),
    (("adobe", "firefly"), "Adobe Firefly"),
]

AI_SOFTWARE_RE = re.compile(r"photoshop|ai|generated|stable|diffusion|dall", re.IGNORECASE)
C2PA_EDIT_ACTIONS = ("edited", "derived", "converted")

TIMED_OUT = "Metadata scan timed out"
FAILED = "Metadata analysis failed"


def tags_to_text(tags: dict[str, Any]) -> str:
    """Serialise tags (keys included) to a lowercase search string."""
    return json.dumps(tags or {}, default=str, ensure_ascii=False).lower()


class MetadataDetector(BaseDetector):
    """Score EXIF/XMP tags and the filename for signs of generation.

    Args:
        config: Keyword lists; defaults to the global configuration
        timeout: Seconds to wait for tag extraction before giving up
        extractor: Callable returning the tag dictionary for a path
    """

    name: ClassVar[DetectorName] = DetectorName.METADATA
    tool_name: ClassVar[str] = "Metadata"

    def __init__(
        self,
        config: MetadataConfig | None = None,
        timeout: float | None = None,
        extractor: Callable[[str], dict[str, Any]] | None = None,
    ):
        settings = get_config()
        self.config = config or settings.metadata
        self.timeout = timeout if timeout is not None else settings.detection.metadata_timeout_seconds
        self.extractor = extractor or extract_tags

    async def detect(
        self,
        path: str | None = None,
        *,
        tags: dict[str, Any] | None = None,
        filename: str | None = None,
        file_info: FileInfo | None = None,
    ) -> MetadataResult:
        """Extract tags (unless given) and score them.

        Extraction runs on a private worker thread raced against ``timeout``.
        The pool is shut down without waiting, so a late or hung extractor
        never holds up the scan; its result is discarded.

        Returns:
            MetadataResult; on timeout or extraction failure a zero-score
            result with a single explanatory marker
        """
        if filename is None:
            filename = file_info.filename if file_info else Path(path or "").name

        try:
            if tags is None:
                if path is None:
                    raise ValueError("either a path or a tag dictionary is required")
                tags = await self._extract(path)
            return self.score(tags, filename, file_info)
        except asyncio.TimeoutError:
            logger.warning("Metadata extraction timed out after %.1fs: %s", self.timeout, path)
            return MetadataResult(score=0, markers=[TIMED_OUT], raw_data={})
        except Exception as e:
            logger.warning("Metadata analysis failed for %s: %s", path or filename, e)
            return MetadataResult(score=0, markers=[FAILED], raw_data={})

    async def _extract(self, path: str) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="aiimg-metadata")
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(executor, self.extractor, path), timeout=self.timeout
            )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def score(
        self,
        tags: dict[str, Any],
        filename: str = "",
        file_info: FileInfo | None = None,
    ) -> MetadataResult:
        """Score a tag dictionary and filename.

        Args:
            tags: Flat tag dictionary (Make, Model, Software, ...)
            filename: Name of the file, matched against known generator names
            file_info: Basic file details to attach to the result

        Returns:
            MetadataResult with score capped at 100
        """
        tags = tags or {}
        cfg = self.config
        meta = tags_to_text(tags)
        is_smartphone = any(brand in meta for brand in cfg.smartphone_brands)

        score = 0
        markers: list[str] = []

        # Content credentials
        if "c2pa" in meta or "contentcredentials" in meta or tags.get("XMPProvenance"):
            if "c2pa.action" in meta and any(a in meta for a in C2PA_EDIT_ACTIONS):
                markers += ["C2PA: CRYPTOGRAPHIC EDIT RECORD FOUND", C2PA_EDIT_SIGNAL]
            elif "adobe.photoshop" in meta or "lightroom" in meta:
                markers += ["C2PA: SIGNED BY EDITING SOFTWARE", C2PA_EDIT_SIGNAL]
            else:
                markers.append("C2PA: CRYPTOGRAPHIC SIGNATURE DETECTED")
            score = 0

        name = (filename or "").lower()
        for parts, label in IDENTITY_PATTERNS:
            if all(p in name for p in parts):
                score = 100
                markers.append(f"Filename Identity: {label} Origin")

        for field in cfg.forensic_fields:
            if not tags.get(field):
                continue
            value = str(tags[field]).lower()
            for kw in cfg.forensic_keywords:
                if kw in value:
                    logger.info("AI origin confirmed [field: %s, value: %s]", field, tags[field])
                    markers.append(f'METADATA SMOKING GUN: {field} contains "{kw}"')
                    score += 50

        suppressed = set(cfg.smartphone_suppressed_keywords) if is_smartphone else set()
        for keyword in cfg.ai_keywords:
            if keyword in meta and keyword not in suppressed:
                score += 40
                markers.append(f"Forensic Trace: Found AI keyword: {keyword}")

        if not tags.get("Make") and not tags.get("Model"):
            score += 25
            markers.append("Anomalous: Striped EXIF/No Camera ID")

        if tags.get("Software"):
            software = str(tags["Software"]).lower()
            if AI_SOFTWARE_RE.search(software):
                if is_smartphone and "ai" in software:
                    markers.append("Context: Smartphone AI Enhancement Detected (Not Generative)")
                else:
                    score += 30
                    markers.append("Forensic Trace: AI Software Signature")

        if file_info is not None:
            file_info = file_info.model_copy(
                update={
                    "is_smartphone": is_smartphone,
                    "captured": file_info.captured or parse_date(tags.get("DateTimeOriginal")),
                }
            )

        return MetadataResult(
            score=min(score, 100),
            markers=markers or ["No metadata anomalies detected"],
            raw_data=tags,
            file_info=file_info,
            payload={"is_smartphone": is_smartphone},
        )
