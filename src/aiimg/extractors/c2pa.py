"""C2PA metadata extractor using c2pa-python library."""

import json
import logging
from typing import Any, ClassVar

from aiimg.extractors.base import BaseExtractor

logger = logging.getLogger(__name__)


class C2PAExtractor(BaseExtractor):
    """Extract C2PA Content Credentials using the official c2pa-python library.

    The active manifest is summarised into ``C2PA*`` tags (claim generator,
    assertion labels, actions, signer) so that the metadata detector's
    provenance check sees the same vocabulary it would find in XMP.

    Install: pip install c2pa-python
    """

    name: ClassVar[str] = "c2pa-python"
    priority: ClassVar[int] = 20

    @classmethod
    def is_available(cls) -> bool:
        """Check if c2pa-python is available."""
        try:
            from c2pa import Reader  # noqa: F401

            return True
        except ImportError:
            return False

    def extract(self, path: str) -> dict[str, Any]:
        """Extract C2PA metadata using c2pa-python."""
        try:
            from c2pa import Reader

            with Reader(path) as reader:
                manifest_data = json.loads(reader.json())
        except Exception as e:
            # No C2PA data or parsing error
            logger.debug("No C2PA manifest in %s: %s", path, e)
            return {}
        return self.summarize(manifest_data)

    @staticmethod
    def summarize(data: dict[str, Any]) -> dict[str, Any]:
        """Summarise a c2pa-python manifest store as flat tags."""
        tags: dict[str, Any] = {}

        active_id = data.get("active_manifest")
        manifest = data.get("manifests", {}).get(active_id) if active_id else None
        if not manifest:
            return tags

        tags["C2PAManifest"] = active_id
        if data.get("validation_state"):
            tags["C2PAValidationState"] = data["validation_state"]

        # Claim generator (from claim_generator_info list)
        claim_gen_info = manifest.get("claim_generator_info") or []
        claim_generator = manifest.get("claim_generator")
        if claim_gen_info and isinstance(claim_gen_info, list):
            first_gen = claim_gen_info[0]
            if isinstance(first_gen, dict):
                claim_generator = first_gen.get("name") or claim_generator
            elif isinstance(first_gen, str):
                claim_generator = first_gen
        if claim_generator:
            tags["C2PAClaimGenerator"] = claim_generator

        sig_info = manifest.get("signature_info") or {}
        if sig_info.get("issuer"):
            tags["C2PAIssuer"] = sig_info["issuer"]

        labels = []
        actions = []
        for assertion in manifest.get("assertions", []):
            label = assertion.get("label", "")
            labels.append(label)
            if "c2pa.actions" not in label:
                continue
            for action in assertion.get("data", {}).get("actions", []):
                actions.append(action.get("action", ""))

                software_agent = action.get("softwareAgent")
                if isinstance(software_agent, dict):
                    software_agent = software_agent.get("name")
                if software_agent:
                    tags.setdefault("C2PASoftwareAgent", software_agent)

                source_type = action.get("digitalSourceType", "")
                if source_type:
                    # Extract just the type name from URL if present
                    tags.setdefault("C2PADigitalSourceType", source_type.split("/")[-1])

        if labels:
            tags["C2PAAssertions"] = labels
        if actions:
            tags["C2PAActions"] = actions
        return tags
