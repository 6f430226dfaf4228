"""
Build manifest schema.

A build manifest embeds version tags computed at build time, so a deployed
application can read constants instead of hashing its own files at run
time. Manifests carry no timestamps: identical inputs always produce a
byte-identical file.
"""

import json
import logging
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field, ValidationError, field_validator

from assetstamp.exceptions import ManifestError
from assetstamp.tags import MAX_TAG_LENGTH, MIN_TAG_LENGTH, AssetVersionTag

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA_VERSION = 1


class BuildManifest(BaseModel):
    """Version tags recorded for compiled units at build time."""

    schema_version: int = Field(
        MANIFEST_SCHEMA_VERSION,
        description="Manifest format version",
    )

    tag_length: int = Field(
        12,
        description="Hex characters kept from derived digests",
        ge=MIN_TAG_LENGTH,
        le=MAX_TAG_LENGTH,
    )

    tags: Dict[str, str] = Field(
        default_factory=dict,
        description="Unit key (e.g. 'module:mylib') to version tag",
    )

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, value: int) -> int:
        if value != MANIFEST_SCHEMA_VERSION:
            raise ValueError(f"Unsupported manifest schema version: {value}")
        return value

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, tags: Dict[str, str]) -> Dict[str, str]:
        """Ensure every recorded tag is a valid URL-safe token."""
        for key, value in tags.items():
            if not key:
                raise ValueError("Manifest unit keys cannot be empty")
            AssetVersionTag(value=value)
        return tags

    def tag_for(self, key: str) -> AssetVersionTag | None:
        """Return the recorded tag for a unit key, if any."""
        value = self.tags.get(key)
        if value is None:
            return None
        return AssetVersionTag(value=value, unit=key, provider="manifest")

    def to_json(self) -> str:
        """Serialize deterministically (sorted keys, trailing newline)."""
        return json.dumps(self.model_dump(), indent=2, sort_keys=True) + "\n"

    def write(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Wrote build manifest with {len(self.tags)} unit(s) to {path}")

    @classmethod
    def from_file(cls, manifest_path: Path) -> "BuildManifest":
        """
        Load a build manifest from a JSON file.

        Args:
            manifest_path: Path to the manifest file

        Returns:
            BuildManifest instance

        Raises:
            FileNotFoundError: If the manifest file doesn't exist
            ManifestError: If the manifest file is invalid
        """
        if not manifest_path.exists():
            raise FileNotFoundError(f"Manifest file not found: {manifest_path}")

        try:
            with open(manifest_path, encoding="utf-8") as f:
                data = json.load(f)
            return cls.model_validate(data)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in manifest {manifest_path}: {e}") from e
        except ValidationError as e:
            raise ManifestError(f"Invalid manifest {manifest_path}: {e}") from e
