"""
Build manifest identity provider.

Reads tags embedded at build time instead of reflecting on the running
installation. Takes precedence over the reflection providers so deployed
applications serve exactly the tags that were built.
"""

import logging
from pathlib import Path
from typing import Optional

from assetstamp.exceptions import ManifestError, ResolutionError
from assetstamp.manifest import BuildManifest
from assetstamp.providers.metadata import ANY_SCHEME, ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import UnitReference

logger = logging.getLogger(__name__)


class ManifestProvider:
    """Resolve any unit recorded in a build manifest file."""

    def __init__(self, manifest_path: Path, priority: int = 90) -> None:
        self.manifest_path = Path(manifest_path)
        self._manifest: Optional[BuildManifest] = None
        self._metadata = ProviderMetadata(
            name="manifest",
            version="1.0.0",
            schemes=[ANY_SCHEME],
            priority=priority,
            description=f"Reads build-time tags from {self.manifest_path}",
        )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def can_resolve(self, unit: UnitReference) -> bool:
        return True

    def load(self) -> BuildManifest:
        """
        Load the manifest once and keep it for the provider's lifetime.

        Raises:
            ResolutionError: If the manifest is missing or invalid
        """
        if self._manifest is None:
            try:
                self._manifest = BuildManifest.from_file(self.manifest_path)
            except FileNotFoundError as e:
                raise ResolutionError(
                    str(self.manifest_path), "build manifest not found"
                ) from e
            except ManifestError as e:
                raise ResolutionError(str(self.manifest_path), str(e)) from e
            logger.debug(
                f"Loaded build manifest {self.manifest_path} "
                f"({len(self._manifest.tags)} units)"
            )
        return self._manifest

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        tag = self.load().tag_for(unit.key)
        if tag is None:
            raise ResolutionError(
                unit.key, f"not recorded in build manifest {self.manifest_path}"
            )
        return tag
