"""Built asset directory identity provider."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from assetstamp.config import settings
from assetstamp.exceptions import ResolutionError
from assetstamp.providers.metadata import ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import DIRECTORY, UnitReference
from assetstamp.utils.hashing import calculate_tree_hash

logger = logging.getLogger(__name__)


class DirectoryProvider:
    """
    Resolve ``dir:`` units by hashing a build output directory or file.

    Relative paths are resolved against ``root`` (the ``asset_root``
    setting, or the working directory at resolution time).
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        tag_length: Optional[int] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> None:
        self.root = Path(root) if root is not None else None
        self.tag_length = tag_length or settings.asset_tag_length
        self.exclude = list(
            exclude if exclude is not None else settings.asset_hash_exclude
        )
        self._metadata = ProviderMetadata(
            name="directory",
            version="1.0.0",
            schemes=[DIRECTORY],
            priority=40,
            description="Hashes a built asset directory",
        )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def can_resolve(self, unit: UnitReference) -> bool:
        return unit.scheme == DIRECTORY

    def resolve_path(self, unit: UnitReference) -> Path:
        path = Path(unit.name)
        if not path.is_absolute():
            path = (self.root or settings.asset_root_path) / path
        return path

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        path = self.resolve_path(unit)
        if not path.exists():
            raise ResolutionError(unit.key, f"path not found: {path}")

        try:
            digest = calculate_tree_hash(path, self.exclude)
        except OSError as e:
            raise ResolutionError(unit.key, f"cannot read {path}: {e}") from e

        logger.debug(f"Hashed {unit.key} at {path}")
        return AssetVersionTag.from_digest(
            digest, self.tag_length, unit=unit.key, provider=self._metadata.name
        )
