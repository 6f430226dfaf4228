"""
Installed distribution identity provider.

Uses the file record an installer writes for every distribution (RECORD)
to derive a tag without re-reading files whose hashes are already recorded.
"""

import logging
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Optional, Sequence

from assetstamp.config import settings
from assetstamp.exceptions import ResolutionError
from assetstamp.providers.metadata import ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import DISTRIBUTION, UnitReference
from assetstamp.utils.hashing import calculate_digest_hash, calculate_file_hash, is_excluded

logger = logging.getLogger(__name__)


class DistributionProvider:
    """Resolve ``dist:`` units from installed distribution metadata."""

    def __init__(
        self,
        tag_length: Optional[int] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> None:
        self.tag_length = tag_length or settings.asset_tag_length
        self.exclude = list(
            exclude if exclude is not None else settings.asset_hash_exclude
        )
        self._metadata = ProviderMetadata(
            name="distribution",
            version="1.0.0",
            schemes=[DISTRIBUTION],
            priority=50,
            description="Hashes the file record of an installed distribution",
        )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def can_resolve(self, unit: UnitReference) -> bool:
        return unit.scheme == DISTRIBUTION

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        dist = self._find(unit)
        files = dist.files
        if not files:
            raise ResolutionError(unit.key, "distribution has no file record")

        entries: list[tuple[str, str]] = []
        for record in files:
            name = record.as_posix()
            if any(is_excluded(part, self.exclude) for part in record.parts):
                continue
            if record.hash is not None:
                entries.append((name, f"{record.hash.mode}={record.hash.value}"))
                continue

            # RECORD itself and generated files carry no hash
            if record.name == "RECORD":
                continue
            located = Path(str(dist.locate_file(record)))
            if located.is_file():
                entries.append((name, calculate_file_hash(located)))

        if not entries:
            raise ResolutionError(unit.key, "distribution record lists no files")

        logger.debug(f"Hashed {len(entries)} recorded files for {unit.key}")
        return AssetVersionTag.from_digest(
            calculate_digest_hash(entries),
            self.tag_length,
            unit=unit.key,
            provider=self._metadata.name,
        )

    def _find(self, unit: UnitReference) -> importlib_metadata.Distribution:
        if isinstance(unit.target, importlib_metadata.Distribution):
            return unit.target
        try:
            return importlib_metadata.distribution(unit.name)
        except importlib_metadata.PackageNotFoundError as e:
            raise ResolutionError(unit.key, "distribution is not installed") from e
