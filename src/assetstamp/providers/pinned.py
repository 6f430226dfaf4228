"""Pinned tag provider for deployments that stamp a single build identifier."""

from assetstamp.providers.metadata import ANY_SCHEME, ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import UnitReference


class PinnedTagProvider:
    """
    Resolve every unit to one configured tag (e.g. a CI commit SHA).

    Invalidation then happens per deployment rather than per unit.
    """

    def __init__(self, tag: str, priority: int = 100) -> None:
        self.tag = AssetVersionTag(value=tag, provider="pinned")
        self._metadata = ProviderMetadata(
            name="pinned",
            version="1.0.0",
            schemes=[ANY_SCHEME],
            priority=priority,
            description="Uses a configured build identifier for every unit",
        )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def can_resolve(self, unit: UnitReference) -> bool:
        return True

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        return AssetVersionTag(value=self.tag.value, unit=unit.key, provider="pinned")
