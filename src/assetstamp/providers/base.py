"""
Base protocol for unit identity providers.

A provider turns a normalised unit reference into the AssetVersionTag of
that unit. Each provider covers one way of discovering a unit's identity:
run-time reflection through the import system, installed distribution
metadata, a built asset directory, or constants embedded at build time.
"""

from typing import Protocol, runtime_checkable

from assetstamp.providers.metadata import ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import UnitReference


@runtime_checkable
class UnitIdentityProvider(Protocol):
    """
    Protocol for unit identity providers.

    All provider implementations must provide these members to integrate
    with the VersionTagResolver.
    """

    @property
    def metadata(self) -> ProviderMetadata:
        """
        Get provider metadata.

        Returns:
            ProviderMetadata with name, version, schemes and priority
        """
        ...

    def can_resolve(self, unit: UnitReference) -> bool:
        """
        Check if this provider may be able to resolve the unit.

        Note:
            This method should be fast and free of side effects. Returning
            True does not guarantee identity_of() will succeed.
        """
        ...

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        """
        Compute the version tag of a compiled unit.

        Args:
            unit: Normalised unit reference

        Returns:
            AssetVersionTag for the unit's current content

        Raises:
            ResolutionError: If the unit cannot be located
        """
        ...
