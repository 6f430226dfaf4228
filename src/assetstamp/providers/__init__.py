"""
Unit identity providers.

This package provides the providers that compute version tags for the
different kinds of compiled units, along with their shared protocol.
"""

from assetstamp.providers.base import UnitIdentityProvider
from assetstamp.providers.directory import DirectoryProvider
from assetstamp.providers.distribution import DistributionProvider
from assetstamp.providers.manifest import ManifestProvider
from assetstamp.providers.metadata import ANY_SCHEME, ProviderMetadata
from assetstamp.providers.module import ModuleProvider
from assetstamp.providers.pinned import PinnedTagProvider

__all__ = [
    "ANY_SCHEME",
    "DirectoryProvider",
    "DistributionProvider",
    "ManifestProvider",
    "ModuleProvider",
    "PinnedTagProvider",
    "ProviderMetadata",
    "UnitIdentityProvider",
]
