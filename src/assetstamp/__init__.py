"""
assetstamp - build-derived version tags for cache-busting asset URLs.

Resolve a deterministic, content-derived tag for a compiled unit and append
it to the URLs of the scripts and styles that unit ships.
"""

__version__ = "0.1.0"

from assetstamp.exceptions import (  # noqa: E402
    AssetStampError,
    InvalidAssetPathError,
    ManifestError,
    ResolutionError,
)
from assetstamp.resolver import (  # noqa: E402
    VersionTagResolver,
    get_default_resolver,
    resolve_version_tag,
)
from assetstamp.tags import AssetVersionTag  # noqa: E402
from assetstamp.units import UnitReference  # noqa: E402
from assetstamp.urls import compose_versioned_url, versioned_asset_url  # noqa: E402

__all__ = [
    "AssetStampError",
    "AssetVersionTag",
    "InvalidAssetPathError",
    "ManifestError",
    "ResolutionError",
    "UnitReference",
    "VersionTagResolver",
    "compose_versioned_url",
    "get_default_resolver",
    "resolve_version_tag",
    "versioned_asset_url",
]
