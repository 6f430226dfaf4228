"""
Versioned asset URLs.

Appends a version tag to an asset path as a query parameter, keeping any
existing query and fragment intact and never producing a duplicate
version parameter.
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

from assetstamp.config import settings
from assetstamp.exceptions import InvalidAssetPathError, ResolutionError
from assetstamp.resolver import VersionTagResolver, resolve_version_tag
from assetstamp.tags import AssetVersionTag

logger = logging.getLogger(__name__)


def compose_versioned_url(
    base_path: str,
    tag: AssetVersionTag | str,
    param: Optional[str] = None,
) -> str:
    """
    Append ``<param>=<tag>`` to an asset path.

    Args:
        base_path: Asset path or URL, optionally with a query and fragment
        tag: Version tag (or tag string) to append
        param: Query parameter name (default: the ``asset_version_param`` setting)

    Returns:
        The path with the version parameter appended

    Raises:
        InvalidAssetPathError: If base_path is empty or not a string
        ValueError: If tag is not a valid version tag

    Example:
        >>> compose_versioned_url("a/b/c.js", "XYZ")
        'a/b/c.js?version=XYZ'
        >>> compose_versioned_url("a/b/c.js?foo=1", "XYZ")
        'a/b/c.js?foo=1&version=XYZ'
    """
    if not isinstance(base_path, str) or not base_path:
        raise InvalidAssetPathError(f"Asset path must be a non-empty string: {base_path!r}")

    value = AssetVersionTag.coerce(tag).value
    param = param or settings.asset_version_param

    path, hash_sign, fragment = base_path.partition("#")
    path, _, query = path.partition("?")

    pairs = [pair for pair in query.split("&") if pair] if query else []
    kept = [pair for pair in pairs if pair.partition("=")[0] != param]
    if len(kept) != len(pairs):
        logger.debug(f"Replacing existing '{param}' parameter in {base_path}")

    kept.append(f"{param}={quote(value, safe='')}")
    url = f"{path}?{'&'.join(kept)}"
    if hash_sign:
        url += f"#{fragment}"
    return url


def versioned_asset_url(
    base_path: str,
    unit_reference: Any,
    resolver: Optional[VersionTagResolver] = None,
    param: Optional[str] = None,
    fallback_to_unversioned: bool = False,
) -> str:
    """
    Resolve a unit's tag and append it to an asset path.

    Args:
        base_path: Asset path or URL
        unit_reference: The compiled unit the asset ships with
        resolver: VersionTagResolver to use (default: the global resolver)
        param: Query parameter name
        fallback_to_unversioned: Return base_path unchanged instead of
            raising when the unit cannot be resolved

    Raises:
        ResolutionError: If resolution fails and no fallback was requested
    """
    if not isinstance(base_path, str) or not base_path:
        raise InvalidAssetPathError(f"Asset path must be a non-empty string: {base_path!r}")

    try:
        tag = resolve_version_tag(unit_reference, resolver)
    except ResolutionError as e:
        if not fallback_to_unversioned:
            raise
        logger.warning(f"Serving unversioned asset URL {base_path}: {e}")
        return base_path

    return compose_versioned_url(base_path, tag, param)
