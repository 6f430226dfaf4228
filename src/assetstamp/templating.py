"""Jinja2 helpers for versioned asset URLs in server-rendered markup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from jinja2 import Environment

from assetstamp.resolver import VersionTagResolver, resolve_version_tag
from assetstamp.urls import versioned_asset_url

if TYPE_CHECKING:
    from fastapi.templating import Jinja2Templates

logger = logging.getLogger(__name__)


def setup_asset_versioning(
    templates: Union[Environment, "Jinja2Templates"],
    resolver: Optional[VersionTagResolver] = None,
    default_unit: Any = None,
    static_prefix: str = "",
    fallback_to_unversioned: bool = False,
) -> Environment:
    """Add asset versioning functions to a Jinja2 environment.

    This adds the following:
    - asset_url(path, unit=None): global returning the versioned URL
    - asset_version(unit=None): global returning the bare tag value
    - versioned(unit=None): filter, e.g. ``{{ "/static/app.js" | versioned }}``

    Args:
        templates: Jinja2 Environment or FastAPI Jinja2Templates to configure
        resolver: Resolver to use (default: the global resolver)
        default_unit: Unit used when a template does not name one
        static_prefix: Prefix joined to relative paths passed to asset_url
        fallback_to_unversioned: Render unversioned URLs instead of failing
            the page when a unit cannot be resolved

    Returns:
        The configured Environment
    """
    env = templates if isinstance(templates, Environment) else templates.env

    def _unit(unit: Any) -> Any:
        target = unit if unit is not None else default_unit
        if target is None:
            raise ValueError("Template asset helper called without a unit")
        return target

    def _url(path: str, unit: Any = None) -> str:
        return versioned_asset_url(
            path,
            _unit(unit),
            resolver,
            fallback_to_unversioned=fallback_to_unversioned,
        )

    def asset_url(path: str, unit: Any = None) -> str:
        if static_prefix and not path.startswith(("/", "http://", "https://")):
            path = f"{static_prefix.rstrip('/')}/{path}"
        return _url(path, unit)

    def asset_version(unit: Any = None) -> str:
        return resolve_version_tag(_unit(unit), resolver).value

    env.globals["asset_url"] = asset_url
    env.globals["asset_version"] = asset_version
    env.filters["versioned"] = _url

    logger.debug("Asset versioning helpers registered on Jinja2 environment")
    return env
