"""
Versioned module imports for client runtimes.

Client runtimes load script modules asynchronously (a browser ``import()``
bridged through a websocket, a headless test driver, ...). AssetImporter
takes that loader capability as an explicit parameter and hands it
versioned URLs, so cache invalidation follows the owning unit's content.
"""

import logging
from typing import Any, Awaitable, Optional, Protocol, TypeVar

from assetstamp.resolver import VersionTagResolver
from assetstamp.urls import versioned_asset_url

logger = logging.getLogger(__name__)

T_co = TypeVar("T_co", covariant=True)


class ModuleLoader(Protocol[T_co]):
    """Async callable that fetches and instantiates a module from a URL."""

    def __call__(self, url: str) -> Awaitable[T_co]: ...


class AssetImporter:
    """
    Import client-side modules through versioned URLs.

    Example:
        >>> importer = AssetImporter(js_runtime.import_module, unit=MyComponent)
        >>> module = await importer.import_module("./_content/mylib/widget.js")

    The importer holds no state beyond its configuration. Cancellation and
    timeouts are whatever the loader implements; resolution errors are
    raised before the loader is called.
    """

    def __init__(
        self,
        loader: ModuleLoader[Any],
        unit: Any = None,
        resolver: Optional[VersionTagResolver] = None,
        param: Optional[str] = None,
    ) -> None:
        self.loader = loader
        self.unit = unit
        self.resolver = resolver
        self.param = param

    def url_for(self, path: str, unit: Any = None) -> str:
        """Versioned URL for a module path, using the importer's unit by default."""
        target = unit if unit is not None else self.unit
        if target is None:
            raise ValueError("No unit given and the importer has no default unit")
        return versioned_asset_url(path, target, self.resolver, self.param)

    async def import_module(self, path: str, unit: Any = None) -> Any:
        """
        Load a module through the loader using its versioned URL.

        Args:
            path: Module path as the client runtime expects it
            unit: Compiled unit owning the module (default: the importer's unit)

        Returns:
            Whatever the loader returns for the module

        Raises:
            ResolutionError: If the unit's tag cannot be resolved
        """
        url = self.url_for(path, unit)
        logger.debug(f"Importing module {url}")
        return await self.loader(url)
