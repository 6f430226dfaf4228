"""
Version tag resolver.

The resolver maintains a collection of unit identity providers and routes
each unit reference to the most preferred provider that can resolve it.
Resolved tags are cached per unit for the lifetime of the resolver: a tag
is computed once per loaded unit and is read-only afterwards.
"""

import asyncio
import logging
import threading
from pathlib import Path
from typing import Any, Optional

from assetstamp.config import Settings, settings
from assetstamp.exceptions import ResolutionError
from assetstamp.providers.base import UnitIdentityProvider
from assetstamp.providers.directory import DirectoryProvider
from assetstamp.providers.distribution import DistributionProvider
from assetstamp.providers.manifest import ManifestProvider
from assetstamp.providers.module import ModuleProvider
from assetstamp.providers.pinned import PinnedTagProvider
from assetstamp.tags import AssetVersionTag
from assetstamp.units import UnitReference

logger = logging.getLogger(__name__)


class VersionTagResolver:
    """
    Registry of unit identity providers with per-unit tag caching.

    When resolving, providers supporting the unit's scheme are tried from
    highest to lowest priority; the first one to return a tag wins.

    Example:
        >>> resolver = VersionTagResolver()
        >>> resolver.register(ModuleProvider())
        >>> resolver.resolve("mylib").value
        '3f2a9c0d51be'
    """

    def __init__(self, cache_tags: bool = True) -> None:
        """Initialize an empty resolver."""
        self._providers: list[UnitIdentityProvider] = []
        self._cache: dict[str, AssetVersionTag] = {}
        self._lock = threading.Lock()
        self.cache_tags = cache_tags

    def register(self, provider: UnitIdentityProvider) -> None:
        """
        Register a provider implementation.

        Args:
            provider: Instance implementing the UnitIdentityProvider protocol

        Note:
            Providers with equal priority are tried in registration order.
        """
        self._providers.append(provider)
        logger.debug(
            f"Registered provider: {provider.metadata.name} "
            f"(priority {provider.metadata.priority})"
        )

    def _candidates(self, unit: UnitReference) -> list[UnitIdentityProvider]:
        """Providers supporting the unit's scheme, most preferred first."""
        supported = [
            provider
            for provider in self._providers
            if provider.metadata.supports_scheme(unit.scheme)
        ]
        # sorted() is stable, so equal priorities keep registration order
        return sorted(supported, key=lambda p: p.metadata.priority, reverse=True)

    def resolve(self, unit_reference: Any) -> AssetVersionTag:
        """
        Resolve the version tag of the compiled unit a reference points to.

        Args:
            unit_reference: Anything UnitReference.parse() accepts

        Returns:
            AssetVersionTag of the unit

        Raises:
            ResolutionError: If no provider can determine the unit's identity
        """
        unit = UnitReference.parse(unit_reference)

        if self.cache_tags:
            with self._lock:
                cached = self._cache.get(unit.key)
            if cached is not None:
                return cached

        tag = self._resolve_uncached(unit)

        if self.cache_tags:
            with self._lock:
                # Keep the first tag stored so concurrent callers agree
                tag = self._cache.setdefault(unit.key, tag)
        return tag

    def _resolve_uncached(self, unit: UnitReference) -> AssetVersionTag:
        attempts: list[str] = []

        for provider in self._candidates(unit):
            name = provider.metadata.name

            try:
                if not provider.can_resolve(unit):
                    attempts.append(f"{name} skipped")
                    continue
            except Exception as probe_error:
                attempts.append(f"{name} probe failed: {probe_error}")
                logger.debug(f"Provider {name} probe failed for {unit.key}: {probe_error}")
                continue

            try:
                tag = provider.identity_of(unit)
            except ResolutionError as e:
                attempts.append(f"{name}: {e.reason or e}")
                logger.debug(f"Provider {name} could not resolve {unit.key}: {e}")
                continue
            except Exception as e:
                attempts.append(f"{name} failed: {e}")
                logger.debug(f"Provider {name} failed for {unit.key}", exc_info=True)
                continue

            if not isinstance(tag, AssetVersionTag) or not tag.value:
                attempts.append(f"{name} returned no tag")
                continue

            logger.debug(f"Resolved {unit.key} -> {tag.value} via {name}")
            return tag

        reason = "" if attempts else "no providers registered for this unit"
        raise ResolutionError(unit.key, reason, attempts)

    async def resolve_async(self, unit_reference: Any) -> AssetVersionTag:
        """
        Resolve a tag from asyncio code without blocking the event loop.

        Hashing runs in a worker thread; cancellation applies to the await,
        not to the hashing itself.
        """
        return await asyncio.to_thread(self.resolve, unit_reference)

    def clear_cache(self) -> None:
        """Forget every cached tag (e.g. after a hot reload)."""
        with self._lock:
            self._cache.clear()

    @property
    def registered_providers(self) -> list[str]:
        """
        Get names of all registered providers.

        Returns:
            List of provider names in registration order
        """
        return [provider.metadata.name for provider in self._providers]


def build_resolver(config: Optional[Settings] = None) -> VersionTagResolver:
    """
    Create a resolver with the built-in providers for a configuration.

    The pinned and manifest providers are only registered when configured.
    """
    config = config or settings
    resolver = VersionTagResolver(cache_tags=config.asset_cache_tags)

    if config.asset_pinned_tag:
        resolver.register(PinnedTagProvider(config.asset_pinned_tag))
    if config.asset_manifest_path:
        resolver.register(ManifestProvider(Path(config.asset_manifest_path).expanduser()))

    tag_length = config.asset_tag_length
    exclude = config.asset_hash_exclude
    resolver.register(ModuleProvider(tag_length=tag_length, exclude=exclude))
    resolver.register(DistributionProvider(tag_length=tag_length, exclude=exclude))
    resolver.register(
        DirectoryProvider(
            root=config.asset_root_path if config.asset_root else None,
            tag_length=tag_length,
            exclude=exclude,
        )
    )

    for module_path in config.provider_module_list:
        _load_external_provider(resolver, module_path)

    return resolver


def _load_external_provider(resolver: VersionTagResolver, module_path: str) -> None:
    """Register a provider from a module exposing get_provider() or PROVIDER."""
    from importlib import import_module

    try:
        module = import_module(module_path)
        factory = getattr(module, "get_provider", None)
        provider = factory() if callable(factory) else getattr(module, "PROVIDER", None)
        if provider:
            resolver.register(provider)
            logger.info(f"Loaded external provider from {module_path}")
        else:
            logger.warning(f"Module {module_path} did not provide get_provider()/PROVIDER")
    except Exception as import_error:
        logger.warning(f"Failed to load provider module {module_path}: {import_error}")


# Global resolver instance (singleton pattern)
_default_resolver: Optional[VersionTagResolver] = None
_default_lock = threading.Lock()


def get_default_resolver() -> VersionTagResolver:
    """
    Get the default global resolver.

    The resolver is lazy-initialized on first access from the global
    settings and includes all built-in providers.

    Note:
        This is a singleton. Multiple calls return the same instance.
    """
    global _default_resolver

    with _default_lock:
        if _default_resolver is None:
            _default_resolver = build_resolver(settings)
            logger.debug("Initialized default version tag resolver")

    return _default_resolver


def reset_default_resolver() -> None:
    """Drop the global resolver so the next access rebuilds it."""
    global _default_resolver

    with _default_lock:
        _default_resolver = None


def resolve_version_tag(
    unit_reference: Any, resolver: Optional[VersionTagResolver] = None
) -> AssetVersionTag:
    """
    Resolve the version tag for a compiled unit.

    Args:
        unit_reference: Module, class, distribution, path or string naming the unit
        resolver: Resolver to use (default: the global resolver)

    Raises:
        ResolutionError: If the unit's identity cannot be determined
    """
    return (resolver or get_default_resolver()).resolve(unit_reference)
