"""Tests for the version tag resolver."""

import asyncio
import json
import threading
from pathlib import Path

import pytest

from assetstamp.config import Settings
from assetstamp.exceptions import ResolutionError
from assetstamp.providers import ProviderMetadata
from assetstamp.resolver import (
    VersionTagResolver,
    build_resolver,
    get_default_resolver,
    resolve_version_tag,
)
from assetstamp.tags import AssetVersionTag
from assetstamp.units import UnitReference


class _CountingProvider:
    """Provider returning a fixed tag and counting calls."""

    def __init__(self, name: str, tag: str, priority: int = 50, schemes=("*",)) -> None:
        self.metadata = ProviderMetadata(
            name=name, version="1.0.0", schemes=list(schemes), priority=priority
        )
        self.tag = tag
        self.calls = 0

    def can_resolve(self, unit: UnitReference) -> bool:
        return True

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        self.calls += 1
        return AssetVersionTag(self.tag, unit=unit.key, provider=self.metadata.name)


class _FailingProvider(_CountingProvider):
    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        self.calls += 1
        raise ResolutionError(unit.key, f"{self.metadata.name} cannot see it")


class _BrokenProbeProvider(_CountingProvider):
    def can_resolve(self, unit: UnitReference) -> bool:
        raise RuntimeError("probe exploded")


class TestProviderSelection:
    """Tests for provider ordering and fallthrough."""

    def test_higher_priority_wins(self):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("low", "lowtag00", priority=10))
        resolver.register(_CountingProvider("high", "hightag0", priority=90))

        tag = resolver.resolve("mylib")

        assert tag.value == "hightag0"
        assert tag.provider == "high"

    def test_equal_priority_keeps_registration_order(self):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("first", "firsttag"))
        resolver.register(_CountingProvider("second", "secondtg"))

        assert resolver.resolve("mylib").provider == "first"

    def test_falls_through_failing_providers(self):
        """Test that a provider's ResolutionError moves on to the next one."""
        resolver = VersionTagResolver()
        failing = _FailingProvider("manifest", "unused00", priority=90)
        resolver.register(failing)
        resolver.register(_CountingProvider("module", "moduletg", priority=50))

        assert resolver.resolve("mylib").value == "moduletg"
        assert failing.calls == 1

    def test_broken_probe_is_skipped(self):
        resolver = VersionTagResolver()
        resolver.register(_BrokenProbeProvider("broken", "unused00", priority=90))
        resolver.register(_CountingProvider("module", "moduletg"))

        assert resolver.resolve("mylib").value == "moduletg"

    def test_scheme_filtering(self):
        """Test that providers only see units of their schemes."""
        resolver = VersionTagResolver()
        dir_only = _CountingProvider("dir", "dirtag00", priority=90, schemes=["dir"])
        resolver.register(dir_only)
        resolver.register(_CountingProvider("module", "moduletg", schemes=["module"]))

        assert resolver.resolve("mylib").value == "moduletg"
        assert dir_only.calls == 0

    def test_all_providers_failing_raises_with_attempts(self):
        """Test that the aggregated error lists every attempt."""
        resolver = VersionTagResolver()
        resolver.register(_FailingProvider("manifest", "unused00"))
        resolver.register(_FailingProvider("module", "unused00"))

        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve("mylib")

        assert exc_info.value.unit == "module:mylib"
        assert len(exc_info.value.attempts) == 2
        assert "manifest cannot see it" in str(exc_info.value)

    def test_no_providers_raises(self):
        with pytest.raises(ResolutionError, match="no providers"):
            VersionTagResolver().resolve("mylib")

    def test_invalid_reference_raises(self):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("any", "anytag00"))

        with pytest.raises(ResolutionError):
            resolver.resolve("")

    def test_registered_providers(self):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("a", "aaaaaaaa"))
        resolver.register(_CountingProvider("b", "bbbbbbbb"))

        assert resolver.registered_providers == ["a", "b"]


class TestCaching:
    """Tests for per-unit tag caching."""

    def test_tag_computed_once_per_unit(self):
        """Test that repeated resolution of one unit reuses the tag."""
        resolver = VersionTagResolver()
        provider = _CountingProvider("module", "moduletg")
        resolver.register(provider)

        resolver.resolve("mylib")
        resolver.resolve("mylib.widgets")
        resolver.resolve(UnitReference.parse("module:mylib"))

        assert provider.calls == 1

    def test_cache_can_be_disabled(self):
        resolver = VersionTagResolver(cache_tags=False)
        provider = _CountingProvider("module", "moduletg")
        resolver.register(provider)

        resolver.resolve("mylib")
        resolver.resolve("mylib")

        assert provider.calls == 2

    def test_clear_cache(self):
        resolver = VersionTagResolver()
        provider = _CountingProvider("module", "moduletg")
        resolver.register(provider)

        resolver.resolve("mylib")
        resolver.clear_cache()
        resolver.resolve("mylib")

        assert provider.calls == 2

    def test_failures_are_not_cached(self):
        resolver = VersionTagResolver()
        failing = _FailingProvider("module", "unused00")
        resolver.register(failing)

        for _ in range(2):
            with pytest.raises(ResolutionError):
                resolver.resolve("mylib")

        assert failing.calls == 2

    def test_concurrent_callers_agree(self, sample_package, resolver):
        """Test that concurrent resolution of one unit yields one tag."""
        results: list[AssetVersionTag] = []

        def worker() -> None:
            results.append(resolver.resolve(sample_package.name))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert len({tag.value for tag in results}) == 1


class TestResolveBuiltins:
    """Tests with the built-in providers."""

    def test_determinism_across_resolvers(self, sample_package):
        """Test that independent resolvers agree on unchanged content."""
        first = build_resolver(Settings(_env_file=None)).resolve(sample_package.name)
        second = build_resolver(Settings(_env_file=None)).resolve(sample_package.name)

        assert first == second

    def test_sensitivity_after_change(self, sample_package, resolver):
        """Test that a fresh resolution sees changed content."""
        before = resolver.resolve(sample_package.name)
        (sample_package.path / "__init__.py").write_text("class Widget:\n    x = 2\n")
        resolver.clear_cache()

        assert resolver.resolve(sample_package.name) != before

    def test_cached_tag_survives_change(self, sample_package, resolver):
        """Test that a loaded unit's tag is read-only for the resolver lifetime."""
        before = resolver.resolve(sample_package.name)
        (sample_package.path / "__init__.py").write_text("class Widget:\n    x = 2\n")

        assert resolver.resolve(sample_package.name) == before

    def test_granularity_assets_of_one_unit_share_tag(self, sample_package, resolver):
        """Test that a script and a stylesheet of one unit share a tag."""
        js_tag = resolver.resolve(f"{sample_package.name}.static")
        css_tag = resolver.resolve(sample_package.name)

        assert js_tag == css_tag

    def test_missing_unit_raises(self, resolver):
        """Test that unresolvable units raise rather than return a tag."""
        with pytest.raises(ResolutionError):
            resolver.resolve("stamp_definitely_missing_pkg")

    def test_directory_unit(self, asset_dir: Path, resolver):
        tag = resolver.resolve("dir:build")

        assert tag.provider == "directory"

    def test_resolve_async(self, sample_package, resolver):
        """Test resolution from asyncio code."""
        tag = asyncio.run(resolver.resolve_async(sample_package.name))

        assert tag == resolver.resolve(sample_package.name)


class TestBuildResolver:
    """Tests for build_resolver configuration."""

    def test_default_providers(self):
        resolver = build_resolver(Settings(_env_file=None))

        assert resolver.registered_providers == ["module", "distribution", "directory"]

    def test_pinned_and_manifest_providers(self, tmp_path: Path):
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"tags": {"module:mylib": "0123456789ab"}}))

        resolver = build_resolver(
            Settings(
                _env_file=None,
                asset_pinned_tag="ci-build-7",
                asset_manifest_path=str(manifest),
            )
        )

        assert resolver.registered_providers[:2] == ["pinned", "manifest"]
        assert resolver.resolve("mylib").value == "ci-build-7"

    def test_manifest_preferred_over_reflection(self, tmp_path: Path, sample_package):
        """Test that build-time tags beat run-time hashing."""
        manifest = tmp_path / "manifest.json"
        manifest.write_text(
            json.dumps({"tags": {f"module:{sample_package.name}": "0123456789ab"}})
        )

        resolver = build_resolver(
            Settings(_env_file=None, asset_manifest_path=str(manifest))
        )

        assert resolver.resolve(sample_package.name).value == "0123456789ab"

    def test_manifest_miss_falls_back_to_reflection(self, tmp_path: Path, sample_package):
        manifest = tmp_path / "manifest.json"
        manifest.write_text(json.dumps({"tags": {}}))

        resolver = build_resolver(
            Settings(_env_file=None, asset_manifest_path=str(manifest))
        )

        assert resolver.resolve(sample_package.name).provider == "module"

    def test_tag_length_setting(self, sample_package):
        resolver = build_resolver(Settings(_env_file=None, asset_tag_length=20))

        assert len(resolver.resolve(sample_package.name).value) == 20

    def test_hash_exclude_setting_reaches_hashing_providers(self):
        resolver = build_resolver(Settings(_env_file=None, asset_hash_exclude=["*.map"]))

        hashing = [p for p in resolver._providers if hasattr(p, "exclude")]

        assert [p.metadata.name for p in hashing] == ["module", "distribution", "directory"]
        assert all(p.exclude == ["*.map"] for p in hashing)

    def test_cache_setting(self):
        resolver = build_resolver(Settings(_env_file=None, asset_cache_tags=False))

        assert resolver.cache_tags is False

    def test_external_provider_module(self, tmp_path: Path, monkeypatch):
        """Test loading providers from configured modules."""
        (tmp_path / "stamp_ext_provider.py").write_text(
            "from assetstamp.providers import PinnedTagProvider\n"
            "\n"
            "def get_provider():\n"
            "    return PinnedTagProvider('external1', priority=10)\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        resolver = build_resolver(
            Settings(_env_file=None, provider_modules="stamp_ext_provider")
        )

        assert resolver.registered_providers[-1] == "pinned"

    def test_broken_external_provider_is_skipped(self, caplog):
        resolver = build_resolver(
            Settings(_env_file=None, provider_modules=["stamp_missing_provider_mod"])
        )

        assert resolver.registered_providers == ["module", "distribution", "directory"]
        assert "Failed to load provider module" in caplog.text


class TestDefaultResolver:
    """Tests for the global resolver."""

    def test_singleton(self):
        assert get_default_resolver() is get_default_resolver()

    def test_resolve_version_tag_uses_given_resolver(self):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("any", "giventag"))

        assert resolve_version_tag("mylib", resolver).value == "giventag"

    def test_resolve_version_tag_defaults_to_global(self, monkeypatch):
        resolver = VersionTagResolver()
        resolver.register(_CountingProvider("any", "globaltg"))
        monkeypatch.setattr("assetstamp.resolver._default_resolver", resolver)

        assert resolve_version_tag("mylib").value == "globaltg"
