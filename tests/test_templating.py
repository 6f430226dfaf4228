"""Tests for Jinja2 asset versioning helpers."""

import pytest
from jinja2 import DictLoader, Environment

from assetstamp.exceptions import ResolutionError
from assetstamp.providers import PinnedTagProvider
from assetstamp.resolver import VersionTagResolver
from assetstamp.templating import setup_asset_versioning


@pytest.fixture
def pinned_resolver() -> VersionTagResolver:
    resolver = VersionTagResolver()
    resolver.register(PinnedTagProvider("build42"))
    return resolver


def render(env: Environment, source: str) -> str:
    return env.from_string(source).render()


class TestSetupAssetVersioning:
    """Tests for setup_asset_versioning."""

    def test_registers_helpers(self, pinned_resolver):
        env = setup_asset_versioning(Environment(), pinned_resolver, default_unit="mylib")

        assert "asset_url" in env.globals
        assert "asset_version" in env.globals
        assert "versioned" in env.filters

    def test_asset_url_global(self, pinned_resolver):
        env = setup_asset_versioning(Environment(), pinned_resolver, default_unit="mylib")

        assert render(env, "{{ asset_url('/static/app.js') }}") == "/static/app.js?version=build42"

    def test_static_prefix_applies_to_relative_paths(self, pinned_resolver):
        env = setup_asset_versioning(
            Environment(), pinned_resolver, default_unit="mylib", static_prefix="/static/"
        )

        assert render(env, "{{ asset_url('css/app.css') }}") == "/static/css/app.css?version=build42"
        assert render(env, "{{ asset_url('/other.css') }}") == "/other.css?version=build42"

    def test_versioned_filter(self, pinned_resolver):
        env = setup_asset_versioning(Environment(), pinned_resolver, default_unit="mylib")

        assert render(env, "{{ '/app.js?x=1' | versioned }}") == "/app.js?x=1&version=build42"

    def test_asset_version_global(self, pinned_resolver):
        env = setup_asset_versioning(Environment(), pinned_resolver, default_unit="mylib")

        assert render(env, "{{ asset_version() }}") == "build42"

    def test_explicit_unit_in_template(self, sample_package, resolver):
        """Test that templates can name the owning unit."""
        env = setup_asset_versioning(Environment(), resolver)
        expected = resolver.resolve(sample_package.name).value

        output = render(env, f"{{{{ asset_version('{sample_package.name}') }}}}")

        assert output == expected

    def test_missing_unit_raises(self, pinned_resolver):
        env = setup_asset_versioning(Environment(), pinned_resolver)

        with pytest.raises(ValueError, match="without a unit"):
            render(env, "{{ asset_url('/app.js') }}")

    def test_unresolvable_unit_fails_render(self):
        env = setup_asset_versioning(Environment(), VersionTagResolver(), default_unit="mylib")

        with pytest.raises(ResolutionError):
            render(env, "{{ asset_url('/app.js') }}")

    def test_fallback_renders_unversioned(self):
        env = setup_asset_versioning(
            Environment(),
            VersionTagResolver(),
            default_unit="mylib",
            fallback_to_unversioned=True,
        )

        assert render(env, "{{ asset_url('/app.js') }}") == "/app.js"

    def test_page_template(self, pinned_resolver):
        env = Environment(
            loader=DictLoader(
                {
                    "page.html": (
                        '<link rel="stylesheet" href="{{ asset_url(\'/static/app.css\') }}">'
                        '<script src="{{ \'/static/app.js\' | versioned }}"></script>'
                    )
                }
            )
        )
        setup_asset_versioning(env, pinned_resolver, default_unit="mylib")

        html = env.get_template("page.html").render()

        assert 'href="/static/app.css?version=build42"' in html
        assert 'src="/static/app.js?version=build42"' in html
