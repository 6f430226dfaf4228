"""
Pytest configuration and fixtures for assetstamp tests.

This module provides shared fixtures: throwaway importable packages,
built asset directories and fresh resolvers.
"""

import logging
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Generator

import pytest

from assetstamp.config import Settings
from assetstamp.providers import DirectoryProvider, DistributionProvider, ModuleProvider
from assetstamp.resolver import VersionTagResolver, reset_default_resolver


@dataclass
class SamplePackage:
    """An importable package written to a temporary directory."""

    name: str
    path: Path
    site: Path


def write_package(site: Path, name: str) -> Path:
    """Write a small package with Python sources and shipped static assets."""
    package = site / name
    (package / "static").mkdir(parents=True)
    (package / "__init__.py").write_text("class Widget:\n    pass\n")
    (package / "widgets.py").write_text("def render():\n    return 'widget'\n")
    (package / "static" / "widget.js").write_text("export const widget = 1;\n")
    (package / "static" / "widget.css").write_text(".widget { color: red; }\n")
    return package


@pytest.fixture
def sample_package(tmp_path: Path, monkeypatch) -> Generator[SamplePackage, None, None]:
    """
    Create a uniquely named package and put it on sys.path.

    The package is removed from sys.modules afterwards so tests never see
    each other's imports.
    """
    name = f"stampsample_{uuid.uuid4().hex[:8]}"
    site = tmp_path / "site"
    package = write_package(site, name)
    monkeypatch.syspath_prepend(str(site))

    yield SamplePackage(name=name, path=package, site=site)

    for module_name in list(sys.modules):
        if module_name == name or module_name.startswith(f"{name}."):
            sys.modules.pop(module_name, None)


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """A built asset directory with a script and a stylesheet."""
    build = tmp_path / "build"
    (build / "js").mkdir(parents=True)
    (build / "css").mkdir()
    (build / "js" / "app.js").write_text("console.log('app');\n")
    (build / "css" / "app.css").write_text("body { margin: 0; }\n")
    return build


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment."""
    return Settings(
        _env_file=None,
        asset_root=str(tmp_path),
        log_file_enabled=False,
    )


@pytest.fixture
def resolver(tmp_path: Path) -> VersionTagResolver:
    """A resolver with the reflection providers and no manifest or pin."""
    resolver = VersionTagResolver()
    resolver.register(ModuleProvider(tag_length=12))
    resolver.register(DistributionProvider(tag_length=12))
    resolver.register(DirectoryProvider(root=tmp_path, tag_length=12))
    return resolver


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Drop the global resolver and assetstamp log handlers between tests."""
    reset_default_resolver()
    yield
    reset_default_resolver()

    logger = logging.getLogger("assetstamp")
    for handler in list(logger.handlers):
        if getattr(handler, "_assetstamp_handler", False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
