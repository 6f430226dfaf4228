"""
Import-system identity provider.

Locates a Python package through the import system (without importing it)
and derives its tag from the content of its source files.
"""

import importlib.util
import logging
import sys
import types
from importlib.machinery import ModuleSpec
from pathlib import Path
from typing import Optional, Sequence

from assetstamp.config import settings
from assetstamp.exceptions import ResolutionError
from assetstamp.providers.metadata import ProviderMetadata
from assetstamp.tags import AssetVersionTag
from assetstamp.units import ENTRY_POINT_MODULE, MODULE, UnitReference, top_level_package
from assetstamp.utils.hashing import calculate_tree_hash

logger = logging.getLogger(__name__)


class ModuleProvider:
    """
    Resolve ``module:`` units by hashing the package's files.

    The compiled unit of a module is its top-level package, so every module
    of ``mylib`` shares the tag of ``mylib``. Single-file modules hash just
    that file. Built-in and frozen modules have no files and cannot be
    resolved.
    """

    def __init__(
        self,
        tag_length: Optional[int] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> None:
        self.tag_length = tag_length or settings.asset_tag_length
        self.exclude = list(
            exclude if exclude is not None else settings.asset_hash_exclude
        )
        self._metadata = ProviderMetadata(
            name="module",
            version="1.0.0",
            schemes=[MODULE],
            priority=50,
            description="Hashes the source files of an importable package",
        )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._metadata

    def can_resolve(self, unit: UnitReference) -> bool:
        return unit.scheme == MODULE

    def identity_of(self, unit: UnitReference) -> AssetVersionTag:
        paths = self.locate(unit)
        try:
            digest = calculate_tree_hash(paths, self.exclude)
        except OSError as e:
            raise ResolutionError(unit.key, f"cannot read package files: {e}") from e

        logger.debug(f"Hashed {unit.key} from {[str(p) for p in paths]}")
        return AssetVersionTag.from_digest(
            digest, self.tag_length, unit=unit.key, provider=self._metadata.name
        )

    def locate(self, unit: UnitReference) -> list[Path]:
        """
        Find the files and directories making up a module unit.

        Raises:
            ResolutionError: If the module cannot be found or has no files
        """
        if unit.name == ENTRY_POINT_MODULE:
            return self._locate_entry_point(unit)

        module = sys.modules.get(unit.name)
        if module is None and isinstance(unit.target, types.ModuleType):
            if top_level_package(unit.target.__name__) == unit.name:
                module = unit.target

        spec: Optional[ModuleSpec] = getattr(module, "__spec__", None)
        if spec is None and module is None:
            try:
                spec = importlib.util.find_spec(unit.name)
            except (ImportError, ValueError) as e:
                raise ResolutionError(unit.key, f"import lookup failed: {e}") from e

        if spec is None:
            module_file = getattr(module, "__file__", None)
            if module_file and Path(module_file).is_file():
                return [Path(module_file)]
            raise ResolutionError(unit.key, "module not found")

        return self._paths_from_spec(unit, spec)

    def _paths_from_spec(self, unit: UnitReference, spec: ModuleSpec) -> list[Path]:
        locations = spec.submodule_search_locations
        if locations:
            directories = sorted(
                {Path(location) for location in locations if Path(location).is_dir()}
            )
            if directories:
                return directories

        if spec.has_location and spec.origin and Path(spec.origin).is_file():
            return [Path(spec.origin)]

        raise ResolutionError(
            unit.key, f"module has no source location (origin={spec.origin!r})"
        )

    def _locate_entry_point(self, unit: UnitReference) -> list[Path]:
        main = sys.modules.get(ENTRY_POINT_MODULE)
        if main is None:
            raise ResolutionError(unit.key, "no entry point module loaded")

        spec: Optional[ModuleSpec] = getattr(main, "__spec__", None)
        if spec is not None and spec.name and spec.name != ENTRY_POINT_MODULE:
            # Started with ``python -m``: the unit is the package that was run
            package = UnitReference(scheme=MODULE, name=top_level_package(spec.name))
            return self.locate(package)

        main_file = getattr(main, "__file__", None)
        if main_file and Path(main_file).is_file():
            return [Path(main_file)]

        raise ResolutionError(unit.key, "entry point has no file (interactive session?)")
