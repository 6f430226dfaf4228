"""
Compiled unit references.

A unit reference names the deployable unit whose content determines a
version tag. Callers may pass modules, classes, distributions, paths or
strings; UnitReference.parse() normalises them into a scheme and a name so
that every asset of the same unit shares one cache key.
"""

import os
import re
import types
from dataclasses import dataclass, field
from importlib.metadata import Distribution
from pathlib import Path
from typing import Any

from assetstamp.exceptions import ResolutionError

MODULE = "module"
DISTRIBUTION = "dist"
DIRECTORY = "dir"

SCHEMES = (MODULE, DISTRIBUTION, DIRECTORY)

ENTRY_POINT_MODULE = "__main__"

_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def normalize_distribution_name(name: str) -> str:
    """Normalize a project name the way package indexes do (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


def top_level_package(module_name: str) -> str:
    """Return the top-level package of a dotted module name."""
    return module_name.partition(".")[0]


def _looks_like_path(value: str) -> bool:
    return (
        "/" in value
        or "\\" in value
        or value.startswith(".")
        or value.startswith("~")
    )


@dataclass(frozen=True)
class UnitReference:
    """
    Normalised reference to a compiled unit.

    Attributes:
        scheme: Kind of unit ("module", "dist" or "dir")
        name: Scheme-specific name (top-level package, project name, path)
        target: The original object the reference was built from, if any
    """

    scheme: str
    name: str
    target: Any = field(default=None, compare=False, repr=False)

    @property
    def key(self) -> str:
        """Canonical cache key, e.g. ``module:mylib``."""
        return f"{self.scheme}:{self.name}"

    def __str__(self) -> str:
        return self.key

    @classmethod
    def entry_point(cls) -> "UnitReference":
        """Reference to the unit containing the application entry point."""
        return cls(scheme=MODULE, name=ENTRY_POINT_MODULE)

    @classmethod
    def parse(cls, reference: Any) -> "UnitReference":
        """
        Normalise any supported unit reference.

        Args:
            reference: A UnitReference, module, Distribution, path, string,
                or any object with a ``__module__`` attribute

        Returns:
            UnitReference for the compiled unit containing the reference

        Raises:
            ResolutionError: If the reference cannot name a compiled unit
        """
        if isinstance(reference, UnitReference):
            return reference

        if isinstance(reference, types.ModuleType):
            return cls(
                scheme=MODULE,
                name=top_level_package(reference.__name__),
                target=reference,
            )

        if isinstance(reference, Distribution):
            metadata = reference.metadata
            project = metadata["Name"] if metadata is not None else None
            if not project:
                raise ResolutionError(repr(reference), "distribution has no name")
            return cls(
                scheme=DISTRIBUTION,
                name=normalize_distribution_name(project),
                target=reference,
            )

        if isinstance(reference, os.PathLike):
            return cls._directory(os.fspath(reference), reference)

        if isinstance(reference, str):
            return cls._from_string(reference)

        module_name = getattr(reference, "__module__", None)
        if isinstance(module_name, str) and module_name and module_name != "builtins":
            return cls(
                scheme=MODULE,
                name=top_level_package(module_name),
                target=reference,
            )

        raise ResolutionError(repr(reference), "unrecognized unit reference")

    @classmethod
    def _from_string(cls, value: str) -> "UnitReference":
        text = value.strip()
        if not text:
            raise ResolutionError(repr(value), "unit reference is empty")

        scheme, sep, rest = text.partition(":")
        if sep and scheme in SCHEMES:
            rest = rest.strip()
            if not rest:
                raise ResolutionError(text, "unit reference has no name")
            if scheme == DIRECTORY:
                return cls._directory(rest, value)
            if scheme == DISTRIBUTION:
                return cls(
                    scheme=DISTRIBUTION,
                    name=normalize_distribution_name(rest),
                    target=value,
                )
            if not _DOTTED_NAME.match(rest):
                raise ResolutionError(text, "invalid module name")
            return cls(scheme=MODULE, name=top_level_package(rest), target=value)

        if _looks_like_path(text):
            return cls._directory(text, value)

        if _DOTTED_NAME.match(text):
            return cls(scheme=MODULE, name=top_level_package(text), target=value)

        raise ResolutionError(text, "unrecognized unit reference")

    @classmethod
    def _directory(cls, raw: str, target: Any) -> "UnitReference":
        # Relative paths stay relative; providers resolve them against their root
        path = Path(raw).expanduser()
        return cls(scheme=DIRECTORY, name=path.as_posix(), target=target)
