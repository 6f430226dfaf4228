"""
Provider metadata definitions.

This module defines the metadata structure that unit identity providers use
to declare which unit schemes they handle and how strongly they should be
preferred.
"""

from dataclasses import dataclass
from typing import List

ANY_SCHEME = "*"


@dataclass
class ProviderMetadata:
    """
    Metadata about a unit identity provider.

    Attributes:
        name: Provider identifier (e.g., 'module', 'manifest')
        version: Provider version using semantic versioning (e.g., '1.0.0')
        schemes: Unit schemes handled (e.g., ['module']); '*' matches any
        priority: Selection priority (0-100, higher = preferred). Used when
                  several providers can resolve the same unit.
        description: Optional human-readable description

    Example:
        >>> metadata = ProviderMetadata(
        ...     name="git",
        ...     version="1.0.0",
        ...     schemes=["dir"],
        ...     priority=60,
        ... )
    """

    name: str
    version: str
    schemes: List[str]
    priority: int = 50
    description: str = ""

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not self.name:
            raise ValueError("Provider name cannot be empty")

        if not self.version:
            raise ValueError("Provider version cannot be empty")

        if not self.schemes:
            raise ValueError("Provider must support at least one scheme")

        if not 0 <= self.priority <= 100:
            raise ValueError("Priority must be between 0 and 100")

        self.schemes = [scheme.lower() for scheme in self.schemes]

    def supports_scheme(self, scheme: str) -> bool:
        """
        Check if provider handles a given unit scheme.

        Args:
            scheme: Unit scheme to check (e.g., 'module')

        Returns:
            True if the scheme is handled, False otherwise
        """
        return ANY_SCHEME in self.schemes or scheme.lower() in self.schemes
