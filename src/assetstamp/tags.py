"""
Asset version tags.

An AssetVersionTag is the opaque token appended to asset URLs. Tags derived
from content are a prefix of a SHA-256 hex digest, so they are URL-safe,
deterministic for identical content and change whenever the content does.
"""

import re
from dataclasses import dataclass, field

# RFC 3986 unreserved characters
_TAG_PATTERN = re.compile(r"^[A-Za-z0-9._~-]+$")

MIN_TAG_LENGTH = 8
MAX_TAG_LENGTH = 64


@dataclass(frozen=True)
class AssetVersionTag:
    """
    Opaque, URL-safe identifier of a compiled unit's content.

    Attributes:
        value: The token placed in the query string
        unit: Canonical key of the unit the tag was resolved for
        provider: Name of the provider that produced the tag

    Only ``value`` takes part in equality and hashing: two assets of the
    same unit compare equal regardless of how their tags were obtained.
    """

    value: str
    unit: str = field(default="", compare=False)
    provider: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Version tag cannot be empty")
        if not _TAG_PATTERN.match(self.value):
            raise ValueError(
                f"Version tag must only contain URL-safe characters: {self.value!r}"
            )

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_digest(
        cls, digest: str, length: int = 12, unit: str = "", provider: str = ""
    ) -> "AssetVersionTag":
        """
        Build a tag from a hex digest, keeping the first ``length`` characters.

        Raises:
            ValueError: If length is outside 8..64 or the digest is too short
        """
        if not MIN_TAG_LENGTH <= length <= MAX_TAG_LENGTH:
            raise ValueError(
                f"Tag length must be between {MIN_TAG_LENGTH} and {MAX_TAG_LENGTH}"
            )
        if len(digest) < length:
            raise ValueError(f"Digest shorter than requested tag length {length}")
        return cls(value=digest[:length].lower(), unit=unit, provider=provider)

    @classmethod
    def coerce(cls, tag: "AssetVersionTag | str") -> "AssetVersionTag":
        """Accept either a tag or a plain string token."""
        if isinstance(tag, AssetVersionTag):
            return tag
        return cls(value=tag)
