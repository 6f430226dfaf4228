"""Shared FastAPI dependencies."""

from assetstamp.resolver import VersionTagResolver, get_default_resolver


def get_resolver() -> VersionTagResolver:
    """Resolver used by request handlers (overridable in tests)."""
    return get_default_resolver()
