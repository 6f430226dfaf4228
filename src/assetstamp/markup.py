"""
Stamp version tags into static markup.

Rewrites ``href``/``src`` attributes that reference local script and style
files so they carry the unit's version tag. Useful for HTML that is served
as-is rather than rendered through templates.
"""

import logging
import re
from html import unescape
from pathlib import Path
from typing import Optional

from assetstamp.tags import AssetVersionTag
from assetstamp.urls import compose_versioned_url

logger = logging.getLogger(__name__)

ASSET_ATTR_RE = re.compile(
    r"""(?P<prefix>\b(?:href|src)\s*=\s*(?P<quote>["']))"""
    r"""(?P<url>[^"'#?]+\.(?:css|js|mjs)(?:\?[^"'#]*)?(?:#[^"']*)?)"""
    r"""(?P=quote)""",
    re.IGNORECASE,
)

_EXTERNAL_PREFIXES = ("http://", "https://", "//", "data:")


def is_local_asset(url: str) -> bool:
    """True for relative or root-relative URLs."""
    return not url.lower().startswith(_EXTERNAL_PREFIXES)


def stamp_markup(
    html: str, tag: AssetVersionTag | str, param: Optional[str] = None
) -> str:
    """
    Return markup with local .css/.js/.mjs references versioned.

    External URLs are left untouched; existing version parameters are
    replaced rather than duplicated. Attribute values are unescaped before
    composing, and `&amp;` separators are written back if the source used
    them.
    """
    tag = AssetVersionTag.coerce(tag)

    def replace(match: re.Match) -> str:
        raw = match.group("url")
        if not is_local_asset(raw):
            return match.group(0)
        stamped = compose_versioned_url(unescape(raw), tag, param)
        if "&amp;" in raw:
            stamped = stamped.replace("&", "&amp;")
        return f"{match.group('prefix')}{stamped}{match.group('quote')}"

    return ASSET_ATTR_RE.sub(replace, html)


def stamp_directory(
    root: Path,
    tag: AssetVersionTag | str,
    pattern: str = "*.html",
    param: Optional[str] = None,
    dry_run: bool = False,
) -> list[Path]:
    """
    Stamp every markup file under root matching pattern.

    Args:
        root: Directory to scan recursively
        tag: Version tag to apply
        pattern: Glob for markup files
        param: Query parameter name
        dry_run: Report changes without writing files

    Returns:
        Files whose content changed (or would change), sorted

    Raises:
        FileNotFoundError: If root is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")

    changed: list[Path] = []
    for path in sorted(root.rglob(pattern)):
        if not path.is_file():
            continue
        text = path.read_text(encoding="utf-8")
        stamped = stamp_markup(text, tag, param)
        if stamped == text:
            continue
        changed.append(path)
        if not dry_run:
            path.write_text(stamped, encoding="utf-8")
            logger.info(f"Stamped {path}")

    return changed
