"""
Link canonicalization for result deduplication.

The canonical key is only used to decide whether two hits point at the same
resource. The original link is what clients see.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

_SCHEME_WWW_RE = re.compile(r"^(?:https?://)?(?:www\.)?", re.IGNORECASE)


def canonicalize(link: str) -> str:
    """
    Normalize a result link into a dedup key.

    Query string and fragment are dropped, scheme and host are lower-cased,
    the path is percent-decoded, a leading ``www.`` host label is removed
    and exactly one trailing slash is stripped. Anything that does not parse
    as an absolute URL is used verbatim. Never raises.

    >>> canonicalize("https://www.example.com/page?x=1#y")
    'https://example.com/page'
    >>> canonicalize("https://example.com/page/")
    'https://example.com/page'
    """
    if not isinstance(link, str):
        return link

    try:
        parts = urlsplit(link)
        if not parts.scheme or not parts.netloc:
            return link

        netloc = parts.netloc.lower()
        if netloc.startswith("www."):
            netloc = netloc[4:]

        key = unquote(urlunsplit((parts.scheme.lower(), netloc, parts.path, "", "")))
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to normalize URL {link!r}: {e}")
        return link

    if key.endswith("/"):
        key = key[:-1]
    return key


def display_link(link: str | None) -> str:
    """Host part of a link without scheme or ``www.``, for display."""
    if not link:
        return ""
    return _SCHEME_WWW_RE.sub("", link, count=1).split("/")[0]
