"""
Turn user-supplied map links into embeddable preview URLs.

People paste all sorts of links: share links, place pages, search results,
coordinates, or plain addresses. Rules are tried in order and the first match
wins; anything unrecognised becomes a text search for the raw input.
"""

import re
from urllib.parse import parse_qs, quote, unquote, urlsplit

SEARCH_EMBED = "https://www.google.com/maps?q={query}&output=embed"
COORDS_EMBED = "https://www.google.com/maps?q={lat},{lng}&ll={lat},{lng}&z={zoom}&output=embed"
DEFAULT_ZOOM = 14

SHORT_LINK_HOSTS = ("maps.app.goo.gl",)
SHORT_LINK_EXACT_HOSTS = ("goo.gl",)

AT_COORDS_RE = re.compile(r"@(-?\d+\.\d+),(-?\d+\.\d+)")
QUERY_COORDS_RE = re.compile(r"(-?\d+\.\d+),\s*(-?\d+\.\d+)")


def build_search_embed(query: str) -> str:
    # Escape everything but unreserved characters, spaces as %20
    return SEARCH_EMBED.format(query=quote(query, safe="-_.!~*'()", errors="replace"))


def build_coords_embed(lat: str, lng: str, zoom: int = DEFAULT_ZOOM) -> str:
    return COORDS_EMBED.format(lat=lat, lng=lng, zoom=zoom)


def _is_short_link(host: str) -> bool:
    return any(h in host for h in SHORT_LINK_HOSTS) or host in SHORT_LINK_EXACT_HOSTS


def _embed_from_query_value(value: str) -> str:
    coords = QUERY_COORDS_RE.search(value)
    if coords:
        return build_coords_embed(coords.group(1), coords.group(2))
    return build_search_embed(value)


def _embed_from_url(raw: str) -> str:
    parts = urlsplit(raw)
    if not parts.scheme:
        raise ValueError(f"not an absolute URL: {raw!r}")

    path = parts.path
    host = (parts.hostname or "").lower()

    # 1. Already an embed URL
    if "/maps/embed" in path:
        return raw

    # 2. @lat,lng in the path
    at_coords = AT_COORDS_RE.search(path)
    if at_coords:
        return build_coords_embed(at_coords.group(1), at_coords.group(2))

    # 3. Short links can't be resolved offline; search for the link itself
    if _is_short_link(host):
        return build_search_embed(raw)

    # 4. ?q= / ?query= on a maps host
    if "google" in host:
        params = parse_qs(parts.query, keep_blank_values=True)
        for key in ("q", "query"):
            if key in params:
                return _embed_from_query_value(params[key][0])

    # 5. /place/<name>/
    if "google" in host and "/place/" in path:
        place = path.split("/place/", 1)[1].split("/")[0]
        if place:
            return build_search_embed(unquote(place))

    return build_search_embed(raw)


def to_embed_url(raw_link: str) -> str:
    """
    Normalize a map link for inline preview.

    Never raises: malformed input falls back to a text search embed.

    Args:
        raw_link: Whatever the user pasted

    Returns:
        Embed URL, or "" for a blank link

    Examples:
        >>> to_embed_url("https://www.google.com/maps?q=6.9271,79.8612")
        'https://www.google.com/maps?q=6.9271,79.8612&ll=6.9271,79.8612&z=14&output=embed'
        >>> to_embed_url("Kandy")
        'https://www.google.com/maps?q=Kandy&output=embed'
    """
    raw = str(raw_link).strip() if raw_link is not None else ""
    if not raw:
        return ""

    try:
        return _embed_from_url(raw)
    except Exception:
        return build_search_embed(raw)
