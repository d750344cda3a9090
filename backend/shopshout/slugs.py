"""
SEO-friendly product URLs.

Two path formats are live on the site:

    marker:      /product/wireless-bluetooth-headphones--id--550e8400-e29b-41d4-a716-446655440000
    short_hash:  /product/wireless-bluetooth-headphones-550e8400

plus the legacy query form `product.html?id=...`, which is what local
development hosts always get.
"""
import logging
import re
from typing import Optional
from urllib.parse import quote, urlsplit

logger = logging.getLogger(__name__)

MARKER = "marker"
SHORT_HASH = "short_hash"

ID_MARKER = "--id--"
SLUG_MAX_LENGTH = 50
SHORT_HASH_LENGTH = 8
DEFAULT_SLUG = "product"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SHORT_HASH = re.compile(r"[a-f0-9]{8}", re.IGNORECASE)
_PRODUCT_PATH = re.compile(r"/product/([a-z0-9-]+)", re.IGNORECASE)
_LOCAL_HOSTNAMES = {"localhost", "127.0.0.1", "::1"}


def slugify(title) -> str:
    if not isinstance(title, str) or not title.strip():
        return DEFAULT_SLUG
    slug = _NON_ALNUM.sub("-", title.lower().strip()).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or DEFAULT_SLUG


def is_local_host(host: Optional[str]) -> bool:
    """True for loopback hostnames or any host carrying an explicit port."""
    if not host:
        return False
    parts = urlsplit(f"//{host}")
    try:
        has_port = parts.port is not None
    except ValueError:
        # "localhost:abc" still spells out a port
        has_port = True
    return has_port or (parts.hostname or "") in _LOCAL_HOSTNAMES


def query_product_url(product_id, base_url: str = "") -> str:
    path = f"product.html?id={quote(str(product_id or 'unknown'), safe='')}"
    return f"{base_url}/{path}" if base_url else path


def build_product_url(
    product_id: str,
    title: Optional[str],
    *,
    scheme: str = MARKER,
    base_url: str = "",
    host: Optional[str] = None,
) -> str:
    if is_local_host(host):
        return query_product_url(product_id)

    try:
        if not product_id or not isinstance(product_id, str):
            logger.warning("Invalid product id %r, using query URL", product_id)
            return query_product_url(product_id, base_url)

        slug = slugify(title)
        if scheme == MARKER:
            return f"{base_url}/product/{slug}{ID_MARKER}{product_id}"
        if scheme == SHORT_HASH:
            return f"{base_url}/product/{slug}-{product_id[:SHORT_HASH_LENGTH]}"
        raise ValueError(f"Unknown product URL scheme: {scheme!r}")
    except Exception:
        logger.warning("Error generating SEO URL for %r, using query URL", product_id, exc_info=True)
        return query_product_url(product_id, base_url)


def parse_marker_id(slug) -> Optional[str]:
    if not isinstance(slug, str) or not slug:
        return None
    index = slug.find(ID_MARKER)
    if index == -1:
        return None
    return slug[index + len(ID_MARKER):] or None


def parse_short_hash_id(slug) -> Optional[str]:
    if not isinstance(slug, str) or not slug:
        return None
    candidate = slug.split("-")[-1]
    return candidate if _SHORT_HASH.fullmatch(candidate) else None


def parse_product_id(slug, scheme: str = MARKER) -> Optional[str]:
    if scheme == SHORT_HASH:
        return parse_short_hash_id(slug)
    return parse_marker_id(slug)


def resolve_product_id(slug) -> Optional[str]:
    """Try both formats; the first one that yields an id wins."""
    return parse_marker_id(slug) or parse_short_hash_id(slug)


def product_slug_from_path(path) -> Optional[str]:
    if not isinstance(path, str):
        return None
    match = _PRODUCT_PATH.search(path)
    return match.group(1) if match else None
