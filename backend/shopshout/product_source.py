import logging
import re
from typing import Any, List, Optional

from supabase import Client

from .models import ProductRecord
from .slugs import SHORT_HASH_LENGTH

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "cleaned_products"
STORES_TABLE = "cleaned_stores"

SITEMAP_COLUMNS = "hash_id, title, updated_at, image, store_id"
FEED_COLUMNS = (
    "hash_id, title, description, description_english, price, sale_price, "
    "currency, image, brand, updated_at, availability, store_id"
)
PRODUCT_PAGE_COLUMNS = (
    "hash_id, product_id, title, description, description_english, price, sale_price, "
    "image, brand, currency, availability, store_id, updated_at"
)

_UUID = re.compile(r"^[0-9a-f-]{36}$", re.IGNORECASE)
_SHORT_HASH = re.compile(r"^[0-9a-f]{%d}$" % SHORT_HASH_LENGTH, re.IGNORECASE)


class ProductSourceError(RuntimeError):
    """The product query failed; the cause is chained and logged, never shown to clients."""


def _rows(resp: Any) -> List[dict]:
    error = getattr(resp, "error", None)
    if error:
        raise ProductSourceError(f"Supabase error: {error}")
    return getattr(resp, "data", None) or []


def _published(client: Client, columns: str):
    return (
        client.table(PRODUCTS_TABLE)
        .select(columns)
        .eq("status", "published")
        .not_.is_("store_id", "null")
    )


def fetch_published_products(client: Client, columns: str = FEED_COLUMNS) -> List[ProductRecord]:
    """
    Published products that have a store and an image, most recently updated first.
    """
    try:
        resp = (
            _published(client, columns)
            .not_.is_("image", "null")
            .order("updated_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise ProductSourceError("Product query failed") from exc
    rows = _rows(resp)
    logger.info("Fetched %d published products", len(rows))
    return [ProductRecord.model_validate(row) for row in rows]


def _store_name(client: Client, store_id) -> Optional[str]:
    try:
        resp = client.table(STORES_TABLE).select("cleaned_name").eq("id", store_id).limit(1).execute()
        rows = _rows(resp)
    except Exception:
        logger.warning("Store lookup failed for store_id=%s", store_id, exc_info=True)
        return None
    return rows[0].get("cleaned_name") if rows else None


def fetch_product(client: Client, id_or_hash: str) -> Optional[ProductRecord]:
    """
    Look up one published product by hash_id, product_id (UUIDs) or
    hash_id prefix (8-char short hashes from short_hash URLs).
    """
    if not id_or_hash:
        return None
    query = _published(client, PRODUCT_PAGE_COLUMNS)
    if _UUID.match(id_or_hash):
        query = query.or_(f"product_id.eq.{id_or_hash},hash_id.eq.{id_or_hash}")
    elif _SHORT_HASH.match(id_or_hash):
        query = query.like("hash_id", f"{id_or_hash}%")
    else:
        query = query.eq("hash_id", id_or_hash)

    try:
        resp = query.limit(1).execute()
    except Exception as exc:
        raise ProductSourceError("Product lookup failed") from exc
    rows = _rows(resp)
    if not rows:
        return None

    product = ProductRecord.model_validate(rows[0])
    if product.store_id is not None:
        product.store_name = _store_name(client, product.store_id)
    return product
