"""
Page-level SEO for a single product: title, meta description, canonical URL,
Open Graph / Twitter tags and schema.org JSON-LD.

Pure data in, data out; the frontend writes the result into <head>.
"""
from datetime import timedelta
from typing import Any, Dict, Optional

from .feeds import DEFAULT_AVAILABILITY
from .models import ProductRecord, ProductSeoMeta
from .slugs import MARKER, build_product_url
from .xml_utils import Clock, format_price, strip_html, utc_now

SITE_NAME = "ShopShout"
OFFER_VALID_DAYS = 30


def truncate(text, max_length: int = 160) -> str:
    cleaned = strip_html(text, limit=None)
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[: max_length - 3] + "..."


def _put(tags: Dict[str, str], key: str, value) -> None:
    if value:
        tags[key] = str(value)


def _page_price(product: ProductRecord) -> Optional[float]:
    # Product pages show any sale price, discounted or not; the feed is stricter.
    return product.sale_price or product.price


def _structured_data(product: ProductRecord, url: str, clock: Clock) -> Dict[str, Any]:
    price = _page_price(product)
    availability = product.availability or DEFAULT_AVAILABILITY
    valid_until = (clock() + timedelta(days=OFFER_VALID_DAYS)).strftime("%Y-%m-%d")
    return {
        "@context": "https://schema.org/",
        "@type": "Product",
        "name": product.title,
        "image": product.image or "",
        "description": truncate(product.description_english or product.description or product.title, 500),
        "brand": {
            "@type": "Brand",
            "name": product.store_name or product.brand or "Unknown",
        },
        "offers": {
            "@type": "Offer",
            "url": url,
            "priceCurrency": product.currency_code,
            "price": f"{price:.2f}" if price else "0.00",
            "availability": (
                "https://schema.org/InStock" if availability == "in stock" else "https://schema.org/OutOfStock"
            ),
            "priceValidUntil": valid_until,
        },
    }


def build_product_meta(
    product: ProductRecord,
    *,
    base_url: str,
    scheme: str = MARKER,
    clock: Clock = utc_now,
    host: Optional[str] = None,
) -> ProductSeoMeta:
    if product.hash_id:
        url = build_product_url(product.hash_id, product.title, scheme=scheme, base_url=base_url, host=host)
    else:
        url = base_url

    price = _page_price(product)
    price_text = format_price(price, product.currency_code) or ""
    title = f"{product.title} - {price_text} | {SITE_NAME}" if price_text else f"{product.title} | {SITE_NAME}"

    source = product.description_english or product.description or product.title
    if price_text:
        description = f"Get {product.title} for {price_text}. {truncate(source, 120)}"
    else:
        description = truncate(source, 160)

    brand = product.store_name or product.brand

    meta: Dict[str, str] = {}
    _put(meta, "description", description)
    _put(meta, "twitter:card", "summary_large_image")
    _put(meta, "twitter:title", title)
    _put(meta, "twitter:description", description)
    if product.image:
        _put(meta, "twitter:image", product.image)
        _put(meta, "twitter:image:alt", product.title)

    properties: Dict[str, str] = {}
    _put(properties, "og:type", "product")
    _put(properties, "og:title", title)
    _put(properties, "og:description", description)
    _put(properties, "og:url", url)
    _put(properties, "og:site_name", SITE_NAME)
    if product.image:
        _put(properties, "og:image", product.image)
        _put(properties, "og:image:alt", product.title)
    if price:
        _put(properties, "product:price:amount", f"{price:.2f}")
        _put(properties, "product:price:currency", product.currency_code)
    _put(properties, "product:brand", brand)

    return ProductSeoMeta(
        title=title,
        description=description,
        canonical_url=url,
        meta=meta,
        properties=properties,
        structured_data=_structured_data(product, url, clock),
    )
