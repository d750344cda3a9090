"""
XML documents for crawlers: the sitemap and the Google Shopping product feed.

Both builders take rows already filtered and ordered by the query
(see product_source) and make a single pass over them.
"""
from typing import Any, Dict, Iterable, List, Sequence, Union

from .models import PageEntry, ProductRecord
from .slugs import MARKER, build_product_url
from .xml_utils import (
    Clock,
    escape_xml,
    format_price,
    format_rfc822,
    format_sitemap_date,
    strip_html,
    utc_now,
)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
GOOGLE_NAMESPACE = "http://base.google.com/ns/1.0"

FEED_TITLE = "ShopShout - AI Deal Platform"
FEED_DESCRIPTION = "Discover the best deals, coupons and offers from verified stores"
FEED_LANGUAGE = "en"

PRODUCT_CHANGEFREQ = "weekly"
PRODUCT_PRIORITY = "0.7"
DEFAULT_AVAILABILITY = "in stock"

STATIC_PAGES: Sequence[PageEntry] = (
    PageEntry(loc="/", priority="1.0", changefreq="weekly"),
    PageEntry(loc="/landing.html", priority="1.0", changefreq="weekly"),
    PageEntry(loc="/index.html", priority="0.9", changefreq="daily"),
    PageEntry(loc="/shops.html", priority="0.9", changefreq="weekly"),
    PageEntry(loc="/store.html", priority="0.8", changefreq="weekly"),
    PageEntry(loc="/contact.html", priority="0.6", changefreq="monthly"),
    PageEntry(loc="/privacy.html", priority="0.4", changefreq="monthly"),
    PageEntry(loc="/impressum.html", priority="0.4", changefreq="monthly"),
)

ProductLike = Union[ProductRecord, Dict[str, Any]]


def _records(products: Iterable[ProductLike]) -> List[ProductRecord]:
    return [p if isinstance(p, ProductRecord) else ProductRecord.model_validate(p) for p in products or []]


def is_eligible(product: ProductRecord) -> bool:
    """
    A row needs an id and a title. Image and store are enforced by the query;
    when a row does carry those columns they must be set as well.
    """
    if not product.hash_id or not product.title:
        return False
    fields = product.model_fields_set
    if "image" in fields and product.image is None:
        return False
    if "store_id" in fields and product.store_id is None:
        return False
    return True


def build_sitemap(
    products: Iterable[ProductLike],
    static_pages: Sequence[PageEntry] = STATIC_PAGES,
    *,
    base_url: str,
    scheme: str = MARKER,
    clock: Clock = utc_now,
) -> str:
    today = format_sitemap_date(clock(), clock)

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]

    for page in static_pages:
        lines += [
            "  <url>",
            f"    <loc>{escape_xml(base_url + page.loc)}</loc>",
            f"    <lastmod>{today}</lastmod>",
            f"    <changefreq>{escape_xml(page.changefreq)}</changefreq>",
            f"    <priority>{escape_xml(page.priority)}</priority>",
            "  </url>",
        ]

    for product in _records(products):
        if not is_eligible(product):
            continue
        url = build_product_url(product.hash_id, product.title, scheme=scheme, base_url=base_url)
        lines += [
            "  <url>",
            f"    <loc>{escape_xml(url)}</loc>",
            f"    <lastmod>{format_sitemap_date(product.updated_at, clock)}</lastmod>",
            f"    <changefreq>{PRODUCT_CHANGEFREQ}</changefreq>",
            f"    <priority>{PRODUCT_PRIORITY}</priority>",
            "  </url>",
        ]

    lines.append("</urlset>")
    return "\n".join(lines)


def _feed_item(product: ProductRecord, *, base_url: str, scheme: str, clock: Clock) -> List[str]:
    url = build_product_url(product.hash_id, product.title, scheme=scheme, base_url=base_url)
    description = strip_html(product.description_english or product.description or product.title)
    currency = product.currency_code

    item = [
        "    <item>",
        f"      <title>{escape_xml(product.title)}</title>",
        f"      <link>{escape_xml(url)}</link>",
        f"      <description>{escape_xml(description)}</description>",
        f"      <pubDate>{format_rfc822(product.updated_at, clock)}</pubDate>",
        f'      <guid isPermaLink="true">{escape_xml(url)}</guid>',
        f"      <g:id>{escape_xml(product.hash_id)}</g:id>",
    ]

    price = format_price(product.display_price, currency)
    if price:
        item.append(f"      <g:price>{escape_xml(price)}</g:price>")
    if product.has_discount:
        item.append(f"      <g:sale_price>{escape_xml(format_price(product.sale_price, currency))}</g:sale_price>")
    if product.image:
        item.append(f"      <g:image_link>{escape_xml(product.image)}</g:image_link>")
    if product.brand:
        item.append(f"      <g:brand>{escape_xml(product.brand)}</g:brand>")

    item += [
        f"      <g:availability>{escape_xml(product.availability or DEFAULT_AVAILABILITY)}</g:availability>",
        "      <g:condition>new</g:condition>",
        "    </item>",
        "",
    ]
    return item


def build_product_feed(
    products: Iterable[ProductLike],
    *,
    base_url: str,
    scheme: str = MARKER,
    clock: Clock = utc_now,
) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<rss version="2.0" xmlns:g="{GOOGLE_NAMESPACE}">',
        "  <channel>",
        f"    <title>{escape_xml(FEED_TITLE)}</title>",
        f"    <link>{escape_xml(base_url)}</link>",
        f"    <description>{escape_xml(FEED_DESCRIPTION)}</description>",
        f"    <language>{FEED_LANGUAGE}</language>",
        f"    <lastBuildDate>{format_rfc822(clock(), clock)}</lastBuildDate>",
        "",
    ]

    for product in _records(products):
        if not is_eligible(product):
            continue
        lines += _feed_item(product, base_url=base_url, scheme=scheme, clock=clock)

    lines += ["  </channel>", "</rss>"]
    return "\n".join(lines)
