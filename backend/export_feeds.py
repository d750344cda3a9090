#!/usr/bin/env python
"""
Write sitemap.xml and product-feed.xml to disk, for static hosting or for
eyeballing the output against a real Supabase project.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from shopshout.config import Settings, configure_logging, get_settings
from shopshout.feeds import build_product_feed, build_sitemap
from shopshout.product_source import FEED_COLUMNS, SITEMAP_COLUMNS, fetch_published_products
from shopshout.supabase_client import get_supabase
from shopshout.xml_utils import Clock, utc_now


def export(client, out_dir: Path, settings: Settings, clock: Clock = utc_now) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    options = {"base_url": settings.base_url, "scheme": settings.product_url_scheme, "clock": clock}

    sitemap = build_sitemap(fetch_published_products(client, SITEMAP_COLUMNS), **options)
    feed = build_product_feed(fetch_published_products(client, FEED_COLUMNS), **options)

    written = []
    for name, body in (("sitemap.xml", sitemap), ("product-feed.xml", feed)):
        path = out_dir / name
        path.write_text(body, encoding="utf-8")
        written.append(path)
    return written


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Export the sitemap and Google Shopping feed as files.")
    parser.add_argument("--out", type=Path, default=Path("public"), help="output directory")
    args = parser.parse_args()
    try:
        settings = get_settings()
        configure_logging(settings)
        for path in export(get_supabase(), args.out, settings):
            print(f"Wrote {path}")
    except Exception as exc:
        print(
            "Export failed:",
            exc,
            "\nCommon fixes:",
            "\n- Ensure .env has real SUPABASE_URL and SUPABASE_ANON_KEY (not placeholders)."
            "\n- Verify network access to Supabase.",
            file=sys.stderr,
        )
        sys.exit(1)
