import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel
from supabase import Client

from ..config import Settings, get_settings
from ..deps import get_client, get_clock
from ..models import ProductRecord, ProductSeoMeta
from ..product_seo import build_product_meta
from ..product_source import ProductSourceError, fetch_product
from ..slugs import resolve_product_id
from ..xml_utils import Clock

logger = logging.getLogger(__name__)

router = APIRouter()


class ProductPage(BaseModel):
    product: ProductRecord
    seo: ProductSeoMeta


def _page(client: Client, product_id: str, settings: Settings, clock: Clock, host: Optional[str]) -> ProductPage:
    try:
        product = fetch_product(client, product_id)
    except ProductSourceError as exc:
        logger.exception("Product lookup failed for %s", product_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Product lookup failed") from exc
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    seo = build_product_meta(
        product,
        base_url=settings.base_url,
        scheme=settings.product_url_scheme,
        clock=clock,
        host=host,
    )
    return ProductPage(product=product, seo=seo)


@router.get("", response_model=ProductPage)
def product_by_query(
    request: Request,
    id: Optional[str] = Query(default=None),
    client: Client = Depends(get_client),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
):
    """
    Legacy `product.html?id=...` links.
    """
    if not id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return _page(client, id, settings, clock, request.headers.get("host"))


@router.get("/{slug}", response_model=ProductPage)
def product_by_slug(
    slug: str,
    request: Request,
    client: Client = Depends(get_client),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
):
    product_id = resolve_product_id(slug)
    if not product_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unrecognised product URL")
    return _page(client, product_id, settings, clock, request.headers.get("host"))
