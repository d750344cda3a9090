import logging
from typing import Callable, List

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, Response
from supabase import Client

from ..config import Settings, get_settings
from ..deps import get_client_factory, get_clock
from ..feeds import build_product_feed, build_sitemap
from ..models import ProductRecord
from ..product_source import FEED_COLUMNS, SITEMAP_COLUMNS, ProductSourceError, fetch_published_products
from ..xml_utils import Clock

logger = logging.getLogger(__name__)

router = APIRouter()

XML_HEADERS = {"Cache-Control": "public, max-age=3600, s-maxage=3600"}
XML_MEDIA_TYPE = "application/xml; charset=utf-8"


def _xml_response(body: str) -> Response:
    return Response(content=body, status_code=status.HTTP_200_OK, headers=XML_HEADERS, media_type=XML_MEDIA_TYPE)


def _error(message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _load(client_factory: Callable[[], Client], columns: str) -> List[ProductRecord]:
    return fetch_published_products(client_factory(), columns)


@router.get("/sitemap.xml", response_class=Response)
def sitemap(
    client_factory: Callable[[], Client] = Depends(get_client_factory),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
):
    try:
        try:
            products = _load(client_factory, SITEMAP_COLUMNS)
        except ProductSourceError:
            logger.exception("[Sitemap] Database error")
            return _error("Error generating sitemap")
        xml = build_sitemap(
            products,
            base_url=settings.base_url,
            scheme=settings.product_url_scheme,
            clock=clock,
        )
    except Exception:
        logger.exception("[Sitemap] Error")
        return _error("Internal server error")
    return _xml_response(xml)


@router.get("/product-feed.xml", response_class=Response)
def product_feed(
    client_factory: Callable[[], Client] = Depends(get_client_factory),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
):
    """
    Google Merchant Center feed (RSS 2.0 with the g: namespace).
    """
    try:
        try:
            products = _load(client_factory, FEED_COLUMNS)
        except ProductSourceError:
            logger.exception("[Product Feed] Database error")
            return _error("Error generating product feed")
        xml = build_product_feed(
            products,
            base_url=settings.base_url,
            scheme=settings.product_url_scheme,
            clock=clock,
        )
    except Exception:
        logger.exception("[Product Feed] Error")
        return _error("Internal server error")
    return _xml_response(xml)
