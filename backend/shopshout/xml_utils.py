import html
import logging
import math
import re
import warnings
from datetime import date, datetime, timezone
from email.utils import format_datetime
from typing import Callable, Optional

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

logger = logging.getLogger(__name__)

# Descriptions are often bare URLs or file names; they are still text to us.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

Clock = Callable[[], datetime]

DESCRIPTION_MAX_LENGTH = 500

_XML_ESCAPES = (
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)
_WHITESPACE = re.compile(r"\s+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def escape_xml(value) -> str:
    if value is None or value == "":
        return ""
    text = str(value)
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def strip_html(text, limit: Optional[int] = DESCRIPTION_MAX_LENGTH) -> str:
    """Plain text of an HTML fragment, whitespace collapsed and cut to `limit` chars."""
    if not text:
        return ""
    text = str(text)
    # Only real markup needs parsing.
    plain = BeautifulSoup(text, "lxml").get_text() if "<" in text else html.unescape(text)
    return _WHITESPACE.sub(" ", plain).strip()[:limit]


def format_price(amount, currency: Optional[str] = "EUR") -> Optional[str]:
    if not amount:
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return f"{value:.2f} {currency or 'EUR'}"


def _to_datetime(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_timestamp(value, clock: Clock = utc_now) -> datetime:
    """UTC datetime for `value`, or the clock's time when it is missing or unparseable."""
    if not value:
        return _to_datetime(clock())
    try:
        return _to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Unparseable timestamp %r, using current time", value)
        return _to_datetime(clock())


def format_sitemap_date(value, clock: Clock = utc_now) -> str:
    return parse_timestamp(value, clock).strftime("%Y-%m-%d")


def format_rfc822(value, clock: Clock = utc_now) -> str:
    return format_datetime(parse_timestamp(value, clock), usegmt=True)
