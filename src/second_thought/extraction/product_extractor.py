"""Turn scraped text fragments into a validated ProductRecord.

Every function here degrades to None/default on malformed input instead of
raising; the scraping itself happens in the browser extension.
"""
import math
import re
from collections.abc import Mapping
from typing import Any

from second_thought.schemas import ProductRecord, RawProductFields

MAX_NAME_LENGTH = 200
MAX_URGENCY_LENGTH = 100
MAX_URGENCY_INDICATORS = 5
SUSPICIOUS_DISCOUNT_PERCENT = 80
DEFAULT_CURRENCY = "USD"

KNOWN_SITES = ("amazon", "ebay")
GENERIC_SITE = "generic"

_PRICE_RE = re.compile(r"\d[\d,]*(?:\.\d*)?")

# Checked in order; the first symbol present wins.
_CURRENCY_SYMBOLS: tuple[tuple[str, str], ...] = (
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("¥", "JPY"),
    ("₹", "INR"),
)

URGENCY_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"only \d+ left",
        r"limited",
        r"sale ends",
        r"hurry",
        r"last chance",
        r"selling fast",
        r"\d+ (people|others)",
        r"flash sale",
        r"ends in",
        r"while supplies last",
    )
)


def parse_price(text: str | None) -> float | None:
    """Parse the first numeric token (e.g. "$1,234.56" -> 1234.56); None if absent."""
    if not text:
        return None
    match = _PRICE_RE.search(text)
    if match is None:
        return None
    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return None


def parse_currency(text: str | None) -> str:
    """Map the first known currency symbol in text to its ISO code; USD otherwise."""
    if not text:
        return DEFAULT_CURRENCY
    for symbol, code in _CURRENCY_SYMBOLS:
        if symbol in text:
            return code
    return DEFAULT_CURRENCY


def detect_site(hostname: str) -> str:
    """Classify a hostname as a known marketplace tag or "generic"."""
    host = (hostname or "").lower()
    for site in KNOWN_SITES:
        if site in host:
            return site
    return GENERIC_SITE


def contains_urgency_indicator(text: str) -> bool:
    """True if text uses scarcity, time-pressure or social-proof language."""
    return any(pattern.search(text) for pattern in URGENCY_PATTERNS)


def normalize_product_name(name: str) -> str:
    """Trim whitespace and cap length."""
    return name.strip()[:MAX_NAME_LENGTH]


def calculate_discount_percentage(
    current_price: float, original_price: float | None
) -> int | None:
    """Whole-number discount percent, or None when there is no real discount."""
    if not original_price or original_price <= current_price:
        return None
    return math.floor(100 * (original_price - current_price) / original_price + 0.5)


def is_suspicious_discount(current_price: float, original_price: float | None) -> bool:
    """Discounts above 80% are suspicious."""
    discount = calculate_discount_percentage(current_price, original_price)
    if discount is None:
        return False
    return discount > SUSPICIOUS_DISCOUNT_PERCENT


def _field(candidate: Any, name: str, alias: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name, candidate.get(alias))
    return getattr(candidate, name, None)


def validate_product(candidate: Mapping[str, Any] | ProductRecord) -> bool:
    """Structural check before a candidate is treated as a ProductRecord.

    Accepts either snake_case or camelCase keys for mappings.
    """
    name = _field(candidate, "name", "name")
    price = _field(candidate, "price", "price")
    currency = _field(candidate, "currency", "currency")
    url = _field(candidate, "url", "url")
    indicators = _field(candidate, "urgency_indicators", "urgencyIndicators")
    return (
        isinstance(name, str)
        and len(name) > 0
        and isinstance(price, (int, float))
        and not isinstance(price, bool)
        and price > 0
        and isinstance(currency, str)
        and len(currency) == 3
        and isinstance(url, str)
        and isinstance(indicators, list)
    )


def extract_urgency_indicators(texts: list[str]) -> list[str]:
    """Keep genuine urgency strings, truncated, first five in source order."""
    indicators = [t[:MAX_URGENCY_LENGTH] for t in texts if contains_urgency_indicator(t)]
    return indicators[:MAX_URGENCY_INDICATORS]


def extract_product_from_data(data: RawProductFields) -> ProductRecord | None:
    """Build a ProductRecord from raw fields; None when name or price is missing."""
    name = (data.name or "").strip()
    price = parse_price(data.price_text)
    if not name or not price:
        return None

    original_price = parse_price(data.original_price_text)
    return ProductRecord(
        name=normalize_product_name(name),
        price=price,
        currency=parse_currency(data.price_text),
        original_price=original_price if original_price and original_price > price else None,
        category=data.category,
        url=data.url,
        image_url=data.image_url,
        seller=data.seller,
        urgency_indicators=extract_urgency_indicators(data.urgency_texts),
    )
