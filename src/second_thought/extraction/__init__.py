"""Product extraction: parsing, validation and normalization of scraped data."""
from second_thought.extraction.product_extractor import (
    DEFAULT_CURRENCY, URGENCY_PATTERNS, calculate_discount_percentage, contains_urgency_indicator,
    detect_site, extract_product_from_data, extract_urgency_indicators,
    is_suspicious_discount, normalize_product_name, parse_currency,
    parse_price, validate_product)
from second_thought.extraction.selectors import (SITE_SELECTORS, SiteSelectors,
                                                 selectors_for)

__all__ = [
    "DEFAULT_CURRENCY",
    "SITE_SELECTORS",
    "SiteSelectors",
    "URGENCY_PATTERNS",
    "calculate_discount_percentage",
    "contains_urgency_indicator",
    "detect_site",
    "extract_product_from_data",
    "extract_urgency_indicators",
    "is_suspicious_discount",
    "normalize_product_name",
    "parse_currency",
    "parse_price",
    "selectors_for",
    "validate_product",
]
