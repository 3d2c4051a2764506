"""Predatory pricing detection: fake discounts, urgency manipulation, inflated prices.

Pure functions over a ProductRecord; no I/O.
"""
import math
import re

from second_thought.schemas import PricingWarning, ProductRecord, WarningType

SUSPICIOUS_DISCOUNT_THRESHOLD = 0.5
EXTREME_DISCOUNT_THRESHOLD = 0.7

EXTREME_DISCOUNT_CONFIDENCE = 0.9
SUSPICIOUS_DISCOUNT_CONFIDENCE = 0.6
INFLATED_PRICE_CONFIDENCE = 0.7
URGENCY_BASE_CONFIDENCE = 0.5
URGENCY_STEP_CONFIDENCE = 0.15
URGENCY_MAX_CONFIDENCE = 0.9

# Narrower than the extractor's filter: these are the phrasings treated as manipulation.
URGENCY_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"only \d+ left",
        r"limited (time|stock|quantity)",
        r"sale ends (in|soon|today)",
        r"hurry",
        r"don't miss",
        r"last chance",
        r"selling fast",
        r"\d+ (people|others) (are )?(viewing|watching)",
        r"\d+ sold in (the )?last",
        r"flash sale",
        r"deal of the day",
        r"expires? (in|soon)",
        r"countdown",
        r"timer",
    )
)


def _discount_fraction(product: ProductRecord) -> float | None:
    if not product.original_price or product.original_price <= product.price:
        return None
    return (product.original_price - product.price) / product.original_price


def _percent(fraction: float) -> int:
    return math.floor(fraction * 100 + 0.5)


def is_manipulative_urgency(text: str) -> bool:
    """True if text matches any manipulation pattern."""
    return any(pattern.search(text) for pattern in URGENCY_PATTERNS)


def detect_fake_discount(product: ProductRecord) -> PricingWarning | None:
    """Flag discounts of 50% or more; 70% or more gets the higher confidence."""
    discount = _discount_fraction(product)
    if discount is None:
        return None

    if discount >= EXTREME_DISCOUNT_THRESHOLD:
        return PricingWarning(
            type=WarningType.FAKE_DISCOUNT,
            confidence=EXTREME_DISCOUNT_CONFIDENCE,
            explanation=(
                f"This {_percent(discount)}% discount seems too good to be true. "
                'The "original" price may be artificially inflated.'
            ),
        )
    if discount >= SUSPICIOUS_DISCOUNT_THRESHOLD:
        return PricingWarning(
            type=WarningType.FAKE_DISCOUNT,
            confidence=SUSPICIOUS_DISCOUNT_CONFIDENCE,
            explanation=(
                f"A {_percent(discount)}% discount is significant. "
                "Consider checking if this price is typical for similar products."
            ),
        )
    return None


def detect_urgency_manipulation(product: ProductRecord) -> PricingWarning | None:
    """Flag urgency language; confidence grows with the number of matching indicators."""
    matched = [text for text in product.urgency_indicators if is_manipulative_urgency(text)]
    if not matched:
        return None

    confidence = min(
        URGENCY_MAX_CONFIDENCE,
        URGENCY_BASE_CONFIDENCE + URGENCY_STEP_CONFIDENCE * len(matched),
    )
    quoted = '", "'.join(matched[:2])
    return PricingWarning(
        type=WarningType.URGENCY_MANIPULATION,
        confidence=confidence,
        explanation=(
            f'Urgency tactics detected: "{quoted}". '
            "These are common techniques to pressure quick decisions."
        ),
    )


def detect_inflated_price(product: ProductRecord) -> PricingWarning | None:
    """Large discount and urgency together suggest a staged deal."""
    if not product.urgency_indicators:
        return None
    discount = _discount_fraction(product)
    if discount is None or discount < SUSPICIOUS_DISCOUNT_THRESHOLD:
        return None
    return PricingWarning(
        type=WarningType.INFLATED_PRICE,
        confidence=INFLATED_PRICE_CONFIDENCE,
        explanation=(
            "Combination of large discount and urgency tactics suggests the original "
            "price may have been inflated to make the deal seem better."
        ),
    )


def analyze_pricing(product: ProductRecord) -> list[PricingWarning]:
    """Run all detectors; order is fake_discount, urgency_manipulation, inflated_price."""
    detectors = (detect_fake_discount, detect_urgency_manipulation, detect_inflated_price)
    return [w for w in (detect(product) for detect in detectors) if w is not None]
