"""Pricing analysis and opportunity-cost projection (pure, no I/O)."""
from second_thought.pricing.analyzer import (analyze_pricing,
                                             detect_fake_discount,
                                             detect_inflated_price,
                                             detect_urgency_manipulation)
from second_thought.pricing.opportunity_cost import (
    ANNUAL_GROWTH_RATE, calculate_opportunity_cost, compound, format_currency,
    generate_comparison_message)

__all__ = [
    "ANNUAL_GROWTH_RATE",
    "analyze_pricing",
    "calculate_opportunity_cost",
    "compound",
    "detect_fake_discount",
    "detect_inflated_price",
    "detect_urgency_manipulation",
    "format_currency",
    "generate_comparison_message",
]
