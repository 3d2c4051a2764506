"""Prompt building and response parsing for the purchase analysis call.

The model is asked for the judgement fields only; warnings from the pricing
analyzer and the opportunity cost are computed locally.
"""
import json
import logging
import math
import re
from typing import Any

from second_thought.pricing.opportunity_cost import calculate_opportunity_cost
from second_thought.schemas import (PricingWarning, ProductRecord,
                                    Recommendation, SuggestedAction,
                                    UserProfile, WarningType)
from second_thought.utils import clamp01, format_number

logger = logging.getLogger(__name__)

PROMPT_VERSION = "v1.0"

DEFAULT_SCORE = 0.5
FALLBACK_REASONING = (
    "We couldn't analyze this purchase right now. "
    "Consider waiting 24 hours before deciding."
)
FALLBACK_MESSAGE = "Take a moment to reflect on whether you truly need this item."
DEFAULT_REASONING = "Unable to analyze"
DEFAULT_MESSAGE = "Consider your financial goals before purchasing."
DEFAULT_WARNING_EXPLANATION = "Potential pricing concern detected."

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

_RESPONSE_FORMAT = """Respond in JSON format with these fields:
{
  "isEssential": boolean (true if this is a necessary purchase like food, medicine, utilities),
  "essentialityScore": number (0-1, how essential is this purchase),
  "reasoning": string (brief explanation of your assessment),
  "warnings": [
    {
      "type": "fake_discount" | "urgency_manipulation" | "inflated_price",
      "confidence": number (0-1),
      "explanation": string
    }
  ],
  "personalizedMessage": string (empathetic message considering user's goals),
  "suggestedAction": "proceed" | "cooldown" | "skip"
}

Be empathetic but honest. Focus on helping the user achieve their financial goals."""


def build_prompt(product: ProductRecord, profile: UserProfile | None = None) -> str:
    """Build the analysis prompt from the product and optional user profile."""
    lines = [
        "You are a financial wellness assistant helping users make better purchasing decisions.",
        "",
        "Analyze this potential purchase and provide guidance:",
        "",
        f"Product: {product.name}",
        f"Price: {product.currency} {format_number(product.price)}",
    ]
    if product.original_price:
        lines.append(f"Original Price: {product.currency} {format_number(product.original_price)}")
    if product.category:
        lines.append(f"Category: {product.category}")
    if product.urgency_indicators:
        lines.append(f"Urgency Indicators Found: {', '.join(product.urgency_indicators)}")
    if profile is not None:
        if profile.financial_goals:
            lines.append(f"User's Financial Goals: {', '.join(profile.financial_goals)}")
        if profile.monthly_budget is not None:
            lines.append(f"Monthly Budget: {format_number(profile.monthly_budget)}")
        if profile.savings_goal is not None:
            lines.append(f"Savings Goal: {format_number(profile.savings_goal)}")
    lines.extend(["", _RESPONSE_FORMAT])
    return "\n".join(lines)


def extract_json_text(content: str) -> str:
    """Strip a fenced code block wrapper if present."""
    match = _FENCE_RE.search(content)
    return (match.group(1) if match else content).strip()


def _as_score(value: Any, default: float = DEFAULT_SCORE) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return clamp01(number)


def _parse_warning(raw: Any) -> PricingWarning | None:
    if not isinstance(raw, dict):
        return None
    try:
        warning_type = WarningType(raw.get("type"))
    except ValueError:
        warning_type = WarningType.INFLATED_PRICE
    return PricingWarning(
        type=warning_type,
        confidence=_as_score(raw.get("confidence")),
        explanation=str(raw.get("explanation") or DEFAULT_WARNING_EXPLANATION),
    )


def _parse_action(value: Any) -> SuggestedAction:
    try:
        return SuggestedAction(value)
    except ValueError:
        return SuggestedAction.COOLDOWN


def fallback_recommendation(product: ProductRecord) -> Recommendation:
    """Neutral "wait a day" recommendation with the real opportunity cost."""
    return Recommendation(
        is_essential=False,
        essentiality_score=DEFAULT_SCORE,
        reasoning=FALLBACK_REASONING,
        warnings=[],
        opportunity_cost=calculate_opportunity_cost(product.price, product.currency),
        personalized_message=FALLBACK_MESSAGE,
        suggested_action=SuggestedAction.COOLDOWN,
    )


def parse_response(content: str, product: ProductRecord) -> Recommendation:
    """Parse model output into a Recommendation; fall back on anything unparseable."""
    try:
        parsed = json.loads(extract_json_text(content))
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
        raw_warnings = parsed.get("warnings")
        warnings = [
            w
            for w in (_parse_warning(r) for r in (raw_warnings if isinstance(raw_warnings, list) else []))
            if w is not None
        ]
        return Recommendation(
            is_essential=bool(parsed.get("isEssential")),
            essentiality_score=_as_score(parsed.get("essentialityScore")),
            reasoning=str(parsed.get("reasoning") or DEFAULT_REASONING),
            warnings=warnings,
            opportunity_cost=calculate_opportunity_cost(product.price, product.currency),
            personalized_message=str(parsed.get("personalizedMessage") or DEFAULT_MESSAGE),
            suggested_action=_parse_action(parsed.get("suggestedAction")),
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Unparseable inference output, using fallback: %s", exc)
        return fallback_recommendation(product)
