"""Opportunity cost: what a purchase price could grow to if invested at 7% a year."""
from second_thought.schemas import OpportunityCost, Projections
from second_thought.utils import round2

ANNUAL_GROWTH_RATE = 0.07
PROJECTION_YEARS = (5, 10, 20)

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}


def compound(principal: float, years: int, rate: float = ANNUAL_GROWTH_RATE) -> float:
    """principal * (1 + rate) ** years."""
    return principal * (1 + rate) ** years


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format with thousands separators and exactly 2 decimals, e.g. "€1,234.50".

    Unknown codes are prefixed with the code itself ("CHF 12.00").
    """
    code = (currency or "USD").upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.2f}"
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"


def calculate_opportunity_cost(price: float, currency: str = "USD") -> OpportunityCost:
    """Project price at 5, 10 and 20 years; zeroed result for non-positive prices."""
    if price <= 0:
        return OpportunityCost(
            amount=0,
            projections=Projections(year5=0, year10=0, year20=0),
            comparison_text="Enter a valid price to see opportunity cost.",
        )

    year5, year10, year20 = (compound(price, years) for years in PROJECTION_YEARS)
    return OpportunityCost(
        amount=price,
        projections=Projections(
            year5=round2(year5),
            year10=round2(year10),
            year20=round2(year20),
        ),
        comparison_text=(
            f"Investing {format_currency(price, currency)} today could grow to "
            f"{format_currency(year20, currency)} in 20 years."
        ),
    )


def generate_comparison_message(price: float, currency: str = "USD") -> str:
    """Friendlier one-liner including the growth multiple."""
    cost = calculate_opportunity_cost(price, currency)
    if price <= 0:
        return cost.comparison_text
    multiplier = round(cost.projections.year20 / price)
    return (
        f"This {format_currency(price, currency)} purchase could be worth "
        f"{format_currency(cost.projections.year20, currency)} in 20 years, "
        f"that's {multiplier}x your money!"
    )
