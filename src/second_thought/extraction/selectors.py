"""DOM selector profiles handed to the scraping layer, keyed by site tag."""
from dataclasses import dataclass

from second_thought.extraction.product_extractor import GENERIC_SITE, detect_site


@dataclass(frozen=True)
class SiteSelectors:
    """CSS selectors for the fields the extension scrapes."""

    name: str
    price: str
    original_price: str
    urgency: str


SITE_SELECTORS: dict[str, SiteSelectors] = {
    "amazon": SiteSelectors(
        name="#productTitle, #title",
        price=".a-price .a-offscreen, #priceblock_ourprice, #priceblock_dealprice, .a-price-whole",
        original_price=".a-text-price .a-offscreen, #priceblock_ourprice_lbl + .a-text-price",
        urgency='.a-color-price, #availability, .a-declarative[data-action="a-modal"]',
    ),
    "ebay": SiteSelectors(
        name=".x-item-title__mainTitle",
        price=".x-price-primary .ux-textspans",
        original_price=".x-price-primary .ux-textspans--STRIKETHROUGH",
        urgency=".d-urgency-message, .vi-notify-new-bg-dBtm",
    ),
    GENERIC_SITE: SiteSelectors(
        name='h1, [itemprop="name"], .product-title, .product-name',
        price='[itemprop="price"], .price, .product-price, .current-price',
        original_price=".original-price, .was-price, .compare-price, del",
        urgency=".urgency, .limited, .stock-warning, .countdown",
    ),
}


def selectors_for(hostname: str) -> tuple[str, SiteSelectors]:
    """Return (site tag, selector profile) for a hostname."""
    site = detect_site(hostname)
    return site, SITE_SELECTORS.get(site, SITE_SELECTORS[GENERIC_SITE])
