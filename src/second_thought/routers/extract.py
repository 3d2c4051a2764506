"""Product extraction routes for the browser extension.

Stateless: parsing only, nothing is stored.
"""
from urllib.parse import urlparse

from fastapi import APIRouter, HTTPException, Query

from second_thought.extraction import extract_product_from_data, selectors_for
from second_thought.schemas import (ExtractResponse, RawProductFields,
                                    SelectorsResponse)

router = APIRouter(prefix="/extract", tags=["extract"])


@router.post("", response_model=ExtractResponse)
async def extract_product(fields: RawProductFields) -> ExtractResponse:
    """Parse scraped page fields into a product record.

    Returns 400 when no name or no parseable price was found.
    """
    product = extract_product_from_data(fields)
    if product is None:
        raise HTTPException(status_code=400, detail="Could not extract product name and price")
    site, _ = selectors_for(urlparse(fields.url).hostname or "")
    return ExtractResponse(product=product, site=site)


@router.get("/selectors", response_model=SelectorsResponse)
async def get_selectors(
    hostname: str = Query(..., min_length=1, description="Page hostname, e.g. www.amazon.com"),
) -> SelectorsResponse:
    """CSS selector profile the extension should scrape for a hostname."""
    site, selectors = selectors_for(hostname)
    return SelectorsResponse(
        site=site,
        name=selectors.name,
        price=selectors.price,
        original_price=selectors.original_price,
        urgency=selectors.urgency,
    )
