"""Purchase analysis route."""
from dependency_injector.wiring import inject
from fastapi import APIRouter, HTTPException

from second_thought.container import AnalysisServiceDep
from second_thought.extraction import DEFAULT_CURRENCY, validate_product
from second_thought.providers.core import (SERVICE_EXCEPTIONS,
                                           ServiceErrorMapper)
from second_thought.schemas import (AnalyzeRequest, AnalyzeResponse,
                                    ProductRecord)

router = APIRouter(prefix="/analyze", tags=["analyze"])
_errors = ServiceErrorMapper(resource_name="Analysis", api_name="Inference API")


@router.post("", response_model=AnalyzeResponse)
@inject
async def analyze_product(body: AnalyzeRequest, service: AnalysisServiceDep) -> AnalyzeResponse:
    """Analyze a product and return the merged recommendation.

    The product must carry a name, a positive price, a 3-letter currency code
    and its URL. When userId is given the user's profile is created on first
    sight and used for the prompt.
    """
    if not body.product.get("name") or not body.product.get("price"):
        raise HTTPException(
            status_code=400, detail="Invalid product data. Name and price are required."
        )
    candidate = {"currency": DEFAULT_CURRENCY, "urgencyIndicators": [], **body.product}
    if not validate_product(candidate):
        raise HTTPException(status_code=400, detail="Invalid product data.")
    try:
        product = ProductRecord.model_validate(body.product)
        outcome = await service.analyze(product, body.user_id, body.session_id)
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc)
    return AnalyzeResponse(analysis=outcome.recommendation, metadata=outcome.metadata)
