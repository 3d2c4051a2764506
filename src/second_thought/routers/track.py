"""Engagement tracking route."""
from dependency_injector.wiring import inject
from fastapi import APIRouter

from second_thought.container import TrackingServiceDep
from second_thought.providers.core import (SERVICE_EXCEPTIONS,
                                           ServiceErrorMapper)
from second_thought.schemas import TrackRequest, TrackResponse

router = APIRouter(prefix="/track", tags=["track"])
_errors = ServiceErrorMapper(resource_name="Event", api_name="Tracing")


@router.post("", response_model=TrackResponse)
@inject
async def track_event(body: TrackRequest, service: TrackingServiceDep) -> TrackResponse:
    """Record an engagement, cool-down or profile event.

    Engagement events that carry both product and analysis are also stored
    as interventions.
    """
    try:
        intervention_id = await service.track(
            body.event_type, body.user_id, body.session_id, body.data
        )
    except SERVICE_EXCEPTIONS as exc:
        _errors.raise_http(exc)
    return TrackResponse(intervention_id=intervention_id)
