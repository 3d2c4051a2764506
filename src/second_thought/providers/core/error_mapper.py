"""Domain concept for mapping service exceptions to HTTP responses."""
import asyncio
from dataclasses import dataclass

import httpx
from fastapi import HTTPException

from second_thought.providers.core.exceptions import (InferenceError,
                                                      NotFoundError,
                                                      ProfileRequiredError,
                                                      SecondThoughtError,
                                                      StoreError)


# Exceptions routers map to HTTP; anything else propagates to the default 500 handler.
SERVICE_EXCEPTIONS: tuple[type[Exception], ...] = (
    SecondThoughtError,
    ValueError,
    TimeoutError,
    asyncio.TimeoutError,
    httpx.HTTPStatusError,
)


@dataclass(frozen=True)
class ServiceErrorMapper:
    """Maps service/backend exceptions to HTTP (status_code, detail).

    One instance per router so 404 and upstream messages name the right
    resource and backing service.
    """

    resource_name: str = "Resource"
    api_name: str = "API"

    def to_http(self, exc: Exception, identifier: str | None = None) -> tuple[int, str]:
        """Map an exception to (status_code, detail).

        Args:
            exc: The exception raised by the service.
            identifier: Optional id to include in 404 detail (e.g. a profile id).
        """
        if isinstance(exc, NotFoundError):
            if identifier is not None:
                return (404, f"{self.resource_name} '{identifier}' not found")
            return (404, str(exc) or f"{self.resource_name} not found")
        if isinstance(exc, ProfileRequiredError):
            return (409, str(exc) or "User profile required")
        if isinstance(exc, StoreError):
            return (503, f"Failed to {exc.operation}")
        if isinstance(exc, InferenceError):
            return (502, f"{self.api_name} error")
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return (502 if status >= 500 else status, f"{self.api_name} error")
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
            return (504, f"Request to {self.api_name} timed out")
        if isinstance(exc, ValueError):
            return (400, str(exc) or "Invalid request")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception, identifier: str | None = None) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc, identifier=identifier)
        raise HTTPException(status_code=status_code, detail=detail) from exc
