"""Core provider abstractions and error handling."""
from second_thought.providers.core.error_mapper import (SERVICE_EXCEPTIONS,
                                                        ServiceErrorMapper)
from second_thought.providers.core.exceptions import (InferenceError,
                                                      NotFoundError,
                                                      ProfileRequiredError,
                                                      SecondThoughtError,
                                                      StoreError)
from second_thought.providers.core.protocols import (InferenceProvider,
                                                     RelevanceJudge)

__all__ = [
    "SERVICE_EXCEPTIONS",
    "InferenceError",
    "InferenceProvider",
    "NotFoundError",
    "ProfileRequiredError",
    "RelevanceJudge",
    "SecondThoughtError",
    "ServiceErrorMapper",
    "StoreError",
]
