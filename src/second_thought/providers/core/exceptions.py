"""Error types raised by I/O-backed components."""


class SecondThoughtError(Exception):
    """Base class for service errors."""


class StoreError(SecondThoughtError):
    """A read or write against the backing store failed."""

    def __init__(self, operation: str, cause: object) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation}: {cause}")


class InferenceError(SecondThoughtError):
    """The generative inference call failed on every attempt."""


class ProfileRequiredError(SecondThoughtError):
    """An operation needed a user profile that could not be resolved."""


class NotFoundError(SecondThoughtError):
    """A record looked up by id does not exist."""
