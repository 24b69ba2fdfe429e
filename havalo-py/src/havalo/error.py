"""
Exception classes for Havalo SDK
"""


class HavaloException(Exception):
    """
    Base exception for all Havalo SDK errors.

    Only configuration-class faults are raised. Routine API failures are
    returned to the caller as a Failure outcome instead.
    """


class EncodingError(HavaloException):
    """Thrown when a path segment cannot be encoded."""

    def __init__(self, segment: str):
        super().__init__(f"Failed to URL-encode path segment {segment!r}.")
        self.segment = segment


class SigningError(HavaloException):
    """Thrown when a request cannot be signed."""

    def __init__(self, message: str):
        super().__init__(message)


class PipelineStateError(HavaloException):
    """Thrown when a request pipeline is executed more than once."""

    def __init__(self, state: str):
        super().__init__(
            f"Request pipeline already executed (state={state}); "
            "build a new pipeline to send the request again."
        )
        self.state = state
