"""Error types raised by roamgraph."""


class RoamGraphError(Exception):
    """Base class for roamgraph errors."""


class ConfigurationError(RoamGraphError, ValueError):
    """Raised when required client configuration cannot be resolved."""


class RoamAPIError(RoamGraphError):
    """Raised when the REST endpoint answers without a ``success`` payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
