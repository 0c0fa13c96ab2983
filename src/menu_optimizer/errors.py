"""Exception types raised by the optimization pipeline."""


class MenuOptimizerError(Exception):
    """Base exception for pipeline errors."""

    pass


class ModelProviderError(MenuOptimizerError):
    """Fatal failure from a model provider. Callers must not retry."""

    def __init__(self, provider: str, message: str, status: int | None = None):
        """Initialize with the provider name, upstream message and HTTP status."""
        self.provider = provider
        self.status = status
        self.message = message
        prefix = f"HTTP {status}: " if status is not None else ""
        super().__init__(f"{provider} API error: {prefix}{message}")


class CredentialResolutionError(MenuOptimizerError):
    """No API credential could be resolved for a provider."""

    pass


class UnsupportedProviderError(MenuOptimizerError):
    """The requested provider is not one of the known providers."""

    pass


class DomainValidationError(MenuOptimizerError):
    """A request was rejected before any external call was made."""

    pass


class NotFoundError(MenuOptimizerError):
    """A record required to start a batch does not exist."""

    pass


class ReviewConflictError(MenuOptimizerError):
    """A review transition was attempted on a record that is already terminal."""

    def __init__(self, record_id: str, current_status: str):
        """Initialize with the record id and its current terminal status."""
        self.record_id = record_id
        self.current_status = current_status
        super().__init__(
            f"Record {record_id} is already {current_status} and cannot be reviewed again"
        )


class TasteApiError(MenuOptimizerError):
    """Fatal failure from the taste/peer-signal API."""

    def __init__(self, message: str, status: int | None = None):
        """Initialize with the upstream message and HTTP status."""
        self.status = status
        self.message = message
        super().__init__(message)


class ResponseParseError(MenuOptimizerError):
    """A model reply held no usable content for one item."""

    pass
