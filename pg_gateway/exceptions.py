"""Custom exception hierarchy for pg-gateway."""


class GatewayError(Exception):
    """Base exception for all pg-gateway errors."""


class EntityNotFoundError(GatewayError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(GatewayError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(GatewayError):
    """Raised when configuration is invalid or missing."""


class RequestValidationError(GatewayError):
    """Raised when a field required by a provider is missing from the request."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name


class ProviderError(GatewayError):
    """Base exception for failures reported by (or while reaching) a payment provider."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProviderRejectedError(ProviderError):
    """Raised when the provider explicitly declines the payment."""


class ProviderBadRequestError(ProviderError):
    """Raised when the provider reports a malformed request."""


class ProviderAuthenticationError(ProviderError):
    """Raised when the provider does not accept our credentials."""


class ProviderAuthorizationError(ProviderError):
    """Raised when our credentials lack permission for the operation."""


class ProviderResponseError(ProviderError):
    """Raised on an unclassified error status or an empty/unparseable response."""


class ProviderUnavailableError(ProviderError):
    """Raised when the provider cannot be reached or times out."""
