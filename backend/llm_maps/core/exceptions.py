"""
Error taxonomy shared by the services and the HTTP layer.

Client errors (InvalidInput) map to 400, provider errors map to 500 and
classifier errors never leave the intent service.
"""


class InvalidInput(Exception):
    """Raised when a request field fails validation."""

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class ProviderError(Exception):
    """Raised when the place-search provider fails or returns a non-OK status."""

    def __init__(self, status: str, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class ProviderAuthError(ProviderError):
    def __init__(self, message: str):
        super().__init__("REQUEST_DENIED", message)


class ProviderQuotaExceeded(ProviderError):
    def __init__(self, message: str = "Google Maps API quota exceeded"):
        super().__init__("OVER_QUERY_LIMIT", message)


class ClassifierUnavailable(Exception):
    """The intent classifier could not be reached or answered with an error."""


class ClassifierOutputError(Exception):
    """The intent classifier answered, but no usable intent could be parsed."""


class InvalidApiKey(Exception):
    """The x-api-key header is missing or does not match CLIENT_API_KEY."""
