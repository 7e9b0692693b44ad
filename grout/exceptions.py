"""Domain-specific exceptions for Grout."""


class GroutError(Exception):
    """Base exception for all Grout errors."""


class RenderError(GroutError):
    """An image could not be produced for a structurally valid request."""


class ContentNotFoundError(GroutError):
    """Requested content kind or category does not exist."""


class ConfigurationError(GroutError):
    """Error related to configuration issues."""


class RateLimitExceeded(Exception):
    """Client exhausted its request budget; retry later."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Rate limit exceeded for {client_id}")
        self.client_id = client_id
