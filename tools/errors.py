from typing import Optional


class ImporterError(Exception):
    """Base class for errors raised by the record importer."""

    message = "Importer error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthorized(ImporterError):
    """No authenticated tenant on the request."""

    message = "Unauthorized"


class InvalidRequest(ImporterError):
    """Missing or inconsistent import parameters."""

    message = "Invalid request"


class InternalError(ImporterError):
    """Unexpected failure from the integration platform or the record store."""

    message = "Internal Server Error"


class IntegrationError(ImporterError):
    """Integration.app call failed or returned something unusable."""


class PageLimitExceeded(ImporterError):
    """The action kept returning cursors past the configured page cap."""


class WebhookError(ImporterError):
    """Webhook endpoint rejected the payload."""
