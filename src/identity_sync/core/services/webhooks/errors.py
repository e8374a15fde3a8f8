"""Webhook processing errors and the outcomes they map to."""

from enum import Enum


class WebhookStatus(str, Enum):
    """Terminal state of one webhook call."""

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"
    UNKNOWN_SUBJECT = "unknown_subject"
    MALFORMED = "malformed"
    UNAUTHORIZED = "unauthorized"
    UNKNOWN_PROVIDER = "unknown_provider"
    FAILED = "failed"


STATUS_CODES: dict[WebhookStatus, int] = {
    WebhookStatus.APPLIED: 200,
    WebhookStatus.DUPLICATE: 200,
    WebhookStatus.IGNORED: 200,
    # Same as a no-op so the status code does not reveal whether an account exists
    WebhookStatus.UNKNOWN_SUBJECT: 202,
    WebhookStatus.MALFORMED: 400,
    WebhookStatus.UNAUTHORIZED: 401,
    WebhookStatus.UNKNOWN_PROVIDER: 404,
    WebhookStatus.FAILED: 500,
}


class WebhookError(Exception):
    """Base class for failures that end a webhook call early."""

    status: WebhookStatus = WebhookStatus.FAILED
    public_detail: str = "Webhook processing failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_detail)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.status]


class AuthenticationError(WebhookError):
    """Secret header missing or wrong. Both cases look identical to the caller."""

    status = WebhookStatus.UNAUTHORIZED
    public_detail = "Invalid webhook credentials"


class NormalizationError(WebhookError):
    """Payload is empty, not JSON, or lacks fields its event kind requires."""

    status = WebhookStatus.MALFORMED
    public_detail = "Malformed webhook payload"


class UnknownSubjectError(WebhookError):
    """The provider subject does not map to any user."""

    status = WebhookStatus.UNKNOWN_SUBJECT
    public_detail = "Accepted"


class UnknownProviderError(WebhookError):
    """No enabled provider matches the route."""

    status = WebhookStatus.UNKNOWN_PROVIDER
    public_detail = "Unknown webhook provider"


class ApplyError(WebhookError):
    """Persisting the identity change failed. Safe for the provider to retry."""

    status = WebhookStatus.FAILED
    public_detail = "Webhook processing failed"
