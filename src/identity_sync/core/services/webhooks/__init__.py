"""Identity provider webhook processing."""

from .applier import IdentityStateApplier, compute_patch
from .dispatcher import WebhookDispatcher, WebhookOutcome
from .errors import (
    ApplyError,
    AuthenticationError,
    NormalizationError,
    UnknownProviderError,
    UnknownSubjectError,
    WebhookError,
    WebhookStatus,
)
from .idempotency import IdempotencyGuard, ReservationStatus
from .normalizers import (
    Auth0PayloadNormalizer,
    KeycloakPayloadNormalizer,
    PayloadNormalizer,
    build_normalizers,
)
from .notifier import LogSyncNotifier, SyncNotifier

__all__ = [
    "ApplyError",
    "Auth0PayloadNormalizer",
    "AuthenticationError",
    "IdempotencyGuard",
    "IdentityStateApplier",
    "KeycloakPayloadNormalizer",
    "LogSyncNotifier",
    "NormalizationError",
    "PayloadNormalizer",
    "ReservationStatus",
    "SyncNotifier",
    "UnknownProviderError",
    "UnknownSubjectError",
    "WebhookDispatcher",
    "WebhookError",
    "WebhookOutcome",
    "WebhookStatus",
    "build_normalizers",
    "compute_patch",
]
