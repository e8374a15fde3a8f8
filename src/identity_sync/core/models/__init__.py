"""Provider-agnostic identity event and user identity state models."""

from .identity import (
    IdentityEvent,
    IdentityPatch,
    MfaChange,
    MfaType,
    ProviderName,
    UserIdentitySnapshot,
    compute_fingerprint,
    ensure_utc,
)

__all__ = [
    "IdentityEvent",
    "IdentityPatch",
    "MfaChange",
    "MfaType",
    "ProviderName",
    "UserIdentitySnapshot",
    "compute_fingerprint",
    "ensure_utc",
]
