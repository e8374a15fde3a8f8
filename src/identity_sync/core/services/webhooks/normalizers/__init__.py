"""Provider payload normalizers."""

from src.identity_sync.core.models.identity import ProviderName

from .auth0 import Auth0PayloadNormalizer
from .base import PayloadNormalizer, map_mfa_type
from .keycloak import KeycloakPayloadNormalizer


def build_normalizers() -> dict[ProviderName, PayloadNormalizer]:
    """One normalizer per supported provider, keyed by provider name."""
    normalizers: list[PayloadNormalizer] = [
        Auth0PayloadNormalizer(),
        KeycloakPayloadNormalizer(),
    ]
    return {normalizer.provider: normalizer for normalizer in normalizers}


__all__ = [
    "Auth0PayloadNormalizer",
    "KeycloakPayloadNormalizer",
    "PayloadNormalizer",
    "build_normalizers",
    "map_mfa_type",
]
