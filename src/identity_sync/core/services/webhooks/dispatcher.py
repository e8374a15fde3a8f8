"""Per-call orchestration of inbound identity provider webhooks."""

from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.identity_sync.core.models.identity import (
    IdentityEvent,
    ProviderName,
    UserIdentitySnapshot,
)
from src.identity_sync.core.security import verify_webhook_secret
from src.identity_sync.core.services.user.user_store import UserStore
from src.identity_sync.core.services.webhooks.applier import IdentityStateApplier
from src.identity_sync.core.services.webhooks.errors import (
    STATUS_CODES,
    ApplyError,
    AuthenticationError,
    UnknownProviderError,
    WebhookError,
    WebhookStatus,
)
from src.identity_sync.core.services.webhooks.idempotency import (
    IdempotencyGuard,
    ReservationStatus,
)
from src.identity_sync.core.services.webhooks.normalizers import PayloadNormalizer
from src.identity_sync.core.services.webhooks.notifier import SyncNotifier


@dataclass(frozen=True)
class WebhookOutcome:
    """Result of one webhook call, ready to be rendered as an HTTP response."""

    status: WebhookStatus
    detail: str
    fingerprint: str | None = None
    snapshot: UserIdentitySnapshot | None = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.status]


class WebhookDispatcher:
    """Authenticates, normalizes and applies a single webhook delivery.

    One instance serves one request: it owns the request's database session
    and commits or rolls back the whole unit of work (ledger reservation plus
    user update) together. There is no retry here; providers retry, and the
    ledger turns their retries into duplicates.

    The user row is read again, under lock, after the reservation, so two
    deliveries for the same user never apply against the same stale state.
    """

    def __init__(
        self,
        db_session: Session,
        normalizers: dict[ProviderName, PayloadNormalizer],
        secrets: dict[str, str],
        notifier: SyncNotifier,
    ):
        self._db_session = db_session
        self._normalizers = normalizers
        self._secrets = secrets
        self._notifier = notifier
        self._guard = IdempotencyGuard(db_session)
        self._applier = IdentityStateApplier(UserStore(db_session))

    def handle(
        self,
        provider: str,
        secret_header: str | None,
        raw_body: bytes,
        received_at: datetime | None = None,
    ) -> WebhookOutcome:
        """Process one delivery.

        Args:
            provider: Provider name from the route.
            secret_header: Value of the shared-secret header, if any.
            raw_body: Request body, untouched.
            received_at: Delivery time; dates sync snapshots that carry no
                timestamp. Defaults to now.
        """
        log = logger.bind(provider=provider, body_bytes=len(raw_body))
        event: IdentityEvent | None = None
        try:
            normalizer = self._authenticate(provider, secret_header)
            event = normalizer.normalize(raw_body, received_at)
            if event is None:
                log.info("Ignoring unhandled provider event kind")
                return WebhookOutcome(WebhookStatus.IGNORED, "Event kind not handled")

            log = log.bind(fingerprint=event.fingerprint, event_type=event.event_type)
            outcome = self._apply_once(event)
        except WebhookError as exc:
            self._log_failure(log, exc)
            return WebhookOutcome(
                exc.status,
                exc.public_detail,
                fingerprint=event.fingerprint if event else None,
            )

        log.bind(outcome=outcome.status.value).info("webhook.processed")
        if outcome.status is WebhookStatus.APPLIED and outcome.snapshot is not None:
            self._notify(outcome.snapshot, event)
        return outcome

    def _authenticate(self, provider: str, secret_header: str | None) -> PayloadNormalizer:
        try:
            provider_name = ProviderName(provider)
        except ValueError:
            raise UnknownProviderError(f"unsupported provider {provider!r}") from None

        normalizer = self._normalizers.get(provider_name)
        if normalizer is None or provider not in self._secrets:
            raise UnknownProviderError(f"provider {provider!r} is not enabled")

        if not verify_webhook_secret(secret_header, self._secrets[provider]):
            raise AuthenticationError("secret header missing or invalid")
        return normalizer

    def _apply_once(self, event: IdentityEvent) -> WebhookOutcome:
        session = self._db_session
        try:
            user = self._applier.resolve(event)
            status = self._guard.check_and_reserve(event.fingerprint, user.id, event.provider)
            if status is ReservationStatus.ALREADY_PROCESSED:
                return WebhookOutcome(
                    WebhookStatus.DUPLICATE,
                    "Event already processed",
                    fingerprint=event.fingerprint,
                )

            snapshot = self._applier.apply(event, user=user)
            session.commit()
        except WebhookError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            raise ApplyError("transaction failed") from exc

        return WebhookOutcome(
            WebhookStatus.APPLIED,
            "Identity updated",
            fingerprint=event.fingerprint,
            snapshot=snapshot,
        )

    def _notify(self, snapshot: UserIdentitySnapshot, event: IdentityEvent) -> None:
        try:
            self._notifier.notify(snapshot, event)
        except Exception:
            logger.bind(fingerprint=event.fingerprint).exception("Sync notification failed")

    @staticmethod
    def _log_failure(log, exc: WebhookError) -> None:
        bound = log.bind(outcome=exc.status.value, error_type=type(exc).__name__)
        if isinstance(exc, ApplyError):
            bound.opt(exception=exc).error("webhook.failed: {}", exc)
        elif isinstance(exc, (AuthenticationError, UnknownProviderError)):
            bound.warning("webhook.rejected: {}", exc)
        else:
            bound.info("webhook.not_applied: {}", exc)
