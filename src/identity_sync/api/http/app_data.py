from dataclasses import dataclass

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.core.services import DbSessionService, SyncNotifier
from src.identity_sync.core.services.webhooks.normalizers import PayloadNormalizer


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    normalizers: dict[ProviderName, PayloadNormalizer]
    webhook_secrets: dict[str, str]
    sync_notifier: SyncNotifier
