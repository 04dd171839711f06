from .catalog import FeederCatalog, SyncResult, SyncStatus
from .repository import SCHEMA_KEY, FeederCacheRepository

__all__ = [
    "FeederCatalog",
    "FeederCacheRepository",
    "SCHEMA_KEY",
    "SyncResult",
    "SyncStatus",
]
