"""Database module for KeyGuard."""

from keyguard.database.connection import check_db, close_db, get_session, init_db
from keyguard.database.models import ProgressRecord, ScanRecord
from keyguard.database.repository import ScanRepository
from keyguard.database.store import DatabaseScanStore, MemoryScanStore

__all__ = [
    "check_db",
    "get_session",
    "init_db",
    "close_db",
    "ProgressRecord",
    "ScanRecord",
    "ScanRepository",
    "DatabaseScanStore",
    "MemoryScanStore",
]
