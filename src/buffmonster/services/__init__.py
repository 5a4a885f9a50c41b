"""Service layer helpers (config, persistence, session)."""

from .config import AppConfig, ConfigLoader
from .session import DocumentSession
from .store import DocumentStore, LoadOutcome, SaveResult

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "DocumentSession",
    "DocumentStore",
    "LoadOutcome",
    "SaveResult",
]
