from .config import ConfigurationError, IntakeConfig, load_config
from .store import DraftStore, DuplicateDraftError, InMemoryDraftStore, StorageError

__all__ = [
    "ConfigurationError",
    "IntakeConfig",
    "load_config",
    "DraftStore",
    "DuplicateDraftError",
    "InMemoryDraftStore",
    "StorageError",
]
