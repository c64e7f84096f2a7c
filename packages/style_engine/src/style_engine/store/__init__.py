"""Settings store, commit protocol and persistence collaborators."""

from style_engine.store.export import (
    EXPORT_FORMAT_VERSION,
    ExportDocument,
    build_export,
    parse_export,
)
from style_engine.store.models import CommitResult, CommitState, FailureKind
from style_engine.store.persistence import (
    InMemoryPersistence,
    SettingsPersistence,
    SQLitePersistence,
)
from style_engine.store.store import SettingsStore

__all__ = [
    "EXPORT_FORMAT_VERSION",
    "CommitResult",
    "CommitState",
    "ExportDocument",
    "FailureKind",
    "InMemoryPersistence",
    "SQLitePersistence",
    "SettingsPersistence",
    "SettingsStore",
    "build_export",
    "parse_export",
]
