"""Versioned SQL migrations for the SQLite store."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    initialize_database,
    run_migrations,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "initialize_database",
    "run_migrations",
]
