"""
Versioned SQL migrations for the inventory database.

Migration files live next to this module and are named ``v<NNN>_<name>.sql``.
Applied versions are recorded in ``schema_migrations`` together with a short
content checksum; a file edited after it was applied is reported, not re-run.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(?P<version>\d+)_(?P<name>.+)\.sql")

_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT,
    applied_at TEXT DEFAULT (datetime('now')),
    execution_time_ms INTEGER
)
"""


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


@dataclass
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match["version"],
            name=match["name"],
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``directory``, ordered by version."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return found


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum."""
    async with conn.execute("SELECT version, checksum FROM schema_migrations") as cursor:
        return {version: checksum async for version, checksum in cursor}


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one migration script and record it; failures are rolled back and reported."""
    started = time.perf_counter()
    logger.info("applying_migration", version=migration.version, name=migration.name)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations "
            "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, _elapsed_ms(started)),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            migration.version, migration.name, False, _elapsed_ms(started), str(e)
        )

    result = MigrationResult(migration.version, migration.name, True, _elapsed_ms(started))
    logger.info(
        "migration_applied",
        version=result.version,
        name=result.name,
        execution_time_ms=result.execution_time_ms,
    )
    return result


async def initialize_database(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Apply every pending migration, stopping at the first failure.

    Args:
        db_path: database file; defaults to ``STORAGE_DATA_DIR/STORAGE_DB_NAME``

    Returns:
        One result per migration attempted in this run (empty when up to date)
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute(_TRACKING_TABLE)
        await conn.commit()
        applied = await get_applied_migrations(conn)

        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    logger.warning("migration_checksum_changed", version=migration.version)
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    return results


run_migrations = initialize_database
