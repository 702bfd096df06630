# =============================================================================
# Database Connection and Schema Management
# =============================================================================
# Manages the SQLite database that can hold a classifier's state.
#
# Schema overview:
#   - categories: Category names and their training example counts
#   - tokens:     Per-category token frequencies
#   - vocabulary: Distinct tokens seen during training
#   - settings:   Classifier options (k, binarized, ...)
#
# Tokens are opaque, so they are stored JSON-encoded in TEXT columns.
#
# Uses aiosqlite for async operations, with WAL mode for better
# concurrent performance.
# =============================================================================

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)


# Current schema version - increment when making schema changes
SCHEMA_VERSION = 1


class Database:
    """
    Manages the SQLite database connection and schema.

    Usage:
        >>> db = Database(Path("nbayes.db"))
        >>> await db.connect()
        >>> async with db.conn.execute("SELECT ...") as cursor:
        ...     rows = await cursor.fetchall()
        >>> await db.close()

    Or as an async context manager:
        >>> async with Database(path) as db:
        ...     ...

    Attributes:
        db_path: Path to the SQLite database file.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the database manager.

        Args:
            db_path: Path to the database file.
        """
        self.db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """
        Open the database connection and ensure schema is up to date.

        Creates the database file if it doesn't exist.
        """
        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)

        # Enable foreign keys (off by default in SQLite)
        await self._connection.execute("PRAGMA foreign_keys = ON")

        # Enable WAL mode for better concurrent performance
        await self._connection.execute("PRAGMA journal_mode = WAL")

        await self._init_schema()
        logger.debug(f"Connected to {self.db_path}")

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def conn(self) -> aiosqlite.Connection:
        """
        Get the active database connection.

        Raises:
            RuntimeError: If not connected.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    async def _init_schema(self) -> None:
        """
        Initialize the database schema.

        Creates tables if they don't exist.
        """
        try:
            async with self.conn.execute(
                "SELECT version FROM schema_version"
            ) as cursor:
                row = await cursor.fetchone()
                current_version = row[0] if row else 0
        except aiosqlite.OperationalError:
            # Table doesn't exist, this is a fresh database
            current_version = 0

        if current_version < SCHEMA_VERSION:
            await self._create_schema()

    async def _create_schema(self) -> None:
        """Create the database schema from scratch."""
        schema = """
        -- Schema version tracking
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY
        );

        -- Categories and their example counts
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            examples INTEGER NOT NULL DEFAULT 0
        );

        -- Token frequencies per category
        CREATE TABLE IF NOT EXISTS tokens (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
            token TEXT NOT NULL,      -- JSON-encoded token
            frequency INTEGER NOT NULL DEFAULT 1,
            UNIQUE(category_id, token)
        );

        -- Distinct tokens seen during training
        CREATE TABLE IF NOT EXISTS vocabulary (
            token TEXT PRIMARY KEY    -- JSON-encoded token
        );

        -- Classifier options
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL       -- JSON-encoded value
        );

        CREATE INDEX IF NOT EXISTS idx_tokens_category ON tokens(category_id);
        CREATE INDEX IF NOT EXISTS idx_tokens_token ON tokens(token);
        """

        await self.conn.executescript(schema)

        await self.conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,)
        )
        await self.conn.commit()
