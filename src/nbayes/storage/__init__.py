# =============================================================================
# Storage Module
# =============================================================================
# Persists classifier state in SQLite.
#
# Provides:
#   - Database initialization and schema management
#   - Row-level token/category operations (upsert, decrement, delete, ...)
#   - Whole-classifier save/load
#   - Async operations via aiosqlite
#
# The classifier itself stays in memory; this module is the durable
# backend it can be copied into and restored from.
# =============================================================================

from nbayes.storage.database import Database
from nbayes.storage.repository import Repository

__all__ = ["Database", "Repository"]
