# =============================================================================
# Repository - Data Access Layer
# =============================================================================
# Storage operations for classifier state.
#
# Two levels of access:
#   - Row-level operations mirroring the classifier's own accounting
#     (upsert, decrement, delete, keys, count, has_category, ...)
#   - Whole-classifier save/load, which copies an in-memory NBayes into
#     the tables and back in a single transaction
#
# Example counts are kept in the categories table, so a classifier
# restored after a crash keeps its category priors.
#
# All methods are async. Database errors propagate to the caller; nothing
# here retries.
# =============================================================================

import json
import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

from nbayes import serialization
from nbayes.classifier import NBayes
from nbayes.core import CategoryRecord

if TYPE_CHECKING:
    from nbayes.storage.database import Database

logger = logging.getLogger(__name__)


def _encode(token: Hashable) -> str:
    """JSON-encode a token for a TEXT column."""
    return json.dumps(serialization.encode_token(token))


def _decode(text: str) -> Hashable:
    return serialization.decode_token(json.loads(text))


class Repository:
    """
    Data access layer for classifier state.

    Usage:
        >>> repo = Repository(database)
        >>> await repo.save_classifier(nb)
        >>> restored = await repo.load_classifier()
        >>> await repo.upsert("spam", "viagra")

    Attributes:
        db: Database instance for executing queries.
    """

    def __init__(self, db: "Database") -> None:
        """
        Initialize the repository.

        Args:
            db: Connected Database instance.
        """
        self.db = db

    # =========================================================================
    # Category Operations
    # =========================================================================

    async def category_names(self) -> list[str]:
        """Names of all stored categories, in creation order."""
        async with self.db.conn.execute(
            "SELECT name FROM categories ORDER BY id"
        ) as cursor:
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    async def has_category(self, name: str) -> bool:
        async with self.db.conn.execute(
            "SELECT 1 FROM categories WHERE name = ?", (name,)
        ) as cursor:
            return await cursor.fetchone() is not None

    async def delete_category(self, name: str) -> list[str]:
        """
        Delete a category and its token rows.

        Returns:
            The remaining category names.
        """
        await self.db.conn.execute("DELETE FROM categories WHERE name = ?", (name,))
        await self.db.conn.commit()
        return await self.category_names()

    async def increment_examples(self, name: str) -> None:
        """Add one training example to a category, creating it if needed."""
        await self._ensure_category(name)
        await self.db.conn.execute(
            "UPDATE categories SET examples = examples + 1 WHERE name = ?", (name,)
        )
        await self.db.conn.commit()

    async def decrement_examples(self, name: str) -> None:
        """Remove one training example, deleting the category at zero."""
        await self.db.conn.execute(
            "UPDATE categories SET examples = examples - 1 WHERE name = ?", (name,)
        )
        await self.db.conn.execute(
            "DELETE FROM categories WHERE name = ? AND examples < 1", (name,)
        )
        await self.db.conn.commit()

    async def category_record(self, name: str) -> CategoryRecord | None:
        """
        Read a category's aggregate state.

        Returns:
            CategoryRecord, or None if the category doesn't exist.
        """
        async with self.db.conn.execute(
            "SELECT id, examples FROM categories WHERE name = ?", (name,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None

        category_id, examples = row
        async with self.db.conn.execute(
            "SELECT token, frequency FROM tokens WHERE category_id = ? ORDER BY id",
            (category_id,)
        ) as cursor:
            tokens = {_decode(token): frequency for token, frequency in await cursor.fetchall()}

        return CategoryRecord(tokens=tokens, total_tokens=sum(tokens.values()), examples=examples)

    # =========================================================================
    # Token Operations
    # =========================================================================

    async def upsert(self, category: str, token: Hashable) -> None:
        """
        Count one occurrence of a token in a category.

        Inserts a fresh row with frequency 1 if the pair is new.
        """
        category_id = await self._ensure_category(category)
        await self.db.conn.execute(
            """INSERT INTO tokens (category_id, token, frequency)
               VALUES (?, ?, 1)
               ON CONFLICT(category_id, token) DO UPDATE SET
                   frequency = frequency + 1""",
            (category_id, _encode(token))
        )
        await self.db.conn.commit()

    async def decrement(self, category: str, token: Hashable) -> int | None:
        """
        Take one occurrence of a token away from a category.

        The row is left in place even at zero; call delete() to drop it.

        Returns:
            The remaining frequency, or None if there was no such row.
        """
        encoded = _encode(token)
        await self.db.conn.execute(
            """UPDATE tokens SET frequency = frequency - 1
               WHERE token = ?
               AND category_id = (SELECT id FROM categories WHERE name = ?)""",
            (encoded, category)
        )
        await self.db.conn.commit()

        async with self.db.conn.execute(
            """SELECT frequency FROM tokens
               WHERE token = ?
               AND category_id = (SELECT id FROM categories WHERE name = ?)""",
            (encoded, category)
        ) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else None

    async def delete(self, category: str, token: Hashable) -> None:
        """Remove a token's row from a category entirely."""
        await self.db.conn.execute(
            """DELETE FROM tokens
               WHERE token = ?
               AND category_id = (SELECT id FROM categories WHERE name = ?)""",
            (_encode(token), category)
        )
        await self.db.conn.commit()

    async def token_keys(self) -> list[Hashable]:
        """Distinct tokens present in any category."""
        async with self.db.conn.execute(
            "SELECT DISTINCT token FROM tokens ORDER BY token"
        ) as cursor:
            rows = await cursor.fetchall()
            return [_decode(row[0]) for row in rows]

    async def token_count(self) -> int:
        """Number of distinct tokens present in any category."""
        async with self.db.conn.execute(
            "SELECT count(DISTINCT token) FROM tokens"
        ) as cursor:
            row = await cursor.fetchone()
            return row[0]

    async def probability_data(self) -> tuple[int, int, int]:
        """
        Aggregate figures needed for smoothing.

        Returns:
            (category count, distinct token count, total token frequency)
        """
        async with self.db.conn.execute(
            """SELECT
                   (SELECT count(*) FROM categories),
                   (SELECT count(DISTINCT token) FROM tokens),
                   (SELECT coalesce(sum(frequency), 0) FROM tokens)"""
        ) as cursor:
            row = await cursor.fetchone()
            return row[0], row[1], row[2]

    # =========================================================================
    # Whole-Classifier Operations
    # =========================================================================

    async def save_classifier(self, classifier: NBayes) -> None:
        """
        Replace the stored state with a classifier's current state.

        Runs in one transaction: either everything is written or nothing is.

        Args:
            classifier: Classifier to persist.
        """
        document = serialization.to_dict(classifier)

        try:
            await self.db.conn.execute("DELETE FROM tokens")
            await self.db.conn.execute("DELETE FROM categories")
            await self.db.conn.execute("DELETE FROM vocabulary")
            await self.db.conn.execute("DELETE FROM settings")

            await self.db.conn.executemany(
                "INSERT INTO settings (key, value) VALUES (?, ?)",
                [(key, json.dumps(value)) for key, value in document["config"].items()]
            )
            await self.db.conn.executemany(
                "INSERT INTO vocabulary (token) VALUES (?)",
                [(json.dumps(token),) for token in document["vocabulary"]]
            )

            for name, entry in document["categories"].items():
                cursor = await self.db.conn.execute(
                    "INSERT INTO categories (name, examples) VALUES (?, ?)",
                    (name, entry["examples"])
                )
                category_id = cursor.lastrowid
                await self.db.conn.executemany(
                    "INSERT INTO tokens (category_id, token, frequency) VALUES (?, ?, ?)",
                    [(category_id, json.dumps(token), count) for token, count in entry["tokens"]]
                )

            await self.db.conn.commit()
        except Exception:
            await self.db.conn.rollback()
            raise

        logger.info(
            f"Saved classifier to {self.db.db_path} "
            f"({len(document['categories'])} categories, {len(document['vocabulary'])} tokens)"
        )

    async def load_classifier(self) -> NBayes:
        """
        Rebuild a classifier from the stored state.

        Categories with no recorded examples (created by upsert() alone) and
        rows left at zero by decrement() are skipped, since neither can be
        scored.

        Returns:
            The restored classifier (empty with default options if nothing
            has been saved yet).

        Raises:
            SnapshotError: If the stored rows are inconsistent.
        """
        async with self.db.conn.execute("SELECT key, value FROM settings") as cursor:
            config = {key: json.loads(value) for key, value in await cursor.fetchall()}

        async with self.db.conn.execute("SELECT token FROM vocabulary") as cursor:
            vocabulary = [json.loads(row[0]) for row in await cursor.fetchall()]

        categories: dict[str, Any] = {}
        async with self.db.conn.execute(
            "SELECT id, name, examples FROM categories ORDER BY id"
        ) as cursor:
            category_rows = await cursor.fetchall()

        for category_id, name, examples in category_rows:
            if examples < 1:
                logger.debug(f"Skipping category {name!r} with no examples")
                continue
            async with self.db.conn.execute(
                """SELECT token, frequency FROM tokens
                   WHERE category_id = ? AND frequency > 0 ORDER BY id""",
                (category_id,)
            ) as cursor:
                tokens = [[json.loads(token), frequency] for token, frequency in await cursor.fetchall()]
            categories[name] = {
                "examples": examples,
                "total_tokens": sum(count for _, count in tokens),
                "tokens": tokens,
            }

        classifier = serialization.from_dict({
            "format": serialization.FORMAT_NAME,
            "version": serialization.FORMAT_VERSION,
            "config": config,
            "vocabulary": vocabulary,
            "categories": categories,
        })
        logger.info(f"Loaded classifier from {self.db.db_path} ({len(categories)} categories)")
        return classifier

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    async def _ensure_category(self, name: str) -> int:
        """Get a category's id, inserting it with zero examples if needed."""
        await self.db.conn.execute(
            "INSERT OR IGNORE INTO categories (name) VALUES (?)", (name,)
        )
        async with self.db.conn.execute(
            "SELECT id FROM categories WHERE name = ?", (name,)
        ) as cursor:
            row = await cursor.fetchone()
            return row[0]
