# =============================================================================
# Category Store
# =============================================================================
# Per-category frequency accounting for the classifier.
#
# Every category has a CategoryRecord:
#   - tokens:       token -> frequency (always >= 1 for stored entries)
#   - total_tokens: sum of all frequencies in `tokens`
#   - examples:     number of train() calls attributed to the category
#
# Lifecycle rules:
#   - Categories appear on first reference (train / add_token).
#   - A category whose examples drop below 1 is deleted outright.
#   - A category whose total_tokens drop below 1 through a removal is
#     deleted outright.
#   - A token whose frequency drops below 1 is removed from the table.
# =============================================================================

import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class CategoryRecord:
    """
    Aggregate training state for one category.

    Attributes:
        tokens: Token frequency table.
        total_tokens: Sum of all token frequencies.
        examples: Number of training examples seen for this category.
    """
    tokens: dict[Hashable, int] = field(default_factory=dict)
    total_tokens: int = 0
    examples: int = 0

    def count_of(self, token: Hashable) -> int:
        """Frequency of a token, 0 when it was never recorded."""
        return self.tokens.get(token, 0)


class CategoryStore:
    """
    Owns the category name -> CategoryRecord table.

    Records are only ever created through ensure(), which replaces the
    auto-vivifying default dict a naive implementation would use. That
    keeps the "no zero-example category" invariant visible in one place.

    Usage:
        >>> store = CategoryStore()
        >>> store.increment_examples("spam")
        >>> store.add_token("spam", "viagra")
        >>> store.count_of("spam", "viagra")
        1
    """

    def __init__(self) -> None:
        self._records: dict[str, CategoryRecord] = {}

    # -------------------------------------------------------------------------
    # Category Access
    # -------------------------------------------------------------------------

    def categories(self) -> list[str]:
        """Names of the categories currently present, in creation order."""
        return list(self._records)

    def ensure(self, category: str) -> CategoryRecord:
        """
        Get the mutable record for a category, creating an empty one if needed.

        Args:
            category: Category name.

        Returns:
            The live CategoryRecord (mutations are visible to the store).
        """
        record = self._records.get(category)
        if record is None:
            record = CategoryRecord()
            self._records[category] = record
            logger.debug(f"Created category '{category}'")
        return record

    def get(self, category: str) -> CategoryRecord | None:
        """Get a category's record without creating it."""
        return self._records.get(category)

    def delete_category(self, category: str) -> list[str]:
        """
        Remove a category and everything it holds.

        Args:
            category: Category to remove. Unknown names are ignored.

        Returns:
            The remaining category names.
        """
        if self._records.pop(category, None) is not None:
            logger.debug(f"Deleted category '{category}'")
        return self.categories()

    # -------------------------------------------------------------------------
    # Example Counts
    # -------------------------------------------------------------------------

    def increment_examples(self, category: str) -> None:
        self.ensure(category).examples += 1

    def decrement_examples(self, category: str) -> None:
        """
        Drop one example from a category, deleting it when none remain.

        An unknown category is created and immediately deleted again, so
        the net effect on the store is nothing.
        """
        record = self.ensure(category)
        record.examples -= 1
        if record.examples < 1:
            self.delete_category(category)

    def total_examples(self) -> int:
        """Sum of example counts across all categories."""
        return sum(record.examples for record in self._records.values())

    # -------------------------------------------------------------------------
    # Token Frequencies
    # -------------------------------------------------------------------------

    def add_token(self, category: str, token: Hashable) -> None:
        """
        Count one more occurrence of a token in a category.

        A new category created here has zero examples until
        increment_examples() is called for it; NBayes.train() always does
        that first. Scoring such a category with a non-uniform prior raises
        ProbabilityError.
        """
        record = self.ensure(category)
        record.tokens[token] = record.tokens.get(token, 0) + 1
        record.total_tokens += 1

    def remove_token(self, category: str, token: Hashable) -> bool:
        """
        Count one fewer occurrence of a token in a category.

        Nothing happens when the category or the token entry is absent:
        there is no occurrence to take back.

        Returns:
            True if a count was removed.
        """
        record = self._records.get(category)
        if record is None or token not in record.tokens:
            return False

        record.tokens[token] -= 1
        record.total_tokens -= 1
        if record.tokens[token] < 1:
            del record.tokens[token]
        if record.total_tokens < 1:
            self.delete_category(category)
        return True

    def token_trained(self, token: Hashable, category: str) -> bool:
        """True if the category exists and has an entry for the token."""
        record = self._records.get(category)
        return record is not None and token in record.tokens

    def count_of(self, category: str, token: Hashable) -> int:
        """Frequency of a token in a category, 0 if either is absent."""
        record = self._records.get(category)
        return record.count_of(token) if record is not None else 0

    def total_count_of(self, token: Hashable) -> int:
        """Frequency of a token summed across every category."""
        return sum(record.count_of(token) for record in self._records.values())

    def purge_less_than(self, token: Hashable, threshold: float) -> bool:
        """
        Drop a token everywhere if it is rarer than `threshold` overall.

        The frequency is summed across all categories first. Categories
        whose total_tokens fall to zero as a result are deleted. Example
        counts are left alone, so purging is not always identical to never
        having trained the token.

        Args:
            token: Token to check.
            threshold: Minimum cross-category frequency to keep the token.

        Returns:
            True if the token was removed, False if it was kept.
        """
        if self.total_count_of(token) >= threshold:
            return False

        for category in self.categories():
            record = self._records[category]
            count = record.tokens.pop(token, None)
            if count is None:
                continue
            record.total_tokens -= count
            if record.total_tokens < 1:
                self.delete_category(category)
        return True

    def clear(self) -> None:
        self._records.clear()

    # -------------------------------------------------------------------------
    # Container Protocol
    # -------------------------------------------------------------------------

    def items(self) -> Iterator[tuple[str, CategoryRecord]]:
        return iter(list(self._records.items()))

    def __contains__(self, category: object) -> bool:
        return category in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self.categories())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"CategoryStore(categories={self.categories()!r})"
