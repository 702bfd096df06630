# =============================================================================
# Naive Bayes Classifier
# =============================================================================
# Multinomial Naive Bayes over arbitrary tokens.
#
# How it works:
#   1. train() counts how often each token appears per category and how
#      many examples each category has seen
#   2. classify() asks the probability engine for a score per category:
#      log P(category) + sum of log P(token|category), Laplace-smoothed
#   3. The scores are renormalized so they sum to 1
#
# Options:
#   - binarized:      count each token once per example ("set of words")
#   - assume_uniform: ignore example counts when computing priors
#   - log_vocab:      smooth with ln(vocabulary size) instead of the size
#   - k:              additive smoothing constant (default 1)
#
# The classifier is not thread-safe. Wrap it in a lock if several threads
# need to share one instance.
# =============================================================================

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from nbayes import serialization
from nbayes.core import CategoryStore, ClassificationResult, Vocabulary, calculate_probabilities

if TYPE_CHECKING:
    from nbayes.config import ClassifierConfig

logger = logging.getLogger(__name__)


@dataclass
class ClassifierStats:
    """
    Statistics about the classifier.

    Attributes:
        categories: Number of categories present.
        examples: Training examples across all categories.
        vocabulary_size: Number of distinct tokens in the vocabulary.
        total_tokens: Token occurrences across all categories.
    """
    categories: int = 0
    examples: int = 0
    vocabulary_size: int = 0
    total_tokens: int = 0


class NBayes:
    """
    Naive Bayes classifier with incremental training and untraining.

    Usage:
        >>> nb = NBayes()
        >>> nb.train(["cheap", "pills", "now"], "spam")
        >>> nb.train(["lunch", "at", "noon"], "ham")
        >>> result = nb.classify(["cheap", "lunch", "pills"])
        >>> result.max_class()
        'spam'
        >>> nb.dump("model.json")

    Attributes:
        vocab: Every token seen during training.
        data: Per-category frequency tables.
        assume_uniform: Use a uniform category prior.
        debug: Log each classification query and its result at INFO level.
    """

    def __init__(
        self,
        *,
        k: float = 1,
        binarized: bool = False,
        assume_uniform: bool = False,
        log_vocab: bool = False,
    ) -> None:
        """
        Initialize an empty classifier.

        Args:
            k: Smoothing constant. Must be non-negative.
            binarized: Deduplicate tokens within each example.
            assume_uniform: Treat all categories as equally likely a priori.
            log_vocab: Use the log of the vocabulary size when smoothing.
        """
        self.k = k
        self._binarized = binarized
        self.assume_uniform = assume_uniform
        self.debug = False

        self.vocab = Vocabulary(log_scaled=log_vocab)
        self.data = CategoryStore()

    @classmethod
    def from_config(cls, config: "ClassifierConfig") -> "NBayes":
        """Create a classifier from the [classifier] config section."""
        return cls(
            k=config.k,
            binarized=config.binarized,
            assume_uniform=config.assume_uniform,
            log_vocab=config.log_vocab,
        )

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    @property
    def k(self) -> float:
        """Laplace smoothing constant."""
        return self._k

    @k.setter
    def k(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"Smoothing constant k must be non-negative, got {value}")
        self._k = value

    @property
    def binarized(self) -> bool:
        """True if tokens are deduplicated per example. Fixed at construction."""
        return self._binarized

    @property
    def log_vocab(self) -> bool:
        """True if smoothing uses ln(vocabulary size)."""
        return self.vocab.log_scaled

    @log_vocab.setter
    def log_vocab(self, value: bool) -> None:
        self.vocab.log_scaled = value

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def train(self, tokens: Iterable[Hashable], category: str) -> None:
        """
        Learn one example.

        Args:
            tokens: The example's tokens.
            category: The example's label.
        """
        tokens = self._prepare(tokens)
        self.data.increment_examples(category)
        for token in tokens:
            self.vocab.seen(token)
            self.data.add_token(category, token)

        logger.debug(f"Trained {len(tokens)} tokens into '{category}'")

    def untrain(self, tokens: Iterable[Hashable], category: str) -> None:
        """
        Take back one previously trained example.

        Tokens that aren't trained in the category are skipped. Untraining
        a category's last example deletes the category.

        Args:
            tokens: The example's tokens, as they were trained.
            category: The label it was trained under.
        """
        tokens = self._prepare(tokens)
        if category not in self.data:
            logger.warning(f"Untrain requested for unknown category '{category}'")

        # Decided before the example count drops: removing the last example
        # deletes the category, which would otherwise hide these tokens.
        trained = {token for token in tokens if self.data.token_trained(token, category)}
        self.data.decrement_examples(category)

        for token in tokens:
            if token in trained:
                # NOTE: the token leaves the global vocabulary even if other
                # categories still hold it, which shrinks V for them too.
                self.vocab.delete(token)
                self.data.remove_token(category, token)

        logger.debug(f"Untrained {len(trained)} distinct tokens from '{category}'")

    def ham(self, tokens: Iterable[Hashable]) -> None:
        self.train(tokens, "ham")

    def spam(self, tokens: Iterable[Hashable]) -> None:
        self.train(tokens, "spam")

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(self, tokens: Iterable[Hashable]) -> ClassificationResult:
        """
        Score each category for a list of tokens.

        Args:
            tokens: Tokens to classify.

        Returns:
            ClassificationResult mapping category -> score (scores sum to 1).

        Raises:
            ProbabilityError: For degenerate queries (e.g. empty with a
                              single category).
        """
        tokens = self._prepare(tokens)
        if self.debug:
            logger.info(f"classify: {', '.join(map(str, tokens))}")

        result = calculate_probabilities(
            tokens, self.vocab, self.data, k=self.k, assume_uniform=self.assume_uniform
        )

        if self.debug:
            logger.info(f"results: {result.to_dict()}")
        return result

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def purge_less_than(self, x: float) -> int:
        """
        Remove low-frequency tokens.

        Tokens whose frequency summed across all categories is below `x` are
        dropped from every category and from the vocabulary. Example counts
        are not touched.

        Args:
            x: Minimum total frequency a token needs to survive.

        Returns:
            Number of tokens removed.
        """
        removed = 0
        for token in self.vocab.each():
            if self.data.purge_less_than(token, x):
                self.vocab.delete(token)
                removed += 1

        logger.debug(f"Purged {removed} tokens seen fewer than {x} times; vocabulary is now {len(self.vocab)}")
        return removed

    def delete_category(self, category: str) -> list[str]:
        """
        Remove a category entirely.

        Returns:
            The remaining category names (unchanged if it didn't exist).
        """
        return self.data.delete_category(category)

    def reset(self) -> None:
        """Forget all training data (options are kept)."""
        self.vocab.clear()
        self.data.clear()

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def total_examples(self) -> int:
        return self.data.total_examples()

    def vocab_size(self) -> float:
        return self.vocab.size()

    @property
    def stats(self) -> ClassifierStats:
        """Get classifier statistics."""
        return ClassifierStats(
            categories=len(self.data),
            examples=self.data.total_examples(),
            vocabulary_size=len(self.vocab),
            total_tokens=sum(record.total_tokens for _, record in self.data.items()),
        )

    def category_stats(self) -> str:
        """Human-readable summary, one line per category."""
        total = self.data.total_examples()
        lines = []
        for category, record in self.data.items():
            share = 100.0 * record.examples / total if total else 0.0
            lines.append(
                f"For category {category}, {record.examples} examples "
                f"({share:.02f}% of the total) and {record.total_tokens} total_tokens"
            )
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Saving and Loading
    # -------------------------------------------------------------------------

    def dump(self, target: str | Path | None = None) -> str | None:
        """
        Serialize the classifier.

        Args:
            target: File path to write to. If None, nothing is written.

        Returns:
            The JSON document when no target is given, otherwise None.
        """
        document = serialization.dumps(self)
        if target is None:
            return document

        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
        logger.info(f"Saved classifier to {path} ({len(self.data)} categories, {len(self.vocab)} tokens)")
        return None

    @classmethod
    def load(cls, source: str | Path | None = None) -> "NBayes":
        """
        Restore a classifier.

        Args:
            source: None for a fresh classifier, an inline JSON document, or
                    a path to a file written by dump().

        Returns:
            The restored classifier.

        Raises:
            SnapshotError: If the content is not a valid snapshot.
            FileNotFoundError: If `source` is a path that doesn't exist.
        """
        if source is None:
            return cls()
        if isinstance(source, str) and serialization.looks_like_document(source):
            return serialization.loads(source)

        path = Path(source)
        classifier = serialization.loads(path.read_text(encoding="utf-8"))
        logger.info(f"Loaded classifier from {path}")
        return classifier

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _prepare(self, tokens: Iterable[Hashable]) -> list[Hashable]:
        """Materialize tokens, deduplicating them in binarized mode."""
        if self.binarized:
            return list(dict.fromkeys(tokens))
        return list(tokens)

    def __repr__(self) -> str:
        return (
            f"NBayes(categories={self.data.categories()!r}, vocabulary={len(self.vocab)}, "
            f"k={self.k}, binarized={self.binarized})"
        )
