# =============================================================================
# Probability Engine
# =============================================================================
# Turns token counts into per-category scores.
#
# For every category c:
#   prior(c) = ln(1 / N)                        if the prior is assumed uniform
#            = ln(examples(c) / total_examples) otherwise
#   raw(c)   = prior(c) + sum over query tokens t of
#              ln((count(c, t) + k) / (total_tokens(c) + k * V))
#
# raw(c) is a log probability, so it is <= 0 and the *smallest magnitude*
# wins. Instead of exponentiating, scores are renormalized by reciprocals:
#
#   normalizer   = sum(raw)
#   intermed(c)  = normalizer / raw(c)
#   final(c)     = intermed(c) / sum(intermed)
#
#   Ex: raw = -1, -1, -2  ->  4/1, 4/1, 4/2  ->  0.4, 0.4, 0.2
#
# This is NOT a softmax - the numbers differ - and callers depend on these
# exact values (e.g. identical categories score exactly 0.5 / 0.5).
# =============================================================================

import logging
import math
from collections.abc import Hashable, Iterable, Mapping

from nbayes.core.category import CategoryRecord, CategoryStore
from nbayes.core.result import ClassificationResult
from nbayes.core.vocabulary import Vocabulary

logger = logging.getLogger(__name__)


def category_prior(
    record: CategoryRecord,
    total_examples: int,
    num_categories: int,
    *,
    assume_uniform: bool = False,
) -> float:
    """
    Log prior probability of a category.

    Args:
        record: The category's record.
        total_examples: Examples across all categories.
        num_categories: Number of categories present.
        assume_uniform: Ignore example counts and treat all categories alike.

    Raises:
        ProbabilityError: If the category has no training examples (only
                          possible when tokens were added to it directly).
    """
    if assume_uniform:
        return math.log(1 / num_categories)
    if record.examples < 1 or total_examples < 1:
        raise ProbabilityError(
            f"Category has {record.examples} examples out of {total_examples}; "
            f"train it or use a uniform prior"
        )
    return math.log(record.examples / total_examples)


def token_log_likelihood(
    record: CategoryRecord,
    tokens: Iterable[Hashable],
    *,
    k: float,
    vocab_size: float,
) -> float:
    """
    Sum of Laplace-smoothed log P(token|category) over the query tokens.

    Raises:
        ProbabilityError: If a smoothed probability is zero (k == 0 and the
                          token was never seen in this category).
    """
    denominator = float(record.total_tokens + k * vocab_size)
    log_probs = 0.0
    for token in tokens:
        numerator = record.count_of(token) + k
        if numerator <= 0 or denominator <= 0:
            raise ProbabilityError(
                f"Zero probability for token {token!r} (k={k}); use k > 0 to smooth unseen tokens"
            )
        log_probs += math.log(numerator / denominator)
    return log_probs


def renormalize(raw: Mapping[str, float]) -> dict[str, float]:
    """
    Convert raw log scores into scores that sum to 1.

    Args:
        raw: category -> raw log score (all expected to be negative).

    Returns:
        category -> final score.

    Raises:
        ProbabilityError: If any raw score is exactly zero.
    """
    degenerate = [category for category, value in raw.items() if value == 0]
    if degenerate:
        raise ProbabilityError(
            f"Raw score is exactly 0 for {degenerate!r}; cannot renormalize "
            f"(empty query against a certain prior?)"
        )

    normalizer = sum(raw.values())
    intermediate = {category: normalizer / value for category, value in raw.items()}
    renormalizer = sum(intermediate.values())
    return {category: value / renormalizer for category, value in intermediate.items()}


def calculate_probabilities(
    tokens: Iterable[Hashable],
    vocabulary: Vocabulary,
    store: CategoryStore,
    *,
    k: float = 1,
    assume_uniform: bool = False,
) -> ClassificationResult:
    """
    Score every category for the given query tokens.

    Args:
        tokens: Query tokens (duplicates count multiple times).
        vocabulary: Source of the smoothing support size V.
        store: Category frequency tables.
        k: Additive smoothing constant.
        assume_uniform: Use a uniform category prior.

    Returns:
        ClassificationResult mapping category -> score. Empty when no
        category has been trained.
    """
    tokens = list(tokens)
    if len(store) == 0:
        return ClassificationResult()

    vocab_size = vocabulary.size()
    total_examples = store.total_examples()
    num_categories = len(store)

    raw: dict[str, float] = {}
    for category, record in store.items():
        prior = category_prior(
            record, total_examples, num_categories, assume_uniform=assume_uniform
        )
        raw[category] = token_log_likelihood(record, tokens, k=k, vocab_size=vocab_size) + prior

    logger.debug(f"Raw log scores (V={vocab_size}, k={k}): {raw}")
    return ClassificationResult(renormalize(raw))


# =============================================================================
# Exceptions
# =============================================================================

class ProbabilityError(ArithmeticError):
    """Raised when scores cannot be computed (zero probabilities or raw scores)."""
    pass
