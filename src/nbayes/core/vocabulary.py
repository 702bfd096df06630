# =============================================================================
# Vocabulary
# =============================================================================
# The set of distinct tokens the classifier has seen during training.
#
# Its size is the "V" in Laplace smoothing:
#   P(token|class) = (count(token, class) + k) / (total_tokens(class) + k * V)
#
# Tokens are opaque - anything hashable works (words, ints, tuples...).
# =============================================================================

import math
from collections.abc import Hashable, Iterator


class Vocabulary:
    """
    Tracks every token observed via training.

    Usage:
        >>> vocab = Vocabulary()
        >>> vocab.seen("viagra")
        >>> vocab.size()
        1

    Attributes:
        log_scaled: If True, size() returns ln(count) instead of count.
    """

    def __init__(self, log_scaled: bool = False) -> None:
        self.log_scaled = log_scaled
        # dict keeps insertion order, which makes snapshots stable
        self._tokens: dict[Hashable, None] = {}

    def seen(self, token: Hashable) -> None:
        """Mark a token as present. Idempotent."""
        self._tokens[token] = None

    def delete(self, token: Hashable) -> None:
        """Remove a token. No-op if it isn't there."""
        self._tokens.pop(token, None)

    def size(self) -> float:
        """
        Returns the smoothing support size.

        With log scaling on, an empty vocabulary reports 0.0 rather than
        ln(0), so the smoothing term simply vanishes.
        """
        count = len(self._tokens)
        if self.log_scaled:
            return math.log(count) if count > 0 else 0.0
        return count

    def each(self) -> Iterator[Hashable]:
        """Iterate over a snapshot of all tokens (safe to mutate while looping)."""
        return iter(list(self._tokens))

    def clear(self) -> None:
        self._tokens.clear()

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[Hashable]:
        return self.each()

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"Vocabulary(tokens={len(self._tokens)}, log_scaled={self.log_scaled})"
