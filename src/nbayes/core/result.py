# =============================================================================
# Classification Result
# =============================================================================
# Read-only category -> score mapping returned by classify(), with a
# max_class() helper for picking the winner.
# =============================================================================

from collections.abc import Iterator, Mapping


def max_class(scores: Mapping[str, float]) -> str | None:
    """
    Returns the category with the highest score.

    Ties go to whichever tied category comes first in iteration order.
    Returns None for an empty mapping.
    """
    if not scores:
        return None
    return max(scores, key=scores.__getitem__)


class ClassificationResult(Mapping[str, float]):
    """
    Scores produced by classifying a list of tokens.

    Behaves like a read-only dict:

        >>> result = classifier.classify(["cheap", "pills"])
        >>> result["spam"]
        0.71...
        >>> result.max_class()
        'spam'
    """

    def __init__(self, scores: Mapping[str, float] | None = None) -> None:
        self._scores: dict[str, float] = dict(scores or {})

    def max_class(self) -> str | None:
        """Category with the greatest score (None if there are no categories)."""
        return max_class(self._scores)

    def ranked(self) -> list[tuple[str, float]]:
        """(category, score) pairs from most to least likely."""
        return sorted(self._scores.items(), key=lambda item: item[1], reverse=True)

    def to_dict(self) -> dict[str, float]:
        return dict(self._scores)

    def __getitem__(self, category: str) -> float:
        return self._scores[category]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._scores) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ClassificationResult({self._scores!r})"
