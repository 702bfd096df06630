# =============================================================================
# nbayes: Naive Bayes Classification for Arbitrary Tokens
# =============================================================================
#
# A multinomial Naive Bayes classifier with:
#   - Log probabilities to avoid floating point underflow
#   - Laplace smoothing for unseen tokens
#   - Binarized ("set of words") or standard counting
#   - Optional uniform category prior
#   - Incremental train / untrain and pruning of rare tokens
#   - JSON snapshots and an SQLite backend
#
# Tokens don't have to be text: anything hashable works.
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "nbayes"

from nbayes.classifier import ClassifierStats, NBayes
from nbayes.core import ClassificationResult, ProbabilityError
from nbayes.serialization import SnapshotError

__all__ = [
    "NBayes",
    "ClassifierStats",
    "ClassificationResult",
    "ProbabilityError",
    "SnapshotError",
    "__version__",
    "__app_name__",
]
