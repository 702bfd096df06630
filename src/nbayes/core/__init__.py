# =============================================================================
# nbayes Core Module
# =============================================================================
# The classification engine, with no I/O and no third-party dependencies:
#   - Vocabulary: distinct tokens seen during training
#   - CategoryStore / CategoryRecord: per-category frequency accounting
#   - calculate_probabilities: smoothed log-likelihoods -> scores
#   - ClassificationResult: category -> score mapping with max_class()
# =============================================================================

from nbayes.core.category import CategoryRecord, CategoryStore
from nbayes.core.probability import ProbabilityError, calculate_probabilities
from nbayes.core.result import ClassificationResult, max_class
from nbayes.core.vocabulary import Vocabulary

__all__ = [
    "CategoryRecord",
    "CategoryStore",
    "ClassificationResult",
    "ProbabilityError",
    "Vocabulary",
    "calculate_probabilities",
    "max_class",
]
