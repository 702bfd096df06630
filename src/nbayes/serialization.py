# =============================================================================
# Snapshot Serialization
# =============================================================================
# Converts the full classifier state to and from a JSON document:
#
#   {
#     "format": "nbayes",
#     "version": 1,
#     "config": {"k": 1, "binarized": false, "assume_uniform": false, "log_vocab": false},
#     "vocabulary": ["a", "b", 3],
#     "categories": {
#       "spam": {"examples": 2, "total_tokens": 5, "tokens": [["a", 4], [3, 1]]}
#     }
#   }
#
# Tokens are opaque, so they can't be JSON object keys. They travel as
# [token, count] pairs instead. Tuples become arrays on the way out and are
# turned back into tuples on the way in so they stay hashable.
#
# Inline documents are recognized by their first non-whitespace character
# being "{" - anything else is treated as a file path.
# =============================================================================

import json
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nbayes.classifier import NBayes


# Identifies our documents
FORMAT_NAME = "nbayes"

# Current snapshot version - increment when the layout changes
FORMAT_VERSION = 1

# First character of an inline document
DOCUMENT_MARKER = "{"


def looks_like_document(source: str) -> bool:
    """True if `source` is inline serialized content rather than a path."""
    return source.lstrip().startswith(DOCUMENT_MARKER)


# =============================================================================
# Token Encoding
# =============================================================================

def encode_token(token: Hashable) -> Any:
    """
    Convert a token into a JSON-compatible value.

    Raises:
        SnapshotError: If the token has no JSON representation.
    """
    if token is None or isinstance(token, (str, bool, int, float)):
        return token
    if isinstance(token, tuple):
        return [encode_token(part) for part in token]
    raise SnapshotError(f"Token {token!r} of type {type(token).__name__} cannot be serialized")


def decode_token(value: Any) -> Hashable:
    """Inverse of encode_token()."""
    if isinstance(value, list):
        return tuple(decode_token(part) for part in value)
    if isinstance(value, dict):
        raise SnapshotError(f"Invalid token in snapshot: {value!r}")
    return value


# =============================================================================
# Document Conversion
# =============================================================================

def to_dict(classifier: "NBayes") -> dict[str, Any]:
    """Build the snapshot document for a classifier."""
    categories: dict[str, Any] = {}
    for name, record in classifier.data.items():
        categories[name] = {
            "examples": record.examples,
            "total_tokens": record.total_tokens,
            "tokens": [[encode_token(token), count] for token, count in record.tokens.items()],
        }

    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "config": {
            "k": classifier.k,
            "binarized": classifier.binarized,
            "assume_uniform": classifier.assume_uniform,
            "log_vocab": classifier.log_vocab,
        },
        "vocabulary": [encode_token(token) for token in classifier.vocab],
        "categories": categories,
    }


def from_dict(data: Any) -> "NBayes":
    """
    Rebuild a classifier from a snapshot document.

    Every record is recreated through CategoryStore.ensure(), so the
    restored classifier behaves exactly like a freshly trained one.

    Raises:
        SnapshotError: If the document is not a valid snapshot.
    """
    from nbayes.classifier import NBayes

    if not isinstance(data, dict) or data.get("format") != FORMAT_NAME:
        raise SnapshotError("Not an nbayes snapshot")
    if data.get("version") != FORMAT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {data.get('version')!r}")

    try:
        config = data.get("config", {})
        classifier = NBayes(
            k=config.get("k", 1),
            binarized=config.get("binarized", False),
            assume_uniform=config.get("assume_uniform", False),
            log_vocab=config.get("log_vocab", False),
        )

        for token in data.get("vocabulary", []):
            classifier.vocab.seen(decode_token(token))

        for name, entry in data.get("categories", {}).items():
            record = classifier.data.ensure(name)
            record.examples = int(entry["examples"])
            for token, count in entry["tokens"]:
                if int(count) < 1:
                    raise SnapshotError(
                        f"Category '{name}' has token {token!r} with count {count}"
                    )
                record.tokens[decode_token(token)] = int(count)
            record.total_tokens = sum(record.tokens.values())

            if record.total_tokens != entry["total_tokens"]:
                raise SnapshotError(
                    f"Category '{name}' claims {entry['total_tokens']} tokens "
                    f"but its table sums to {record.total_tokens}"
                )
            if record.examples < 1:
                raise SnapshotError(f"Category '{name}' has no training examples")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    return classifier


def dumps(classifier: "NBayes") -> str:
    """Serialize a classifier to a JSON string."""
    return json.dumps(to_dict(classifier))


def loads(text: str) -> "NBayes":
    """
    Deserialize a classifier from a JSON string.

    Raises:
        SnapshotError: If the text is not valid JSON or not a snapshot.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid snapshot JSON: {e}") from e
    return from_dict(data)


# =============================================================================
# Exceptions
# =============================================================================

class SnapshotError(Exception):
    """Raised when a classifier snapshot cannot be written or read."""
    pass
