# =============================================================================
# Text Tokenizer
# =============================================================================
# Turns free text into tokens for the classifier.
#
# The classifier itself treats tokens as opaque values; this is just a
# convenient front end for text. We extract:
#   - Words (normalized, very short words dropped, optionally stop words)
#   - URL domains
# =============================================================================

import re
from dataclasses import dataclass


@dataclass
class TokenizerConfig:
    """
    Configuration for text tokenization.

    Attributes:
        min_token_length: Minimum length for a word to be included.
        max_token_length: Maximum length (longer words are truncated).
        include_urls: Extract and include URL domain tokens.
        normalize_case: Convert all words to lowercase.
        drop_stop_words: Skip common English function words.
    """
    min_token_length: int = 2
    max_token_length: int = 50
    include_urls: bool = True
    normalize_case: bool = True
    drop_stop_words: bool = False


class Tokenizer:
    """
    Converts text into a list of string tokens.

    Usage:
        >>> tokenizer = Tokenizer()
        >>> tokenizer.tokenize("Meet at noon! Map: https://maps.example.com")
        ['meet', 'at', 'noon', 'map', 'https', 'maps', 'example', 'com', 'URL_DOMAIN_maps.example.com']
    """

    STOP_WORDS = frozenset([
        "an", "the", "and", "or", "but", "is", "are", "was", "were", "be",
        "to", "of", "in", "for", "on", "with", "at", "by", "from", "as",
        "it", "its", "this", "that",
    ])

    URL_PATTERN = re.compile(
        r'https?://(?:www\.)?([a-zA-Z0-9-]+(?:\.[a-zA-Z]{2,})+)',
        re.IGNORECASE
    )

    def __init__(self, config: TokenizerConfig | None = None) -> None:
        self.config = config or TokenizerConfig()

    def tokenize(self, text: str) -> list[str]:
        """
        Tokenize a piece of text.

        Args:
            text: Text to tokenize. HTML tags are stripped.

        Returns:
            List of tokens (duplicates preserved, in order of appearance).
        """
        if not text:
            return []

        tokens = self._tokenize_words(text)
        if self.config.include_urls:
            tokens.extend(self._extract_urls(text))
        return tokens

    def tokenize_many(self, texts: list[str]) -> list[str]:
        """Tokenize several pieces of text as one example."""
        return self.tokenize(" ".join(texts))

    def _tokenize_words(self, text: str) -> list[str]:
        """Split on non-word characters, then normalize and filter."""
        text = re.sub(r'<[^>]+>', ' ', text)

        tokens = []
        for word in re.findall(r'\b[a-zA-Z0-9]+\b', text):
            if self.config.normalize_case:
                word = word.lower()

            if len(word) < self.config.min_token_length:
                continue
            if len(word) > self.config.max_token_length:
                word = word[:self.config.max_token_length]
            if self.config.drop_stop_words and word.lower() in self.STOP_WORDS:
                continue

            tokens.append(word)

        return tokens

    def _extract_urls(self, text: str) -> list[str]:
        """Extract URL domain tokens from text."""
        return [
            f"URL_DOMAIN_{match.group(1).lower()}"
            for match in self.URL_PATTERN.finditer(text)
        ]
