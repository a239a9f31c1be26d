"""Exception hierarchy shared across the tagger package."""

from __future__ import annotations


class TaggerError(Exception):
    """Base class for all tagger errors."""


class ConfigurationError(TaggerError):
    """Settings, vocabulary or label files are missing or unusable."""


class MissingSpecialTokenError(ConfigurationError, LookupError):
    """A required special token is absent from the vocabulary."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Special token {token!r} is missing from the vocabulary.")


class TokenNotInVocabularyError(TaggerError, KeyError):
    """A token or token id could not be resolved against the vocabulary."""

    def __init__(self, token):
        self.token = token
        super().__init__(token)

    def __str__(self) -> str:
        if isinstance(self.token, int):
            return f"Token id {self.token} is outside the vocabulary."
        return f"Token {self.token!r} is not in the vocabulary."


class ShapeMismatchError(TaggerError, ValueError):
    """Logits, token ids and label counts do not line up."""


class SequenceTooLongError(TaggerError, ValueError):
    """The tokenized input does not fit the configured sequence length."""

    def __init__(self, num_tokens: int, max_sequence_length: int):
        self.num_tokens = num_tokens
        self.max_sequence_length = max_sequence_length
        super().__init__(
            f"Input too long: {num_tokens} tokens, limit is {max_sequence_length}"
        )


class ClassifierUnavailableError(TaggerError):
    """Prediction was requested but no classifier is configured."""


__all__ = [
    "TaggerError",
    "ConfigurationError",
    "MissingSpecialTokenError",
    "TokenNotInVocabularyError",
    "ShapeMismatchError",
    "SequenceTooLongError",
    "ClassifierUnavailableError",
]
