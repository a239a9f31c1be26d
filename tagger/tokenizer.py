"""WordPiece tokenizer for the token tagger."""

from __future__ import annotations

import logging
import re
from typing import FrozenSet, Iterable, List, NamedTuple, Sequence, Union

from tagger.vocab import Vocabulary, as_vocabulary

logger = logging.getLogger("tagger.tokenizer")

PUNCTUATION = ".,;:\\/?!#$%()=+-*\"'–_`<>&^@{}[]|~"
CONTINUATION_PREFIX = "##"

_WHITESPACE_SPLIT = re.compile(r" |\r\n")
_PUNCTUATION_SPLIT = re.compile("([" + re.escape(PUNCTUATION) + "])")


class Token(NamedTuple):
    text: str
    id: int


def split_words(text: str) -> List[str]:
    """Split text on spaces/CRLF and isolate every punctuation character, lower-cased."""
    words: List[str] = []
    for fragment in _WHITESPACE_SPLIT.split(text):
        words.extend(part.lower() for part in _PUNCTUATION_SPLIT.split(fragment) if part)
    return words


class WordPieceTokenizer:
    """Greedy longest-prefix WordPiece tokenizer over a fixed vocabulary.

    The output of :meth:`tokenize` is laid out as
    ``[CLS] words of text 1 [SEP] words of text 2 [SEP] ...``.
    """

    def __init__(self, vocabulary: Union[Vocabulary, Sequence[str]]):
        self.vocabulary = as_vocabulary(vocabulary)

    def tokenize(self, texts: Union[str, Iterable[str]]) -> List[Token]:
        """Tokenize one or more input strings into (token, id) pairs."""
        if isinstance(texts, str):
            texts = [texts]
        special = self.vocabulary.special_tokens
        tokens = [Token(special.cls, self.vocabulary.cls_id)]
        for text in texts:
            for word in split_words(text):
                tokens.extend(self.tokenize_word(word))
            tokens.append(Token(special.sep, self.vocabulary.sep_id))
        return tokens

    def tokenize_word(self, word: str) -> List[Token]:
        """Decompose a single word into vocabulary subwords.

        Whitespace-only words produce nothing; words that cannot be fully
        matched produce a single unknown token.
        """
        if not word or word.isspace():
            return []
        if word in self.vocabulary:
            return [Token(word, self.vocabulary.index_of(word))]

        pieces: List[Token] = []
        remaining = word
        while len(remaining) > 2:
            prefix = self.vocabulary.longest_prefix(remaining)
            if prefix is None:
                logger.debug("No subword matches %r in word %r", remaining, word)
                return [self._unknown()]
            shortened = CONTINUATION_PREFIX + remaining[len(prefix):]
            if len(shortened) >= len(remaining):
                # the rest of the word cannot shrink, so it is never fully covered
                logger.debug("No progress decomposing %r at %r", word, remaining)
                return [self._unknown()]
            pieces.append(Token(prefix, self.vocabulary.index_of(prefix)))
            remaining = shortened

        if not pieces:
            return [self._unknown()]
        return pieces

    def special_token_ids(self) -> FrozenSet[int]:
        return self.vocabulary.special_token_ids()

    def _unknown(self) -> Token:
        return Token(self.vocabulary.special_tokens.unk, self.vocabulary.unk_id)


__all__ = ["Token", "WordPieceTokenizer", "split_words", "PUNCTUATION"]
