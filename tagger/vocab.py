"""Vocabulary container and line-oriented vocabulary/label loaders.

A vocabulary file holds one entry per line; the zero-based line number is
the entry's id::

    [PAD]     # 0
    [UNK]     # 1
    [CLS]     # 2
    [SEP]     # 3
    [MASK]    # 4
    the       # 5
    ##s       # 6
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from tagger.errors import ConfigurationError, MissingSpecialTokenError, TokenNotInVocabularyError

logger = logging.getLogger("tagger.vocab")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SpecialTokens:
    pad: str = "[PAD]"
    unk: str = "[UNK]"
    cls: str = "[CLS]"
    sep: str = "[SEP]"
    mask: str = "[MASK]"

    def as_tuple(self) -> Tuple[str, str, str, str, str]:
        return (self.pad, self.unk, self.cls, self.sep, self.mask)


class _TrieNode:
    __slots__ = ("children", "terminal")

    def __init__(self) -> None:
        self.children: Dict[str, "_TrieNode"] = {}
        self.terminal = False


class Vocabulary:
    """Immutable, ordered token vocabulary where an entry's id is its position."""

    def __init__(self, entries: Iterable[str], special_tokens: SpecialTokens = SpecialTokens()):
        self._entries: Tuple[str, ...] = tuple(entries)
        self.special_tokens = special_tokens
        self._index: Dict[str, int] = {}
        self._root = _TrieNode()
        for position, entry in enumerate(self._entries):
            # duplicated lines keep the id of their first occurrence
            if entry in self._index:
                continue
            self._index[entry] = position
            self._insert(entry)

    # ---------------------------
    # Lookups
    # ---------------------------
    def index_of(self, token: str) -> int:
        try:
            return self._index[token]
        except KeyError:
            raise TokenNotInVocabularyError(token) from None

    def contains(self, token: str) -> bool:
        return token in self._index

    def token_at(self, index: int) -> str:
        if not 0 <= index < len(self._entries):
            raise TokenNotInVocabularyError(int(index))
        return self._entries[index]

    def special_token_id(self, token: str) -> int:
        """Return the id of a special token, failing loudly when it is absent."""
        try:
            return self._index[token]
        except KeyError:
            raise MissingSpecialTokenError(token) from None

    @property
    def pad_id(self) -> int:
        return self.special_token_id(self.special_tokens.pad)

    @property
    def unk_id(self) -> int:
        return self.special_token_id(self.special_tokens.unk)

    @property
    def cls_id(self) -> int:
        return self.special_token_id(self.special_tokens.cls)

    @property
    def sep_id(self) -> int:
        return self.special_token_id(self.special_tokens.sep)

    @property
    def mask_id(self) -> int:
        return self.special_token_id(self.special_tokens.mask)

    def special_token_ids(self) -> FrozenSet[int]:
        """Ids of the padding, unknown, classification, separation and mask tokens."""
        return frozenset(self.special_token_id(token) for token in self.special_tokens.as_tuple())

    def longest_prefix(self, text: str) -> Optional[str]:
        """Return the longest vocabulary entry that is a literal prefix of ``text``."""
        node = self._root
        longest = 0
        for depth, char in enumerate(text, start=1):
            node = node.children.get(char)
            if node is None:
                break
            if node.terminal:
                longest = depth
        return text[:longest] if longest else None

    @property
    def entries(self) -> Tuple[str, ...]:
        return self._entries

    def __contains__(self, token: object) -> bool:
        return token in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self._entries)})"

    def _insert(self, entry: str) -> None:
        if not entry:
            return
        node = self._root
        for char in entry:
            node = node.children.setdefault(char, _TrieNode())
        node.terminal = True


def _read_lines(path: PathLike, kind: str) -> List[str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigurationError(f"{kind} file not found: {file_path}")
    with open(file_path, "r", encoding="utf-8") as reader:
        lines = [line.rstrip("\n").rstrip("\r") for line in reader]
    logger.info("Loaded %s file %s (%d entries)", kind, file_path, len(lines))
    return lines


def load_vocab(vocab_file: PathLike, special_tokens: SpecialTokens = SpecialTokens()) -> Vocabulary:
    """Load a vocabulary file where each line holds one token."""
    return Vocabulary(_read_lines(vocab_file, "vocabulary"), special_tokens=special_tokens)


def load_labels(labels_file: PathLike) -> List[str]:
    """Load a label file; a label's line number is the class index the model emits."""
    labels = _read_lines(labels_file, "labels")
    if not labels:
        raise ConfigurationError(f"labels file is empty: {labels_file}")
    return labels


def as_vocabulary(vocabulary: Union[Vocabulary, Sequence[str]]) -> Vocabulary:
    if isinstance(vocabulary, Vocabulary):
        return vocabulary
    return Vocabulary(vocabulary)


__all__ = [
    "SpecialTokens",
    "Vocabulary",
    "load_vocab",
    "load_labels",
    "as_vocabulary",
]
