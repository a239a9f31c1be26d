"""Fixed-length model input encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import torch

from tagger.errors import SequenceTooLongError
from tagger.tokenizer import Token
from tagger.vocab import Vocabulary

logger = logging.getLogger("tagger.encoding")

OVERFLOW_POLICIES = ("reject", "truncate")

# Only these two arrays are fed to the classifier; segment ids are kept for
# models that take token type ids.
MODEL_INPUT_NAMES = ("input_ids", "attention_mask")


@dataclass
class EncodedSequence:
    input_ids: List[int]
    segment_ids: List[int]
    attention_mask: List[int]
    num_tokens: int

    @property
    def max_sequence_length(self) -> int:
        return len(self.input_ids)

    def to_tensors(self, device: Optional[Union[str, torch.device]] = None) -> Dict[str, torch.Tensor]:
        """Return the model inputs as ``[1, max_sequence_length]`` long tensors."""
        tensors = {
            "input_ids": torch.tensor([self.input_ids], dtype=torch.long),
            "attention_mask": torch.tensor([self.attention_mask], dtype=torch.long),
        }
        if device is not None:
            tensors = {name: tensor.to(device) for name, tensor in tensors.items()}
        return tensors


def segment_ids_for(tokens: Sequence[Token], separator: str) -> List[int]:
    """Segment index per token; the index moves on after each separator."""
    segment = 0
    segments: List[int] = []
    for token in tokens:
        segments.append(segment)
        if token.text == separator:
            segment += 1
    return segments


class SequenceEncoder:
    """Pads (or rejects/truncates) token sequences to a fixed length."""

    def __init__(self, vocabulary: Vocabulary, max_sequence_length: int, overflow: str = "reject"):
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"overflow must be one of {OVERFLOW_POLICIES}, got {overflow!r}")
        self.vocabulary = vocabulary
        self.max_sequence_length = self._validate_length(max_sequence_length)
        self.overflow = overflow

    def encode(self, tokens: Sequence[Token], max_sequence_length: Optional[int] = None) -> EncodedSequence:
        """Encode tokens into ids, segment ids and attention mask of equal length."""
        if max_sequence_length is None:
            max_sequence_length = self.max_sequence_length
        limit = self._validate_length(max_sequence_length)
        tokens = list(tokens)
        if len(tokens) > limit:
            if self.overflow == "reject":
                raise SequenceTooLongError(len(tokens), limit)
            logger.warning("Truncating input from %d to %d tokens", len(tokens), limit)
            tokens = tokens[:limit]

        padding = limit - len(tokens)
        input_ids = [token.id for token in tokens]
        if padding:
            input_ids += [self.vocabulary.pad_id] * padding
        segment_ids = segment_ids_for(tokens, self.vocabulary.special_tokens.sep) + [0] * padding
        attention_mask = [1] * len(tokens) + [0] * padding
        return EncodedSequence(
            input_ids=input_ids,
            segment_ids=segment_ids,
            attention_mask=attention_mask,
            num_tokens=len(tokens),
        )

    @staticmethod
    def _validate_length(value: int) -> int:
        if value < 1:
            raise ValueError("max_sequence_length must be a positive integer.")
        return value


__all__ = ["EncodedSequence", "SequenceEncoder", "segment_ids_for", "MODEL_INPUT_NAMES", "OVERFLOW_POLICIES"]
