"""Turn per-token classifier logits back into readable (token, label) pairs."""

from __future__ import annotations

import logging
from typing import Collection, List, NamedTuple, Optional, Sequence, Union

import torch

from tagger.errors import ShapeMismatchError
from tagger.vocab import Vocabulary

logger = logging.getLogger("tagger.decoding")

Logits = Union[Sequence[float], torch.Tensor]


class LabeledToken(NamedTuple):
    token: str
    label: str


def argmax(scores: Sequence[float]) -> int:
    """Index of the highest score; the first one wins on ties."""
    best = 0
    for index in range(1, len(scores)):
        if scores[index] > scores[best]:
            best = index
    return best


def flatten_logits(logits: Logits) -> List[float]:
    if isinstance(logits, torch.Tensor):
        return logits.detach().cpu().reshape(-1).tolist()
    return [float(value) for value in logits]


class LabelDecoder:
    """Maps flat, row-major logits onto the label list, skipping special tokens."""

    def __init__(self, vocabulary: Vocabulary, labels: Sequence[str]):
        if not labels:
            raise ValueError("labels cannot be empty.")
        self.vocabulary = vocabulary
        self.labels = list(labels)

    def decode(
        self,
        token_ids: Sequence[int],
        logits: Logits,
        labels_per_token: Optional[int] = None,
        special_token_ids: Optional[Collection[int]] = None,
    ) -> List[LabeledToken]:
        if labels_per_token is None:
            labels_per_token = len(self.labels)
        if labels_per_token <= 0:
            raise ShapeMismatchError("labels_per_token must be a positive integer.")
        if isinstance(token_ids, torch.Tensor):
            token_ids = token_ids.reshape(-1).tolist()

        scores = flatten_logits(logits)
        if len(scores) % labels_per_token:
            raise ShapeMismatchError(
                f"Logits length {len(scores)} is not a multiple of labels_per_token={labels_per_token}"
            )
        positions = len(scores) // labels_per_token
        if positions > len(token_ids):
            raise ShapeMismatchError(
                f"Logits cover {positions} positions but only {len(token_ids)} token ids were given"
            )

        skipped = self.vocabulary.special_token_ids() if special_token_ids is None else special_token_ids
        decoded: List[LabeledToken] = []
        for position in range(positions):
            token_id = int(token_ids[position])
            if token_id in skipped:
                continue
            start = position * labels_per_token
            best = argmax(scores[start : start + labels_per_token])
            if best >= len(self.labels):
                raise ShapeMismatchError(
                    f"Class index {best} at position {position} has no label "
                    f"(only {len(self.labels)} labels loaded)"
                )
            decoded.append(LabeledToken(self.vocabulary.token_at(token_id), self.labels[best]))

        logger.debug("Decoded %d labeled tokens from %d positions", len(decoded), positions)
        return decoded


__all__ = ["LabeledToken", "LabelDecoder", "argmax", "flatten_logits"]
