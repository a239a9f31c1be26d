"""Token tagging pipeline: text in, labeled tokens out."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Union

import torch

from tagger.config import TaggerSettings, settings as default_settings
from tagger.decoding import LabelDecoder, LabeledToken, Logits
from tagger.encoding import EncodedSequence, SequenceEncoder
from tagger.errors import ClassifierUnavailableError, ConfigurationError
from tagger.tokenizer import Token, WordPieceTokenizer
from tagger.vocab import Vocabulary, as_vocabulary, load_labels, load_vocab

logger = logging.getLogger("tagger.models")


class TokenClassifier(Protocol):
    def __call__(self, input_ids: torch.Tensor, attention_mask: torch.Tensor) -> torch.Tensor:
        ...


@dataclass
class TaggingResult:
    text: str
    tokens: List[LabeledToken] = field(default_factory=list)
    tokens_in: int = 0
    latency_ms: float = 0.0


@dataclass
class PredictionStats:
    waiting: int
    active: int


class MockTokenClassifier(torch.nn.Module):
    """Tiny deterministic classifier for testing without real weights."""

    def __init__(self, num_labels: int):
        super().__init__()
        self.num_labels = num_labels

    @torch.no_grad()
    def forward(self, input_ids: torch.Tensor, attention_mask: torch.Tensor) -> torch.Tensor:
        # class (token id % num_labels) always wins, which keeps tests stable
        logits = torch.nn.functional.one_hot(input_ids % self.num_labels, self.num_labels)
        return (logits * attention_mask.unsqueeze(-1)).float()


class TokenTaggerService:
    """Wires the tokenizer, encoder, classifier and label decoder together."""

    def __init__(
        self,
        settings: TaggerSettings | None = None,
        vocabulary: Optional[Union[Vocabulary, Sequence[str]]] = None,
        labels: Optional[Sequence[str]] = None,
        classifier: Optional[TokenClassifier] = None,
        semaphore: Optional[asyncio.Semaphore] = None,
    ):
        self.settings = settings or default_settings
        self.vocabulary = self._resolve_vocabulary(vocabulary)
        self.labels = list(labels) if labels is not None else self._load_labels()
        self.tokenizer = WordPieceTokenizer(self.vocabulary)
        self.encoder = SequenceEncoder(
            self.vocabulary,
            self.settings.max_sequence_length,
            overflow=self.settings.overflow_policy,
        )
        self.decoder = LabelDecoder(self.vocabulary, self.labels)
        self.device = torch.device(self.settings.device)
        self.classifier = classifier
        if self.classifier is None and self.settings.mock_model:
            self.classifier = MockTokenClassifier(len(self.labels)).to(self.device)
        self.semaphore = semaphore or asyncio.Semaphore(self.settings.max_concurrent_requests)
        # only touched from the event loop thread
        self._waiting = 0
        self._active = 0
        logger.info(
            "Tagger initialized: vocab_size=%d labels=%d classifier=%s device=%s",
            len(self.vocabulary),
            len(self.labels),
            self.model_name,
            self.device,
        )

    # ---------------------------
    # Public API
    # ---------------------------
    def tokenize(self, texts: Union[str, Sequence[str]]) -> List[Token]:
        return self.tokenizer.tokenize(texts)

    def encode(
        self, texts: Union[str, Sequence[str]], max_sequence_length: Optional[int] = None
    ) -> EncodedSequence:
        return self.encoder.encode(self.tokenize(texts), max_sequence_length)

    def decode(
        self, token_ids: Sequence[int], logits: Logits, labels_per_token: Optional[int] = None
    ) -> List[LabeledToken]:
        return self.decoder.decode(token_ids, logits, labels_per_token)

    def tag(self, text: str) -> TaggingResult:
        """Run the full pipeline for a single text."""
        if self.classifier is None:
            raise ClassifierUnavailableError("No token classifier is configured.")
        start = time.perf_counter()
        encoded = self.encode(text)
        inputs = encoded.to_tensors(self.device)
        with torch.no_grad():
            logits = self.classifier(inputs["input_ids"], inputs["attention_mask"])
        tokens = self.decoder.decode(encoded.input_ids, logits, len(self.labels))
        latency_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "request completed tokens_in=%s tokens_out=%s latency_ms=%.2f device=%s",
            encoded.num_tokens,
            len(tokens),
            latency_ms,
            self.device,
        )
        return TaggingResult(
            text=text,
            tokens=tokens,
            tokens_in=encoded.num_tokens,
            latency_ms=latency_ms,
        )

    async def predict(self, text: str) -> TaggingResult:
        """Tag a text in a worker thread, bounded by the service semaphore."""
        self._waiting += 1
        try:
            await self.semaphore.acquire()
        finally:
            self._waiting -= 1
        self._active += 1
        try:
            return await asyncio.to_thread(self.tag, text)
        finally:
            self._active -= 1
            self.semaphore.release()

    def prediction_stats(self) -> PredictionStats:
        """Predictions waiting for a slot and predictions currently running."""
        return PredictionStats(waiting=self._waiting, active=self._active)

    @property
    def has_classifier(self) -> bool:
        return self.classifier is not None

    @property
    def model_name(self) -> str:
        if self.classifier is None:
            return "none"
        if isinstance(self.classifier, MockTokenClassifier):
            return "mock-tagger"
        return self.classifier.__class__.__name__

    # ---------------------------
    # Internal helpers
    # ---------------------------
    def _resolve_vocabulary(self, vocabulary) -> Vocabulary:
        if vocabulary is not None:
            return as_vocabulary(vocabulary)
        if not self.settings.vocab_path:
            raise ConfigurationError("No vocabulary supplied and VOCAB_PATH is not set.")
        return load_vocab(self.settings.vocab_path)

    def _load_labels(self) -> List[str]:
        if not self.settings.labels_path:
            raise ConfigurationError("No labels supplied and LABELS_PATH is not set.")
        return load_labels(self.settings.labels_path)


__all__ = ["TokenClassifier", "MockTokenClassifier", "TaggingResult", "PredictionStats", "TokenTaggerService"]
