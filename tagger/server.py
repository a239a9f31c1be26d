"""FastAPI application exposing tokenize, encode, decode and predict endpoints."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, HTTPException, Request

from tagger.config import TaggerSettings, settings
from tagger.errors import (
    ClassifierUnavailableError,
    ConfigurationError,
    TaggerError,
)
from tagger.models import TokenTaggerService
from tagger.schemas import (
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    HealthResponse,
    LabeledTokenOut,
    PredictRequest,
    PredictResponse,
    TokenizeRequest,
    TokenizeResponse,
    TokenOut,
)

logger = logging.getLogger("tagger.server")


def _http_error(exc: TaggerError) -> HTTPException:
    if isinstance(exc, ClassifierUnavailableError):
        status_code = 503
    elif isinstance(exc, ConfigurationError):
        logger.error("Configuration error: %s", exc)
        status_code = 500
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=str(exc))


def create_app(
    runtime_settings: TaggerSettings = settings,
    tagger_service: TokenTaggerService | None = None,
) -> FastAPI:
    runtime_settings.configure_logging()

    tagger_service = tagger_service or TokenTaggerService(settings=runtime_settings)

    app = FastAPI(
        title="WordPiece Token Tagger",
        version="0.1.0",
        description="Tokenize text for a subword token classifier and decode its predictions.",
    )

    @app.middleware("http")
    async def add_timing(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Process-Time-ms"] = f"{elapsed_ms:.2f}"
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health():
        stats = tagger_service.prediction_stats()
        return HealthResponse(
            status="ok",
            model=tagger_service.model_name,
            device=str(tagger_service.device),
            loaded=tagger_service.has_classifier,
            vocab_size=len(tagger_service.vocabulary),
            num_labels=len(tagger_service.labels),
            queue_waiting=stats.waiting,
            queue_active=stats.active,
        )

    @app.post("/tokenize", response_model=TokenizeResponse)
    async def tokenize(body: TokenizeRequest):
        try:
            tokens = tagger_service.tokenize(body.texts)
        except TaggerError as exc:
            raise _http_error(exc) from exc
        return TokenizeResponse(tokens=[TokenOut(token=token.text, id=token.id) for token in tokens])

    @app.post("/encode", response_model=EncodeResponse)
    async def encode(body: EncodeRequest):
        try:
            encoded = tagger_service.encode(body.texts, body.max_sequence_length)
        except TaggerError as exc:
            raise _http_error(exc) from exc
        return EncodeResponse(
            input_ids=encoded.input_ids,
            segment_ids=encoded.segment_ids,
            attention_mask=encoded.attention_mask,
            num_tokens=encoded.num_tokens,
        )

    @app.post("/decode", response_model=DecodeResponse)
    async def decode(body: DecodeRequest):
        try:
            labeled = tagger_service.decode(body.token_ids, body.logits, body.labels_per_token)
        except TaggerError as exc:
            raise _http_error(exc) from exc
        return DecodeResponse(
            tokens=[LabeledTokenOut(token=item.token, label=item.label) for item in labeled]
        )

    @app.post("/predict", response_model=PredictResponse)
    async def predict(body: PredictRequest):
        try:
            result = await tagger_service.predict(body.text)
        except TaggerError as exc:
            raise _http_error(exc) from exc

        return PredictResponse(
            text=result.text,
            model=tagger_service.model_name,
            tokens=[LabeledTokenOut(token=item.token, label=item.label) for item in result.tokens],
            tokens_in=result.tokens_in,
            latency_ms=result.latency_ms,
        )

    return app
