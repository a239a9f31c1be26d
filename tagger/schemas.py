"""Pydantic schemas for API requests and responses."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class TokenizeRequest(BaseModel):
    texts: List[str] = Field(..., description="Input strings; each is closed by a [SEP] token.")

    @field_validator("texts")
    @classmethod
    def validate_texts(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("texts cannot be empty.")
        return value


class TokenOut(BaseModel):
    token: str
    id: int


class TokenizeResponse(BaseModel):
    tokens: List[TokenOut]


class EncodeRequest(TokenizeRequest):
    max_sequence_length: Optional[int] = Field(
        None, description="Override for the configured sequence length."
    )

    @field_validator("max_sequence_length")
    @classmethod
    def validate_length(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("max_sequence_length must be > 0")
        return value


class EncodeResponse(BaseModel):
    input_ids: List[int]
    segment_ids: List[int]
    attention_mask: List[int]
    num_tokens: int


class DecodeRequest(BaseModel):
    token_ids: List[int] = Field(..., description="Encoded input ids, padding included.")
    logits: List[float] = Field(..., description="Flat, row-major per-token scores.")
    labels_per_token: Optional[int] = Field(
        None, description="Scores per position; defaults to the number of labels."
    )


class LabeledTokenOut(BaseModel):
    token: str
    label: str


class DecodeResponse(BaseModel):
    tokens: List[LabeledTokenOut]


class PredictRequest(BaseModel):
    text: str = Field(..., description="Text to tag.")

    @field_validator("text")
    @classmethod
    def validate_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("text cannot be empty.")
        return value


class PredictResponse(BaseModel):
    text: str
    model: str
    tokens: List[LabeledTokenOut]
    tokens_in: int
    latency_ms: float


class HealthResponse(BaseModel):
    status: str
    model: str
    device: str
    loaded: bool
    vocab_size: int
    num_labels: int
    queue_waiting: int
    queue_active: int
