"""Configuration management for the token tagging service."""

from __future__ import annotations

import logging
import os
from typing import Optional

import torch
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tagger.encoding import OVERFLOW_POLICIES


def _default_device() -> str:
    if torch.cuda.is_available():
        return "cuda"
    if torch.backends.mps.is_available():  # type: ignore[attr-defined]
        return "mps"
    return "cpu"


class TaggerSettings(BaseSettings):
    """Pydantic-powered settings for the tagger and its HTTP service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    vocab_path: Optional[str] = Field(
        None, description="Path to the vocabulary file (one token per line)."
    )
    labels_path: Optional[str] = Field(
        None, description="Path to the label file (one label per line, in class index order)."
    )
    max_sequence_length: int = Field(
        200, description="Fixed length of the encoded model inputs."
    )
    overflow_policy: str = Field(
        "reject",
        description="What to do with inputs longer than max_sequence_length (reject|truncate).",
    )
    device: str = Field(
        default_factory=_default_device,
        description="Target device for the classifier inputs (cuda|mps|cpu).",
    )
    mock_model: bool = Field(
        False,
        description="Use a deterministic mock classifier instead of an injected one (for tests).",
    )
    log_level: str = Field("INFO", description="Logging level for the service.")
    log_file: Optional[str] = Field(
        None, description="Optional file path for service logs."
    )
    port: int = Field(8000, description="Port for the HTTP server.")
    host: str = Field("0.0.0.0", description="Host for the HTTP server.")
    max_concurrent_requests: int = Field(
        2, description="Maximum concurrent prediction requests."
    )

    @field_validator("device")
    @classmethod
    def validate_device(cls, value: str) -> str:
        normalized = value.lower()
        if normalized == "cuda" and not torch.cuda.is_available():
            return "cpu"
        if normalized == "mps" and not torch.backends.mps.is_available():  # type: ignore[attr-defined]
            return "cpu"
        return normalized

    @field_validator("max_sequence_length", "max_concurrent_requests")
    @classmethod
    def positive_values(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Lengths and concurrency limits must be positive integers.")
        return value

    @field_validator("overflow_policy")
    @classmethod
    def known_overflow_policy(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in OVERFLOW_POLICIES:
            raise ValueError(f"overflow_policy must be one of {OVERFLOW_POLICIES}.")
        return normalized

    @field_validator("log_level")
    @classmethod
    def uppercase_log_level(cls, value: str) -> str:
        return value.upper()

    def configure_logging(self) -> None:
        """Configure root logging according to settings."""
        handlers = [logging.StreamHandler()]
        if self.log_file:
            log_dir = os.path.dirname(self.log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(self.log_file))
        logging.basicConfig(
            level=getattr(logging, self.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            handlers=handlers,
        )


settings = TaggerSettings()
