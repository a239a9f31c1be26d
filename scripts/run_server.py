"""Entrypoint script to launch the FastAPI server with Uvicorn."""

from __future__ import annotations

import argparse

import uvicorn

from tagger.config import TaggerSettings
from tagger.server import create_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the WordPiece token tagger API server.")
    parser.add_argument("--host", type=str, default=None, help="Host to bind (default from settings).")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default from settings).")
    parser.add_argument("--vocab", type=str, default=None, help="Vocabulary file (overrides VOCAB_PATH).")
    parser.add_argument("--labels", type=str, default=None, help="Label file (overrides LABELS_PATH).")
    parser.add_argument(
        "--mock-model", action="store_true", help="Serve /predict with the deterministic mock classifier."
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = {}
    if args.vocab:
        overrides["vocab_path"] = args.vocab
    if args.labels:
        overrides["labels_path"] = args.labels
    if args.mock_model:
        overrides["mock_model"] = True
    settings = TaggerSettings(**overrides)
    app = create_app(settings)

    host = args.host or settings.host
    port = args.port or settings.port

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
