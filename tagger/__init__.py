"""WordPiece tokenization and label decoding for subword token classifiers."""

from .config import TaggerSettings, settings
from .decoding import LabelDecoder, LabeledToken
from .encoding import EncodedSequence, SequenceEncoder
from .models import MockTokenClassifier, TokenTaggerService
from .tokenizer import Token, WordPieceTokenizer
from .vocab import SpecialTokens, Vocabulary, load_labels, load_vocab

__all__ = [
    "TaggerSettings",
    "settings",
    "LabelDecoder",
    "LabeledToken",
    "EncodedSequence",
    "SequenceEncoder",
    "MockTokenClassifier",
    "TokenTaggerService",
    "Token",
    "WordPieceTokenizer",
    "SpecialTokens",
    "Vocabulary",
    "load_labels",
    "load_vocab",
]
