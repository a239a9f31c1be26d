import pytest

from tagger.vocab import Vocabulary

VOCAB = [
    "[PAD]",
    "[UNK]",
    "[CLS]",
    "[SEP]",
    "[MASK]",
    "hello",
    "world",
    "wor",
    "##ld",
    "em",
    "##bed",
    "##ding",
    "##s",
    ",",
    "!",
    "play",
    "##ing",
    "ab",
]

LABELS = ["O", "B-X"]


@pytest.fixture
def vocab_entries():
    return list(VOCAB)


@pytest.fixture
def vocabulary():
    return Vocabulary(VOCAB)


@pytest.fixture
def labels():
    return list(LABELS)


@pytest.fixture
def vocab_files(tmp_path):
    vocab_file = tmp_path / "vocab.txt"
    vocab_file.write_text("\n".join(VOCAB) + "\n", encoding="utf-8")
    labels_file = tmp_path / "labels.txt"
    labels_file.write_text("\n".join(LABELS) + "\n", encoding="utf-8")
    return vocab_file, labels_file
