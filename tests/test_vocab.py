import pytest

from tagger.errors import ConfigurationError, MissingSpecialTokenError, TokenNotInVocabularyError
from tagger.vocab import SpecialTokens, Vocabulary, load_labels, load_vocab


def test_index_round_trip(vocabulary, vocab_entries):
    for position, entry in enumerate(vocab_entries):
        assert vocabulary.index_of(entry) == position
        assert vocabulary.token_at(vocabulary.index_of(entry)) == entry


def test_duplicate_entries_resolve_to_first_position():
    vocabulary = Vocabulary(["a", "b", "a"])
    assert vocabulary.index_of("a") == 0
    assert len(vocabulary) == 3


def test_missing_token_is_an_explicit_failure(vocabulary):
    assert not vocabulary.contains("missing")
    assert "missing" not in vocabulary
    with pytest.raises(TokenNotInVocabularyError) as excinfo:
        vocabulary.index_of("missing")
    assert excinfo.value.token == "missing"
    with pytest.raises(KeyError):
        vocabulary.index_of("missing")


def test_token_at_out_of_range(vocabulary):
    with pytest.raises(TokenNotInVocabularyError):
        vocabulary.token_at(len(vocabulary))
    with pytest.raises(TokenNotInVocabularyError):
        vocabulary.token_at(-1)


def test_special_token_ids(vocabulary):
    assert vocabulary.special_token_ids() == frozenset({0, 1, 2, 3, 4})
    assert vocabulary.pad_id == 0
    assert vocabulary.unk_id == 1
    assert vocabulary.cls_id == 2
    assert vocabulary.sep_id == 3
    assert vocabulary.mask_id == 4


def test_missing_special_token_detected_lazily():
    vocabulary = Vocabulary(["[PAD]", "[UNK]", "[CLS]", "[SEP]", "hello"])
    assert vocabulary.cls_id == 2
    with pytest.raises(MissingSpecialTokenError) as excinfo:
        vocabulary.special_token_ids()
    assert excinfo.value.token == "[MASK]"
    assert isinstance(excinfo.value, ConfigurationError)


def test_custom_special_tokens():
    special = SpecialTokens(pad="<pad>", unk="<unk>", cls="<s>", sep="</s>", mask="<mask>")
    vocabulary = Vocabulary(["<pad>", "<unk>", "<s>", "</s>", "<mask>"], special)
    assert vocabulary.sep_id == 3
    assert vocabulary.special_token_ids() == frozenset(range(5))


def test_longest_prefix(vocabulary):
    assert vocabulary.longest_prefix("worldx") == "world"
    assert vocabulary.longest_prefix("wordy") == "wor"
    assert vocabulary.longest_prefix("##ldx") == "##ld"
    assert vocabulary.longest_prefix("zzz") is None
    assert vocabulary.longest_prefix("") is None


def test_load_vocab_and_labels(vocab_files, vocab_entries, labels):
    vocab_file, labels_file = vocab_files
    vocabulary = load_vocab(vocab_file)
    assert list(vocabulary) == vocab_entries
    assert load_labels(labels_file) == labels


def test_load_vocab_strips_crlf(tmp_path):
    vocab_file = tmp_path / "vocab.txt"
    vocab_file.write_bytes(b"[PAD]\r\n[UNK]\r\nhello\r\n")
    vocabulary = load_vocab(vocab_file)
    assert vocabulary.index_of("hello") == 2


def test_load_missing_files(tmp_path):
    with pytest.raises(ConfigurationError):
        load_vocab(tmp_path / "nope.txt")
    empty = tmp_path / "labels.txt"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_labels(empty)
