import pytest

from tagger.errors import MissingSpecialTokenError
from tagger.tokenizer import Token, WordPieceTokenizer, split_words


@pytest.fixture
def tokenizer(vocabulary):
    return WordPieceTokenizer(vocabulary)


def test_hello_world(tokenizer):
    tokens = tokenizer.tokenize("hello world")
    assert tokens == [
        Token("[CLS]", 2),
        Token("hello", 5),
        Token("world", 6),
        Token("[SEP]", 3),
    ]


def test_each_input_closed_by_separator(tokenizer):
    tokens = tokenizer.tokenize(["hello", "world", ""])
    assert [token.text for token in tokens] == [
        "[CLS]", "hello", "[SEP]", "world", "[SEP]", "[SEP]"
    ]


def test_input_is_lowercased_and_punctuation_split(tokenizer):
    tokens = tokenizer.tokenize("Hello, World!")
    assert [token.id for token in tokens] == [2, 5, 13, 6, 14, 3]


def test_split_words_punctuation_is_isolated():
    assert split_words("a--b") == ["a", "-", "-", "b"]
    assert split_words("(x)") == ["(", "x", ")"]
    assert split_words("don't") == ["don", "'", "t"]
    assert split_words("a–b") == ["a", "–", "b"]
    assert split_words("C:\\dir/file") == ["c", ":", "\\", "dir", "/", "file"]


def test_split_words_whitespace_rules():
    assert split_words("Foo\r\nBar   baz") == ["foo", "bar", "baz"]
    # tabs and bare newlines are not separators
    assert split_words("x\ty") == ["x\ty"]
    assert split_words("") == []


def test_verbatim_word_is_single_token(tokenizer):
    assert tokenizer.tokenize_word("wor") == [Token("wor", 7)]
    assert tokenizer.tokenize_word("world") == [Token("world", 6)]


def test_wordpiece_decomposition(tokenizer):
    assert tokenizer.tokenize_word("embeddings") == [
        Token("em", 9),
        Token("##bed", 10),
        Token("##ding", 11),
        Token("##s", 12),
    ]
    assert tokenizer.tokenize_word("playing") == [Token("play", 15), Token("##ing", 16)]
    assert tokenizer.tokenize_word("worlds") == [Token("world", 6), Token("##s", 12)]


def test_unmatched_remainder_reports_whole_word_unknown(tokenizer):
    assert tokenizer.tokenize_word("worldx") == [Token("[UNK]", 1)]


def test_word_without_any_prefix_is_unknown(tokenizer):
    assert tokenizer.tokenize_word("zebra") == [Token("[UNK]", 1)]
    assert tokenizer.tokenize_word("q") == [Token("[UNK]", 1)]
    assert tokenizer.tokenize_word("xy") == [Token("[UNK]", 1)]


def test_prefix_without_progress_is_unknown(tokenizer):
    assert tokenizer.tokenize_word("abc") == [Token("[UNK]", 1)]


def test_whitespace_word_yields_nothing(tokenizer):
    assert tokenizer.tokenize_word("") == []
    assert tokenizer.tokenize_word("\t") == []
    assert tokenizer.tokenize("   ") == [Token("[CLS]", 2), Token("[SEP]", 3)]


def test_accepts_plain_vocabulary_list(vocab_entries):
    tokenizer = WordPieceTokenizer(vocab_entries)
    assert tokenizer.special_token_ids() == frozenset({0, 1, 2, 3, 4})


def test_missing_classification_token():
    tokenizer = WordPieceTokenizer(["[PAD]", "[UNK]", "hello"])
    with pytest.raises(MissingSpecialTokenError) as excinfo:
        tokenizer.tokenize("hello")
    assert excinfo.value.token == "[CLS]"


def test_stalled_continuation_reports_whole_word_unknown():
    # a bare "#" entry matches every continuation without consuming any text
    tokenizer = WordPieceTokenizer(["[PAD]", "[UNK]", "[CLS]", "[SEP]", "[MASK]", "hello", "#", "##s"])
    assert tokenizer.tokenize_word("helloxyz") == [Token("[UNK]", 1)]
    assert tokenizer.tokenize_word("hellos") == [Token("hello", 5), Token("##s", 7)]
