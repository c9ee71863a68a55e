"""Unit tests for tokenization, normalization and stop words."""

import pytest

from corpus_search.search.analyzers import (
    DEFAULT_STOPWORDS,
    StandardAnalyzer,
    StopFilter,
    StopWords,
    Token,
    WhitespaceTokenizer,
    normalize,
    raw_tokens,
)


class TestNormalize:
    def test_strips_punctuation_and_digits_then_lowercases(self):
        assert normalize("Hello,World!42") == "helloworld"

    def test_may_produce_empty_string(self):
        assert normalize("42") == ""
        assert normalize("...") == ""
        assert normalize("") == ""

    def test_apostrophes_are_removed(self):
        assert normalize("Don't") == "dont"

    def test_non_ascii_letters_survive(self):
        assert normalize("Café") == "café"


def test_whitespace_tokenizer_numbers_every_raw_token():
    tokens = list(WhitespaceTokenizer()("  one\ttwo\n\nthree "))

    assert [(token.text, token.position) for token in tokens] == [("one", 0), ("two", 1), ("three", 2)]
    assert tokens[1].start_char == 6
    assert tokens[1].end_char == 9


def test_raw_tokens_splits_on_any_whitespace():
    assert raw_tokens("a  b\tc\nd") == ["a", "b", "c", "d"]


class TestStandardAnalyzer:
    """Positions count stop words and empty tokens too."""

    def test_positions_are_never_renumbered(self):
        analyzer = StandardAnalyzer()
        tokens = analyzer("The quick, brown 42 fox")

        assert [(token.text, token.position) for token in tokens] == [("quick", 1), ("brown", 2), ("fox", 4)]

    def test_terms_are_not_stemmed(self):
        assert [token.text for token in StandardAnalyzer()("running dogs")] == ["running", "dogs"]

    def test_query_terms_drop_stop_words(self):
        assert StandardAnalyzer().query_terms("the Alpha, beta! of") == ["alpha", "beta"]

    def test_custom_stopwords(self):
        analyzer = StandardAnalyzer(stopwords=["alpha"])

        assert analyzer.query_terms("the alpha beta") == ["the", "beta"]
        assert analyzer.stopwords.is_stop_word("alpha")


class TestStopWords:
    def test_default_list(self):
        stopwords = StopWords()

        assert "the" in stopwords
        assert stopwords.is_stop_word("and")
        assert not stopwords.is_stop_word("alpha")
        assert len(stopwords) == len(set(DEFAULT_STOPWORDS))

    def test_default_list_has_no_contractions(self):
        assert all("'" not in word for word in DEFAULT_STOPWORDS)

    def test_entries_are_trimmed_and_lowercased(self):
        stopwords = StopWords(["Foo", " bar ", ""])

        assert list(stopwords) == ["bar", "foo"]

    def test_from_file_skips_comments(self, tmp_path):
        path = tmp_path / "stop.txt"
        path.write_text("# project stop list\nalpha\n\n  Beta\n", encoding="utf-8")

        stopwords = StopWords.from_file(path)

        assert list(stopwords) == ["alpha", "beta"]

    def test_fingerprint_depends_on_words_only(self):
        assert StopWords(["beta", "Alpha"]).fingerprint() == StopWords(["alpha", "beta"]).fingerprint()
        assert StopWords(["alpha"]).fingerprint() != StopWords().fingerprint()

    def test_from_file_missing_raises(self, tmp_path):
        with pytest.raises(OSError):
            StopWords.from_file(tmp_path / "missing.txt")


def test_stop_filter_accepts_plain_sequences():
    tokens = [Token("alpha", 0, 0, 5), Token("beta", 1, 6, 10)]

    assert [token.text for token in StopFilter(["beta"])(tokens)] == ["alpha"]
