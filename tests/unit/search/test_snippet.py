"""Unit tests for snippet windows."""

import pytest

from corpus_search.errors import CorpusReadError
from corpus_search.search.corpus import DirectoryCorpus, DocumentTokenCache
from corpus_search.search.indexer import IndexBuilder, derive_stemmed
from corpus_search.search.models import IndexKind, InvertedIndex, Posting
from corpus_search.search.snippet import extract_snippet, first_position, window


TEN_WORDS = "w0 w1 w2 w3 w4 target w6 w7 w8 w9"


@pytest.fixture
def sample(corpus_dir):
    corpus = DirectoryCorpus(corpus_dir)
    raw = IndexBuilder(corpus).build().index
    return raw, derive_stemmed(raw), DocumentTokenCache(corpus).tokens


def test_radius_two_around_position_five(make_corpus):
    corpus = DirectoryCorpus(make_corpus({"ten.txt": TEN_WORDS}))
    index = IndexBuilder(corpus).build().index

    snippet = extract_snippet(2, "target", "ten.txt", index, DocumentTokenCache(corpus).tokens)

    assert snippet == "w3 w4 target w6 w7"


class TestExtractSnippet:
    def test_window_keeps_raw_tokens(self, sample):
        raw, _, tokens = sample

        assert extract_snippet(2, "running", "docA.txt", raw, tokens) == "gamma. The running dogs ran"

    def test_match_on_first_token(self, sample):
        raw, _, tokens = sample

        assert extract_snippet(1, "alpha", "docA.txt", raw, tokens) == "Alpha beta"

    def test_window_clamped_at_document_end(self, sample):
        raw, _, tokens = sample

        assert extract_snippet(3, "quickly", "docA.txt", raw, tokens) == "running dogs ran quickly!"

    def test_radius_zero_is_the_token_itself(self, sample):
        raw, _, tokens = sample

        assert extract_snippet(0, "delta", "docC.txt", raw, tokens) == "delta"

    def test_stemmed_index_uses_earliest_offset(self, sample):
        _, stemmed, tokens = sample

        assert extract_snippet(1, "run", "docB.txt", stemmed, tokens) == "delta runs; the"

    def test_term_absent_from_document(self, sample):
        raw, _, tokens = sample

        assert extract_snippet(2, "dogs", "docC.txt", raw, tokens) is None
        assert extract_snippet(2, "zebra", "docA.txt", raw, tokens) is None

    def test_unreadable_document_yields_none(self):
        index = InvertedIndex(kind=IndexKind.RAW, terms={"alpha": (Posting("gone.txt", 0),)}, documents=("gone.txt",))

        def token_source(doc_id):
            raise CorpusReadError(doc_id, "No such file or directory")

        assert extract_snippet(2, "alpha", "gone.txt", index, token_source) is None

    def test_stale_offset_yields_none(self):
        index = InvertedIndex(kind=IndexKind.RAW, terms={"alpha": (Posting("a.txt", 9),)}, documents=("a.txt",))

        assert extract_snippet(2, "alpha", "a.txt", index, lambda doc_id: ("alpha",)) is None


def test_first_position_picks_minimum():
    index = InvertedIndex(
        kind=IndexKind.STEMMED,
        terms={"run": (Posting("a.txt", 8), Posting("b.txt", 1), Posting("a.txt", 3))},
    )

    assert first_position(index, "run", "a.txt") == 3
    assert first_position(index, "run", "c.txt") is None


def test_window_rejects_negative_radius():
    with pytest.raises(ValueError):
        window(["a"], 0, -1)
