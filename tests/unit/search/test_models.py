"""Unit tests for index data models."""

from types import MappingProxyType

import pytest

from corpus_search.search.models import IndexKind, IndexSnapshot, InvertedIndex, Posting


def test_posting_list_round_trip():
    posting = Posting("a.txt", 3)

    assert posting.to_list() == ["a.txt", 3]
    assert Posting.from_list(["a.txt", "3"]) == posting


class TestInvertedIndex:
    def test_terms_are_read_only(self):
        terms = {"alpha": [Posting("a.txt", 0)]}
        index = InvertedIndex(kind=IndexKind.RAW, terms=terms)
        terms["beta"] = [Posting("a.txt", 1)]

        assert isinstance(index.terms, MappingProxyType)
        assert "beta" not in index
        assert isinstance(index.postings("alpha"), tuple)
        with pytest.raises(TypeError):
            index.terms["gamma"] = ()  # type: ignore[index]

    def test_postings_absent_term(self):
        assert InvertedIndex(kind=IndexKind.RAW, terms={}).postings("alpha") is None

    def test_counts(self):
        index = InvertedIndex(
            kind=IndexKind.RAW,
            terms={"alpha": (Posting("a.txt", 0), Posting("b.txt", 2)), "beta": (Posting("a.txt", 1),)},
            documents=("a.txt", "b.txt"),
        )

        assert len(index) == 2
        assert index.posting_count == 3
        assert list(index) == ["alpha", "beta"]
        assert index.has_document("b.txt")
        assert not index.has_document("c.txt")


def test_snapshot_with_stemmed_keeps_raw(tmp_path):
    raw = InvertedIndex(kind=IndexKind.RAW, terms={}, documents=("a.txt",))
    stemmed = InvertedIndex(kind=IndexKind.STEMMED, terms={}, documents=("a.txt",))
    snapshot = IndexSnapshot(corpus_dir=tmp_path, raw=raw, build_errors=("b.txt: denied",))

    updated = snapshot.with_stemmed(stemmed)

    assert updated.raw is raw
    assert updated.stemmed is stemmed
    assert updated.build_errors == ("b.txt: denied",)
    assert updated.documents == ("a.txt",)
    assert snapshot.stemmed is None
