"""Unit tests for the directory corpus provider and token cache."""

import pytest

from corpus_search.errors import CorpusReadError
from corpus_search.search.corpus import DirectoryCorpus, DocumentTokenCache


def test_list_documents_sorted_and_filtered(make_corpus):
    directory = make_corpus({"b.txt": "b", "a.txt": "a", ".hidden": "x", ".DS_Store": "x"})
    (directory / "nested").mkdir()

    documents = DirectoryCorpus(directory).list_documents()

    assert [document.doc_id for document in documents] == ["a.txt", "b.txt"]
    assert documents[0].path == directory / "a.txt"


def test_missing_directory_raises(tmp_path):
    with pytest.raises(CorpusReadError) as excinfo:
        DirectoryCorpus(tmp_path / "absent").list_documents()

    assert excinfo.value.path == tmp_path / "absent"


def test_read_text_missing_document_raises(make_corpus):
    corpus = DirectoryCorpus(make_corpus({"a.txt": "alpha"}))

    with pytest.raises(CorpusReadError):
        corpus.read_text("b.txt")


def test_read_text_replaces_undecodable_bytes(make_corpus):
    directory = make_corpus({})
    (directory / "bin.txt").write_bytes(b"ok \xff done")

    assert DirectoryCorpus(directory).read_text("bin.txt").split() == ["ok", "�", "done"]


class TestDocumentTokenCache:
    def test_reads_each_document_once(self, make_corpus, monkeypatch):
        corpus = DirectoryCorpus(make_corpus({"a.txt": "one two three"}))
        cache = DocumentTokenCache(corpus)
        reads = []
        original = corpus.read_text

        def counting_read(doc_id):
            reads.append(doc_id)
            return original(doc_id)

        monkeypatch.setattr(corpus, "read_text", counting_read)

        assert cache.tokens("a.txt") == ("one", "two", "three")
        assert cache.tokens("a.txt") == ("one", "two", "three")
        assert reads == ["a.txt"]

    def test_evicts_least_recently_used(self, make_corpus):
        corpus = DirectoryCorpus(make_corpus({"a.txt": "a", "b.txt": "b", "c.txt": "c"}))
        cache = DocumentTokenCache(corpus, max_documents=2)

        cache.tokens("a.txt")
        cache.tokens("b.txt")
        cache.tokens("a.txt")
        cache.tokens("c.txt")

        assert list(cache._entries) == ["a.txt", "c.txt"]

    def test_clear(self, make_corpus):
        cache = DocumentTokenCache(DirectoryCorpus(make_corpus({"a.txt": "a"})))
        cache.tokens("a.txt")

        cache.clear()

        assert not cache._entries
