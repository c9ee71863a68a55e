"""Query resolution over a published index snapshot.

All operations are read-only. Document mappings preserve discovery order
(the order documents first appear in a term's posting list); callers that
need deterministic presentation sort afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from corpus_search.errors import DocumentNotFoundError, InvalidQueryError
from corpus_search.search.analyzers import StandardAnalyzer, StopWords, normalize
from corpus_search.search.indexer import derive_stemmed
from corpus_search.search.models import IndexSnapshot, InvertedIndex, Posting, PostingList
from corpus_search.search.stemmer import stem as porter_stem


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordLookup:
    """Raw hits for a word plus, when stemming changes it, hits for its stem.

    ``stem_hits`` is ``None`` when the stem equals the term itself, and an
    empty mapping when the stem differs but matches nothing.
    """

    term: str
    hits: dict[str, int]
    stem: str
    stem_hits: dict[str, int] | None = None


@dataclass(frozen=True)
class ConjunctiveLookup:
    """Documents containing every query term.

    ``stemmed_documents`` is ``None`` unless the stemmed pass ran; ``similar``
    holds the stemmed-pass documents that the raw pass did not return.
    """

    terms: tuple[str, ...]
    documents: tuple[str, ...]
    stemmed_terms: tuple[str, ...] = ()
    stemmed_documents: tuple[str, ...] | None = None
    similar: tuple[str, ...] = ()


def count_by_document(postings: Iterable[Posting]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for posting in postings:
        counts[posting.doc_id] = counts.get(posting.doc_id, 0) + 1
    return counts


def intersect_in_order(terms: Iterable[str], index: InvertedIndex) -> tuple[str, ...]:
    """Documents containing every term, in the first term's discovery order.

    Any term without postings makes the whole result empty.
    """
    candidates: list[str] | None = None
    for term in terms:
        postings = index.postings(term)
        if not postings:
            logger.debug("Conjunctive search short-circuited on %r", term)
            return ()
        found = count_by_document(postings)
        if candidates is None:
            candidates = list(found)
        else:
            candidates = [doc_id for doc_id in candidates if doc_id in found]
    return tuple(candidates or ())


class QueryResolver:
    """Answers word, conjunctive and document queries against one snapshot."""

    def __init__(self, snapshot: IndexSnapshot, *, stopwords: StopWords | None = None) -> None:
        self.snapshot = snapshot
        self.analyzer = StandardAnalyzer(stopwords=stopwords)
        self._stemmed = snapshot.stemmed if snapshot.stemmed is not None else derive_stemmed(snapshot.raw)

    @property
    def raw(self) -> InvertedIndex:
        return self.snapshot.raw

    @property
    def stemmed(self) -> InvertedIndex:
        return self._stemmed

    def index_for(self, use_stem: bool) -> InvertedIndex:
        return self._stemmed if use_stem else self.snapshot.raw

    def query_term(self, word: str) -> str:
        """Normalize a single-word query.

        Raises:
            InvalidQueryError: if nothing searchable is left.
        """
        term = normalize(word)
        if not term or self.analyzer.stopwords.is_stop_word(term):
            raise InvalidQueryError(word)
        return term

    def query_terms(self, query: str) -> list[str]:
        """Normalized, stop-word-free terms of a multi-word query.

        Raises:
            InvalidQueryError: if nothing searchable is left.
        """
        terms = self.analyzer.query_terms(query)
        if not terms:
            raise InvalidQueryError(query)
        return terms

    # --- queries ----------------------------------------------------------

    def search_word(self, word: str) -> dict[str, int]:
        """Per-document occurrence counts for ``word`` in the raw index."""
        term = self.query_term(word)
        postings = self.raw.postings(term)
        if not postings:
            return {}
        return count_by_document(postings)

    def search_word_with_stem(self, word: str) -> WordLookup:
        term = self.query_term(word)
        hits = count_by_document(self.raw.postings(term) or ())
        stemmed = porter_stem(term)
        if stemmed == term:
            return WordLookup(term=term, hits=hits, stem=stemmed)
        stem_hits = count_by_document(self._stemmed.postings(stemmed) or ())
        logger.debug("Stem %r of %r matched %d documents", stemmed, term, len(stem_hits))
        return WordLookup(term=term, hits=hits, stem=stemmed, stem_hits=stem_hits)

    def search_conjunctive(self, query: str, use_stem: bool = False) -> ConjunctiveLookup:
        """Documents containing every non-stop-word term of ``query``.

        With ``use_stem`` a second pass intersects the terms' stems in the
        stemmed index, and ``similar`` lists what that pass adds.
        """
        terms = tuple(self.query_terms(query))
        documents = intersect_in_order(terms, self.raw)
        if not use_stem:
            return ConjunctiveLookup(terms=terms, documents=documents)

        stemmed_terms = tuple(porter_stem(term) for term in terms)
        stemmed_documents = intersect_in_order(stemmed_terms, self._stemmed)
        raw_set = set(documents)
        similar = tuple(doc_id for doc_id in stemmed_documents if doc_id not in raw_set)
        return ConjunctiveLookup(
            terms=terms,
            documents=documents,
            stemmed_terms=stemmed_terms,
            stemmed_documents=stemmed_documents,
            similar=similar,
        )

    def search_by_document(self, doc_id: str) -> dict[str, int]:
        """Per-term occurrence counts for every raw term found in ``doc_id``.

        Raises:
            DocumentNotFoundError: if the document is not in the snapshot.
        """
        self._require_document(doc_id)
        counts: dict[str, int] = {}
        for term, postings in self.raw.items():
            count = sum(1 for posting in postings if posting.doc_id == doc_id)
            if count:
                counts[term] = count
        return counts

    # --- inspection -------------------------------------------------------

    def word_postings(self, word: str, use_stem: bool = False) -> PostingList | None:
        """Every posting of ``word`` (or its stem), or ``None`` when unindexed."""
        term = self.query_term(word)
        if use_stem:
            term = porter_stem(term)
        return self.index_for(use_stem).postings(term)

    def document_postings(self, doc_id: str) -> list[tuple[str, int]]:
        """``(term, offset)`` for every raw posting in ``doc_id``, in reading order.

        Raises:
            DocumentNotFoundError: if the document is not in the snapshot.
        """
        self._require_document(doc_id)
        pairs = [
            (term, posting.position)
            for term, postings in self.raw.items()
            for posting in postings
            if posting.doc_id == doc_id
        ]
        pairs.sort(key=lambda pair: pair[1])
        return pairs

    def _require_document(self, doc_id: str) -> None:
        if not self.snapshot.raw.has_document(doc_id):
            raise DocumentNotFoundError(doc_id)
