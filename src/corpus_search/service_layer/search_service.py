"""Search service orchestration layer.

Owns the published index snapshot: loads it from the cache or builds it,
publishes it as one immutable value and swaps it wholesale on rebuild.
Queries grab the current snapshot once and never lock. Expected query
failures (unknown document, empty query) come back as result objects with
``error`` set; anything else propagates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
import logging
import threading
from typing import TypeVar

from corpus_search.config import Settings
from corpus_search.domain.results import (
    ConjunctiveSearchResult,
    DocumentHit,
    DocumentPostingsReport,
    DocumentSearchResult,
    IndexSummary,
    PostingEntry,
    TermCount,
    WordPostingsReport,
    WordSearchResult,
)
from corpus_search.errors import CorpusSearchError, IndexStoreError
from corpus_search.observability.metrics import (
    INDEX_DOC_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    track_latency,
)
from corpus_search.observability.tracing import create_span
from corpus_search.search.analyzers import StopWords
from corpus_search.search.corpus import DirectoryCorpus, DocumentTokenCache
from corpus_search.search.indexer import IndexBuilder, derive_stemmed
from corpus_search.search.models import IndexKind, IndexSnapshot, InvertedIndex
from corpus_search.search.resolver import QueryResolver
from corpus_search.search.snippet import extract_snippet
from corpus_search.search.stemmer import stem as porter_stem
from corpus_search.search.storage import IndexStore


logger = logging.getLogger(__name__)

_ResultT = TypeVar("_ResultT")


@dataclass(frozen=True)
class _Published:
    snapshot: IndexSnapshot
    resolver: QueryResolver
    loaded_from_cache: bool


class SearchService:
    """High-level search orchestration service.

    Coordinates the corpus, the index cache, the resolver and snippet
    extraction, and converts resolver output into domain result objects.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        stopwords: StopWords | None = None,
        corpus: DirectoryCorpus | None = None,
        store: IndexStore | None = None,
    ) -> None:
        self.settings = settings
        self.stopwords = stopwords if stopwords is not None else settings.load_stopwords()
        self.corpus = corpus or DirectoryCorpus(settings.corpus_dir)
        self.store = store or IndexStore(settings.cache_dir)
        self.token_cache = DocumentTokenCache(self.corpus)
        self._published: _Published | None = None
        self._lock = threading.Lock()

    # --- snapshot lifecycle -----------------------------------------------

    def load(self) -> IndexSummary:
        """Publish an index snapshot, preferring cached indexes when enabled.

        A cached raw index is authoritative when it was built from the same
        corpus directory with the same stop-word list; a missing stemmed index
        is derived from it and written back.

        Raises:
            CorpusReadError: if the corpus cannot be read (strict mode, or a
                missing corpus directory).
        """
        if self.settings.cache_enabled:
            raw = self._load_cached(IndexKind.RAW)
            if raw is not None:
                stemmed = self._load_cached(IndexKind.STEMMED)
                if stemmed is None or stemmed.documents != raw.documents:
                    stemmed = derive_stemmed(raw)
                    self._persist(stemmed)
                logger.info("Loaded cached indexes from %s (%d documents)", self.store.directory, len(raw.documents))
                snapshot = IndexSnapshot(corpus_dir=self.corpus.directory, raw=raw, stemmed=stemmed)
                return self._publish(snapshot, loaded_from_cache=True)
        return self.rebuild()

    def rebuild(self) -> IndexSummary:
        """Build fresh indexes from the corpus and swap them in.

        The live snapshot keeps serving queries until the new one is complete;
        a failed build leaves it untouched.
        """
        with create_span("index.rebuild", attributes={"corpus.dir": str(self.corpus.directory)}):
            builder = IndexBuilder(self.corpus, stopwords=self.stopwords, strict=self.settings.strict_corpus_reads)
            result = builder.build()
            stemmed = derive_stemmed(result.index)
            snapshot = IndexSnapshot(
                corpus_dir=self.corpus.directory,
                raw=result.index,
                stemmed=stemmed,
                build_errors=result.errors,
            )
            if self.settings.cache_enabled:
                self._persist(result.index)
                self._persist(stemmed)
            self.token_cache.clear()
            return self._publish(snapshot, loaded_from_cache=False)

    @property
    def snapshot(self) -> IndexSnapshot:
        return self._current().snapshot

    def index(self, kind: IndexKind) -> InvertedIndex:
        published = self._current()
        return published.resolver.index_for(kind is IndexKind.STEMMED)

    def summary(self) -> IndexSummary:
        return self._summarize(self._current())

    def _current(self) -> _Published:
        if self._published is None:
            self.load()
        return self._published  # type: ignore[return-value]

    def _publish(self, snapshot: IndexSnapshot, *, loaded_from_cache: bool) -> IndexSummary:
        published = _Published(
            snapshot=snapshot,
            resolver=QueryResolver(snapshot, stopwords=self.stopwords),
            loaded_from_cache=loaded_from_cache,
        )
        with self._lock:
            self._published = published
        INDEX_DOC_COUNT.labels().set(len(snapshot.documents))
        INDEX_TERM_COUNT.labels(kind=IndexKind.RAW.value).set(len(snapshot.raw))
        INDEX_TERM_COUNT.labels(kind=IndexKind.STEMMED.value).set(len(published.resolver.stemmed))
        return self._summarize(published)

    def _load_cached(self, kind: IndexKind) -> InvertedIndex | None:
        with create_span("index.load", attributes={"index.kind": kind.value}) as span:
            index = self.store.load(kind, self.corpus.directory, self.stopwords)
            span.set_attribute("index.cache_hit", index is not None)
            return index

    def _persist(self, index: InvertedIndex) -> None:
        try:
            with create_span("index.save", attributes={"index.kind": index.kind.value}):
                self.store.save(index, self.corpus.directory, self.stopwords)
        except IndexStoreError as exc:
            logger.warning("Index cache not updated: %s", exc)

    def _summarize(self, published: _Published) -> IndexSummary:
        snapshot = published.snapshot
        return IndexSummary(
            corpus_dir=str(snapshot.corpus_dir),
            documents=len(snapshot.documents),
            raw_terms=len(snapshot.raw),
            stemmed_terms=len(published.resolver.stemmed),
            postings=snapshot.raw.posting_count,
            loaded_from_cache=published.loaded_from_cache,
            skipped_documents=list(snapshot.build_errors),
        )

    # --- queries ----------------------------------------------------------

    def search_word(self, word: str, use_stem: bool = False) -> WordSearchResult:
        """Single-word query with optional stemmed fallback."""

        def run(resolver: QueryResolver) -> WordSearchResult:
            if not use_stem:
                term = resolver.query_term(word)
                hits = resolver.search_word(word)
                return WordSearchResult(query=word, term=term, hits=self._hits(resolver, hits, [term], False))

            lookup = resolver.search_word_with_stem(word)
            stem_hits = None
            if lookup.stem_hits is not None:
                stem_hits = self._hits(resolver, lookup.stem_hits, [lookup.stem], True)
            return WordSearchResult(
                query=word,
                term=lookup.term,
                hits=self._hits(resolver, lookup.hits, [lookup.term], False),
                stem=lookup.stem,
                stem_hits=stem_hits,
            )

        return self._run("word", run, lambda exc: WordSearchResult(query=word, error=str(exc)))

    def search_words(self, query: str, use_stem: bool = False) -> ConjunctiveSearchResult:
        """Multi-word conjunctive query; ``similar`` lists stemmed-only matches."""

        def run(resolver: QueryResolver) -> ConjunctiveSearchResult:
            lookup = resolver.search_conjunctive(query, use_stem=use_stem)
            return ConjunctiveSearchResult(
                query=query,
                terms=list(lookup.terms),
                documents=self._hits(resolver, lookup.documents, lookup.terms, False),
                use_stem=use_stem,
                stemmed_terms=list(lookup.stemmed_terms),
                stemmed_found=bool(lookup.stemmed_documents),
                similar=self._hits(resolver, lookup.similar, lookup.stemmed_terms, True),
            )

        return self._run(
            "conjunctive",
            run,
            lambda exc: ConjunctiveSearchResult(query=query, use_stem=use_stem, error=str(exc)),
        )

    def search_document(self, document: str) -> DocumentSearchResult:
        """Occurrence counts of every indexed term in ``document``."""

        def run(resolver: QueryResolver) -> DocumentSearchResult:
            counts = resolver.search_by_document(document)
            items = sorted(counts.items()) if self.settings.sort_results else list(counts.items())
            return DocumentSearchResult(
                document=document,
                terms=[TermCount(term=term, count=count) for term, count in items],
            )

        return self._run("document", run, lambda exc: DocumentSearchResult(document=document, error=str(exc)))

    def word_postings(self, word: str, use_stem: bool = False) -> WordPostingsReport:
        """Every ``(document, offset)`` posting of ``word``."""

        def run(resolver: QueryResolver) -> WordPostingsReport:
            term = resolver.query_term(word)
            postings = resolver.word_postings(word, use_stem=use_stem)
            if use_stem:
                term = porter_stem(term)
            if postings is None:
                return WordPostingsReport(word=word, term=term)
            return WordPostingsReport(
                word=word,
                term=term,
                indexed=True,
                postings=[PostingEntry(key=posting.doc_id, position=posting.position) for posting in postings],
            )

        return self._run("word_postings", run, lambda exc: WordPostingsReport(word=word, error=str(exc)))

    def document_postings(self, document: str) -> DocumentPostingsReport:
        """Every ``(term, offset)`` posting in ``document``."""

        def run(resolver: QueryResolver) -> DocumentPostingsReport:
            pairs = resolver.document_postings(document)
            return DocumentPostingsReport(
                document=document,
                postings=[PostingEntry(key=term, position=position) for term, position in pairs],
            )

        return self._run(
            "document_postings",
            run,
            lambda exc: DocumentPostingsReport(document=document, error=str(exc)),
        )

    # --- helpers ----------------------------------------------------------

    def _run(
        self,
        operation: str,
        run: Callable[[QueryResolver], _ResultT],
        on_error: Callable[[CorpusSearchError], _ResultT],
    ) -> _ResultT:
        resolver = self._current().resolver
        with create_span(f"search.{operation}"), track_latency(SEARCH_LATENCY, operation=operation):
            try:
                result = run(resolver)
            except CorpusSearchError as exc:
                logger.debug("%s query failed: %s", operation, exc)
                SEARCH_REQUESTS.labels(operation=operation, status="error").inc()
                return on_error(exc)
        SEARCH_REQUESTS.labels(operation=operation, status="ok").inc()
        return result

    def _hits(
        self,
        resolver: QueryResolver,
        documents: Mapping[str, int] | Iterable[str],
        terms: Iterable[str],
        use_stem: bool,
    ) -> list[DocumentHit]:
        """Attach a snippet per term to each document, in presentation order."""
        if isinstance(documents, Mapping):
            entries: list[tuple[str, int | None]] = list(documents.items())
        else:
            entries = [(doc_id, None) for doc_id in documents]
        if self.settings.sort_results:
            entries.sort(key=lambda entry: entry[0])

        index = resolver.index_for(use_stem)
        radius = self.settings.snippet_radius
        term_list = list(dict.fromkeys(terms))
        return [
            DocumentHit(
                document=doc_id,
                count=count,
                snippets={
                    term: extract_snippet(radius, term, doc_id, index, self.token_cache.tokens) for term in term_list
                },
            )
            for doc_id, count in entries
        ]
