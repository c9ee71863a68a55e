"""Corpus indexing.

:class:`IndexBuilder` makes one pass over a :class:`DirectoryCorpus` and
produces the raw positional index. :func:`derive_stemmed` folds the raw index
into the stemmed index without re-reading any document: every raw term's
posting list is appended, in raw iteration order, under that term's stem.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time

from corpus_search.errors import CorpusReadError
from corpus_search.observability.metrics import CORPUS_READ_ERRORS, INDEX_BUILD_SECONDS
from corpus_search.observability.tracing import create_span
from corpus_search.search.analyzers import StandardAnalyzer, StopWords
from corpus_search.search.corpus import DirectoryCorpus
from corpus_search.search.models import IndexKind, InvertedIndex, Posting
from corpus_search.search.stemmer import stem as porter_stem


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexBuildResult:
    """Outcome of a raw indexing run."""

    index: InvertedIndex
    documents_indexed: int
    documents_skipped: int
    errors: tuple[str, ...]
    duration_seconds: float = 0.0


class IndexBuilder:
    """Build the raw positional index for one corpus snapshot.

    In lenient mode an unreadable document is logged, recorded in
    ``IndexBuildResult.errors`` and left out of the snapshot. In strict mode
    the first read failure aborts the build with :class:`CorpusReadError`.
    """

    def __init__(
        self,
        corpus: DirectoryCorpus,
        *,
        stopwords: StopWords | None = None,
        strict: bool = False,
    ) -> None:
        self.corpus = corpus
        self.analyzer = StandardAnalyzer(stopwords=stopwords)
        self.strict = strict

    def build(self) -> IndexBuildResult:
        """Scan every document in name order and collect term positions.

        Raises:
            CorpusReadError: if the corpus directory cannot be listed, or a
                document cannot be read while ``strict`` is set.
        """
        started = time.perf_counter()
        with create_span(
            "index.build",
            attributes={"index.kind": IndexKind.RAW.value, "corpus.dir": str(self.corpus.directory)},
        ) as span:
            documents = self.corpus.list_documents()
            terms: dict[str, list[Posting]] = {}
            indexed: list[str] = []
            errors: list[str] = []

            for document in documents:
                try:
                    text = self.corpus.read_text(document.doc_id)
                except CorpusReadError as exc:
                    CORPUS_READ_ERRORS.labels().inc()
                    if self.strict:
                        raise
                    logger.warning("Skipping unreadable document %s: %s", document.doc_id, exc.reason)
                    errors.append(f"{document.doc_id}: {exc.reason}")
                    continue

                for token in self.analyzer(text):
                    terms.setdefault(token.text, []).append(Posting(document.doc_id, token.position))
                indexed.append(document.doc_id)

            index = InvertedIndex(kind=IndexKind.RAW, terms=terms, documents=tuple(indexed))
            span.set_attribute("index.documents", len(indexed))
            span.set_attribute("index.terms", len(index))

        duration = time.perf_counter() - started
        INDEX_BUILD_SECONDS.labels(kind=IndexKind.RAW.value).observe(duration)
        logger.info(
            "Indexed %d documents (%d skipped): %d terms, %d postings in %.3fs",
            len(indexed),
            len(errors),
            len(index),
            index.posting_count,
            duration,
        )
        return IndexBuildResult(
            index=index,
            documents_indexed=len(indexed),
            documents_skipped=len(errors),
            errors=tuple(errors),
            duration_seconds=duration,
        )


def derive_stemmed(raw: InvertedIndex) -> InvertedIndex:
    """Fold a raw index into its stemmed counterpart.

    Runs in time linear in the total number of postings. The posting list
    of a stem is the concatenation of the lists of every raw term reducing
    to it, in the raw index's iteration order.
    """
    started = time.perf_counter()
    with create_span("index.derive_stemmed", attributes={"index.raw_terms": len(raw)}):
        merged: dict[str, list[Posting]] = {}
        for term, postings in raw.items():
            merged.setdefault(porter_stem(term), []).extend(postings)
        stemmed = InvertedIndex(kind=IndexKind.STEMMED, terms=merged, documents=raw.documents)

    duration = time.perf_counter() - started
    INDEX_BUILD_SECONDS.labels(kind=IndexKind.STEMMED.value).observe(duration)
    logger.debug("Derived %d stems from %d raw terms in %.3fs", len(stemmed), len(raw), duration)
    return stemmed
