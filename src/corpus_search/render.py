"""Plain-text rendering of search results.

Renderers return strings; callers decide whether they go to stdout or to a
file.
"""

from __future__ import annotations

from collections.abc import Iterable

from corpus_search.domain.results import (
    ConjunctiveSearchResult,
    DocumentHit,
    DocumentPostingsReport,
    DocumentSearchResult,
    IndexSummary,
    WordPostingsReport,
    WordSearchResult,
)
from corpus_search.search.models import InvertedIndex


def _snippet_lines(hit: DocumentHit) -> list[str]:
    return [f'\t"...{snippet}..."' for snippet in hit.snippets.values() if snippet is not None]


def _hit_lines(hits: Iterable[DocumentHit], *, with_counts: bool) -> list[str]:
    lines: list[str] = []
    for hit in hits:
        if with_counts and hit.count is not None:
            lines.append(f"{hit.document}: {hit.count}")
        else:
            lines.append(hit.document)
        lines.extend(_snippet_lines(hit))
    return lines


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def render_word_result(result: WordSearchResult) -> str:
    if result.error:
        return _join([f"Invalid query {result.query!r}: {result.error}"])

    lines: list[str] = []
    if result.hits:
        lines.append(f"Search Results for the word: {result.term}")
        lines.extend(_hit_lines(result.hits, with_counts=True))
    else:
        lines.append(f"No results found for {result.term}")

    if result.stem_hits is not None:
        lines.append("")
        if result.stem_hits:
            lines.append(f"Search Results for similar word: {result.stem}")
            lines.extend(_hit_lines(result.stem_hits, with_counts=True))
        else:
            lines.append(f"No result found for {result.stem}")
    return _join(lines)


def render_conjunctive_result(result: ConjunctiveSearchResult) -> str:
    if result.error:
        return _join([f"Invalid query {result.query!r}: {result.error}"])

    lines: list[str] = []
    if result.documents:
        lines.append(f"Search Results for: {result.query}")
        lines.extend(_hit_lines(result.documents, with_counts=False))
    else:
        lines.append(f"No results found for: {result.query}")

    if result.use_stem:
        lines.append("")
        if not result.stemmed_found:
            lines.append("No results found for similar words either")
        elif not result.similar:
            lines.append("Searches for similar words yielded the same results")
        else:
            lines.append("Search Results for similar words:")
            lines.extend(_hit_lines(result.similar, with_counts=False))
    return _join(lines)


def render_document_result(result: DocumentSearchResult) -> str:
    if result.error:
        return _join([f"No results found for the document: {result.document}"])
    lines = [f"Search Results for the document: {result.document}"]
    lines.extend(f"{entry.term}: {entry.count}" for entry in result.terms)
    return _join(lines)


def render_word_postings(report: WordPostingsReport) -> str:
    if report.error:
        return _join([f"Invalid query {report.word!r}: {report.error}"])
    if not report.indexed:
        return _join([f"Word {report.term} not found in the Inverted Index"])
    lines = [
        f"Inverted Index contents for the word: {report.term}",
        "Format is filename: location; the location is the number of words from the beginning of the file",
    ]
    lines.extend(f"{entry.key}: {entry.position}" for entry in report.postings)
    return _join(lines)


def render_document_postings(report: DocumentPostingsReport) -> str:
    if report.error:
        return _join([f"Document {report.document} not found in the Inverted Index"])
    lines = [
        f"Inverted Index contents for the document: {report.document}",
        "Format is word: location; the location is the number of words from the beginning of the file",
    ]
    lines.extend(f"{entry.key}: {entry.position}" for entry in report.postings)
    return _join(lines)


def render_index(index: InvertedIndex, *, sort_terms: bool = False) -> str:
    """Dump every term with its ``(document, offset)`` postings, one term per line."""
    terms = sorted(index) if sort_terms else list(index)
    lines = []
    for term in terms:
        postings = ", ".join(f"({posting.doc_id}, {posting.position})" for posting in index.postings(term) or ())
        lines.append(f"{term}: {{{postings}}}")
    return _join(lines) if lines else ""


def render_summary(summary: IndexSummary) -> str:
    source = "cache" if summary.loaded_from_cache else "corpus"
    lines = [
        f"Corpus: {summary.corpus_dir} (loaded from {source})",
        f"Documents: {summary.documents}",
        f"Terms: {summary.raw_terms} raw, {summary.stemmed_terms} stemmed",
        f"Postings: {summary.postings}",
    ]
    if summary.skipped_documents:
        lines.append(f"Skipped {len(summary.skipped_documents)} unreadable document(s):")
        lines.extend(f"\t{entry}" for entry in summary.skipped_documents)
    return _join(lines)
