"""Snippet extraction around a term's first occurrence in a document.

Offsets are the zero-based raw-token positions stored in postings, so the
window for a match at ``p`` with radius ``r`` is the inclusive token range
``[max(0, p - r), p + r]``. A match on the very first token is an ordinary
match.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from corpus_search.errors import CorpusReadError
from corpus_search.search.models import InvertedIndex


logger = logging.getLogger(__name__)

TokenSource = Callable[[str], Sequence[str]]


def first_position(index: InvertedIndex, term: str, doc_id: str) -> int | None:
    """Return the earliest stored offset of ``term`` in ``doc_id``.

    Postings keep scan order within a document, except in the stemmed index
    where several raw lists are concatenated, so the minimum is taken.
    """
    postings = index.postings(term)
    if not postings:
        return None
    positions = [posting.position for posting in postings if posting.doc_id == doc_id]
    if not positions:
        return None
    return min(positions)


def window(tokens: Sequence[str], position: int, radius: int) -> str:
    """Join the raw tokens within ``radius`` of ``position`` with single spaces."""
    if radius < 0:
        raise ValueError("radius must be non-negative")
    start = max(0, position - radius)
    return " ".join(tokens[start : position + radius + 1])


def extract_snippet(
    radius: int,
    term: str,
    doc_id: str,
    index: InvertedIndex,
    token_source: TokenSource,
) -> str | None:
    """Return the raw-token window around the first posting of ``term`` in ``doc_id``.

    ``term`` must already be in the form ``index`` is keyed by (normalized,
    or stemmed for the stemmed index). ``token_source`` yields a document's
    raw whitespace-delimited tokens.

    Returns ``None`` when the term has no posting in the document or the
    document can no longer be read.
    """
    position = first_position(index, term, doc_id)
    if position is None:
        return None

    try:
        tokens = token_source(doc_id)
    except CorpusReadError as exc:
        logger.warning("Cannot build snippet for %r in %s: %s", term, doc_id, exc.reason)
        return None

    if position >= len(tokens):
        logger.debug("Stale posting %s@%d for %r; document changed since indexing", doc_id, position, term)
        return None
    return window(tokens, position, radius)
