"""Exception hierarchy shared by the index builder, resolver and service layer."""

from __future__ import annotations


class CorpusSearchError(Exception):
    """Base class for recoverable corpus-search failures."""


class DocumentNotFoundError(CorpusSearchError):
    """Raised when a document is not part of the indexed corpus snapshot."""

    def __init__(self, document: str) -> None:
        super().__init__(f"Document not found in corpus: {document}")
        self.document = document


class InvalidQueryError(CorpusSearchError):
    """Raised when a query has no searchable term left after normalization."""

    def __init__(self, query: str) -> None:
        super().__init__(f"Query has no searchable terms: {query!r}")
        self.query = query


class CorpusReadError(CorpusSearchError):
    """Raised when the corpus directory or one of its documents cannot be read."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path
        self.reason = reason


class IndexStoreError(CorpusSearchError):
    """Raised when a persisted index file exists but cannot be decoded."""
