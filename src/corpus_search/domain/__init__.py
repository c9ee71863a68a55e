"""Domain layer - immutable result value objects handed to presentation code.

Key principles:
1. No dependencies on infrastructure (no filesystem, no index internals)
2. Type safety with Pydantic
3. Immutability (value objects)
"""

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


__all__ = [
    "ConjunctiveSearchResult",
    "DocumentHit",
    "DocumentPostingsReport",
    "DocumentSearchResult",
    "IndexSummary",
    "PostingEntry",
    "TermCount",
    "WordPostingsReport",
    "WordSearchResult",
]
