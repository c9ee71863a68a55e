"""Search data models."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any


class IndexKind(str, Enum):
    """Which of the two per-corpus indexes an ``InvertedIndex`` holds."""

    RAW = "raw"
    STEMMED = "stemmed"


@dataclass(frozen=True, slots=True)
class Posting:
    """A posting represents one term occurrence: document plus zero-based raw-token offset."""

    doc_id: str
    position: int

    def to_list(self) -> list[Any]:
        return [self.doc_id, self.position]

    @classmethod
    def from_list(cls, data: Iterable[Any]) -> Posting:
        doc_id, position = data
        return cls(doc_id=str(doc_id), position=int(position))


PostingList = tuple[Posting, ...]


@dataclass(frozen=True, slots=True)
class InvertedIndex:
    """Immutable mapping from term to its posting list.

    Postings for a term keep corpus scan order and are never de-duplicated.
    ``documents`` is the corpus snapshot the index was built from, in scan
    order; it includes documents that contributed no terms.
    """

    kind: IndexKind
    terms: Mapping[str, PostingList]
    documents: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.terms, MappingProxyType):
            frozen = {term: tuple(postings) for term, postings in self.terms.items()}
            object.__setattr__(self, "terms", MappingProxyType(frozen))

    def __contains__(self, term: object) -> bool:
        return term in self.terms

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def postings(self, term: str) -> PostingList | None:
        """Return the posting list for ``term`` or ``None`` when it is unindexed."""
        return self.terms.get(term)

    def items(self) -> Iterable[tuple[str, PostingList]]:
        return self.terms.items()

    def has_document(self, doc_id: str) -> bool:
        return doc_id in self.documents

    @property
    def posting_count(self) -> int:
        return sum(len(postings) for postings in self.terms.values())


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """The published, read-only state queries run against.

    ``stemmed`` is ``None`` until a stemmed index has been derived or loaded.
    """

    corpus_dir: Path
    raw: InvertedIndex
    stemmed: InvertedIndex | None = None
    build_errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def documents(self) -> tuple[str, ...]:
        return self.raw.documents

    def with_stemmed(self, stemmed: InvertedIndex) -> IndexSnapshot:
        return IndexSnapshot(
            corpus_dir=self.corpus_dir,
            raw=self.raw,
            stemmed=stemmed,
            build_errors=self.build_errors,
        )
