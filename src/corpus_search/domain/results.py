"""Domain models for search results.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

Every result carries an optional ``error`` so a failed query still produces
a value the presentation layer can render. "No match" is never an error: it
is an empty ``hits`` / ``documents`` list.
"""

from pydantic import BaseModel, ConfigDict, Field


class DocumentHit(BaseModel):
    """Value object for one matching document.

    ``snippets`` maps each searched term to the text window around its first
    occurrence; a term whose window could not be produced maps to ``None``.
    """

    model_config = ConfigDict(frozen=True)

    document: str
    count: int | None = None
    snippets: dict[str, str | None] = Field(default_factory=dict)


class WordSearchResult(BaseModel):
    """Result of a single-word query, optionally with its stemmed fallback.

    ``stem_hits`` is ``None`` when stemming was not requested or did not
    change the word; it is an empty list when the stem matched nothing.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    term: str | None = None
    hits: list[DocumentHit] = Field(default_factory=list)
    stem: str | None = None
    stem_hits: list[DocumentHit] | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.hits)


class ConjunctiveSearchResult(BaseModel):
    """Result of a multi-word query requiring every term to co-occur."""

    model_config = ConfigDict(frozen=True)

    query: str
    terms: list[str] = Field(default_factory=list)
    documents: list[DocumentHit] = Field(default_factory=list)
    use_stem: bool = False
    stemmed_terms: list[str] = Field(default_factory=list)
    stemmed_found: bool = False
    similar: list[DocumentHit] = Field(default_factory=list)
    error: str | None = None


class TermCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str
    count: int


class DocumentSearchResult(BaseModel):
    """Every indexed term of one document with its occurrence count."""

    model_config = ConfigDict(frozen=True)

    document: str
    terms: list[TermCount] = Field(default_factory=list)
    error: str | None = None


class PostingEntry(BaseModel):
    """One occurrence: the owning document or term, plus its raw-token offset."""

    model_config = ConfigDict(frozen=True)

    key: str
    position: int


class WordPostingsReport(BaseModel):
    """All postings of a term; ``indexed`` is False when the term is absent."""

    model_config = ConfigDict(frozen=True)

    word: str
    term: str | None = None
    indexed: bool = False
    postings: list[PostingEntry] = Field(default_factory=list)
    error: str | None = None


class DocumentPostingsReport(BaseModel):
    """All ``(term, offset)`` postings of one document, in reading order."""

    model_config = ConfigDict(frozen=True)

    document: str
    postings: list[PostingEntry] = Field(default_factory=list)
    error: str | None = None


class IndexSummary(BaseModel):
    """Outcome of loading or building the published indexes."""

    model_config = ConfigDict(frozen=True)

    corpus_dir: str
    documents: int
    raw_terms: int
    stemmed_terms: int
    postings: int
    loaded_from_cache: bool = False
    skipped_documents: list[str] = Field(default_factory=list)
