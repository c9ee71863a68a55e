"""Analyzer utilities for turning raw document text into index terms.

The design keeps the composable tokenizer/filter pipeline: a tokenizer emits
raw whitespace-delimited tokens carrying their position, and filters
normalize and drop stop words. Positions are assigned by
the tokenizer and are never renumbered by filters, so a term's position is
its offset among *all* raw tokens of the document, stop words included.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import hashlib
from pathlib import Path
import re
import string
from typing import Any, Protocol


# ASCII punctuation and digits, matching the classic \p{Punct} and \d classes.
_STRIP_TABLE = str.maketrans("", "", string.punctuation + string.digits)


def normalize(raw_token: str) -> str:
    """Strip punctuation and digits from ``raw_token`` and lowercase it.

    The result may be empty, in which case the token is not a term.
    """
    return raw_token.translate(_STRIP_TABLE).lower()


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: Any) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class WhitespaceTokenizer:
    """Splits text on runs of whitespace, numbering every raw token."""

    _PATTERN = re.compile(r"\S+")

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self._PATTERN.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


def raw_tokens(text: str) -> list[str]:
    """Return the raw whitespace-delimited tokens of ``text`` in order."""
    return text.split()


class NormalizeFilter:
    """Applies :func:`normalize` and drops tokens that normalize to nothing."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            term = normalize(token.text)
            if not term:
                continue
            if term == token.text:
                yield token
            else:
                yield token.copy_with(text=term)


# English stop words. Contractions are omitted: normalization strips the
# apostrophe, so "aren't" could never match a normalized term anyway.
DEFAULT_STOPWORDS = [
    "a",
    "about",
    "above",
    "after",
    "again",
    "against",
    "all",
    "am",
    "an",
    "and",
    "any",
    "are",
    "as",
    "at",
    "be",
    "because",
    "been",
    "before",
    "being",
    "below",
    "between",
    "both",
    "but",
    "by",
    "cannot",
    "could",
    "did",
    "do",
    "does",
    "doing",
    "down",
    "during",
    "each",
    "few",
    "for",
    "from",
    "further",
    "had",
    "has",
    "have",
    "having",
    "he",
    "her",
    "here",
    "hers",
    "herself",
    "him",
    "himself",
    "his",
    "how",
    "i",
    "if",
    "in",
    "into",
    "is",
    "it",
    "its",
    "itself",
    "me",
    "more",
    "most",
    "my",
    "myself",
    "no",
    "nor",
    "not",
    "of",
    "off",
    "on",
    "once",
    "only",
    "or",
    "other",
    "ought",
    "our",
    "ours",
    "ourselves",
    "out",
    "over",
    "own",
    "same",
    "she",
    "should",
    "so",
    "some",
    "such",
    "than",
    "that",
    "the",
    "their",
    "theirs",
    "them",
    "themselves",
    "then",
    "there",
    "these",
    "they",
    "this",
    "those",
    "through",
    "to",
    "too",
    "under",
    "until",
    "up",
    "very",
    "was",
    "we",
    "were",
    "what",
    "when",
    "where",
    "which",
    "while",
    "who",
    "whom",
    "why",
    "with",
    "would",
    "you",
    "your",
    "yours",
    "yourself",
    "yourselves",
]


class StopWords:
    """Immutable stop-word set exposing the ``is_stop_word`` capability."""

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str] | None = None) -> None:
        vocab = DEFAULT_STOPWORDS if words is None else words
        self._words = frozenset(word.strip().lower() for word in vocab if word.strip())

    @classmethod
    def from_file(cls, path: str | Path) -> StopWords:
        """Load a newline-separated stop-word list; ``#`` starts a comment line."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        return cls(line for line in lines if not line.lstrip().startswith("#"))

    def fingerprint(self) -> str:
        """Stable digest of the word set, recorded with persisted indexes."""
        return hashlib.sha256("\n".join(sorted(self._words)).encode("utf-8")).hexdigest()

    def is_stop_word(self, term: str) -> bool:
        return term in self._words

    def __contains__(self, term: object) -> bool:
        return term in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._words))


class StopFilter:
    """Removes stop words from a stream of normalized tokens."""

    def __init__(self, stopwords: StopWords | Sequence[str] | None = None) -> None:
        if isinstance(stopwords, StopWords):
            self.stopwords = stopwords
        else:
            self.stopwords = StopWords(stopwords)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if not self.stopwords.is_stop_word(token.text):
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class StandardAnalyzer:
    """Whitespace tokenization, normalization and stop-word removal.

    The raw index stores unstemmed terms; the stemmed index is derived from
    it afterwards.
    """

    def __init__(
        self,
        *,
        stopwords: StopWords | Sequence[str] | None = None,
    ) -> None:
        self.stop_filter = StopFilter(stopwords)
        self.pipeline = AnalyzerPipeline(WhitespaceTokenizer(), [NormalizeFilter(), self.stop_filter])

    @property
    def stopwords(self) -> StopWords:
        return self.stop_filter.stopwords

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)

    def query_terms(self, query: str) -> list[str]:
        """Normalized, stop-word-free terms of ``query`` in left-to-right order."""
        return [token.text for token in self(query)]
