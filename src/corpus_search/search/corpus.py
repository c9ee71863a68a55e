"""Filesystem corpus provider.

A corpus is a flat directory of text documents. Each regular file is one
document identified by its file name. The listing is a snapshot: files added
after :meth:`DirectoryCorpus.list_documents` are invisible until the next
build.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import logging
from pathlib import Path
import threading

from corpus_search.errors import CorpusReadError
from corpus_search.search.analyzers import raw_tokens


logger = logging.getLogger(__name__)

_SKIP_NAMES = {".DS_Store", "Thumbs.db"}


@dataclass(frozen=True, slots=True)
class CorpusDocument:
    """A document in the corpus snapshot."""

    doc_id: str
    path: Path


class DirectoryCorpus:
    """Enumerates and reads the documents of a corpus directory."""

    def __init__(self, directory: str | Path, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.encoding = encoding

    def list_documents(self) -> list[CorpusDocument]:
        """Return the documents in the directory, ordered by name.

        Hidden files and subdirectories are not part of the corpus.

        Raises:
            CorpusReadError: if the directory is missing or cannot be listed.
        """
        if not self.directory.is_dir():
            raise CorpusReadError(self.directory, "corpus directory does not exist")
        try:
            entries = sorted(self.directory.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            raise CorpusReadError(self.directory, str(exc)) from exc

        documents: list[CorpusDocument] = []
        for entry in entries:
            if entry.name.startswith(".") or entry.name in _SKIP_NAMES:
                continue
            if not entry.is_file():
                continue
            documents.append(CorpusDocument(doc_id=entry.name, path=entry))
        return documents

    def document_path(self, doc_id: str) -> Path:
        return self.directory / doc_id

    def read_text(self, doc_id: str) -> str:
        """Read a document's full text.

        Raises:
            CorpusReadError: if the document cannot be opened or read.
        """
        path = self.document_path(doc_id)
        try:
            return path.read_text(encoding=self.encoding, errors="replace")
        except OSError as exc:
            raise CorpusReadError(path, exc.strerror or str(exc)) from exc


class DocumentTokenCache:
    """Bounded LRU cache of each document's raw token stream.

    Snippet extraction re-scans documents once per matched term; caching the
    parsed tokens keeps that to one disk read per document.
    """

    def __init__(self, corpus: DirectoryCorpus, max_documents: int = 256) -> None:
        self.corpus = corpus
        self.max_documents = max_documents
        self._entries: OrderedDict[str, tuple[str, ...]] = OrderedDict()
        self._lock = threading.Lock()

    def tokens(self, doc_id: str) -> tuple[str, ...]:
        with self._lock:
            cached = self._entries.get(doc_id)
            if cached is not None:
                self._entries.move_to_end(doc_id)
                return cached

        tokens = tuple(raw_tokens(self.corpus.read_text(doc_id)))

        with self._lock:
            self._entries[doc_id] = tokens
            self._entries.move_to_end(doc_id)
            while len(self._entries) > self.max_documents:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s from document token cache", evicted)
        return tokens

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
