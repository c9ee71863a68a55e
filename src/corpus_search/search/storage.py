"""Persistence for the raw and stemmed indexes.

Each index is a single minified JSON file in the cache directory::

    {"format_version": 1, "kind": "raw", "corpus_dir": "/abs/Corpus",
     "stopwords": "<sha256 of the stop list>", "documents": ["a.txt", ...], "terms": {"term": [["a.txt", 3], ...]}}

A file written for another corpus directory or stop-word list, another
format version or another index kind is treated as absent so the caller
rebuilds.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import orjson

from corpus_search.errors import IndexStoreError
from corpus_search.search.analyzers import StopWords
from corpus_search.search.models import IndexKind, InvertedIndex, Posting


logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

_FILENAMES = {
    IndexKind.RAW: "InvertedIndex.json",
    IndexKind.STEMMED: "StemmedIndex.json",
}


def _load_json_payload(path: Path) -> dict[str, Any]:
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        raise IndexStoreError(f"Unable to decode {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise IndexStoreError(f"Unexpected payload type in {path}: {type(data).__name__}")
    return cast("dict[str, Any]", data)


def _corpus_key(corpus_dir: str | Path) -> str:
    return str(Path(corpus_dir).resolve())


def _stopwords_key(stopwords: StopWords | None) -> str:
    return (stopwords if stopwords is not None else StopWords()).fingerprint()


def index_to_dict(
    index: InvertedIndex,
    corpus_dir: str | Path,
    stopwords: StopWords | None = None,
) -> dict[str, Any]:
    return {
        "format_version": FORMAT_VERSION,
        "kind": index.kind.value,
        "corpus_dir": _corpus_key(corpus_dir),
        "stopwords": _stopwords_key(stopwords),
        "documents": list(index.documents),
        "terms": {term: [posting.to_list() for posting in postings] for term, postings in index.items()},
    }


def index_from_dict(data: dict[str, Any]) -> InvertedIndex:
    try:
        kind = IndexKind(data["kind"])
        terms = {
            str(term): tuple(Posting.from_list(entry) for entry in postings)
            for term, postings in data["terms"].items()
        }
        documents = tuple(str(doc_id) for doc_id in data.get("documents", ()))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise IndexStoreError(f"Malformed index payload: {exc}") from exc
    return InvertedIndex(kind=kind, terms=terms, documents=documents)


class IndexStore:
    """Load and save indexes under a cache directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, kind: IndexKind) -> Path:
        return self.directory / _FILENAMES[kind]

    def load(
        self,
        kind: IndexKind,
        corpus_dir: str | Path,
        stopwords: StopWords | None = None,
    ) -> InvertedIndex | None:
        """Return the persisted index of ``kind`` for ``corpus_dir``, or ``None``.

        ``stopwords`` must match the list the index was built with; ``None``
        stands for the default list.

        Unreadable, malformed or mismatched files are logged and ignored.
        """
        path = self.path_for(kind)
        if not path.is_file():
            return None

        try:
            payload = _load_json_payload(path)
        except IndexStoreError as exc:
            logger.warning("Ignoring cached index: %s", exc)
            return None

        version = payload.get("format_version")
        if version != FORMAT_VERSION:
            logger.warning("Ignoring cached index %s: format version %r != %d", path, version, FORMAT_VERSION)
            return None
        if payload.get("kind") != kind.value:
            logger.warning("Ignoring cached index %s: holds %r, expected %r", path, payload.get("kind"), kind.value)
            return None
        if payload.get("corpus_dir") != _corpus_key(corpus_dir):
            logger.info("Cached index %s was built for %s; rebuilding", path, payload.get("corpus_dir"))
            return None
        if payload.get("stopwords") != _stopwords_key(stopwords):
            logger.info("Cached index %s was built with a different stop-word list; rebuilding", path)
            return None

        try:
            index = index_from_dict(payload)
        except IndexStoreError as exc:
            logger.warning("Ignoring cached index %s: %s", path, exc)
            return None

        logger.debug("Loaded %s index from %s (%d terms)", kind.value, path, len(index))
        return index

    def save(self, index: InvertedIndex, corpus_dir: str | Path, stopwords: StopWords | None = None) -> Path:
        """Write ``index`` atomically and return its path.

        Raises:
            IndexStoreError: if the cache directory or file cannot be written.
        """
        path = self.path_for(index.kind)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._atomic_write_json(path, index_to_dict(index, corpus_dir, stopwords))
        except OSError as exc:
            raise IndexStoreError(f"Unable to write {path}: {exc}") from exc
        logger.debug("Saved %s index to %s", index.kind.value, path)
        return path

    def _atomic_write_json(self, path: Path, payload: Any) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_bytes(orjson.dumps(payload))
        tmp_path.replace(path)
