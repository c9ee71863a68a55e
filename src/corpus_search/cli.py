"""Command-line entry point for building indexes and running queries."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
import logging
from pathlib import Path
import sys
from typing import Protocol, TypeVar

from pydantic import ValidationError

from corpus_search.config import Settings
from corpus_search.errors import CorpusReadError
from corpus_search.observability.logging import configure_logging
from corpus_search.observability.metrics import get_metrics, init_metrics
from corpus_search.observability.tracing import init_tracing
from corpus_search.render import (
    render_conjunctive_result,
    render_document_postings,
    render_document_result,
    render_index,
    render_summary,
    render_word_postings,
    render_word_result,
)
from corpus_search.search.models import IndexKind
from corpus_search.service_layer.search_service import SearchService


logger = logging.getLogger(__name__)


class _Reportable(Protocol):
    @property
    def error(self) -> str | None: ...


_ResultT = TypeVar("_ResultT", bound=_Reportable)


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--corpus-dir", type=Path, help="Directory of documents to index (default: ./Corpus)")
    common.add_argument("--cache-dir", type=Path, help="Directory for cached index files (default: ./Data)")
    common.add_argument("--no-cache", action="store_true", help="Neither read nor write cached indexes")
    common.add_argument("--rebuild", action="store_true", help="Ignore cached indexes and rebuild from the corpus")
    common.add_argument("--strict", action="store_true", help="Abort the build when a document cannot be read")
    common.add_argument("--stopwords-file", type=Path, help="Newline-separated stop-word list")
    common.add_argument("--radius", type=int, help="Words of context on each side of a snippet match")
    common.add_argument("--unsorted", action="store_true", help="Keep index discovery order instead of sorting")
    common.add_argument("--output", "-o", type=Path, help="Write results to this file instead of stdout")
    common.add_argument("--log-level", help="Logging level (debug, info, warning, error, critical)")
    common.add_argument("--log-json", action="store_true", help="Emit structured JSON logs")
    common.add_argument("--metrics-file", type=Path, help="Write Prometheus metrics here after the command")
    return common


def build_argument_parser() -> argparse.ArgumentParser:
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="corpus-search",
        description="Positional inverted index over a directory of text documents",
    )
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    word = commands.add_parser("word", parents=[common], help="Search for a single word")
    word.add_argument("word")
    word.add_argument("--stem", "-s", action="store_true", help="Also search the stemmed index")

    words = commands.add_parser("words", parents=[common], help="Find documents containing every word of a query")
    words.add_argument("query")
    words.add_argument("--stem", "-s", action="store_true", help="Also report stemmed-only matches")

    doc = commands.add_parser("doc", parents=[common], help="Count every indexed word of a document")
    doc.add_argument("document")

    batch = commands.add_parser(
        "batch",
        parents=[common],
        help="Run one query per line of a file; with --output, line N goes to '<name>(N).txt'",
    )
    batch.add_argument("query_file", type=Path)
    batch.add_argument("--stem", "-s", action="store_true", help="Also search the stemmed index")

    print_word = commands.add_parser("print-word", parents=[common], help="List every posting of a word")
    print_word.add_argument("word")
    print_word.add_argument("--stem", "-s", action="store_true", help="Look the word's stem up instead")

    print_doc = commands.add_parser("print-doc", parents=[common], help="List every posting in a document")
    print_doc.add_argument("document")

    dump = commands.add_parser("dump", parents=[common], help="Write the whole index, one term per line")
    dump.add_argument("--stem", "-s", action="store_true", help="Dump the stemmed index")
    dump.add_argument("--sort", action="store_true", help="Order terms alphabetically")

    commands.add_parser("build", parents=[common], help="Build and cache both indexes, then report counts")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    """Apply command-line overrides on top of environment configuration."""
    settings = base or Settings()
    updates: dict[str, object] = {}
    if args.corpus_dir is not None:
        updates["corpus_dir"] = args.corpus_dir
    if args.cache_dir is not None:
        updates["cache_dir"] = args.cache_dir
    if args.no_cache:
        updates["cache_enabled"] = False
    if args.strict:
        updates["strict_corpus_reads"] = True
    if args.stopwords_file is not None:
        updates["stopwords_file"] = args.stopwords_file
    if args.radius is not None:
        updates["snippet_radius"] = args.radius
    if args.unsorted:
        updates["sort_results"] = False
    if args.log_level is not None:
        updates["log_level"] = args.log_level
    if args.log_json:
        updates["log_json"] = True
    if not updates:
        return settings
    # model_copy does not validate updates
    return Settings.model_validate({**settings.model_dump(), **updates})


def numbered_output_path(output: Path, number: int) -> Path:
    """``results.txt`` -> ``results(3).txt``."""
    return output.with_name(f"{output.stem}({number}).txt")


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", output)


def _run_batch(service: SearchService, args: argparse.Namespace) -> int:
    try:
        lines = args.query_file.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.error("Query file cannot be read: %s", exc)
        return 1

    for number, line in enumerate(lines, start=1):
        pieces = line.split()
        if not pieces:
            continue
        if len(pieces) > 1:
            text = render_conjunctive_result(service.search_words(line, use_stem=args.stem))
        else:
            text = render_word_result(service.search_word(pieces[0], use_stem=args.stem))
        if args.output is None:
            _emit(f"[{number}] {line}\n{text}\n", None)
        else:
            _emit(text, numbered_output_path(args.output, number))
    return 0


def _dispatch(service: SearchService, args: argparse.Namespace) -> int:
    command = args.command
    if command == "batch":
        return _run_batch(service, args)
    if command == "build":
        _emit(render_summary(service.summary()), args.output)
        return 0
    if command == "dump":
        kind = IndexKind.STEMMED if args.stem else IndexKind.RAW
        _emit(render_index(service.index(kind), sort_terms=args.sort), args.output)
        return 0

    handlers: dict[str, Callable[[], tuple[str, str | None]]] = {
        "word": lambda: _pair(service.search_word(args.word, use_stem=args.stem), render_word_result),
        "words": lambda: _pair(service.search_words(args.query, use_stem=args.stem), render_conjunctive_result),
        "doc": lambda: _pair(service.search_document(args.document), render_document_result),
        "print-word": lambda: _pair(service.word_postings(args.word, use_stem=args.stem), render_word_postings),
        "print-doc": lambda: _pair(service.document_postings(args.document), render_document_postings),
    }
    text, error = handlers[command]()
    _emit(text, args.output)
    if error:
        logger.error("%s", error)
        return 1
    return 0


def _pair(result: _ResultT, renderer: Callable[[_ResultT], str]) -> tuple[str, str | None]:
    return renderer(result), result.error


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    if args.radius is not None and args.radius < 0:
        parser.error("--radius must be >= 0")

    try:
        settings = settings_from_args(args)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    configure_logging(settings.log_level, settings.log_json)
    init_tracing()
    init_metrics()

    try:
        service = SearchService(settings)
    except OSError as exc:
        logger.error("Stop-word file cannot be read: %s", exc)
        return 1

    try:
        if args.rebuild or args.command == "build":
            service.rebuild()
        else:
            service.load()
        exit_code = _dispatch(service, args)
    except CorpusReadError as exc:
        logger.error("Index build failed: %s", exc)
        return 1

    if args.metrics_file is not None:
        args.metrics_file.write_bytes(get_metrics())
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
