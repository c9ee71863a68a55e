"""Unit tests for the command-line interface."""

from pathlib import Path

import pytest

from corpus_search.cli import build_argument_parser, main, numbered_output_path, settings_from_args


@pytest.fixture
def run(corpus_dir, tmp_path, restore_logging):
    cache_dir = tmp_path / "cache"

    def invoke(*args):
        return main([*args, "--corpus-dir", str(corpus_dir), "--cache-dir", str(cache_dir), "--log-level", "error"])

    return invoke


class TestArguments:
    def test_flag_overrides(self, tmp_path):
        args = build_argument_parser().parse_args(
            ["word", "alpha", "--corpus-dir", str(tmp_path), "--radius", "2", "--no-cache", "--unsorted", "--strict"]
        )

        settings = settings_from_args(args)

        assert settings.corpus_dir == tmp_path
        assert settings.snippet_radius == 2
        assert settings.cache_enabled is False
        assert settings.sort_results is False
        assert settings.strict_corpus_reads is True

    def test_environment_used_without_flags(self, monkeypatch):
        monkeypatch.setenv("CORPUS_SEARCH_SNIPPET_RADIUS", "7")
        args = build_argument_parser().parse_args(["word", "alpha"])

        assert settings_from_args(args).snippet_radius == 7

    def test_negative_radius_is_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["word", "alpha", "--radius", "-1"])

        assert excinfo.value.code == 2

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_argument_parser().parse_args([])


def test_numbered_output_path():
    assert numbered_output_path(Path("out/results.txt"), 3) == Path("out/results(3).txt")
    assert numbered_output_path(Path("results"), 1) == Path("results(1).txt")


class TestCommands:
    def test_word(self, run, capsys):
        assert run("word", "alpha") == 0

        out = capsys.readouterr().out
        assert out.startswith("Search Results for the word: alpha\ndocA.txt: 1\n")
        assert "docB.txt: 1" in out

    def test_word_with_stem(self, run, capsys):
        assert run("word", "runs", "--stem") == 0

        assert "Search Results for similar word: run" in capsys.readouterr().out

    def test_invalid_word_exits_nonzero(self, run, capsys):
        assert run("word", "the") == 1

        assert "Invalid query" in capsys.readouterr().out

    def test_words(self, run, capsys):
        assert run("words", "alpha delta") == 0

        assert capsys.readouterr().out.startswith("Search Results for: alpha delta\ndocB.txt\n")

    def test_doc_missing(self, run, capsys):
        assert run("doc", "doc1.txt") == 1

        assert capsys.readouterr().out == "No results found for the document: doc1.txt\n"

    def test_print_word_and_doc(self, run, capsys):
        assert run("print-word", "delta") == 0
        assert run("print-doc", "docC.txt") == 0

        out = capsys.readouterr().out
        assert "docB.txt: 3\ndocC.txt: 3\n" in out
        assert "everything: 6" in out

    def test_dump_to_file(self, run, tmp_path):
        output = tmp_path / "dump.txt"

        assert run("dump", "--stem", "--sort", "--output", str(output)) == 0

        lines = output.read_text(encoding="utf-8").splitlines()
        terms = [line.split(": ", 1)[0] for line in lines]
        assert terms == sorted(terms)
        assert "run: {(docA.txt, 4), (docB.txt, 8), (docB.txt, 4)}" in lines

    def test_build_reports_summary(self, run, capsys, tmp_path):
        assert run("build") == 0

        out = capsys.readouterr().out
        assert "Documents: 3" in out
        assert (tmp_path / "cache" / "InvertedIndex.json").is_file()

    def test_batch_numbers_output_files(self, run, tmp_path):
        queries = tmp_path / "queries.txt"
        queries.write_text("alpha\n\nalpha delta\n", encoding="utf-8")
        output = tmp_path / "out" / "results.txt"

        assert run("batch", str(queries), "--output", str(output)) == 0

        assert (tmp_path / "out" / "results(1).txt").read_text(encoding="utf-8").startswith(
            "Search Results for the word: alpha"
        )
        assert not (tmp_path / "out" / "results(2).txt").exists()
        assert (tmp_path / "out" / "results(3).txt").read_text(encoding="utf-8").startswith(
            "Search Results for: alpha delta"
        )

    def test_batch_missing_query_file(self, run, tmp_path):
        assert run("batch", str(tmp_path / "missing.txt")) == 1

    def test_missing_corpus_exits_nonzero(self, tmp_path, restore_logging):
        assert main(["build", "--corpus-dir", str(tmp_path / "absent"), "--no-cache"]) == 1

    def test_metrics_file(self, run, tmp_path):
        metrics = tmp_path / "metrics.prom"

        assert run("word", "alpha", "--metrics-file", str(metrics)) == 0

        assert "search_requests_total" in metrics.read_text(encoding="utf-8")
