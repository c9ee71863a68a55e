"""Unit tests for environment-driven settings."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from corpus_search.config import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.corpus_dir == Path("./Corpus")
        assert settings.cache_dir == Path("./Data")
        assert settings.cache_enabled is True
        assert settings.snippet_radius == 5
        assert settings.strict_corpus_reads is False
        assert settings.sort_results is True
        assert settings.stopwords_file is None
        assert settings.log_level == "info"
        assert settings.log_json is False

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CORPUS_SEARCH_CORPUS_DIR", str(tmp_path))
        monkeypatch.setenv("CORPUS_SEARCH_SNIPPET_RADIUS", "3")
        monkeypatch.setenv("CORPUS_SEARCH_CACHE_ENABLED", "false")

        settings = Settings()

        assert settings.corpus_dir == tmp_path
        assert settings.snippet_radius == 3
        assert settings.cache_enabled is False

    def test_dotenv_file(self):
        Path(".env").write_text("CORPUS_SEARCH_STRICT_CORPUS_READS=true\n", encoding="utf-8")

        assert Settings().strict_corpus_reads is True

    def test_unprefixed_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("SNIPPET_RADIUS", "9")

        assert Settings().snippet_radius == 5

    def test_negative_radius_rejected(self):
        with pytest.raises(ValidationError):
            Settings(snippet_radius=-1)

    def test_log_level_normalized(self):
        assert Settings(log_level=" WARNING ").log_level == "warning"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")


class TestLoadStopwords:
    def test_default_list(self):
        stopwords = Settings().load_stopwords()

        assert stopwords.is_stop_word("the")

    def test_file_replaces_default_list(self, tmp_path):
        path = tmp_path / "stop.txt"
        path.write_text("alpha\nbeta\n", encoding="utf-8")

        stopwords = Settings(stopwords_file=path).load_stopwords()

        assert stopwords.is_stop_word("alpha")
        assert not stopwords.is_stop_word("the")

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            Settings(stopwords_file=tmp_path / "missing.txt").load_stopwords()
