"""Centralized configuration for corpus-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_search.search.analyzers import StopWords


_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``CORPUS_SEARCH_*`` environment variables.

    Values can also come from a ``.env`` file in the working directory.
    Command-line flags override individual fields via ``model_copy``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORPUS_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Corpus and persistence
    corpus_dir: Path = Field(default=Path("./Corpus"), description="Directory holding the corpus documents")
    cache_dir: Path = Field(default=Path("./Data"), description="Directory for the persisted index files")
    cache_enabled: bool = Field(
        default=True,
        description="Load indexes from cache_dir when present and write them back after a build",
    )

    # Indexing
    strict_corpus_reads: bool = Field(
        default=False,
        description="Abort the build when a document cannot be read instead of skipping it",
    )
    stopwords_file: Path | None = Field(
        default=None,
        description="Newline-separated stop-word list replacing the built-in English list",
    )

    # Query behaviour
    snippet_radius: int = Field(default=5, ge=0, description="Raw tokens shown on each side of a snippet match")
    sort_results: bool = Field(default=True, description="Order result documents by name")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON log lines")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return normalized

    def load_stopwords(self) -> StopWords:
        """Return the configured stop-word set.

        Raises:
            OSError: if ``stopwords_file`` is set but unreadable.
        """
        if self.stopwords_file is None:
            return StopWords()
        return StopWords.from_file(self.stopwords_file)
