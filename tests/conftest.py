"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import os
from pathlib import Path

import pytest

from corpus_search.config import Settings


# docA/docB/docC are listed in name order; tests rely on these exact positions.
SAMPLE_DOCUMENTS = {
    "docA.txt": "Alpha beta gamma. The running dogs ran quickly!",
    "docB.txt": "beta alpha 42 delta runs; the runner is running.",
    "docC.txt": "Gamma rays and delta waves connect everything.",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Drop CORPUS_SEARCH_* variables and run each test from an empty directory."""
    for key in list(os.environ):
        if key.upper().startswith("CORPUS_SEARCH_"):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def make_corpus(tmp_path) -> Callable[[Mapping[str, str]], Path]:
    """Factory writing ``{name: text}`` into a fresh corpus directory."""
    counter = {"n": 0}

    def factory(documents: Mapping[str, str]) -> Path:
        counter["n"] += 1
        directory = tmp_path / f"corpus{counter['n']}"
        directory.mkdir()
        for name, text in documents.items():
            (directory / name).write_text(text, encoding="utf-8")
        return directory

    return factory


@pytest.fixture
def corpus_dir(make_corpus) -> Path:
    return make_corpus(SAMPLE_DOCUMENTS)


@pytest.fixture
def settings(corpus_dir, tmp_path) -> Settings:
    return Settings(corpus_dir=corpus_dir, cache_dir=tmp_path / "cache")


@pytest.fixture
def restore_logging():
    """Undo root-logger changes made by ``configure_logging``."""
    import logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
