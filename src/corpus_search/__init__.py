"""corpus-search: positional inverted index, Porter stemming and snippet search over a document directory."""

__version__ = "0.1.0"
