"""
Search indexing and query engine package.

This package provides a pure-Python positional search stack:
- analyzers: whitespace tokenizer, normalization, stop words, stem filter
- stemmer: Porter suffix-stripping stemmer
- corpus: directory corpus provider and token cache
- indexer: raw index construction and stemmed derivation
- storage: versioned JSON index cache
- resolver: word, conjunctive and document queries
- snippet: context windows around matches
"""
