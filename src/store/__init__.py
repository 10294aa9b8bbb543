"""Table storage layer.

This package persists one primary-key table per file with a
type-preserving JSON codec, and caches one handle per file path.
"""
