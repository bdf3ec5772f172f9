"""Core types for a content-addressed registry: digests, names, contexts, metadata and trees."""

__version__ = "0.1.0"

__all__ = ["digest", "user", "repository", "tag", "paths", "meta", "tree"]