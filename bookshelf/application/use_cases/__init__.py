"""Application use cases: one entry point per workflow."""

from bookshelf.application.use_cases.books import BookService

__all__ = ["BookService"]
