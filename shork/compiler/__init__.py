"""Dialect compilation and page preprocessing."""

from .dialect import DialectCompiler
from .preprocess import PagePreprocessor, PreprocessResult

__all__ = ["DialectCompiler", "PagePreprocessor", "PreprocessResult"]
