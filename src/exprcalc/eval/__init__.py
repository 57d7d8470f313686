"""Evaluator helper modules for the exprcalc runtime."""

__all__ = [
    "calls",
    "expr",
    "helpers",
]
