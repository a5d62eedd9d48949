"""Core module with values, fields, the parser, the store and utilities."""

__all__ = [
    "types",
    "errors",
    "logging",
    "scalar",
    "field",
    "scanner",
    "store",
    "config",
]
