"""Tools for checking, linting, documenting, exporting and running pipeline scripts."""

__version__ = "0.1.0"

__all__ = [
    "check",
    "cli",
    "completions",
    "context",
    "doc",
    "export",
    "lint",
    "shell",
    "temp_files",
]