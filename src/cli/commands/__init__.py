"""CLI command modules."""

from .data import clear, export_problems, import_problems
from .init import init
from .problems import add, due, list_problems, review, search, show

__all__ = [
    "init",
    "add",
    "list_problems",
    "search",
    "due",
    "show",
    "review",
    "import_problems",
    "export_problems",
    "clear",
]
