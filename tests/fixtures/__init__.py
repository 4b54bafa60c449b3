"""Shared testing helpers for the geoquiz test suite."""

from .input import make_provider  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "WorkspaceBuilder",
    "build_tree",
    "make_provider",
]
