"""Lock graph APIs."""

from .io import load_lock_graph, parse_lock_graph
from .model import LockedPackage, LockGraph, SourceKind

__all__ = [
    "LockGraph",
    "LockedPackage",
    "SourceKind",
    "load_lock_graph",
    "parse_lock_graph",
]
