"""Fetch request models for version-control-addressed lock entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GitFetchRequest:
    package: str
    repo: str
    ref: str


__all__ = ["GitFetchRequest"]
