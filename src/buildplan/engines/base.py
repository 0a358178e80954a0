"""Protocols for the external build engine and shell activator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from buildplan.descriptor import BuildDescriptor, DevEnvironmentDescriptor


@dataclass(frozen=True, slots=True)
class BuildArtifact:
    engine: str
    system: str
    executable_path: Path
    metadata_path: Path | None = None


@dataclass(frozen=True, slots=True)
class EnvironmentArtifact:
    engine: str
    name: str
    system: str
    environment_path: Path


class BuildEngine(Protocol):
    name: str

    def build(self, descriptor: BuildDescriptor, output_dir: Path) -> BuildArtifact:
        """Produce a runnable artifact whose entry point is ``primary_executable``."""


class ShellActivator(Protocol):
    name: str

    def activate(
        self,
        environment: DevEnvironmentDescriptor,
        output_dir: Path,
    ) -> EnvironmentArtifact:
        """Materialize an interactive environment exposing the descriptor's tools."""
