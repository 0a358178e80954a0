"""Build engine and shell activator interfaces."""

from .base import BuildArtifact, BuildEngine, EnvironmentArtifact, ShellActivator
from .inprocess import InProcessEngine

__all__ = [
    "BuildArtifact",
    "BuildEngine",
    "EnvironmentArtifact",
    "InProcessEngine",
    "ShellActivator",
]
