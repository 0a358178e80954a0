"""Public package entrypoint for the build descriptor resolver."""

from .config import ResolverConfig, load_config
from .descriptor import (
    BuildDescriptor,
    DevEnvironmentDescriptor,
    compose_dev_environment,
    emit_build_descriptor,
)
from .errors import (
    BackendExecutionError,
    BuildPlanError,
    LockIntegrityError,
    ManifestError,
    ToolchainResolutionError,
    ValidationError,
)
from .inputs import compose_inputs
from .lockfile import LockGraph, load_lock_graph
from .manifest import load_manifest
from .models import InputSet, InputTable, InputTables, Manifest
from .platforms import PlatformFact, classify_system
from .resolver import Resolution, ResolutionRequest, resolve, resolve_systems
from .toolchain import ToolchainProvider, ToolchainSpec, pin_toolchains

__all__ = [
    "BackendExecutionError",
    "BuildDescriptor",
    "BuildPlanError",
    "DevEnvironmentDescriptor",
    "InputSet",
    "InputTable",
    "InputTables",
    "LockGraph",
    "LockIntegrityError",
    "Manifest",
    "ManifestError",
    "PlatformFact",
    "Resolution",
    "ResolutionRequest",
    "ResolverConfig",
    "ToolchainProvider",
    "ToolchainResolutionError",
    "ToolchainSpec",
    "ValidationError",
    "classify_system",
    "compose_dev_environment",
    "compose_inputs",
    "emit_build_descriptor",
    "load_config",
    "load_lock_graph",
    "load_manifest",
    "pin_toolchains",
    "resolve",
    "resolve_systems",
]
