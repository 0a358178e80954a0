"""Resolution passes: manifest, platform, inputs, toolchains and lock into descriptors."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from buildplan.config import ResolverConfig
from buildplan.descriptor import (
    BuildDescriptor,
    DevEnvironmentDescriptor,
    compose_dev_environment,
    default_shell_name,
    emit_build_descriptor,
)
from buildplan.errors import BuildPlanError
from buildplan.inputs import compose_inputs
from buildplan.lockfile import LockGraph, load_lock_graph
from buildplan.manifest import load_manifest
from buildplan.models import Manifest
from buildplan.observability import StructuredLogger
from buildplan.platforms import DEFAULT_SYSTEMS, PlatformFact, classify_system
from buildplan.toolchain import ToolchainSet, pin_toolchains


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    manifest_path: Path
    lock_path: Path
    source_root: Path
    system: str
    config: ResolverConfig = field(default_factory=ResolverConfig)


@dataclass(frozen=True, slots=True)
class Resolution:
    system: str
    platform: PlatformFact
    build: BuildDescriptor
    dev: DevEnvironmentDescriptor


def resolve(request: ResolutionRequest, *, logger: StructuredLogger | None = None) -> Resolution:
    """Run one resolution pass for ``request.system``.

    Any error aborts the pass before either descriptor exists.
    """
    log = logger if logger is not None else StructuredLogger()
    manifest, lock, toolchains = _load_shared(request, system=request.system, logger=log)
    return _resolve_pass(
        request,
        system=request.system,
        manifest=manifest,
        lock=lock,
        toolchains=toolchains,
        logger=log,
    )


def resolve_systems(
    request: ResolutionRequest,
    systems: Iterable[str] = DEFAULT_SYSTEMS,
    *,
    logger: StructuredLogger | None = None,
) -> dict[str, Resolution]:
    """Resolve every system in *systems*, sharing only the read-only loaded inputs.

    ``request.system`` is ignored; each pass gets its own system token.
    """
    log = logger if logger is not None else StructuredLogger()
    manifest, lock, toolchains = _load_shared(request, system=None, logger=log)
    resolutions: dict[str, Resolution] = {}
    for system in systems:
        resolutions[system] = _resolve_pass(
            request,
            system=system,
            manifest=manifest,
            lock=lock,
            toolchains=toolchains,
            logger=log,
        )
    return resolutions


def _load_shared(
    request: ResolutionRequest,
    *,
    system: str | None,
    logger: StructuredLogger,
) -> tuple[Manifest, LockGraph, ToolchainSet]:
    pass_id = logger.begin_pass(system)
    logger.log(
        operation="load_inputs",
        system=system,
        phase="load",
        pass_id=pass_id,
        message="Loading manifest, lock graph and toolchains.",
        extra={"manifest": str(request.manifest_path), "lock": str(request.lock_path)},
    )
    try:
        manifest = load_manifest(request.manifest_path)
        toolchains = pin_toolchains(request.config.provider)
        lock = load_lock_graph(
            request.lock_path,
            allow_source_fetch=request.config.allow_source_fetch,
        )
    except BuildPlanError as exc:
        _log_failure(logger, system=system, phase="load", pass_id=pass_id, error=exc)
        raise
    logger.log(
        operation="load_inputs",
        system=system,
        phase="load",
        pass_id=pass_id,
        message="Loaded resolution inputs.",
        extra={
            "name": manifest.name,
            "version": manifest.version,
            "lock_digest": lock.digest,
            "toolchain": toolchains.production.pin,
        },
    )
    return manifest, lock, toolchains


def _resolve_pass(
    request: ResolutionRequest,
    *,
    system: str,
    manifest: Manifest,
    lock: LockGraph,
    toolchains: ToolchainSet,
    logger: StructuredLogger,
) -> Resolution:
    config = request.config
    pass_id = logger.begin_pass(system)
    platform = classify_system(system)
    logger.log(
        operation="classify_platform",
        system=system,
        phase="platform",
        pass_id=pass_id,
        message="Classified host platform.",
        extra={"platform": platform.value},
    )
    try:
        inputs = compose_inputs(platform, config.tables)
        logger.log(
            operation="compose_inputs",
            system=system,
            phase="inputs",
            pass_id=pass_id,
            message="Composed native input set.",
            extra={
                "native_build_inputs": len(inputs.native_build_inputs),
                "build_inputs": len(inputs.build_inputs),
            },
        )
        build = emit_build_descriptor(
            manifest=manifest,
            inputs=inputs,
            toolchain=toolchains.production,
            lock=lock,
            source_root=request.source_root,
            primary_executable=config.primary_executable,
            system=system,
        )
        dev = compose_dev_environment(
            inputs=inputs,
            toolchains=toolchains.development,
            name=config.shell_name or default_shell_name(manifest),
            system=system,
        )
    except BuildPlanError as exc:
        _log_failure(logger, system=system, phase="emit", pass_id=pass_id, error=exc)
        raise
    logger.log(
        operation="emit_descriptors",
        system=system,
        phase="emit",
        pass_id=pass_id,
        message="Emitted build and development descriptors.",
        extra={"build_digest": build.digest(), "shell_digest": dev.digest()},
    )
    return Resolution(system=system, platform=platform, build=build, dev=dev)


def _log_failure(
    logger: StructuredLogger,
    *,
    system: str | None,
    phase: str,
    pass_id: str,
    error: BuildPlanError,
) -> None:
    logger.log(
        operation="resolve_failed",
        system=system,
        phase=phase,
        pass_id=pass_id,
        level="error",
        message="Resolution pass aborted.",
        extra=error.to_dict(),
    )
