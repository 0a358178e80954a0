"""Build and development environment descriptors.

Both descriptors are fully platform-resolved: serializing or executing them
never consults the host again.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path

import cbor2

from buildplan.errors import ValidationError
from buildplan.lockfile import LockGraph
from buildplan.models import InputSet, Manifest
from buildplan.toolchain import Channel, Profile, ToolchainSpec

SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class BuildDescriptor:
    identity: Manifest
    inputs: InputSet
    toolchain: ToolchainSpec
    lock: LockGraph
    source_root: Path
    primary_executable: str
    system: str

    def to_dict(self) -> dict[str, object]:
        return {
            "schema_version": SCHEMA_VERSION,
            "kind": "build",
            "system": self.system,
            "identity": self.identity.to_dict(),
            "inputs": self.inputs.to_dict(),
            "toolchain": self.toolchain.to_dict(),
            "lock": self.lock.to_dict(),
            "source_root": str(self.source_root),
            "primary_executable": self.primary_executable,
        }

    def to_json(self, path: str | Path | None = None) -> str:
        return _write_json(self.to_dict(), path)

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        return _write_cbor(self.to_dict(), path)

    def digest(self) -> str:
        return _digest(self.to_dict())


@dataclass(frozen=True, slots=True)
class DevEnvironmentDescriptor:
    name: str
    inputs: InputSet
    toolchains: tuple[ToolchainSpec, ...]
    system: str

    def to_dict(self) -> dict[str, object]:
        return {
            "schema_version": SCHEMA_VERSION,
            "kind": "shell",
            "system": self.system,
            "name": self.name,
            "inputs": self.inputs.to_dict(),
            "toolchains": [toolchain.to_dict() for toolchain in self.toolchains],
        }

    def to_json(self, path: str | Path | None = None) -> str:
        return _write_json(self.to_dict(), path)

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        return _write_cbor(self.to_dict(), path)

    def digest(self) -> str:
        return _digest(self.to_dict())


def emit_build_descriptor(
    *,
    manifest: Manifest,
    inputs: InputSet,
    toolchain: ToolchainSpec,
    lock: LockGraph,
    source_root: str | Path,
    primary_executable: str,
    system: str,
) -> BuildDescriptor:
    if (
        toolchain.channel is not Channel.STABLE
        or toolchain.profile is not Profile.MINIMAL
        or toolchain.components
    ):
        raise ValidationError(
            "Build descriptors require the minimal production toolchain.",
            hint="Pass ToolchainSet.production, not a development toolchain.",
            context={"toolchain": toolchain.pin},
        )
    if not primary_executable:
        raise ValidationError("Build descriptors require a primary executable name.")
    if isinstance(source_root, str) and not source_root.strip():
        raise ValidationError("Build descriptors require a source root.")
    return BuildDescriptor(
        identity=manifest,
        inputs=inputs,
        toolchain=toolchain,
        lock=lock,
        source_root=Path(source_root),
        primary_executable=primary_executable,
        system=system,
    )


def compose_dev_environment(
    *,
    inputs: InputSet,
    toolchains: tuple[ToolchainSpec, ...],
    name: str,
    system: str,
) -> DevEnvironmentDescriptor:
    """Compose a shell around the production *inputs* instance, unchanged."""
    if not toolchains:
        raise ValidationError("Development environments require at least one toolchain.")
    if not name:
        raise ValidationError("Development environments require a name.")
    return DevEnvironmentDescriptor(
        name=name,
        inputs=inputs,
        toolchains=tuple(toolchains),
        system=system,
    )


def default_shell_name(manifest: Manifest) -> str:
    return f"{manifest.name.replace('_', '-')}-shell"


def _write_json(payload: dict[str, object], path: str | Path | None) -> str:
    encoded = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    if path is not None:
        Path(path).write_text(encoded, encoding="utf-8")
    return encoded


def _write_cbor(payload: dict[str, object], path: str | Path | None) -> bytes:
    encoded = cbor2.dumps(payload, canonical=True)
    if path is not None:
        Path(path).write_bytes(encoded)
    return encoded


def _digest(payload: dict[str, object]) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
