"""In-process engine for tests and dry runs.

Produces deterministic placeholder artifacts from descriptors without invoking
a compiler, a package manager or any external tool.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from buildplan.descriptor import BuildDescriptor, DevEnvironmentDescriptor
from buildplan.engines.base import BuildArtifact, EnvironmentArtifact
from buildplan.errors import BackendExecutionError


@dataclass(slots=True)
class InProcessEngine:
    name: str = "inprocess"

    def build(self, descriptor: BuildDescriptor, output_dir: Path) -> BuildArtifact:
        fetches = descriptor.lock.source_fetches()
        identity = descriptor.identity
        artifact_dir = Path(output_dir) / f"{identity.name}-{identity.version}-{descriptor.system}"
        executable_path = artifact_dir / "bin" / descriptor.primary_executable
        metadata_path = artifact_dir / "build.json"

        digest = descriptor.digest()
        metadata = {
            "engine": self.name,
            "descriptor_digest": digest,
            "descriptor": descriptor.to_dict(),
            "fetches": [
                {"package": fetch.package, "repo": fetch.repo, "ref": fetch.ref}
                for fetch in fetches
            ],
            "executable": str(executable_path),
        }
        try:
            executable_path.parent.mkdir(parents=True, exist_ok=True)
            executable_path.write_text(
                f"buildplan-artifact: {identity.name} {identity.version}\n"
                f"system={descriptor.system}\n"
                f"toolchain={descriptor.toolchain.pin}\n"
                f"digest={digest}\n",
                encoding="utf-8",
            )
            metadata_path.write_text(
                json.dumps(metadata, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise BackendExecutionError(
                "In-process build could not write artifact.",
                context={
                    "engine": self.name,
                    "operation": "build",
                    "path": str(artifact_dir),
                    "error": str(exc),
                },
            ) from exc

        return BuildArtifact(
            engine=self.name,
            system=descriptor.system,
            executable_path=executable_path,
            metadata_path=metadata_path,
        )

    def activate(
        self,
        environment: DevEnvironmentDescriptor,
        output_dir: Path,
    ) -> EnvironmentArtifact:
        environment_path = Path(output_dir) / f"{environment.name}-{environment.system}.json"
        payload = {
            "engine": self.name,
            "descriptor_digest": environment.digest(),
            "name": environment.name,
            "system": environment.system,
            "path": [
                *environment.inputs.native_build_inputs,
                *(toolchain.pin for toolchain in environment.toolchains),
            ],
            "libraries": list(environment.inputs.build_inputs),
        }
        try:
            environment_path.parent.mkdir(parents=True, exist_ok=True)
            environment_path.write_text(
                json.dumps(payload, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise BackendExecutionError(
                "In-process activation could not write environment.",
                context={
                    "engine": self.name,
                    "operation": "activate",
                    "path": str(environment_path),
                    "error": str(exc),
                },
            ) from exc
        return EnvironmentArtifact(
            engine=self.name,
            name=environment.name,
            system=environment.system,
            environment_path=environment_path,
        )
