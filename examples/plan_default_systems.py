"""Resolve build and shell descriptors for every default system."""

from pathlib import Path

from buildplan import ResolutionRequest, resolve_systems
from buildplan.platforms import DEFAULT_SYSTEMS, host_system


def plan_default_systems(project_root: Path) -> None:
    request = ResolutionRequest(
        manifest_path=project_root / "Cargo.toml",
        lock_path=project_root / "Cargo.lock",
        source_root=project_root,
        system=host_system(),
    )
    for system, resolution in resolve_systems(request, DEFAULT_SYSTEMS).items():
        build = resolution.build
        print(
            f"{system}: {build.identity.name} {build.identity.version} "
            f"[{resolution.platform}] {len(build.inputs.build_inputs)} libraries "
            f"toolchain={build.toolchain.pin} digest={build.digest()[:12]}"
        )


if __name__ == "__main__":
    plan_default_systems(Path("."))
