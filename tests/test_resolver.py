from pathlib import Path

import pytest

from buildplan.config import DEFAULT_INPUT_TABLES, ResolverConfig
from buildplan.errors import LockIntegrityError, ManifestError, ToolchainResolutionError
from buildplan.observability import StructuredLogger
from buildplan.platforms import DEFAULT_SYSTEMS, PlatformFact
from buildplan.resolver import resolve, resolve_systems
from buildplan.toolchain import Profile, ToolchainProvider
from conftest import Project, write_project

MACOS_ONLY = DEFAULT_INPUT_TABLES.macos.native | DEFAULT_INPUT_TABLES.macos.libraries
LINUX_ONLY = DEFAULT_INPUT_TABLES.linux.native | DEFAULT_INPUT_TABLES.linux.libraries


def test_linux_scenario_resolves_fully(project: Project) -> None:
    resolution = resolve(project.request("x86_64-linux"))

    assert resolution.platform is PlatformFact.LINUX
    assert resolution.build.primary_executable == "app_cli"
    assert resolution.build.identity.to_dict() == {"name": "app_cli", "version": "1.2.3"}
    assert LINUX_ONLY <= resolution.build.inputs.names
    assert not resolution.build.inputs.names & MACOS_ONLY
    assert resolution.build.source_root == project.root


def test_identity_matches_manifest_exactly(tmp_path: Path) -> None:
    project = write_project(
        tmp_path / "x",
        manifest='[package]\nname = "x"\nversion = "1.2.3"\n',
    )

    resolution = resolve(project.request())

    assert resolution.build.identity.name == "x"
    assert resolution.build.identity.version == "1.2.3"


def test_build_and_dev_share_the_same_input_set(project: Project) -> None:
    for system in DEFAULT_SYSTEMS:
        resolution = resolve(project.request(system))
        assert resolution.dev.inputs is resolution.build.inputs


def test_production_toolchain_is_minimal_on_every_platform(project: Project) -> None:
    for system in (*DEFAULT_SYSTEMS, "x86_64-windows"):
        toolchain = resolve(project.request(system)).build.toolchain
        assert toolchain.profile is Profile.MINIMAL
        assert toolchain.components == frozenset()


def test_unclassified_platform_is_not_an_error(project: Project) -> None:
    resolution = resolve(project.request("riscv64-freebsd"))

    assert resolution.platform is PlatformFact.OTHER
    assert resolution.build.inputs.names == (
        DEFAULT_INPUT_TABLES.base.native | DEFAULT_INPUT_TABLES.base.libraries
    )


def test_missing_version_aborts_without_descriptors(tmp_path: Path) -> None:
    project = write_project(tmp_path / "x", manifest='[package]\nname = "x"\n')
    logger = StructuredLogger()

    with pytest.raises(ManifestError):
        resolve(project.request(), logger=logger)

    operations = [record["operation"] for record in logger.records]
    assert "emit_descriptors" not in operations
    assert operations[-1] == "resolve_failed"


def test_missing_lock_aborts_resolution(project: Project) -> None:
    project.lock.unlink()

    with pytest.raises(LockIntegrityError):
        resolve(project.request())


def test_unavailable_toolchain_aborts_resolution(project: Project) -> None:
    config = ResolverConfig(provider=ToolchainProvider(name="empty", version="0"))

    with pytest.raises(ToolchainResolutionError):
        resolve(project.request(config=config))


def test_resolve_systems_produces_independent_passes(project: Project) -> None:
    logger = StructuredLogger()

    resolutions = resolve_systems(project.request(), DEFAULT_SYSTEMS, logger=logger)

    assert list(resolutions) == list(DEFAULT_SYSTEMS)
    assert resolutions["x86_64-linux"].platform is PlatformFact.LINUX
    assert resolutions["aarch64-darwin"].platform is PlatformFact.MACOS
    assert resolutions["x86_64-linux"].build.lock is resolutions["aarch64-darwin"].build.lock
    assert "makeBinaryWrapper" in resolutions["x86_64-darwin"].build.inputs.native_build_inputs
    for system in DEFAULT_SYSTEMS:
        assert logger.records_for_system(system)


def test_resolve_systems_matches_single_resolution(project: Project) -> None:
    together = resolve_systems(project.request(), ("x86_64-linux",))["x86_64-linux"]
    alone = resolve(project.request("x86_64-linux"))

    assert together.build == alone.build
    assert together.dev == alone.dev


def test_shell_name_defaults_from_manifest_and_can_be_configured(project: Project) -> None:
    assert resolve(project.request()).dev.name == "app-cli-shell"

    config = ResolverConfig(primary_executable="app_cli", shell_name="custom-shell")
    assert resolve(project.request(config=config)).dev.name == "custom-shell"


def test_logs_record_each_phase(project: Project) -> None:
    logger = StructuredLogger()

    resolve(project.request("aarch64-linux"), logger=logger)

    phases = [record["phase"] for record in logger.records_for_system("aarch64-linux")]
    assert phases == ["load", "load", "platform", "inputs", "emit"]
