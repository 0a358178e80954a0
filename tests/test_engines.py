import json
from pathlib import Path

import pytest

from buildplan.config import ResolverConfig
from buildplan.engines import BuildEngine, InProcessEngine, ShellActivator
from buildplan.errors import BackendExecutionError, LockIntegrityError
from buildplan.resolver import resolve
from conftest import Project


def test_inprocess_engine_produces_declared_executable(project: Project, tmp_path: Path) -> None:
    descriptor = resolve(project.request("x86_64-linux")).build
    engine: BuildEngine = InProcessEngine()

    artifact = engine.build(descriptor, tmp_path / "out")

    assert artifact.executable_path.name == "app_cli"
    assert artifact.executable_path.exists()
    assert artifact.system == "x86_64-linux"
    assert artifact.metadata_path is not None
    metadata = json.loads(artifact.metadata_path.read_text(encoding="utf-8"))
    assert metadata["descriptor_digest"] == descriptor.digest()
    assert metadata["fetches"][0]["package"] == "librespot-core 0.5.0"


def test_inprocess_engine_refuses_git_sources_when_fetching_disabled(
    project: Project,
    tmp_path: Path,
) -> None:
    config = ResolverConfig(primary_executable="app_cli", allow_source_fetch=False)
    descriptor = resolve(project.request(config=config)).build

    with pytest.raises(LockIntegrityError):
        InProcessEngine().build(descriptor, tmp_path / "out")

    assert not (tmp_path / "out").exists()


def test_inprocess_engine_wraps_write_failures(project: Project, tmp_path: Path) -> None:
    descriptor = resolve(project.request()).build
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(BackendExecutionError) as excinfo:
        InProcessEngine().build(descriptor, blocker)

    assert excinfo.value.context["operation"] == "build"


def test_inprocess_activation_exposes_inputs_and_toolchains(
    project: Project,
    tmp_path: Path,
) -> None:
    environment = resolve(project.request("aarch64-darwin")).dev
    activator: ShellActivator = InProcessEngine()

    artifact = activator.activate(environment, tmp_path / "shell")

    payload = json.loads(artifact.environment_path.read_text(encoding="utf-8"))
    assert payload["name"] == "app-cli-shell"
    assert "makeBinaryWrapper" in payload["path"]
    assert any(entry.startswith("rust-bin.nightly.") for entry in payload["path"])
    assert "AppKit" in payload["libraries"]


def test_inprocess_artifacts_are_deterministic(project: Project, tmp_path: Path) -> None:
    descriptor = resolve(project.request()).build

    first = InProcessEngine().build(descriptor, tmp_path / "a")
    second = InProcessEngine().build(descriptor, tmp_path / "b")

    assert first.executable_path.read_bytes() == second.executable_path.read_bytes()
