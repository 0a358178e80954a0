"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from pathlib import Path

import pytest

from buildplan.config import ResolverConfig
from buildplan.resolver import ResolutionRequest

GIT_REV = "4ea0a2b3c1d0e9f8a7b6c5d4e3f2a1b0c9d8e7f6"

MANIFEST_TOML = textwrap.dedent("""\
    [package]
    name = "app_cli"
    version = "1.2.3"
    edition = "2021"

    [dependencies]
    serde = "1"
""")

LOCK_TOML = textwrap.dedent(f"""\
    version = 3

    [[package]]
    name = "app_cli"
    version = "1.2.3"
    dependencies = [
     "librespot-core",
     "serde 1.0.210",
    ]

    [[package]]
    name = "librespot-core"
    version = "0.5.0"
    source = "git+https://github.com/librespot-org/librespot?branch=dev#{GIT_REV}"
    dependencies = [
     "serde 1.0.210 (registry+https://github.com/rust-lang/crates.io-index)",
    ]

    [[package]]
    name = "serde"
    version = "1.0.210"
    source = "registry+https://github.com/rust-lang/crates.io-index"
    checksum = "c8e3592472072e6e22e0a54d5904d9febf8508f65fb8552499a1abc7d1078c3a"
""")

REGISTRY_ONLY_LOCK_TOML = textwrap.dedent("""\
    version = 3

    [[package]]
    name = "app_cli"
    version = "1.2.3"
    dependencies = [
     "serde",
    ]

    [[package]]
    name = "serde"
    version = "1.0.210"
    source = "registry+https://github.com/rust-lang/crates.io-index"
    checksum = "c8e3592472072e6e22e0a54d5904d9febf8508f65fb8552499a1abc7d1078c3a"
""")


@dataclass(frozen=True, slots=True)
class Project:
    root: Path
    manifest: Path
    lock: Path

    def request(
        self,
        system: str = "x86_64-linux",
        *,
        config: ResolverConfig | None = None,
    ) -> ResolutionRequest:
        return ResolutionRequest(
            manifest_path=self.manifest,
            lock_path=self.lock,
            source_root=self.root,
            system=system,
            config=config or ResolverConfig(primary_executable="app_cli"),
        )


def write_project(root: Path, *, manifest: str = MANIFEST_TOML, lock: str = LOCK_TOML) -> Project:
    root.mkdir(parents=True, exist_ok=True)
    manifest_path = root / "Cargo.toml"
    lock_path = root / "Cargo.lock"
    manifest_path.write_text(manifest, encoding="utf-8")
    lock_path.write_text(lock, encoding="utf-8")
    return Project(root=root, manifest=manifest_path, lock=lock_path)


@pytest.fixture
def project(tmp_path: Path) -> Project:
    """Provide a package tree with a manifest and a lock carrying a git source."""
    return write_project(tmp_path / "app")
