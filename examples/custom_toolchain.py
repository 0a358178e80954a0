"""Pin a different toolchain provider and extend the linux input table."""

from dataclasses import replace
from pathlib import Path

from buildplan import InputTable, ResolutionRequest, ResolverConfig, resolve
from buildplan.config import DEFAULT_INPUT_TABLES
from buildplan.engines import InProcessEngine
from buildplan.toolchain import (
    ANALYZER,
    FORMAT,
    LINT,
    SOURCE,
    Channel,
    ChannelOffer,
    ToolchainProvider,
)

PROVIDER = ToolchainProvider(
    name="rust-bin",
    version="2025-01-09",
    channels={
        Channel.STABLE: ChannelOffer(
            version="1.84.0",
            components=frozenset({LINT, FORMAT, SOURCE, ANALYZER}),
        ),
        Channel.NIGHTLY: ChannelOffer(
            version="2025-01-08",
            components=frozenset({LINT, FORMAT, SOURCE, ANALYZER}),
        ),
    },
)

TABLES = replace(
    DEFAULT_INPUT_TABLES,
    linux=InputTable.of(
        native=DEFAULT_INPUT_TABLES.linux.native | {"mold"},
        libraries=DEFAULT_INPUT_TABLES.linux.libraries,
    ),
)


def build_with_custom_toolchain(project_root: Path, out_dir: Path) -> None:
    config = ResolverConfig(tables=TABLES, provider=PROVIDER, allow_source_fetch=True)
    resolution = resolve(
        ResolutionRequest(
            manifest_path=project_root / "Cargo.toml",
            lock_path=project_root / "Cargo.lock",
            source_root=project_root,
            system="x86_64-linux",
            config=config,
        )
    )
    engine = InProcessEngine()
    artifact = engine.build(resolution.build, out_dir)
    shell = engine.activate(resolution.dev, out_dir)
    print(f"artifact: {artifact.executable_path}")
    print(f"shell: {shell.environment_path}")


if __name__ == "__main__":
    build_with_custom_toolchain(Path("."), Path("build"))
