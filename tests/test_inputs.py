import pytest

from buildplan.config import DEFAULT_INPUT_TABLES
from buildplan.errors import ValidationError
from buildplan.inputs import compose_inputs
from buildplan.models import InputTable, InputTables
from buildplan.platforms import PlatformFact, classify_system

LINUX_ONLY = DEFAULT_INPUT_TABLES.linux.native | DEFAULT_INPUT_TABLES.linux.libraries
MACOS_ONLY = DEFAULT_INPUT_TABLES.macos.native | DEFAULT_INPUT_TABLES.macos.libraries
BASE = DEFAULT_INPUT_TABLES.base.native | DEFAULT_INPUT_TABLES.base.libraries


@pytest.mark.parametrize("token", ["x86_64-linux", "aarch64-linux", "x86_64-unknown-linux-gnu"])
def test_linux_inputs_include_linux_extension_and_exclude_macos(token: str) -> None:
    inputs = compose_inputs(classify_system(token), DEFAULT_INPUT_TABLES)

    assert BASE | LINUX_ONLY == inputs.names
    assert not inputs.names & MACOS_ONLY
    assert "libsixel" in inputs.build_inputs


@pytest.mark.parametrize("token", ["x86_64-darwin", "aarch64-darwin"])
def test_macos_inputs_include_macos_extension_and_exclude_linux(token: str) -> None:
    inputs = compose_inputs(classify_system(token), DEFAULT_INPUT_TABLES)

    assert BASE | MACOS_ONLY == inputs.names
    assert not inputs.names & LINUX_ONLY
    assert "makeBinaryWrapper" in inputs.native_build_inputs
    assert "AppKit" in inputs.build_inputs


@pytest.mark.parametrize("token", ["x86_64-windows", "", "wasm32-wasi"])
def test_unrecognized_platform_yields_exactly_base(token: str) -> None:
    inputs = compose_inputs(classify_system(token), DEFAULT_INPUT_TABLES)

    assert inputs.platform is PlatformFact.OTHER
    assert inputs.native_build_inputs == tuple(sorted(DEFAULT_INPUT_TABLES.base.native))
    assert inputs.build_inputs == tuple(sorted(DEFAULT_INPUT_TABLES.base.libraries))


@pytest.mark.parametrize("fact", list(PlatformFact))
def test_composition_is_idempotent(fact: PlatformFact) -> None:
    assert compose_inputs(fact, DEFAULT_INPUT_TABLES) == compose_inputs(fact, DEFAULT_INPUT_TABLES)


def test_native_tools_stay_out_of_link_set() -> None:
    inputs = compose_inputs(PlatformFact.MACOS, DEFAULT_INPUT_TABLES)

    assert "cmake" in inputs.native_build_inputs
    assert "cmake" not in inputs.build_inputs
    assert "makeBinaryWrapper" not in inputs.build_inputs


def test_duplicate_entries_are_merged() -> None:
    tables = InputTables(
        base=InputTable.of(native=("cmake",), libraries=("openssl",)),
        linux=InputTable.of(native=("cmake",), libraries=("openssl", "alsa-lib")),
    )

    inputs = compose_inputs(PlatformFact.LINUX, tables)

    assert inputs.native_build_inputs == ("cmake",)
    assert inputs.build_inputs == ("alsa-lib", "openssl")


def test_tool_declared_as_library_is_rejected() -> None:
    tables = InputTables(
        base=InputTable.of(native=("pkg-config",)),
        linux=InputTable.of(libraries=("pkg-config",)),
    )

    with pytest.raises(ValidationError) as excinfo:
        compose_inputs(PlatformFact.LINUX, tables)

    assert excinfo.value.context["inputs"] == "pkg-config"
    assert compose_inputs(PlatformFact.MACOS, tables).native_build_inputs == ("pkg-config",)
