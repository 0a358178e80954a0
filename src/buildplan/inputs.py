"""Platform-gated composition of native build and link inputs."""

from __future__ import annotations

from typing import assert_never

from buildplan.errors import ValidationError
from buildplan.models import InputSet, InputTable, InputTables
from buildplan.platforms import PlatformFact


def platform_table(fact: PlatformFact, tables: InputTables) -> InputTable | None:
    """Return the extension table selected by *fact*, or ``None`` for no extension."""
    if fact is PlatformFact.LINUX:
        return tables.linux
    if fact is PlatformFact.MACOS:
        return tables.macos
    if fact is PlatformFact.OTHER:
        return None
    assert_never(fact)


def compose_inputs(fact: PlatformFact, tables: InputTables) -> InputSet:
    """Merge the base table with the extension table selected by *fact*.

    Native tools and linked libraries are merged separately and must stay
    disjoint; a name declared in both partitions is rejected.
    """
    native = set(tables.base.native)
    libraries = set(tables.base.libraries)
    extension = platform_table(fact, tables)
    if extension is not None:
        native |= extension.native
        libraries |= extension.libraries

    leaked = native & libraries
    if leaked:
        raise ValidationError(
            "Native build tools overlap the linked library set.",
            hint="Declare each input either as a native tool or as a library, not both.",
            context={"platform": fact.value, "inputs": ", ".join(sorted(leaked))},
        )
    return InputSet(
        platform=fact,
        native_build_inputs=tuple(sorted(native)),
        build_inputs=tuple(sorted(libraries)),
    )
