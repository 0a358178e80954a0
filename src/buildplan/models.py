"""Core typed dataclasses for package identity and native input sets."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from buildplan.platforms import PlatformFact


@dataclass(frozen=True, slots=True)
class Manifest:
    name: str
    version: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True, slots=True)
class InputTable:
    """One partition of declared native inputs.

    ``native`` holds build-time tools that run on the build host; ``libraries``
    holds what the artifact links against.
    """

    native: frozenset[str] = frozenset()
    libraries: frozenset[str] = frozenset()

    @classmethod
    def of(
        cls,
        *,
        native: Iterable[str] = (),
        libraries: Iterable[str] = (),
    ) -> InputTable:
        return cls(native=frozenset(native), libraries=frozenset(libraries))


@dataclass(frozen=True, slots=True)
class InputTables:
    base: InputTable = field(default_factory=InputTable)
    linux: InputTable = field(default_factory=InputTable)
    macos: InputTable = field(default_factory=InputTable)


@dataclass(frozen=True, slots=True)
class InputSet:
    platform: PlatformFact
    native_build_inputs: tuple[str, ...] = ()
    build_inputs: tuple[str, ...] = ()

    def __contains__(self, name: object) -> bool:
        return name in self.native_build_inputs or name in self.build_inputs

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.native_build_inputs) | frozenset(self.build_inputs)

    def to_dict(self) -> dict[str, object]:
        return {
            "platform": self.platform.value,
            "native_build_inputs": list(self.native_build_inputs),
            "build_inputs": list(self.build_inputs),
        }


__all__ = ["InputSet", "InputTable", "InputTables", "Manifest"]
