"""Lock graph typed model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from buildplan.errors import LockIntegrityError
from buildplan.fetch import GitFetchRequest

SourceKind = Literal["registry", "git", "path"]


@dataclass(frozen=True, slots=True)
class LockedPackage:
    name: str
    version: str
    kind: SourceKind = "path"
    url: str | None = None
    revision: str | None = None
    checksum: str | None = None
    dependencies: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return f"{self.name} {self.version}"

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "name": self.name,
            "version": self.version,
            "kind": self.kind,
        }
        if self.url is not None:
            payload["url"] = self.url
        if self.revision is not None:
            payload["revision"] = self.revision
        if self.checksum is not None:
            payload["checksum"] = self.checksum
        return payload


@dataclass(frozen=True, slots=True)
class LockGraph:
    version: int
    digest: str
    packages: Mapping[str, LockedPackage] = field(default_factory=dict)
    allow_source_fetch: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "packages", MappingProxyType(dict(self.packages)))

    def git_packages(self) -> tuple[LockedPackage, ...]:
        return tuple(
            package for _, package in sorted(self.packages.items()) if package.kind == "git"
        )

    def source_fetches(self) -> tuple[GitFetchRequest, ...]:
        """Return fetch requests for git-pinned packages.

        The selected revisions come from the lock verbatim; the flag only
        decides whether they may be materialized.
        """
        git_packages = self.git_packages()
        if git_packages and not self.allow_source_fetch:
            raise LockIntegrityError(
                "Lock graph contains git sources but source fetching is disabled.",
                hint="Enable allow_source_fetch or vendor the git dependencies.",
                context={"packages": ", ".join(package.id for package in git_packages)},
            )
        return tuple(
            GitFetchRequest(package=package.id, repo=package.url or "", ref=package.revision or "")
            for package in git_packages
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "digest": self.digest,
            "allow_source_fetch": self.allow_source_fetch,
            "packages": {
                package_id: package.to_dict()
                for package_id, package in sorted(self.packages.items())
            },
        }
