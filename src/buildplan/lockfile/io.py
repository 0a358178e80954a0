"""Lock file parser for pre-resolved Cargo-style dependency graphs."""

from __future__ import annotations

import hashlib
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from buildplan.errors import LockIntegrityError
from buildplan.lockfile.model import LockedPackage, LockGraph


def parse_lock_graph(raw: bytes, *, allow_source_fetch: bool = False) -> LockGraph:
    try:
        payload = tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise LockIntegrityError("Invalid lock file TOML.", hint=str(exc)) from exc

    version = payload.get("version", 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise LockIntegrityError("Invalid lock file `version` value.")

    entries = payload.get("package", [])
    if not isinstance(entries, list):
        raise LockIntegrityError("Invalid lock file `package` value.")

    packages: dict[str, LockedPackage] = {}
    for entry in entries:
        package = _parse_package(entry)
        if package.id in packages:
            raise LockIntegrityError(
                "Duplicate package in lock file.",
                context={"package": package.id},
            )
        packages[package.id] = package

    _check_dependencies(packages)
    return LockGraph(
        version=version,
        digest=hashlib.sha256(raw).hexdigest(),
        packages=packages,
        allow_source_fetch=allow_source_fetch,
    )


def load_lock_graph(path: str | Path, *, allow_source_fetch: bool = False) -> LockGraph:
    """Load the lock file at *path* verbatim; no version constraint is re-solved."""
    lock_path = Path(path)
    try:
        with lock_path.open("rb") as stream:
            raw = stream.read()
    except FileNotFoundError as exc:
        raise LockIntegrityError(
            "Lock file does not exist.",
            hint="Generate the lock file with the package manager before resolving.",
            context={"path": str(lock_path)},
        ) from exc
    except OSError as exc:
        raise LockIntegrityError(
            "Lock file could not be read.",
            hint=str(exc),
            context={"path": str(lock_path)},
        ) from exc
    try:
        return parse_lock_graph(raw, allow_source_fetch=allow_source_fetch)
    except LockIntegrityError as exc:
        raise LockIntegrityError(
            exc.args[0],
            hint=exc.hint,
            context={**exc.context, "path": str(lock_path)},
        ) from exc


def _parse_package(entry: Any) -> LockedPackage:
    if not isinstance(entry, dict):
        raise LockIntegrityError("Invalid package entry in lock file.")
    name = _required_str(entry, "name")
    version = _required_str(entry, "version")

    dependencies = entry.get("dependencies", [])
    if not isinstance(dependencies, list) or not all(
        isinstance(item, str) for item in dependencies
    ):
        raise LockIntegrityError(
            "Invalid lock file dependency list.",
            context={"package": f"{name} {version}"},
        )

    checksum = entry.get("checksum")
    if checksum is not None and not isinstance(checksum, str):
        raise LockIntegrityError(
            "Invalid lock file `checksum` value.",
            context={"package": f"{name} {version}"},
        )

    source = entry.get("source")
    if source is None:
        return LockedPackage(
            name=name,
            version=version,
            checksum=checksum,
            dependencies=tuple(dependencies),
        )
    if not isinstance(source, str):
        raise LockIntegrityError(
            "Invalid lock file `source` value.",
            context={"package": f"{name} {version}"},
        )
    if source.startswith("git+"):
        url, revision = _split_git_source(source, package=f"{name} {version}")
        return LockedPackage(
            name=name,
            version=version,
            kind="git",
            url=url,
            revision=revision,
            checksum=checksum,
            dependencies=tuple(dependencies),
        )
    if source.startswith(("registry+", "sparse+")):
        return LockedPackage(
            name=name,
            version=version,
            kind="registry",
            url=source.split("+", 1)[1],
            checksum=checksum,
            dependencies=tuple(dependencies),
        )
    raise LockIntegrityError(
        "Unsupported lock file source kind.",
        context={"package": f"{name} {version}", "source": source},
    )


def _split_git_source(source: str, *, package: str) -> tuple[str, str]:
    # git+<url>[?branch=..|tag=..|rev=..]#<resolved commit>
    locator, _, revision = source[len("git+"):].partition("#")
    if not revision:
        raise LockIntegrityError(
            "Git source in lock file is not pinned to a revision.",
            context={"package": package, "source": source},
        )
    parts = urlsplit(locator)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", "")), revision


def _check_dependencies(packages: dict[str, LockedPackage]) -> None:
    by_name: dict[str, list[str]] = {}
    for package_id, package in packages.items():
        by_name.setdefault(package.name, []).append(package_id)

    for package in packages.values():
        for reference in package.dependencies:
            tokens = reference.split()
            if not tokens:
                raise LockIntegrityError(
                    "Empty dependency reference in lock file.",
                    context={"package": package.id},
                )
            if len(tokens) == 1:
                matches = by_name.get(tokens[0], [])
                resolved = len(matches) == 1
            else:
                resolved = f"{tokens[0]} {tokens[1]}" in packages
            if not resolved:
                raise LockIntegrityError(
                    "Lock file dependency reference does not resolve to exactly one package.",
                    context={"package": package.id, "dependency": reference},
                )


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise LockIntegrityError(f"Invalid lock file `{key}` value.")
    return value
