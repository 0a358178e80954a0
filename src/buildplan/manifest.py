"""Package identity loader for TOML package metadata files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from buildplan.errors import ManifestError
from buildplan.models import Manifest


def load_manifest(path: str | Path) -> Manifest:
    """Read ``name`` and ``version`` from the ``[package]`` table of *path*."""
    manifest_path = Path(path)
    try:
        with manifest_path.open("rb") as stream:
            payload = tomllib.load(stream)
    except FileNotFoundError as exc:
        raise ManifestError(
            "Package manifest does not exist.",
            context={"path": str(manifest_path)},
        ) from exc
    except OSError as exc:
        raise ManifestError(
            "Package manifest could not be read.",
            hint=str(exc),
            context={"path": str(manifest_path)},
        ) from exc
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ManifestError(
            "Package manifest is not valid TOML.",
            hint=str(exc),
            context={"path": str(manifest_path)},
        ) from exc

    package = payload.get("package")
    if not isinstance(package, dict):
        raise ManifestError(
            "Package manifest has no [package] table.",
            context={"path": str(manifest_path)},
        )
    return Manifest(
        name=_identity_field(package, "name", manifest_path),
        version=_identity_field(package, "version", manifest_path),
    )


def _identity_field(package: dict[str, Any], key: str, path: Path) -> str:
    value = package.get(key)
    if isinstance(value, dict) and value.get("workspace") is True:
        raise ManifestError(
            f"Package `{key}` is inherited from the workspace.",
            hint=f"Declare `{key}` directly in the package manifest.",
            context={"path": str(path), "field": key},
        )
    if not isinstance(value, str) or not value.strip():
        raise ManifestError(
            f"Package manifest is missing a valid `{key}`.",
            context={"path": str(path), "field": key},
        )
    return value.strip()
