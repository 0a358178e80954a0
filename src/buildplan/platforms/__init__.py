"""Host platform classification.

Every platform-conditional decision in the resolver consults the
:class:`PlatformFact` produced here; nothing else inspects the host.
"""

from __future__ import annotations

import platform
import sys
from enum import StrEnum


class PlatformFact(StrEnum):
    LINUX = "linux"
    MACOS = "macos"
    OTHER = "other"


DEFAULT_SYSTEMS: tuple[str, ...] = (
    "x86_64-linux",
    "aarch64-linux",
    "x86_64-darwin",
    "aarch64-darwin",
)

_LINUX_MARKERS = frozenset({"linux"})
_MACOS_MARKERS = frozenset({"darwin", "macos", "osx"})
# Operating systems that share a kernel or vendor with the above but not its inputs.
_EXCLUDED_MARKERS = frozenset({"android", "androideabi", "ios", "tvos", "watchos", "visionos"})

_MACHINE_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
}


def classify_system(token: object) -> PlatformFact:
    """Map a host-description token to exactly one :class:`PlatformFact`.

    Accepts Nix system strings (``x86_64-linux``), target triples
    (``aarch64-apple-darwin``) and bare OS names (``linux``, ``darwin``).
    Classification keys on the OS component, so
    ``aarch64-apple-ios`` and ``aarch64-linux-android`` are ``other``.
    Unrecognized tokens, including non-strings, classify as ``other``.
    """
    if not isinstance(token, str):
        return PlatformFact.OTHER
    parts = {part for part in token.strip().lower().split("-") if part}
    if parts & _EXCLUDED_MARKERS:
        return PlatformFact.OTHER
    if parts & _LINUX_MARKERS:
        return PlatformFact.LINUX
    if parts & _MACOS_MARKERS:
        return PlatformFact.MACOS
    return PlatformFact.OTHER


def host_system() -> str:
    """Return the evaluating host as a ``<arch>-<os>`` system token.

    Only entry points should call this; resolution functions take the token
    as an explicit argument.
    """
    machine = platform.machine().lower()
    machine = _MACHINE_ALIASES.get(machine, machine) or "unknown"
    if sys.platform.startswith("linux"):
        kernel = "linux"
    elif sys.platform == "darwin":
        kernel = "darwin"
    else:
        kernel = sys.platform
    return f"{machine}-{kernel}"


__all__ = [
    "DEFAULT_SYSTEMS",
    "PlatformFact",
    "classify_system",
    "host_system",
]
