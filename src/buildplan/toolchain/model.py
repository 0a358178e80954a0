"""Toolchain provider and pinned toolchain model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class Channel(StrEnum):
    STABLE = "stable"
    NIGHTLY = "nightly"


class Profile(StrEnum):
    MINIMAL = "minimal"
    FULL = "full"


# Concrete component names offered by rust toolchain distributions.
LINT = "clippy"
FORMAT = "rustfmt"
SOURCE = "rust-src"
ANALYZER = "rust-analyzer"


@dataclass(frozen=True, slots=True)
class ChannelOffer:
    version: str
    profiles: frozenset[Profile] = frozenset({Profile.MINIMAL, Profile.FULL})
    components: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class ToolchainProvider:
    """A declared, versioned source of toolchains.

    Pinning reads only this value, so two providers with equal fields pin
    identical toolchains regardless of what is installed on the host.
    """

    name: str
    version: str
    channels: Mapping[Channel, ChannelOffer] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))


@dataclass(frozen=True, slots=True)
class ToolchainSpec:
    channel: Channel
    profile: Profile
    version: str
    provider: str
    provider_version: str
    components: frozenset[str] = frozenset()

    @property
    def pin(self) -> str:
        pin = f"{self.provider}.{self.channel}.{self.version}.{self.profile}"
        if self.components:
            pin += "+" + ",".join(sorted(self.components))
        return pin

    def to_dict(self) -> dict[str, object]:
        return {
            "channel": self.channel.value,
            "profile": self.profile.value,
            "version": self.version,
            "provider": self.provider,
            "provider_version": self.provider_version,
            "components": sorted(self.components),
            "pin": self.pin,
        }


@dataclass(frozen=True, slots=True)
class ToolchainSet:
    production: ToolchainSpec
    development: tuple[ToolchainSpec, ...] = ()
