"""Toolchain pinning APIs."""

from .model import (
    ANALYZER,
    FORMAT,
    LINT,
    SOURCE,
    Channel,
    ChannelOffer,
    Profile,
    ToolchainProvider,
    ToolchainSet,
    ToolchainSpec,
)
from .pin import DEV_NIGHTLY_COMPONENTS, DEV_STABLE_COMPONENTS, pin_toolchain, pin_toolchains

__all__ = [
    "ANALYZER",
    "Channel",
    "ChannelOffer",
    "DEV_NIGHTLY_COMPONENTS",
    "DEV_STABLE_COMPONENTS",
    "FORMAT",
    "LINT",
    "Profile",
    "SOURCE",
    "ToolchainProvider",
    "ToolchainSet",
    "ToolchainSpec",
    "pin_toolchain",
    "pin_toolchains",
]
