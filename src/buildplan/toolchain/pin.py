"""Deterministic toolchain pinning from a declared provider."""

from __future__ import annotations

from collections.abc import Iterable

from buildplan.errors import ToolchainResolutionError
from buildplan.toolchain.model import (
    ANALYZER,
    FORMAT,
    LINT,
    SOURCE,
    Channel,
    Profile,
    ToolchainProvider,
    ToolchainSet,
    ToolchainSpec,
)

DEV_STABLE_COMPONENTS: frozenset[str] = frozenset({LINT, SOURCE})
DEV_NIGHTLY_COMPONENTS: frozenset[str] = frozenset({LINT, FORMAT, ANALYZER})


def pin_toolchain(
    provider: ToolchainProvider,
    *,
    channel: Channel,
    profile: Profile = Profile.MINIMAL,
    components: Iterable[str] = (),
) -> ToolchainSpec:
    requested = frozenset(components)
    context = {
        "provider": provider.name,
        "provider_version": provider.version,
        "channel": channel.value,
        "profile": profile.value,
    }
    offer = provider.channels.get(channel)
    if offer is None:
        raise ToolchainResolutionError(
            f"Toolchain provider does not offer the `{channel}` channel.",
            hint="Declare the channel on the provider or pin a different provider version.",
            context=context,
        )
    if profile not in offer.profiles:
        raise ToolchainResolutionError(
            f"Toolchain provider does not offer the `{profile}` profile on `{channel}`.",
            context=context,
        )
    missing = requested - offer.components
    if missing:
        raise ToolchainResolutionError(
            "Toolchain provider does not offer requested components.",
            context={**context, "missing": ", ".join(sorted(missing))},
        )
    return ToolchainSpec(
        channel=channel,
        profile=profile,
        version=offer.version,
        provider=provider.name,
        provider_version=provider.version,
        components=requested,
    )


def pin_toolchains(provider: ToolchainProvider) -> ToolchainSet:
    """Pin the production toolchain and the development toolchain pair."""
    production = pin_toolchain(provider, channel=Channel.STABLE)
    development = (
        pin_toolchain(provider, channel=Channel.STABLE, components=DEV_STABLE_COMPONENTS),
        pin_toolchain(provider, channel=Channel.NIGHTLY, components=DEV_NIGHTLY_COMPONENTS),
    )
    return ToolchainSet(production=production, development=development)
