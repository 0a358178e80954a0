"""Resolver configuration: declared input tables, toolchain provider, and naming."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from buildplan.errors import ValidationError
from buildplan.models import InputTable, InputTables
from buildplan.toolchain import (
    ANALYZER,
    FORMAT,
    LINT,
    SOURCE,
    Channel,
    ChannelOffer,
    Profile,
    ToolchainProvider,
)

DEFAULT_PRIMARY_EXECUTABLE = "spotify_player"

DEFAULT_INPUT_TABLES = InputTables(
    base=InputTable.of(
        native=("pkg-config", "cmake", "bindgen-hook"),
        libraries=("openssl", "dbus", "fontconfig"),
    ),
    linux=InputTable.of(
        libraries=(
            "libsixel",
            "alsa-lib",
            "libpulseaudio",
            "portaudio",
            "libjack2",
            "SDL2",
            "gstreamer",
            "gst-devtools",
            "gst-plugins-base",
            "gst-plugins-good",
        ),
    ),
    macos=InputTable.of(
        native=("makeBinaryWrapper",),
        libraries=("AppKit", "AudioUnit", "Cocoa", "MediaPlayer"),
    ),
)

DEFAULT_TOOLCHAIN_PROVIDER = ToolchainProvider(
    name="rust-bin",
    version="2024-11-28",
    channels={
        Channel.STABLE: ChannelOffer(
            version="1.83.0",
            components=frozenset({LINT, FORMAT, SOURCE, ANALYZER, "rust-docs"}),
        ),
        Channel.NIGHTLY: ChannelOffer(
            version="2024-11-27",
            components=frozenset({LINT, FORMAT, SOURCE, ANALYZER, "rust-docs", "miri"}),
        ),
    },
)

_TOP_LEVEL_KEYS = frozenset({"package", "inputs", "toolchain", "lock"})
_TABLE_NAMES = ("base", "linux", "macos")


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    tables: InputTables = field(default_factory=lambda: DEFAULT_INPUT_TABLES)
    provider: ToolchainProvider = field(default_factory=lambda: DEFAULT_TOOLCHAIN_PROVIDER)
    primary_executable: str = DEFAULT_PRIMARY_EXECUTABLE
    shell_name: str | None = None
    allow_source_fetch: bool = True


def load_config(path: str | Path, *, base: ResolverConfig | None = None) -> ResolverConfig:
    """Load a TOML config file, overlaying it on *base* (defaults when omitted)."""
    config_path = Path(path)
    try:
        with config_path.open("rb") as stream:
            payload = tomllib.load(stream)
    except FileNotFoundError as exc:
        raise ValidationError(
            "Config file does not exist.",
            context={"path": str(config_path)},
        ) from exc
    except OSError as exc:
        raise ValidationError(
            "Config file could not be read.",
            hint=str(exc),
            context={"path": str(config_path)},
        ) from exc
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ValidationError(
            "Config file is not valid TOML.",
            hint=str(exc),
            context={"path": str(config_path)},
        ) from exc
    return config_from_mapping(payload, base=base, origin=str(config_path))


def config_from_mapping(
    data: Mapping[str, Any],
    *,
    base: ResolverConfig | None = None,
    origin: str = "<mapping>",
) -> ResolverConfig:
    config = base or ResolverConfig()
    _reject_unknown(data, _TOP_LEVEL_KEYS, section="", origin=origin)

    package = _section(data, "package", origin=origin)
    _reject_unknown(package, {"main_program", "shell_name"}, section="package", origin=origin)
    if "main_program" in package:
        config = replace(
            config,
            primary_executable=_string(package["main_program"], "package.main_program", origin),
        )
    if "shell_name" in package:
        config = replace(
            config,
            shell_name=_string(package["shell_name"], "package.shell_name", origin),
        )

    inputs = _section(data, "inputs", origin=origin)
    if inputs:
        _reject_unknown(inputs, set(_TABLE_NAMES), section="inputs", origin=origin)
        tables = config.tables
        for table_name in _TABLE_NAMES:
            if table_name in inputs:
                tables = replace(
                    tables,
                    **{table_name: _input_table(inputs, table_name, origin)},
                )
        config = replace(config, tables=tables)

    toolchain = _section(data, "toolchain", origin=origin)
    if toolchain:
        config = replace(config, provider=_provider(toolchain, config.provider, origin))

    lock = _section(data, "lock", origin=origin)
    _reject_unknown(lock, {"allow_source_fetch"}, section="lock", origin=origin)
    if "allow_source_fetch" in lock:
        value = lock["allow_source_fetch"]
        if not isinstance(value, bool):
            raise ValidationError(
                "Config value must be a boolean.",
                context={"path": origin, "key": "lock.allow_source_fetch"},
            )
        config = replace(config, allow_source_fetch=value)
    return config


def _input_table(inputs: Mapping[str, Any], name: str, origin: str) -> InputTable:
    section = _section(inputs, name, origin=origin, prefix="inputs.")
    _reject_unknown(section, {"native", "libraries"}, section=f"inputs.{name}", origin=origin)
    return InputTable.of(
        native=_string_list(section.get("native", []), f"inputs.{name}.native", origin),
        libraries=_string_list(section.get("libraries", []), f"inputs.{name}.libraries", origin),
    )


def _provider(
    section: Mapping[str, Any],
    current: ToolchainProvider,
    origin: str,
) -> ToolchainProvider:
    _reject_unknown(section, {"name", "version", "channels"}, section="toolchain", origin=origin)
    name = _string(section.get("name", current.name), "toolchain.name", origin)
    version = _string(section.get("version", current.version), "toolchain.version", origin)
    channels = dict(current.channels)
    raw_channels = _section(section, "channels", origin=origin, prefix="toolchain.")
    for raw_channel, raw_offer in raw_channels.items():
        try:
            channel = Channel(str(raw_channel))
        except ValueError as exc:
            raise ValidationError(
                f"Unknown toolchain channel `{raw_channel}`.",
                context={"path": origin},
            ) from exc
        key = f"toolchain.channels.{channel}"
        if not isinstance(raw_offer, Mapping):
            raise ValidationError(
                "Config section must be a table.",
                context={"path": origin, "key": key},
            )
        _reject_unknown(
            raw_offer,
            {"version", "profiles", "components"},
            section=key,
            origin=origin,
        )
        try:
            profiles = frozenset(
                Profile(item)
                for item in _string_list(
                    raw_offer.get("profiles", ["minimal", "full"]), f"{key}.profiles", origin
                )
            )
        except ValueError as exc:
            raise ValidationError(
                "Unknown toolchain profile.",
                context={"path": origin, "key": f"{key}.profiles"},
            ) from exc
        channels[channel] = ChannelOffer(
            version=_string(raw_offer.get("version"), f"{key}.version", origin),
            profiles=profiles,
            components=frozenset(
                _string_list(raw_offer.get("components", []), f"{key}.components", origin)
            ),
        )
    return ToolchainProvider(name=name, version=version, channels=channels)


def _section(
    data: Mapping[str, Any],
    key: str,
    *,
    origin: str,
    prefix: str = "",
) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ValidationError(
            "Config section must be a table.",
            context={"path": origin, "key": f"{prefix}{key}"},
        )
    return value


def _reject_unknown(
    data: Mapping[str, Any],
    allowed: set[str] | frozenset[str],
    *,
    section: str,
    origin: str,
) -> None:
    unknown = {str(key) for key in data} - set(allowed)
    if unknown:
        raise ValidationError(
            "Config contains unknown keys.",
            context={
                "path": origin,
                "section": section or "<root>",
                "keys": ", ".join(sorted(unknown)),
            },
        )


def _string(value: Any, key: str, origin: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            "Config value must be a non-empty string.",
            context={"path": origin, "key": key},
        )
    return value.strip()


def _string_list(value: Any, key: str, origin: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
        raise ValidationError(
            "Config value must be a list of non-empty strings.",
            context={"path": origin, "key": key},
        )
    return list(value)
