"""Command-line entry point.

Usage:
    python -m buildplan build [--system x86_64-linux] [--materialize out/]
    python -m buildplan shell [--system aarch64-darwin]
    python -m buildplan plan --system x86_64-linux --system aarch64-darwin
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from buildplan.config import ResolverConfig, load_config
from buildplan.engines import InProcessEngine
from buildplan.errors import BuildPlanError
from buildplan.observability import StructuredLogger
from buildplan.platforms import DEFAULT_SYSTEMS, host_system
from buildplan.resolver import ResolutionRequest, resolve, resolve_systems


def cmd_build(args: argparse.Namespace, logger: StructuredLogger) -> None:
    resolution = resolve(_request(args, system=args.system or host_system()), logger=logger)
    descriptor = resolution.build
    _emit(args, descriptor.to_json, descriptor.to_cbor)
    if args.materialize is not None:
        artifact = InProcessEngine().build(descriptor, Path(args.materialize))
        print(f"Materialized {artifact.executable_path}", file=sys.stderr)


def cmd_shell(args: argparse.Namespace, logger: StructuredLogger) -> None:
    resolution = resolve(_request(args, system=args.system or host_system()), logger=logger)
    environment = resolution.dev
    _emit(args, environment.to_json, environment.to_cbor)
    if args.materialize is not None:
        artifact = InProcessEngine().activate(environment, Path(args.materialize))
        print(f"Materialized {artifact.environment_path}", file=sys.stderr)


def cmd_plan(args: argparse.Namespace, logger: StructuredLogger) -> None:
    systems = tuple(args.systems or DEFAULT_SYSTEMS)
    resolutions = resolve_systems(_request(args, system=systems[0]), systems, logger=logger)
    plan = {
        system: {"build": resolution.build.to_dict(), "shell": resolution.dev.to_dict()}
        for system, resolution in resolutions.items()
    }
    print(json.dumps(plan, indent=2, sort_keys=True))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="buildplan",
        description="Resolve reproducible build and development environment descriptors",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build_p = sub.add_parser("build", help="Emit the build descriptor for one system")
    _add_common(build_p)
    _add_single_system(build_p)

    shell_p = sub.add_parser("shell", help="Emit the development environment descriptor")
    _add_common(shell_p)
    _add_single_system(shell_p)

    plan_p = sub.add_parser("plan", help="Emit descriptors for several systems as JSON")
    _add_common(plan_p)
    plan_p.add_argument(
        "--system",
        dest="systems",
        action="append",
        help="System token to resolve; repeatable (default: all default systems)",
    )

    args = parser.parse_args(argv)
    logger = StructuredLogger()
    try:
        if args.command == "build":
            cmd_build(args, logger)
        elif args.command == "shell":
            cmd_shell(args, logger)
        elif args.command == "plan":
            cmd_plan(args, logger)
    except BuildPlanError as exc:
        print(json.dumps(exc.to_dict(), indent=2, sort_keys=True), file=sys.stderr)
        return 1
    finally:
        if args.log_file is not None:
            logger.to_json_lines(args.log_file)
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--manifest", type=Path, default=Path("Cargo.toml"))
    parser.add_argument("--lock", type=Path, default=Path("Cargo.lock"))
    parser.add_argument("--source-root", type=Path, default=Path("."))
    parser.add_argument("--config", type=Path, default=None, help="TOML resolver config")
    parser.add_argument("--log-file", type=Path, default=None, help="Write JSON-lines logs")


def _add_single_system(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--system", default=None, help="System token (default: this host)")
    parser.add_argument("--format", choices=("json", "cbor"), default="json")
    parser.add_argument("--output", type=Path, default=None, help="Write descriptor to file")
    parser.add_argument(
        "--materialize",
        type=Path,
        default=None,
        help="Run the in-process engine into this directory",
    )


def _request(args: argparse.Namespace, *, system: str) -> ResolutionRequest:
    config = load_config(args.config) if args.config is not None else ResolverConfig()
    return ResolutionRequest(
        manifest_path=args.manifest,
        lock_path=args.lock,
        source_root=args.source_root,
        system=system,
        config=config,
    )


def _emit(
    args: argparse.Namespace,
    to_json: Callable[[Path | None], str],
    to_cbor: Callable[[Path | None], bytes],
) -> None:
    if args.format == "cbor":
        encoded = to_cbor(args.output)
        if args.output is None:
            sys.stdout.buffer.write(encoded)
        return
    encoded_json = to_json(args.output)
    if args.output is None:
        sys.stdout.write(encoded_json)


if __name__ == "__main__":
    sys.exit(main())
