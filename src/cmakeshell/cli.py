"""Command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from cmakeshell.errors import CmakeShellError, ValidationError
from cmakeshell.models import Target, TargetKey, TargetKind
from cmakeshell.observability import StructuredLogger
from cmakeshell.session import ShellSession
from cmakeshell.settings import Settings, host_platform, parse_architecture, parse_configuration
from cmakeshell.terminals import InProcessHost, LocalShellHost, TerminalHost
from cmakeshell.workspace import JsonLauncher, Workspace


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmakeshell",
        description="Drive a CMake project through one persistent shell session.",
    )
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Project root directory.")
    parser.add_argument("--config", default="Debug", help="Build configuration (Debug or Release).")
    parser.add_argument("--arch", default="x64", help="Target architecture (x86 or x64).")
    parser.add_argument("--build-dir", default="build", help="Build directory relative to the root.")
    parser.add_argument("--cmake", default="cmake", help="cmake executable.")
    parser.add_argument("--debugger", default="cppdbg", help="Debugger kind for Debug runs.")
    parser.add_argument(
        "--platform",
        choices=("windows", "posix"),
        default=None,
        help="Override the generator platform family.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print commands instead of executing them.",
    )
    parser.add_argument("--log-json", type=Path, default=None, help="Write structured logs here.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Echo log records to stderr.")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("targets", help="List build and run targets.")
    commands.add_parser("generate", help="Configure the build directory from scratch.")
    build = commands.add_parser("build", help="Build a target.")
    build.add_argument("target", nargs="?", default="all")
    run = commands.add_parser("run", help="Build and start an executable target.")
    run.add_argument("target")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        build_dir_name=args.build_dir,
        cmake=args.cmake,
        debugger=args.debugger,
        config=parse_configuration(args.config),
        arch=parse_architecture(args.arch),
        platform=args.platform or host_platform(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = StructuredLogger(echo=args.verbose)
    try:
        return asyncio.run(_run(args, logger))
    except CmakeShellError as exc:
        print(f"error[{exc.code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.log_json is not None:
            logger.to_json_lines(args.log_json)


async def _run(args: argparse.Namespace, logger: StructuredLogger) -> int:
    settings = settings_from_args(args)
    host: TerminalHost
    if args.dry_run:
        host = InProcessHost()
    else:
        host = LocalShellHost(cwd=str(args.root))
    session = ShellSession(host, name=settings.terminal_name, logger=logger)
    workspace = Workspace(
        args.root,
        session=session,
        settings=settings,
        launcher=JsonLauncher(),
        logger=logger,
    )
    workspace.reload()

    try:
        if args.command == "targets":
            _print_targets(workspace)
        elif args.command == "generate":
            await workspace.generate()
        elif args.command == "build":
            await workspace.build(_resolve(workspace, args.target, TargetKind.BUILD))
        elif args.command == "run":
            await workspace.launch(_resolve(workspace, args.target, TargetKind.RUN))
    finally:
        session.close()

    if isinstance(host, InProcessHost):
        for command in host.history:
            print(command)
    return 0


def _resolve(workspace: Workspace, name: str, kind: TargetKind) -> Target:
    target = workspace.project.find(TargetKey(name=name, kind=kind))
    if target is None:
        raise ValidationError(
            f"Unknown {kind.value} target {name!r}.",
            hint="Run `cmakeshell targets` to list the declared targets.",
            context={"target": name, "root": str(workspace.root_dir)},
        )
    return target


def _print_targets(workspace: Workspace) -> None:
    for kind in TargetKind:
        print(f"{kind.value.capitalize()}:")
        for target in workspace.project.targets_of(kind):
            print(f"  {target.name}")


if __name__ == "__main__":
    raise SystemExit(main())
