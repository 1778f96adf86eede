"""pentenv - Main entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import output
from .commands import commands
from .config import AppConfig, load_app_config
from .engine import VarsEngine
from .errors import ConfigError, PentenvError
from .server import HAS_MCP, MISSING_MCP_MESSAGE, run_server
from .shell import Shell
from .workspace import Workspace, current_workspace

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pentenv",
        description="pentenv - per-workspace variables for penetration testing sessions",
    )
    parser.add_argument(
        "--home",
        type=Path,
        help="Application directory (default: $PENTENV_HOME or ~/.pentenv)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to settings file (default: config.toml or config.json in the application directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug messages to stderr",
    )

    subparsers = parser.add_subparsers(dest="mode")
    subparsers.add_parser("console", help="Start the interactive shell (default)")

    run_parser = subparsers.add_parser("run", help="Run a single shell command, e.g. run vr ip")
    run_parser.add_argument("words", nargs=argparse.REMAINDER, help="command and its arguments")

    serve_parser = subparsers.add_parser("serve", help="Serve the vars over MCP (stdio)")
    serve_parser.add_argument(
        "--workspace",
        "-w",
        type=Path,
        help="Workspace directory (default: the current workspace)",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def run_command(app_conf: AppConfig, words: list[str]) -> int:
    """Run one shell command and return the process exit status."""
    if not words:
        output.error("no command is given.")
        return 1
    shell = Shell(app_conf, commands(), use_history=False)
    return 1 if shell.execute_command(words[0], words[1:]) else 0


def serve(app_conf: AppConfig, workspace_dir: Optional[Path]) -> int:
    if not HAS_MCP:
        output.error(MISSING_MCP_MESSAGE)
        return 1

    try:
        if workspace_dir is not None:
            workspace = Workspace(workspace_dir.expanduser().resolve(), app_conf.settings)
        else:
            workspace = current_workspace(app_conf)
    except PentenvError as e:
        output.error(str(e))
        return 1
    if not workspace.exists():
        output.error(f"{workspace.vars_path} does not exist; run init there first")
        return 1

    asyncio.run(run_server(VarsEngine(workspace)))
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        app_conf = load_app_config(args.home, args.config)
    except ConfigError as e:
        output.error("failed to init application")
        output.error(str(e))
        sys.exit(1)

    if args.mode == "run":
        sys.exit(run_command(app_conf, args.words))

    if args.mode == "serve":
        sys.exit(serve(app_conf, args.workspace))

    Shell(app_conf, commands()).start()


if __name__ == "__main__":  # pragma: no cover
    main()
