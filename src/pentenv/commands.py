"""Shell commands: vars (v, vh, vr, vm, vs) and workspaces (init, clean, scw, cw)."""

from __future__ import annotations

import argparse
import functools
from pathlib import Path
from typing import Callable, NoReturn, Optional

from . import clipboard, output
from .config import AppConfig
from .engine import VarsEngine
from .errors import NotFound, PentenvError
from .shell import Command
from .values import render
from .workspace import Workspace, current_workspace


class CommandExit(Exception):
    """Raised by CommandParser instead of exiting the process."""

    def __init__(self, status: int):
        super().__init__(status)
        self.status = status


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems without calling sys.exit()."""

    def exit(self, status: int = 0, message: Optional[str] = None) -> NoReturn:
        if message:
            output.error(message.strip())
        raise CommandExit(status)

    def error(self, message: str) -> NoReturn:
        output.plain(self.format_usage().rstrip())
        self.exit(2, f"{self.prog}: {message}")


def with_arguments(build_parser: Callable[[], CommandParser]):
    """Parse the command's words with ``build_parser()`` before calling it.

    ``-h`` prints help and is not an error; any other usage problem is.
    """
    def decorator(func: Callable[[argparse.Namespace, AppConfig], bool]):
        @functools.wraps(func)
        def wrapper(words: list[str], app_conf: AppConfig) -> bool:
            try:
                args = build_parser().parse_args(words)
            except CommandExit as e:
                return e.status != 0
            return func(args, app_conf)
        return wrapper
    return decorator


# ========== Vars ==========


def vars_help(words: list[str], app_conf: AppConfig) -> bool:
    output.heading("V", "ars")
    output.plain("\trefer or modify variables like an ip address.")
    output.plain("Commands:")
    output.plain("\tv\tprint this screen.")
    output.plain("\tvh\tprint this screen.")
    output.plain('\tvr\trefer the variables by a json query like this: "vr ip", "vr creds[0].password".')
    output.plain("\t\t-c copies the value to your clipboard.")
    output.plain(
        "\tvm\tmodify the variables by a json query. when you want to register the ip address, "
        'you can do it with this: "vm ip 0.0.0.0" for example.'
    )
    output.plain("\t\tvalues that are valid json (5, true, \"5\", {...}) are stored as json, anything else as a string.")
    output.plain("\t\t--string always stores a string, -s shows the document before and after.")
    output.plain("\t\tput -- before a value that starts with a dash: \"vm password -- -x9!\".")
    output.plain("\tvs\tshow all variables.")
    return False


def _refer_parser() -> CommandParser:
    parser = CommandParser(prog="vr", description="Print the value at a path.")
    parser.add_argument("path", help='json query, e.g. "ip" or "creds[0].password"')
    parser.add_argument("-c", "--copy", action="store_true", help="copy the value to the clipboard")
    return parser


@with_arguments(_refer_parser)
def vars_refer(args: argparse.Namespace, app_conf: AppConfig) -> bool:
    try:
        value = VarsEngine.for_app(app_conf).refer(args.path)
    except NotFound:
        output.plain(f"not found: {args.path}")
        return False
    except PentenvError as e:
        output.error("vars reference error")
        output.error(str(e))
        return True

    text = render(value)
    output.plain(text)
    if args.copy:
        try:
            clipboard.copy(text)
        except PentenvError as e:
            output.error(str(e))
            return True
        output.info("above value is copied to your clipboard!")
    return False


def _modify_parser() -> CommandParser:
    parser = CommandParser(
        prog="vm",
        description="Store a value at a path.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Values starting with '-' need a preceding --, e.g. vm password -- -x9!",
    )
    parser.add_argument("path", help='json query, e.g. "ip" or "creds[0].password"')
    parser.add_argument("value", help="value to store; use -- before values starting with '-'")
    parser.add_argument("-s", "--show", action="store_true", help="show the document before and after")
    parser.add_argument("--string", action="store_true", help="store the value as a string even if it is valid json")
    return parser


@with_arguments(_modify_parser)
def vars_modify(args: argparse.Namespace, app_conf: AppConfig) -> bool:
    try:
        result = VarsEngine.for_app(app_conf).modify(args.path, args.value, as_string=args.string)
    except PentenvError as e:
        output.error("error occurred during modifying vars.")
        output.error(str(e))
        return True

    if args.show:
        output.info("previous:")
        output.info(result.before)
        output.info("current:")
        output.info(result.after)
    return False


def vars_show(words: list[str], app_conf: AppConfig) -> bool:
    try:
        output.plain(VarsEngine.for_app(app_conf).show())
    except PentenvError as e:
        output.error("failed to show vars")
        output.error(str(e))
        return True
    return False


# ========== Workspaces ==========


def _init_parser() -> CommandParser:
    parser = CommandParser(prog="init", description="Create a workspace and select it.")
    parser.add_argument("directory", nargs="?", help="workspace directory (default: current directory)")
    return parser


@with_arguments(_init_parser)
def workspace_init(args: argparse.Namespace, app_conf: AppConfig) -> bool:
    root = Path(args.directory).expanduser() if args.directory else Path.cwd()
    try:
        workspace = Workspace.init(root, app_conf.settings)
        app_conf.set_current_workspace(workspace.root)
    except (PentenvError, OSError) as e:
        output.error("failed to initialize:")
        output.error(f"\t{e}")
        return True
    output.info(f"initialized {workspace.env_path}")
    return False


def workspace_clean(words: list[str], app_conf: AppConfig) -> bool:
    try:
        workspace = current_workspace(app_conf)
    except PentenvError as e:
        output.error("failed to clean current workspace.")
        output.error(str(e))
        return True

    output.plain(f"removing {workspace.env_path}")
    try:
        workspace.clean()
        app_conf.set_current_workspace(None)
    except (PentenvError, OSError) as e:
        output.error(f"failed to remove {workspace.env_path}")
        output.error(str(e))
        output.error("failed to clean environment")
        return True
    output.plain(f"removed {workspace.env_path}")
    output.plain("the environment is cleaned successfully")
    return False


def show_current_workspace(words: list[str], app_conf: AppConfig) -> bool:
    root = app_conf.current_workspace()
    output.plain(str(root) if root is not None else "(no workspace selected)")
    return False


def _change_parser() -> CommandParser:
    parser = CommandParser(prog="cw", description="Select an existing workspace.")
    parser.add_argument("directory", help="workspace directory")
    return parser


@with_arguments(_change_parser)
def change_workspace(args: argparse.Namespace, app_conf: AppConfig) -> bool:
    workspace = Workspace(Path(args.directory).expanduser().resolve(), app_conf.settings)
    if not workspace.exists():
        output.error(f"{workspace.vars_path} does not exist; run init there first")
        return True
    try:
        app_conf.set_current_workspace(workspace.root)
    except (PentenvError, OSError) as e:
        output.error(f"failed to select {workspace.root}")
        output.error(str(e))
        return True
    output.info(f"current workspace: {workspace.root}")
    return False


def commands() -> list[Command]:
    """All shell commands, in help order."""
    return [
        Command("v", vars_help, "help about vars"),
        Command("vh", vars_help, "help about vars"),
        Command("vr", vars_refer, "refer a variable: vr creds[0].password [-c]"),
        Command("vm", vars_modify, "modify a variable: vm ip 0.0.0.0 [-s] [--string]"),
        Command("vs", vars_show, "show all variables"),
        Command("init", workspace_init, "create a workspace here and select it"),
        Command("clean", workspace_clean, "remove the current workspace"),
        Command("scw", show_current_workspace, "show the current workspace"),
        Command("cw", change_workspace, "select a workspace: cw <dir>"),
    ]
