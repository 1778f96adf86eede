"""Interactive shell.

Each input line is split with shell quoting rules; the first word selects a
command and the rest are passed to it. A command returns True when it
reported an error, which switches the prompt to the error prompt until the
next successful command.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from typing import Callable, Optional

try:
    import readline
except ImportError:  # pragma: no cover - not available on Windows
    readline = None

from . import output
from .config import AppConfig

logger = logging.getLogger(__name__)

CommandFunc = Callable[[list[str], AppConfig], bool]

EXIT_COMMANDS = ("exit", "quit")
HISTORY_LENGTH = 1000


@dataclass
class Command:
    """A named shell command."""
    name: str
    func: CommandFunc
    summary: str = ""


class Shell:
    """Read-eval loop over a set of commands."""

    def __init__(
        self,
        app_conf: AppConfig,
        commands: Optional[list[Command]] = None,
        prompt: Optional[str] = None,
        error_prompt: Optional[str] = None,
        use_history: bool = True,
    ):
        self.app_conf = app_conf
        self.commands: dict[str, Command] = {c.name: c for c in commands or []}
        self.prompt = prompt or app_conf.settings.shell.prompt
        self.error_prompt = error_prompt or app_conf.settings.shell.error_prompt
        self.use_history = use_history and readline is not None
        self.prev_error = False

    def prompt_text(self) -> str:
        """Prompt prefixed with the current workspace name, e.g. ``|box| pentenv> ``."""
        workspace = self.app_conf.current_workspace()
        ws_name = f"|{workspace.name}| " if workspace is not None else ""
        base = self.error_prompt if self.prev_error else self.prompt
        return f"{ws_name}{base} "

    def show_help(self) -> None:
        output.plain("Commands:")
        width = max((len(name) for name in self.commands), default=0)
        for name, command in self.commands.items():
            output.plain(f"  {name:<{width}}  {command.summary}")
        output.plain(f"  {'exit':<{width}}  leave the shell")

    def execute_command(self, name: str, args: list[str]) -> bool:
        """Run one command. Returns True if it reported an error."""
        command = self.commands.get(name)
        if command is None:
            output.error(f"command {name} is not found!")
            return True
        try:
            return command.func(args, self.app_conf)
        except Exception as e:
            logger.exception("command %s failed", name)
            output.error(f"unexpected error in {name}: {e}")
            return True

    def execute_line(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        line = line.strip()
        if not line:
            return True
        if line in EXIT_COMMANDS:
            return False

        try:
            words = shlex.split(line)
        except ValueError as e:
            output.error(f"failed to parse input: {e}")
            self.prev_error = True
            return True

        if words[0] == "help":
            self.show_help()
            self.prev_error = False
            return True

        self.prev_error = self.execute_command(words[0], words[1:])
        return True

    def start(self, read_line: Optional[Callable[[str], str]] = None) -> None:
        """Run the loop until ``exit`` or end of input.

        ``read_line`` defaults to input().
        """
        if read_line is None:
            read_line = input
        self._load_history()
        try:
            while True:
                try:
                    line = read_line(self.prompt_text())
                except EOFError:
                    output.plain("")
                    break
                except KeyboardInterrupt:
                    output.plain("")
                    continue

                if not self.execute_line(line):
                    break
        finally:
            self._save_history()

    def _load_history(self) -> None:
        if not self.use_history:
            return
        path = self.app_conf.shell_hist_path
        if path.exists():
            try:
                readline.read_history_file(path)
            except OSError as e:
                logger.warning("could not read shell history %s: %s", path, e)

    def _save_history(self) -> None:
        if not self.use_history:
            return
        path = self.app_conf.shell_hist_path
        try:
            readline.set_history_length(HISTORY_LENGTH)
            readline.write_history_file(path)
        except OSError as e:
            logger.warning("could not write shell history %s: %s", path, e)
