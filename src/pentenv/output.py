"""Console output with ``[err]`` / ``[info]`` prefixes."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

# Values are printed verbatim: no markup, highlighting, emoji or wrapping
console = Console(markup=False, highlight=False, emoji=False, soft_wrap=True)


def error_prefix() -> Text:
    return Text.assemble("[", ("err", "red"), "]")


def log_prefix() -> Text:
    return Text.assemble("[", ("info", "green"), "]")


def error(message: str) -> None:
    console.print(Text.assemble(error_prefix(), " ", message))


def info(message: str) -> None:
    console.print(Text.assemble(log_prefix(), " ", message))


def plain(message: str) -> None:
    console.print(Text(message))


def heading(first: str, rest: str) -> None:
    """Print a help title with its first letter highlighted, e.g. *V*ars."""
    console.print(Text.assemble((first, "bold blue"), rest))
