"""System clipboard access."""

from __future__ import annotations

import pyperclip

from .errors import ClipboardError


def copy(text: str) -> None:
    """Copy ``text`` to the clipboard.

    Raises:
        ClipboardError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"failed to copy to clipboard: {e}") from e
