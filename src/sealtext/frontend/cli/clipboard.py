"""Clipboard access for the CLI, via pyperclip.

Lets the command line behave like the editor integration it stands in for:
take the "selection" from the clipboard and put the result back there.
"""

from __future__ import annotations

import pyperclip


def copy_to_clipboard(text: str) -> None:
    """Place ``text`` on the system clipboard.

    Raises:
        pyperclip.PyperclipException: If clipboard access fails.
    """
    pyperclip.copy(text)


def paste_from_clipboard() -> str:
    """Return the current clipboard text ("" when empty)."""
    return pyperclip.paste() or ""
