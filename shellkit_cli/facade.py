"""Interactive helpers: yes/no prompt, modal popup, timestamps, shell restart."""

from __future__ import annotations

import sys
from datetime import datetime
from enum import IntEnum
from typing import Callable, TextIO

from .host import (
    ConsoleSessionContext,
    DialogService,
    ExecSessionLauncher,
    SessionContext,
    SessionLauncher,
    default_dialog_service,
)

DEFAULT_PROMPT = "Are you sure? [y/n]"

_AFFIRMATIVE = frozenset({"y", "yes"})
_NEGATIVE = frozenset({"n", "no"})

BASIC_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
EXTENDED_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class PopupResult(IntEnum):
    OK = 1
    CANCEL = 2


def parse_answer(raw: str | None) -> bool | None:
    answer = (raw or "").strip().lower()
    if answer in _AFFIRMATIVE:
        return True
    if answer in _NEGATIVE:
        return False
    return None


def confirm(
    prompt: str | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> bool | None:
    """Ask a yes/no question and read a single line of input.

    Returns True for y/yes, False for n/no, and None for anything else,
    including empty input and end of input. The question is never repeated.
    """
    out = sys.stdout if stdout is None else stdout
    inp = sys.stdin if stdin is None else stdin
    text = DEFAULT_PROMPT if prompt is None else str(prompt)
    out.write(f"{text} ")
    out.flush()
    return parse_answer(inp.readline())


def show_popup(
    message: object,
    window_title: object,
    has_cancel_button: bool = False,
    *,
    dialog: DialogService | None = None,
) -> PopupResult | int:
    """Show a blocking modal dialog.

    Codes 1 and 2 map to PopupResult.OK and PopupResult.CANCEL. Any other code
    the dialog service reports is returned as the raw int.
    """
    service = default_dialog_service() if dialog is None else dialog
    code = int(service.show(str(message), str(window_title), with_cancel=bool(has_cancel_button)))
    try:
        return PopupResult(code)
    except ValueError:
        return code


def format_timestamp(
    extended: bool = False, *, clock: Callable[[], datetime] = datetime.now
) -> str:
    fmt = EXTENDED_TIMESTAMP_FORMAT if extended else BASIC_TIMESTAMP_FORMAT
    return clock().strftime(fmt)


def restart_shell(
    *,
    context: SessionContext | None = None,
    launcher: SessionLauncher | None = None,
) -> bool:
    """Replace the current console session with a fresh shell.

    Does nothing unless running as a top-level interactive console. Returns
    whether a relaunch was attempted; a successful relaunch does not return.
    """
    ctx = ConsoleSessionContext() if context is None else context
    if not ctx.is_top_level_console():
        return False
    (ExecSessionLauncher() if launcher is None else launcher).relaunch()
    return True
