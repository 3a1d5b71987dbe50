"""Host capabilities the facade calls through.

Each capability is a small protocol with one default implementation per
platform. Tests substitute fakes for all of them.
"""

from __future__ import annotations

import ctypes
import os
import sys
from typing import Any, Mapping, Protocol, TextIO

from .cli_shared import SHELLKIT_SHELL, CapabilityUnavailable, OpError, UsageError

# Win32 MessageBox button layouts and return codes.
MB_OK = 0x0
MB_OKCANCEL = 0x1
IDOK = 1
IDCANCEL = 2

EMBEDDED_HOST_MARKERS = ("INSIDE_EMACS", "PYCHARM_HOSTED", "JPY_PARENT_PID")


class DialogService(Protocol):
    def show(self, message: str, title: str, *, with_cancel: bool) -> int:
        ...


class SessionContext(Protocol):
    def is_top_level_console(self) -> bool:
        ...


class SessionLauncher(Protocol):
    def relaunch(self) -> None:
        ...


class Win32DialogService:
    def __init__(self) -> None:
        win_dll = getattr(ctypes, "WinDLL", None)
        if win_dll is None:
            raise CapabilityUnavailable("win32 message boxes require Windows")
        try:
            self._user32 = win_dll("user32", use_last_error=True)
        except OSError as e:
            raise CapabilityUnavailable(f"user32 could not be loaded: {e}") from e

    def show(self, message: str, title: str, *, with_cancel: bool) -> int:
        flags = MB_OKCANCEL if with_cancel else MB_OK
        code = int(self._user32.MessageBoxW(None, str(message), str(title), flags))
        if code == 0:
            raise OpError(f"MessageBoxW failed (last error {ctypes.get_last_error()})")
        return code


class TkDialogService:
    """Modal dialogs through tkinter on a hidden root window."""

    def __init__(self) -> None:
        try:
            import tkinter
            from tkinter import messagebox
        except ImportError as e:
            raise CapabilityUnavailable(f"tkinter is not available: {e}") from e
        self._tkinter = tkinter
        self._messagebox = messagebox

    def _root(self) -> Any:
        try:
            root = self._tkinter.Tk()
        except self._tkinter.TclError as e:
            raise CapabilityUnavailable(f"no display for dialogs: {e}") from e
        root.withdraw()
        return root

    def show(self, message: str, title: str, *, with_cancel: bool) -> int:
        root = self._root()
        try:
            if with_cancel:
                accepted = self._messagebox.askokcancel(str(title), str(message), parent=root)
            else:
                self._messagebox.showinfo(str(title), str(message), parent=root)
                accepted = True
        finally:
            root.destroy()
        return IDOK if accepted else IDCANCEL


def default_dialog_service(backend: str = "auto") -> DialogService:
    name = (backend or "auto").strip().lower()
    if name == "auto":
        name = "win32" if sys.platform == "win32" else "tk"
    if name == "win32":
        return Win32DialogService()
    if name == "tk":
        return TkDialogService()
    raise UsageError(f"unknown dialog backend {backend!r}")


class ConsoleSessionContext:
    def __init__(
        self,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._environ = environ

    @staticmethod
    def _isatty(stream: TextIO | None) -> bool:
        if stream is None:
            return False
        try:
            return bool(stream.isatty())
        except (AttributeError, ValueError):
            return False

    def is_top_level_console(self) -> bool:
        env = os.environ if self._environ is None else self._environ
        if any(env.get(marker) for marker in EMBEDDED_HOST_MARKERS):
            return False
        stdin = sys.stdin if self._stdin is None else self._stdin
        stdout = sys.stdout if self._stdout is None else self._stdout
        return self._isatty(stdin) and self._isatty(stdout)


def resolve_shell_program(
    explicit: str = "", *, environ: Mapping[str, str] | None = None
) -> str:
    env = os.environ if environ is None else environ
    for candidate in (explicit, env.get(SHELLKIT_SHELL), env.get("SHELL")):
        v = str(candidate or "").strip()
        if v:
            return v
    if sys.platform == "win32":
        return str(env.get("COMSPEC") or "cmd.exe").strip()
    return "/bin/sh"


class ExecSessionLauncher:
    """Replace the running process with a fresh instance of the shell."""

    def __init__(self, shell: str = "") -> None:
        self.shell = resolve_shell_program(shell)

    def relaunch(self) -> None:
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execvp(self.shell, [self.shell])
        except OSError as e:
            raise OpError(f"failed to start shell {self.shell!r}: {e}") from e
