from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console


class ShellkitError(Exception):
    pass


class UsageError(ShellkitError):
    pass


class OpError(ShellkitError):
    pass


class CapabilityUnavailable(OpError):
    """Raised when the host has no native service for a requested operation."""


SHELLKIT_SHELL = "SHELLKIT_SHELL"
SHELLKIT_DIALOG_BACKEND = "SHELLKIT_DIALOG_BACKEND"
SHELLKIT_QUIET = "SHELLKIT_QUIET"

DIALOG_BACKENDS = ("auto", "win32", "tk")

_ERROR_CONSOLE = Console(stderr=True)


@dataclass(frozen=True)
class GlobalOpts:
    quiet: bool
    pretty: bool
    shell: str = ""
    dialog_backend: str = "auto"


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {msg}")


def _status(g: GlobalOpts, msg: str) -> None:
    if g.quiet:
        return
    _ERROR_CONSOLE.print(f"[dim]{msg}[/dim]")


def _truthy(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _resolve_dialog_backend(raw: str | None) -> str:
    v = (raw or "").strip().lower() or "auto"
    if v not in DIALOG_BACKENDS:
        raise UsageError(
            f"unknown dialog backend {v!r} (expected one of: {', '.join(DIALOG_BACKENDS)})"
        )
    return v


def _global_opts_from_env(*, quiet: bool = False, plain_json: bool = False) -> GlobalOpts:
    return GlobalOpts(
        quiet=quiet or _truthy(os.environ.get(SHELLKIT_QUIET)),
        pretty=not plain_json,
        shell=_env_or_none(SHELLKIT_SHELL) or "",
        dialog_backend=_resolve_dialog_backend(_env_or_none(SHELLKIT_DIALOG_BACKEND)),
    )


def _print_json(obj: Any, *, pretty: bool) -> None:
    if pretty:
        sys.stdout.write(json.dumps(obj, indent=2, sort_keys=True) + "\n")
    else:
        sys.stdout.write(json.dumps(obj, separators=(",", ":"), sort_keys=True) + "\n")
