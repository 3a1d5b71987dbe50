from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from . import facade


@dataclass(frozen=True)
class AliasEntry:
    alias: str
    operation: Callable[..., object]
    summary: str


ALIASES: tuple[AliasEntry, ...] = (
    AliasEntry("choose", facade.confirm, "Ask a yes/no question."),
    AliasEntry("popup", facade.show_popup, "Show a modal message box."),
    AliasEntry("date", facade.format_timestamp, "Print the local time as an ISO-8601 timestamp."),
    AliasEntry("reload", facade.restart_shell, "Restart the interactive shell."),
)

SHELL_ALIAS_TEMPLATES = {
    "bash": "alias {alias}='{prog} {alias}'",
    "zsh": "alias {alias}='{prog} {alias}'",
    "fish": "alias {alias} '{prog} {alias}'",
    "powershell": "function {alias} {{ {prog} {alias} @args }}",
}

# reload must replace the calling shell itself, so it is emitted as a function
# that execs in that shell once the interactive-console check passes.
SHELL_RELOAD_TEMPLATES = {
    "bash": (
        'reload() {{ if [[ $- == *i* ]] && {prog} reload --check; '
        'then exec "${{SHELLKIT_SHELL:-$SHELL}}"; fi; }}'
    ),
    "zsh": (
        'reload() {{ if [[ $- == *i* ]] && {prog} reload --check; '
        'then exec "${{SHELLKIT_SHELL:-$SHELL}}"; fi; }}'
    ),
    "fish": (
        "function reload; if status is-interactive; and {prog} reload --check; "
        "exec (status fish-path); end; end"
    ),
    "powershell": (
        "function reload {{ if ($Host.Name -eq 'ConsoleHost') {{ {prog} reload --check; "
        "if ($LASTEXITCODE -eq 0) {{ Start-Process -FilePath (Get-Process -Id $PID).Path; exit }} }} }}"
    ),
}


def alias_names() -> list[str]:
    return [e.alias for e in ALIASES]


def alias_table() -> list[dict[str, str]]:
    return [
        {"alias": e.alias, "operation": e.operation.__name__, "summary": e.summary}
        for e in ALIASES
    ]


def shell_alias_lines(shell: str, *, prog: str = "shellkit") -> list[str]:
    key = (shell or "").strip().lower()
    template = SHELL_ALIAS_TEMPLATES.get(key)
    if template is None:
        raise KeyError(shell)
    lines = []
    for e in ALIASES:
        if e.alias == "reload":
            lines.append(SHELL_RELOAD_TEMPLATES[key].format(prog=prog))
        else:
            lines.append(template.format(alias=e.alias, prog=prog))
    return lines
