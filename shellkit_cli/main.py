from __future__ import annotations

import sys

import click
import typer
from dotenv import load_dotenv

from . import __version__
from . import facade
from . import registry
from .cli_shared import (
    GlobalOpts,
    OpError,
    UsageError,
    _global_opts_from_env,
    _print_json,
    _rich_error,
    _status,
)
from .host import ConsoleSessionContext, ExecSessionLauncher, default_dialog_service

EXIT_NO = 1
EXIT_UNRECOGNIZED = 3
EXIT_UNKNOWN_POPUP_CODE = 4

app = typer.Typer(
    name="shellkit",
    help="Interactive shell helpers: prompts, popups, timestamps, shell restart.",
    no_args_is_help=True,
    add_completion=False,
)


def _bootstrap_env() -> None:
    # Discover and load .env without overriding exported variables.
    load_dotenv()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"shellkit {__version__}")
        raise typer.Exit(code=0)


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("g"), GlobalOpts):
        return ctx.obj["g"]
    return _global_opts_from_env()


@app.callback()
def app_callback(
    ctx: typer.Context,
    quiet: bool = typer.Option(False, "--quiet", help="Reduce stderr logging"),
    plain_json: bool = typer.Option(False, "--plain-json", help="Emit compact JSON output"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    del version
    ctx.obj = {"g": _global_opts_from_env(quiet=quiet, plain_json=plain_json)}


def choose_command(
    ctx: typer.Context,
    prompt: str | None = typer.Argument(None, help=f"Question to ask (default: {facade.DEFAULT_PROMPT!r})"),
    json_output: bool = typer.Option(False, "--json", help="Print the answer as JSON"),
) -> None:
    g = _ctx_global(ctx)
    answer = facade.confirm(prompt, stdout=sys.stderr)
    if json_output:
        _print_json({"kind": "shellkit.choose.v1", "answer": answer}, pretty=g.pretty)
    elif answer is not None:
        sys.stdout.write(("yes" if answer else "no") + "\n")
    if answer is None:
        raise typer.Exit(code=EXIT_UNRECOGNIZED)
    if not answer:
        raise typer.Exit(code=EXIT_NO)


def popup_command(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message text"),
    title: str = typer.Option(..., "--title", "-t", help="Window title"),
    cancel: bool = typer.Option(False, "--cancel", help="Offer a Cancel button next to OK"),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    g = _ctx_global(ctx)
    result = facade.show_popup(
        message,
        title,
        has_cancel_button=cancel,
        dialog=default_dialog_service(g.dialog_backend),
    )
    label = result.name if isinstance(result, facade.PopupResult) else str(result)
    if json_output:
        _print_json({"kind": "shellkit.popup.v1", "result": label, "code": int(result)}, pretty=g.pretty)
    else:
        sys.stdout.write(label + "\n")
    if result is facade.PopupResult.CANCEL:
        raise typer.Exit(code=EXIT_NO)
    if not isinstance(result, facade.PopupResult):
        raise typer.Exit(code=EXIT_UNKNOWN_POPUP_CODE)


def date_command(
    extended: bool = typer.Option(
        False, "--extended", "-e", help="Use YYYY-MM-DDTHH:MM:SS instead of YYYYMMDDTHHMMSS"
    ),
) -> None:
    sys.stdout.write(facade.format_timestamp(extended) + "\n")


def reload_command(
    ctx: typer.Context,
    check: bool = typer.Option(
        False,
        "--check",
        help="Only test for a top-level interactive console (exit 0) or not (exit 1)",
    ),
) -> None:
    g = _ctx_global(ctx)
    context = ConsoleSessionContext()
    if check:
        if not context.is_top_level_console():
            raise typer.Exit(code=EXIT_NO)
        return
    launcher = ExecSessionLauncher(g.shell)
    if context.is_top_level_console():
        _status(g, f"restarting shell: {launcher.shell}")
    facade.restart_shell(context=context, launcher=launcher)


_ALIAS_COMMANDS = {
    "choose": choose_command,
    "popup": popup_command,
    "date": date_command,
    "reload": reload_command,
}

for _entry in registry.ALIASES:
    app.command(_entry.alias, help=_entry.summary)(_ALIAS_COMMANDS[_entry.alias])


@app.command("aliases", help="Print the alias table, or alias definitions for a shell.")
def aliases(
    ctx: typer.Context,
    shell: str = typer.Option(
        "",
        "--shell",
        help=f"Emit definitions for: {', '.join(sorted(registry.SHELL_ALIAS_TEMPLATES))}",
    ),
    prog: str = typer.Option("shellkit", "--prog", help="Command the aliases invoke"),
) -> None:
    g = _ctx_global(ctx)
    if not shell.strip():
        _print_json({"kind": "shellkit.aliases.v1", "aliases": registry.alias_table()}, pretty=g.pretty)
        return
    try:
        lines = registry.shell_alias_lines(shell, prog=prog)
    except KeyError as e:
        raise UsageError(
            f"unsupported shell {shell!r} "
            f"(expected one of: {', '.join(sorted(registry.SHELL_ALIAS_TEMPLATES))})"
        ) from e
    sys.stdout.write("\n".join(lines) + "\n")


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        _bootstrap_env()
        result = app(args=argv, prog_name="shellkit", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.ClickException as e:
        _rich_error(e.format_message())
        return int(e.exit_code)
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
