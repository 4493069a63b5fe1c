"""Run any known MPD command."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError
from mb_mpc.mpd.commands import lookup


def call(
    ctx: typer.Context,
    command: str = typer.Argument(help="MPD command name"),
    args: list[str] | None = typer.Argument(default=None, help="Command arguments"),
) -> None:
    """Run any known MPD command and print its normalized result."""
    app = use_context(ctx)
    if lookup(command) is None:
        app.out.print_error_and_exit("unknown_command", f"Unknown command: {command}")
    try:
        with app.open_session() as session:
            result = session.call(command, *(args or []))
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_result(command, result if result is not None else True)
