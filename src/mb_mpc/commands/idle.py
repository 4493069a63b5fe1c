"""Wait for a daemon subsystem change."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def idle(
    ctx: typer.Context, subsystems: list[str] | None = typer.Argument(default=None, help="Subsystems to watch (default: all)")
) -> None:
    """Block until the daemon reports a change, then print the changed subsystems."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            changed = session.idle(*(subsystems or []))
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_list("changed", changed)
