"""Pause playback."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def pause(ctx: typer.Context) -> None:
    """Pause playback."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            session.call("pause", 1)
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_paused()
