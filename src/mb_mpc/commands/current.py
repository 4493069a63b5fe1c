"""Show the current track."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def current(ctx: typer.Context) -> None:
    """Show the track at the current queue position."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            track = session.current_track()
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_track(track)
