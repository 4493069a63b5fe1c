"""Show player status and the current track."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def status(ctx: typer.Context) -> None:
    """Show player status and the current track."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            player = session.player
            track = session.queue[player.song] if player.active and player.song < len(session.queue) else {}
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_status(player, track)
