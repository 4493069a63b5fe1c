"""Show daemon statistics."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def stats(ctx: typer.Context) -> None:
    """Show database and uptime statistics."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            server = session.server
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_stats(server)
