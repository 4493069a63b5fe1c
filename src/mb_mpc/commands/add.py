"""Add songs to the queue."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def add(ctx: typer.Context, uris: list[str] = typer.Argument(help="Song or directory URIs")) -> None:
    """Add songs to the queue in a single command list."""
    app = use_context(ctx)
    try:
        with app.open_session() as session, session.command_list() as batch:
            for uri in uris:
                batch.add("add", uri)
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_added(len(uris))
