"""List stored playlists."""

from typing import cast

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def playlists(ctx: typer.Context) -> None:
    """List stored playlists."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            names = cast(list[str], session.call("listplaylists"))
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_list("playlists", names)
