"""List the play queue."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError, PlayerStatus, Record


def queue(
    ctx: typer.Context,
    *,
    complete: bool = typer.Option(default=False, help="Only tracks that carry every essential tag"),
) -> None:
    """List the play queue, marking the current track."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            tracks = session.complete_queue() if complete else session.queue
            player = session.player
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_tracks(tracks, current_index(tracks, player))


def current_index(tracks: list[Record], player: PlayerStatus) -> int | None:
    """Index in ``tracks`` of the current song, matched by queue position."""
    if not player.active:
        return None
    position = str(player.song)
    return next((index for index, track in enumerate(tracks) if track.get("Pos") == position), None)
