"""Playback navigation: play, next, previous, skip."""

import typer

from mb_mpc.app_context import use_context
from mb_mpc.mpd import MpdError


def play(
    ctx: typer.Context,
    *,
    resume: bool = typer.Option(default=True, help="Resume a paused track from its elapsed position"),
) -> None:
    """Start or resume playback of the current track."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            track = session.play(resume=resume)
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_track(track)


def next_(ctx: typer.Context) -> None:
    """Play the next track, wrapping to the start of the queue."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            track = session.next()
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_track(track)


def previous(ctx: typer.Context) -> None:
    """Play the previous track, wrapping to the end of the queue."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            track = session.previous()
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_track(track)


def skip(ctx: typer.Context, position: int = typer.Argument(help="Queue position, starting at 1")) -> None:
    """Jump to a queue position."""
    app = use_context(ctx)
    try:
        with app.open_session() as session:
            track = session.skip(position - 1)
    except MpdError as e:
        app.out.print_error_and_exit(e.code, str(e))
    app.out.print_track(track)
