"""CLI entry point for mb-mpc."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from mb_mpc.app_context import AppContext
from mb_mpc.commands.add import add
from mb_mpc.commands.call import call
from mb_mpc.commands.current import current
from mb_mpc.commands.idle import idle
from mb_mpc.commands.pause import pause
from mb_mpc.commands.play import next_, play, previous, skip
from mb_mpc.commands.playlists import playlists
from mb_mpc.commands.queue import queue
from mb_mpc.commands.stats import stats
from mb_mpc.commands.status import status
from mb_mpc.commands.stop import stop
from mb_mpc.config import Config
from mb_mpc.log import setup_logging
from mb_mpc.output import Output

app = TyperPlus(package_name="mb-mpc")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    host: Annotated[str | None, typer.Option("--host", help="MPD host or unix socket path.")] = None,
    port: Annotated[int | None, typer.Option("--port", help="MPD port.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Echo protocol activity to stderr.")] = False,
) -> None:
    """Control a Music Player Daemon from the terminal."""
    cfg = Config.build(data_dir, host=host, port=port)
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, verbose=verbose)
    ctx.obj = AppContext(out=Output(json_mode=json_output), cfg=cfg)


# Status
app.command(aliases=["s"])(status)
app.command()(stats)
app.command(aliases=["q"])(queue)
app.command()(current)

# Playback
app.command(aliases=["p"])(play)
app.command("next", aliases=["n"])(next_)
app.command()(previous)
app.command()(skip)
app.command()(pause)
app.command()(stop)

# Queue and playlists
app.command()(add)
app.command()(playlists)

# Protocol
app.command()(idle)
app.command()(call)
