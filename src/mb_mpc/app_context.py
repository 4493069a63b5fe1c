"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from mb_mpc.config import Config
from mb_mpc.connect import open_session
from mb_mpc.mpd import Session
from mb_mpc.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Output mode and configuration resolved by the CLI callback."""

    out: Output
    cfg: Config

    def open_session(self) -> Session:
        """Connect to the configured daemon and load the first snapshot."""
        return open_session(self.cfg)


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
