"""Build a ready-to-use session from the application configuration."""

import contextlib
import logging

from mb_mpc.config import Config
from mb_mpc.mpd.connection import Connection
from mb_mpc.mpd.errors import DisconnectionFailed
from mb_mpc.mpd.session import Session

logger = logging.getLogger(__name__)


def create_session(cfg: Config) -> Session:
    """Create a session for the configured daemon without connecting."""
    connection = Connection(cfg.host, cfg.port, cfg.password, timeout=cfg.timeout, connect_timeout=cfg.connect_timeout)
    return Session(
        connection,
        tag_filtering=cfg.tag_filtering,
        report_missing_tags=cfg.report_missing_tags,
        idle_timeout=cfg.idle_timeout,
    )


def open_session(cfg: Config) -> Session:
    """Connect, authenticate when a password is configured, and load the first snapshot.

    Raises:
        MpdError: Connecting, authenticating or refreshing failed. The connection is closed.

    """
    session = create_session(cfg)
    try:
        session.connection.establish()
        if cfg.password:
            session.authenticate()
        session.refresh()
    except BaseException:
        with contextlib.suppress(DisconnectionFailed):
            session.close()
        raise
    logger.debug("Session ready: MPD %s at %s (local: %s)", session.version, session.connection.address, session.is_local())
    return session
