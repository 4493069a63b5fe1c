"""High-level MPD session: allow-listed commands, cached status, playback navigation."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Self, cast

from mb_mpc.mpd.commands import CommandSpec, lookup
from mb_mpc.mpd.connection import Connection
from mb_mpc.mpd.errors import (
    BadPassword,
    CommandFailed,
    ConnectionNotEstablished,
    DisconnectionFailed,
    InvalidArguments,
    NoPassword,
)
from mb_mpc.mpd.normalize import ESSENTIAL_TAGS, Record, Result, is_complete, normalize
from mb_mpc.mpd.protocol import command_list, serialize_command

logger = logging.getLogger(__name__)

Arg = str | int | float | list[str] | tuple[str, ...]

DEFAULT_IDLE_TIMEOUT = 86400.0

# States in which the status carries a current song and a play position
_ACTIVE_STATES = ("play", "pause")


@dataclass(frozen=True)
class PlayerStatus:
    """Scalar fields derived from the ``status`` snapshot."""

    state: str = "stop"
    song: int = 0  # queue position of the current song
    song_id: int = 0
    elapsed: int = 0
    duration: int = 0
    volume: int = 0
    repeat: bool = False
    random: bool = False
    single: str = "0"
    consume: bool = False
    crossfade: int = 0
    playlist_version: int = 0
    playlist_length: int = 0
    next_song: int = 0
    next_song_id: int = 0
    bitrate: int = 0
    audio: str = ""

    @property
    def active(self) -> bool:
        """Whether a song is playing or paused."""
        return self.state in _ACTIVE_STATES

    @staticmethod
    def from_status(status: Mapping[str, str]) -> PlayerStatus:
        """Derive player fields from a status snapshot. Absent fields default to zero or empty.

        The current song and the play position are only meaningful while a song is
        playing or paused; they are zero otherwise.
        """
        state = status.get("state", "stop")
        active = state in _ACTIVE_STATES
        if "time" in status:
            elapsed, _, duration = status["time"].partition(":")
        else:
            elapsed, duration = status.get("elapsed", ""), status.get("duration", "")
        return PlayerStatus(
            state=state,
            song=_int(status.get("song")) if active else 0,
            song_id=_int(status.get("songid")) if active else 0,
            elapsed=_int(elapsed) if active else 0,
            duration=_int(duration) if active else 0,
            volume=_int(status.get("volume")),
            repeat=status.get("repeat") == "1",
            random=status.get("random") == "1",
            single=status.get("single", "0"),
            consume=status.get("consume") == "1",
            crossfade=_int(status.get("xfade")),
            playlist_version=_int(status.get("playlist")),
            playlist_length=_int(status.get("playlistlength")),
            next_song=_int(status.get("nextsong")),
            next_song_id=_int(status.get("nextsongid")),
            bitrate=_int(status.get("bitrate")),
            audio=status.get("audio", ""),
        )


@dataclass(frozen=True)
class ServerStats:
    """Counters from the ``stats`` snapshot."""

    uptime: int = 0
    playtime: int = 0
    artists: int = 0
    albums: int = 0
    songs: int = 0
    db_playtime: int = 0
    db_update: int = 0

    @staticmethod
    def from_stats(stats: Mapping[str, str]) -> ServerStats:
        """Read counters from a stats snapshot, defaulting absent ones to zero."""
        return ServerStats(
            uptime=_int(stats.get("uptime")),
            playtime=_int(stats.get("playtime")),
            artists=_int(stats.get("artists")),
            albums=_int(stats.get("albums")),
            songs=_int(stats.get("songs")),
            db_playtime=_int(stats.get("db_playtime")),
            db_update=_int(stats.get("db_update")),
        )


class Session:
    """One client session over one connection. Not safe for concurrent callers.

    Status, statistics and queue are cached snapshots: they change only when
    ``refresh`` runs (navigation helpers refresh before and after acting).
    """

    def __init__(
        self,
        connection: Connection,
        *,
        tag_filtering: bool = True,
        report_missing_tags: bool = False,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    ) -> None:
        """Initialize the session around a connection.

        Args:
            connection: Transport to the daemon, established or not.
            tag_filtering: Reduce track records to the essential tags.
            report_missing_tags: Raise EssentialTagsMissing for incomplete track records.
            idle_timeout: Read deadline for long-poll commands such as ``idle``.

        """
        self.connection = connection
        self.tag_filtering = tag_filtering
        self.report_missing_tags = report_missing_tags
        self.idle_timeout = idle_timeout
        self.status: Record = {}
        self.stats: Record = {}
        self.queue: list[Record] = []
        self.player = PlayerStatus()
        self.server = ServerStats()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        """Whether the underlying connection is live."""
        return self.connection.connected

    @property
    def version(self) -> str:
        """Protocol version reported in the greeting."""
        return self.connection.version

    def is_local(self) -> bool:
        """Whether the daemon runs on this machine."""
        return self.connection.is_local()

    def close(self) -> None:
        """Close the connection."""
        self.connection.close()

    # --- Commands ---

    def call(self, command: str, *args: Arg) -> Result | None:
        """Run an allow-listed command and return its normalized result.

        Unknown command names are ignored and return None.

        Raises:
            InvalidArguments: Argument count does not fit the command.
            MpdError: Any transport or daemon failure (see ``Connection.execute``).

        """
        spec = lookup(command)
        if spec is None:
            logger.debug("Ignoring unknown command %r", command)
            return None
        line = build_line(command, spec, args)
        if not spec.expects_reply:
            logger.info("Sending %r, MPD will close the connection", command)
            self.connection.send(line)
            return True
        timeout = self.idle_timeout if spec.long_poll else None
        lines = self.connection.execute(line, timeout)
        return normalize(
            lines, command, tag_filtering=self.tag_filtering, report_missing_tags=self.report_missing_tags
        )

    def command_list(self) -> CommandList:
        """Start a batch of commands sent in one round trip."""
        return CommandList(self.connection)

    def authenticate(self) -> None:
        """Send the configured password.

        Raises:
            ConnectionNotEstablished: No live connection.
            NoPassword: No password configured; the connection is closed.
            BadPassword: The daemon rejected the password; the connection is closed.

        """
        if not self.connection.connected:
            raise ConnectionNotEstablished("The connection to MPD has not been established")
        password = self.connection.password
        if not password:
            self._close_quietly()
            raise NoPassword("Must supply a password to authenticate to MPD")
        try:
            self.call("password", password)
        except CommandFailed as e:
            self._close_quietly()
            raise BadPassword("MPD did not accept the provided password", ack=e.ack) from e
        logger.info("Authenticated to MPD at %s", self.connection.address)

    def refresh(self) -> PlayerStatus:
        """Re-read statistics, status and the queue, and recompute derived fields."""
        self.stats = cast(Record, self.call("stats"))
        self.status = cast(Record, self.call("status"))
        self.queue = cast(list[Record], self.call("playlistinfo"))
        self.player = PlayerStatus.from_status(self.status)
        self.server = ServerStats.from_stats(self.stats)
        return self.player

    def idle(self, *subsystems: str) -> list[str]:
        """Block until the daemon reports a change and return the changed subsystems."""
        return cast(list[str], self.call("idle", *subsystems))

    # --- Navigation ---

    def play(self, *, resume: bool = True) -> Record:
        """Play the current song, resuming from the elapsed position when there is one."""
        self.refresh()
        if resume and self.player.elapsed > 0:
            logger.info("Resuming song %d at %ds", self.player.song, self.player.elapsed)
            self.call("seekcur", self.player.elapsed)
            self.call("pause", 0)
            return self.current_track()
        return self._play_at(self.player.song)

    def next(self) -> Record:
        """Play the next song, wrapping to the start of the queue."""
        self.refresh()
        return self._play_at(self.player.song + 1)

    def previous(self) -> Record:
        """Play the previous song, wrapping to the end of the queue."""
        self.refresh()
        return self._play_at(self.player.song - 1)

    def skip(self, position: int) -> Record:
        """Play the song at a queue position (modulo the queue length)."""
        self.refresh()
        return self._play_at(position)

    def current_track(self) -> Record:
        """Refresh and return the queue record of the current song, or an empty dict."""
        self.refresh()
        if 0 <= self.player.song < len(self.queue):
            return dict(self.queue[self.player.song])
        return {}

    # --- Queries ---

    def complete_queue(self) -> list[Record]:
        """Refresh and return the queued tracks that carry every descriptive tag."""
        self.refresh()
        required = [tag for tag in ESSENTIAL_TAGS if tag not in ("Id", "Pos")]
        return [track for track in self.queue if is_complete(track, required)]

    def playlist_exists(self, name: str) -> bool:
        """Check whether a stored playlist with this name exists."""
        return name in cast(list[str], self.call("listplaylists"))

    def first_track(self, album: str) -> str | None:
        """Return the file of the first track of an album, or None if nothing matches."""
        tracks = cast(list[Record], self.call("find", "album", album))
        return tracks[0].get("file") if tracks else None

    # --- Private helpers ---

    def _play_at(self, position: int) -> Record:
        """Play a queue position wrapped modulo the queue length."""
        if not self.queue:
            logger.info("Queue is empty, nothing to play")
            return {}
        self.call("play", position % len(self.queue))
        return self.current_track()

    def _close_quietly(self) -> None:
        with contextlib.suppress(DisconnectionFailed):
            self.connection.close()


class CommandList:
    """Commands collected client-side and sent as one ``command_list_begin`` batch.

    The daemon's reply to a batch is returned as raw lines, not normalized per command.
    Used as a context manager, the batch is sent on a clean exit.
    """

    def __init__(self, connection: Connection) -> None:
        """Initialize an empty batch bound to a connection."""
        self._connection = connection
        self._lines: list[str] = []
        self.response: list[str] | None = None

    def __len__(self) -> int:
        return len(self._lines)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        if exc_type is None and self._lines:
            self.send()

    def add(self, command: str, *args: Arg) -> Self:
        """Queue a command. Unknown command names are ignored."""
        spec = lookup(command)
        if spec is None:
            logger.debug("Ignoring unknown command %r in command list", command)
            return self
        self._lines.append(build_line(command, spec, args))
        return self

    def send(self) -> list[str]:
        """Transmit the batch and return the daemon's raw response lines."""
        if not self._lines:
            return []
        logger.debug("Sending command list of %d commands", len(self._lines))
        lines, self._lines = self._lines, []
        self.response = self._connection.execute(command_list(lines))
        return self.response


def build_line(command: str, spec: CommandSpec, args: tuple[Arg, ...]) -> str:
    """Check arity and serialize one command.

    Raises:
        InvalidArguments: Argument count (list arguments excluded) does not fit ``spec``.

    """
    wire_args = [arg for arg in args if not isinstance(arg, (list, tuple))]
    if not spec.accepts(len(wire_args)):
        upper = "any" if spec.max_args is None else str(spec.max_args)
        msg = f'Command "{command}" takes {spec.min_args} to {upper} arguments, got {len(wire_args)}'
        raise InvalidArguments(msg)
    return serialize_command(command, wire_args)


def _int(value: str | None) -> int:
    """Parse a numeric status field, tolerating fractions and garbage."""
    if not value:
        return 0
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return 0
