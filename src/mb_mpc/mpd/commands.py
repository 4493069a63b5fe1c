"""Known MPD commands: argument arity and expected response shape.

``Session.call`` only dispatches names found in ``COMMANDS``; the normalizer
picks its parsing strategy from the same entry.
"""

from dataclasses import dataclass
from enum import StrEnum


class Shape(StrEnum):
    """How a command's response lines are normalized."""

    BOOL = "bool"  # bare success, payload discarded
    MAP = "map"  # one flat key/value record
    LIST = "list"  # records split on repeated keys
    VALUES = "values"  # values of key/value lines, in order
    TRACKS = "tracks"  # track records split with the essential-tag checklist


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Arity and response shape of one command."""

    shape: Shape
    min_args: int = 0
    max_args: int | None = 0  # None = unbounded
    value_key: str | None = None  # VALUES only: keep just this key
    expects_reply: bool = True  # False: daemon drops the connection instead of answering
    long_poll: bool = False  # blocks until the daemon reports a change

    def accepts(self, count: int) -> bool:
        """Check whether ``count`` arguments fit this command."""
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args


def _bool(min_args: int = 0, max_args: int | None = 0) -> CommandSpec:
    return CommandSpec(Shape.BOOL, min_args, max_args)


COMMANDS: dict[str, CommandSpec] = {
    # Queue
    "add": _bool(1, 2),
    "addid": CommandSpec(Shape.MAP, 1, 2),
    "clear": _bool(),
    "delete": _bool(1, 1),
    "deleteid": _bool(1, 1),
    "move": _bool(2, 2),
    "moveid": _bool(2, 2),
    "playlist": CommandSpec(Shape.VALUES),
    "playlistfind": CommandSpec(Shape.LIST, 1, None),
    "playlistid": CommandSpec(Shape.MAP, 0, 1),
    "playlistinfo": CommandSpec(Shape.TRACKS, 0, 1),
    "playlistsearch": CommandSpec(Shape.LIST, 1, None),
    "plchanges": CommandSpec(Shape.TRACKS, 1, 2),
    "plchangesposid": CommandSpec(Shape.LIST, 1, 2),
    "shuffle": _bool(0, 1),
    "swap": _bool(2, 2),
    "swapid": _bool(2, 2),
    # Playback
    "next": _bool(),
    "pause": _bool(0, 1),
    "play": _bool(0, 1),
    "playid": _bool(0, 1),
    "previous": _bool(),
    "seek": _bool(2, 2),
    "seekcur": _bool(1, 1),
    "seekid": _bool(2, 2),
    "stop": _bool(),
    # Playback options
    "consume": _bool(1, 1),
    "crossfade": _bool(1, 1),
    "mixrampdb": _bool(1, 1),
    "mixrampdelay": _bool(1, 1),
    "random": _bool(1, 1),
    "repeat": _bool(1, 1),
    "replay_gain_mode": _bool(1, 1),
    "replay_gain_status": CommandSpec(Shape.MAP),
    "setvol": _bool(1, 1),
    "single": _bool(1, 1),
    # Status
    "clearerror": _bool(),
    "currentsong": CommandSpec(Shape.MAP),
    "idle": CommandSpec(Shape.VALUES, 0, None, value_key="changed", long_poll=True),
    "stats": CommandSpec(Shape.MAP),
    "status": CommandSpec(Shape.MAP),
    # Stored playlists
    "listplaylist": CommandSpec(Shape.VALUES, 1, 1),
    "listplaylistinfo": CommandSpec(Shape.LIST, 1, 1),
    "listplaylists": CommandSpec(Shape.VALUES, value_key="playlist"),
    "load": _bool(1, 3),
    "playlistadd": _bool(2, 3),
    "playlistclear": _bool(1, 1),
    "playlistdelete": _bool(2, 2),
    "playlistmove": _bool(3, 3),
    "rename": _bool(2, 2),
    "rm": _bool(1, 1),
    "save": _bool(1, 1),
    # Music database
    "count": CommandSpec(Shape.MAP, 1, None),
    "find": CommandSpec(Shape.LIST, 1, None),
    "findadd": _bool(1, None),
    "list": CommandSpec(Shape.VALUES, 1, None),
    "listall": CommandSpec(Shape.LIST, 0, 1),
    "listallinfo": CommandSpec(Shape.LIST, 0, 1),
    "lsinfo": CommandSpec(Shape.LIST, 0, 1),
    "rescan": CommandSpec(Shape.MAP, 0, 1),
    "search": CommandSpec(Shape.LIST, 1, None),
    "update": CommandSpec(Shape.MAP, 0, 1),
    # Stickers: list and find repeat sticker lines, one record each; find takes up to 6 args
    "sticker": CommandSpec(Shape.LIST, 3, 6),
    # Connection
    "close": CommandSpec(Shape.BOOL, expects_reply=False),
    "kill": CommandSpec(Shape.BOOL, expects_reply=False),
    "password": _bool(1, 1),
    "ping": _bool(),
    # Outputs
    "disableoutput": _bool(1, 1),
    "enableoutput": _bool(1, 1),
    "outputs": CommandSpec(Shape.LIST),
    # Reflection
    "commands": CommandSpec(Shape.VALUES, value_key="command"),
    "decoders": CommandSpec(Shape.LIST),
    "notcommands": CommandSpec(Shape.VALUES, value_key="command"),
    "tagtypes": CommandSpec(Shape.VALUES, 0, None, value_key="tagtype"),
    "urlhandlers": CommandSpec(Shape.VALUES, value_key="handler"),
}


def lookup(name: str) -> CommandSpec | None:
    """Return the spec for a command name, or None if the command is not allowed."""
    return COMMANDS.get(name.strip())
