"""MPD protocol core: connection, command codec, response normalization, session."""

from mb_mpc.mpd.connection import Connection as Connection
from mb_mpc.mpd.errors import MpdError as MpdError
from mb_mpc.mpd.normalize import Record as Record
from mb_mpc.mpd.session import CommandList as CommandList
from mb_mpc.mpd.session import PlayerStatus as PlayerStatus
from mb_mpc.mpd.session import ServerStats as ServerStats
from mb_mpc.mpd.session import Session as Session
