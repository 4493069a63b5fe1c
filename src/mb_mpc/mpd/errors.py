"""Error taxonomy for the MPD client.

Every failure carries a machine-readable ``code`` (used by the CLI error
envelope) and, when the daemon sent one, the parsed ``ACK`` line.
"""

from mb_mpc.mpd.protocol import Ack


class MpdError(Exception):
    """Base class for all MPD client errors."""

    code = "mpd_error"

    def __init__(self, message: str, *, ack: Ack | None = None) -> None:
        """Initialize with a human-readable message.

        Args:
            message: Human-readable error description.
            ack: Parsed daemon error line, if the failure came from one.

        """
        super().__init__(message)
        self.ack = ack


class ConnectionFailed(MpdError):
    """Socket could not be opened or the greeting was not ``OK``."""

    code = "connection_failed"


class ConnectionNotEstablished(MpdError):
    """Operation needs a live connection and none could be established."""

    code = "connection_not_established"


class WriteFailed(MpdError):
    """The command line could not be written to the socket."""

    code = "write_failed"


class CommandTimeout(MpdError):
    """No terminator line arrived before the read deadline. The connection is discarded."""

    code = "timeout"


class CommandFailed(MpdError):
    """The daemon answered with an ``ACK`` line. The connection stays usable."""

    code = "command_failed"


class DisconnectionFailed(MpdError):
    """Closing the socket raised. Local state is reset regardless."""

    code = "disconnection_failed"


class BadPassword(MpdError):
    """The daemon rejected the configured password."""

    code = "bad_password"


class NoPassword(MpdError):
    """Authentication was requested without a configured password."""

    code = "no_password"


class InvalidArguments(MpdError):
    """Argument count does not fit the command's arity."""

    code = "invalid_arguments"


class EssentialTagsMissing(MpdError):
    """Track records are missing essential tags."""

    code = "essential_tags_missing"

    def __init__(self, message: str, missing: dict[str, list[str]]) -> None:
        """Initialize with the incomplete records.

        Args:
            message: Human-readable error description.
            missing: Record identifier mapped to the names of its missing fields.

        """
        super().__init__(message)
        self.missing = missing
