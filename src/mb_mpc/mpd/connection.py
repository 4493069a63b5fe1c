"""Blocking socket transport and response framing for the MPD line protocol."""

import contextlib
import ipaddress
import logging
import socket
import time

from mb_mpc.mpd.errors import (
    CommandFailed,
    CommandTimeout,
    ConnectionFailed,
    ConnectionNotEstablished,
    DisconnectionFailed,
    WriteFailed,
)
from mb_mpc.mpd.protocol import ACK, NEWLINE, OK, parse_ack, parse_greeting

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600

# Read buffer size
_BUFSIZE = 65536


class Connection:
    """One blocking duplex connection to an MPD daemon.

    A host starting with ``/`` is treated as the path of a unix domain socket.
    The socket is opened lazily: ``execute`` establishes it when needed.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        password: str | None = None,
        *,
        timeout: float = 30.0,
        connect_timeout: float = 5.0,
    ) -> None:
        """Initialize connection parameters without opening the socket.

        Args:
            host: Hostname, IP address, or unix socket path.
            port: TCP port (ignored for unix sockets).
            password: Password sent by ``Session.authenticate``.
            timeout: Default read deadline for one command, in seconds.
            connect_timeout: Deadline for the TCP handshake and the greeting.

        """
        self.host = host
        self.port = port
        self.password = password
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.version = ""
        self._sock: socket.socket | None = None
        self._buffer = b""
        self._connected = False
        self._read_timeout = timeout

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"Connection({self.address!r}, {state})"

    @property
    def connected(self) -> bool:
        """Whether the greeting was received and the socket is still open."""
        return self._connected

    @property
    def address(self) -> str:
        """Printable daemon address."""
        return self.host if self.is_unix else f"{self.host}:{self.port}"

    @property
    def is_unix(self) -> bool:
        """Whether the host names a unix domain socket."""
        return self.host.startswith("/")

    # --- Lifecycle ---

    def establish(self) -> None:
        """Open the socket and consume the daemon greeting. No-op when already connected.

        Raises:
            ConnectionFailed: Socket error, ``ACK`` greeting, or no greeting before EOF or deadline.

        """
        if self._connected:
            return
        logger.info("Connecting to MPD at %s", self.address)
        try:
            self._sock = self._open_socket()
        except OSError as e:
            logger.warning("Connection to %s failed: %s", self.address, e)
            raise ConnectionFailed(f"Connection failed: {e}") from e
        self._buffer = b""
        try:
            self.version = self._read_greeting()
        except ConnectionFailed:
            with contextlib.suppress(DisconnectionFailed):
                self.close()
            raise
        self._connected = True
        logger.info("Connected to MPD %s at %s", self.version, self.address)

    def close(self) -> None:
        """Close the socket. Idempotent; local state is always reset.

        Raises:
            DisconnectionFailed: The underlying socket close raised.

        """
        sock, self._sock = self._sock, None
        self._connected = False
        self._buffer = b""
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            raise DisconnectionFailed(f"Disconnection failed: {e}") from e
        logger.info("Disconnected from MPD at %s", self.address)

    def set_timeout(self, seconds: float) -> None:
        """Set the read deadline applied to the next exchange."""
        self._read_timeout = seconds

    def is_local(self) -> bool:
        """Check whether the daemon runs on this machine. First matching rule wins."""
        if self.is_unix or (self._sock is not None and self._sock.family == socket.AF_UNIX):
            return True
        with contextlib.suppress(OSError):
            if self.host == socket.gethostbyname(socket.gethostname()):
                return True
        if self.host == "localhost":
            return True
        try:
            return ipaddress.ip_address(self.host).is_loopback
        except ValueError:
            return False

    # --- Exchange ---

    def execute(self, line: str, timeout: float | None = None) -> list[str]:
        """Send one command line and collect its response lines up to the terminator.

        Args:
            line: Serialized command (may hold several lines for a command list).
            timeout: Read deadline in seconds; defaults to ``self.timeout``.

        Raises:
            ConnectionNotEstablished: Not connected and establishing failed.
            WriteFailed: The socket rejected the write.
            CommandTimeout: No terminator before the deadline; the connection is closed.
            CommandFailed: The daemon answered with ``ACK``; the connection stays open.
            ConnectionFailed: The daemon closed the connection mid-response.

        """
        self._ensure_connected()
        self._write(line)
        self.set_timeout(self.timeout if timeout is None else timeout)
        try:
            return self._read_response(_command_name(line))
        finally:
            self.set_timeout(self.timeout)

    def send(self, line: str) -> None:
        """Send a command the daemon answers by hanging up, then close locally."""
        self._ensure_connected()
        self._write(line)
        self.close()

    # --- Private helpers ---

    def _ensure_connected(self) -> None:
        """Establish lazily, reporting failure as ConnectionNotEstablished."""
        if self._connected:
            return
        try:
            self.establish()
        except ConnectionFailed as e:
            raise ConnectionNotEstablished(str(e), ack=e.ack) from e

    def _open_socket(self) -> socket.socket:
        """Open a unix or TCP socket with the connect timeout."""
        if not self.is_unix:
            return socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.connect_timeout)
        try:
            sock.connect(self.host)
        except OSError:
            sock.close()
            raise
        return sock

    def _read_greeting(self) -> str:
        """Read lines until ``OK MPD <version>`` and return the canonical version."""
        deadline = time.monotonic() + self.connect_timeout
        while True:
            try:
                line = self._read_line(deadline)
            except TimeoutError as e:
                raise ConnectionFailed("Connection failed: no greeting from MPD") from e
            except OSError as e:
                raise ConnectionFailed(f"Connection failed: {e}") from e
            if line is None:
                raise ConnectionFailed("Connection failed")
            if line.startswith(OK):
                return parse_greeting(line)
            if line.startswith(ACK):
                ack = parse_ack(line)
                message = ack.message if ack is not None else line
                logger.warning("MPD refused the connection: %s", line)
                raise ConnectionFailed(f"Connection failed: {message}", ack=ack)

    def _write(self, line: str) -> None:
        """Write one newline-terminated line, closing the socket on failure."""
        if self._sock is None:
            raise ConnectionNotEstablished("The connection to MPD has not been established")
        try:
            self._sock.sendall((line + NEWLINE).encode())
        except OSError as e:
            logger.warning("Failed to write %r to MPD: %s", _command_name(line), e)
            with contextlib.suppress(DisconnectionFailed):
                self.close()
            raise WriteFailed(f"Failed to write to MPD socket: {e}") from e

    def _read_response(self, command: str) -> list[str]:
        """Collect lines until ``OK`` or ``ACK``; tear the socket down on timeout or EOF."""
        deadline = time.monotonic() + self._read_timeout
        lines: list[str] = []
        while True:
            try:
                line = self._read_line(deadline)
            except TimeoutError as e:
                logger.warning("Command %r timed out after %ss, dropping connection", command, self._read_timeout)
                with contextlib.suppress(DisconnectionFailed):
                    self.close()
                raise CommandTimeout(f"Command timed out: {command}") from e
            except OSError as e:
                with contextlib.suppress(DisconnectionFailed):
                    self.close()
                raise ConnectionFailed(f"Connection lost: {e}") from e
            if line is None:
                logger.warning("MPD closed the connection during %r", command)
                with contextlib.suppress(DisconnectionFailed):
                    self.close()
                raise ConnectionFailed("Connection closed by MPD")
            if not line:
                continue
            if line == OK:
                return lines
            if line.startswith(ACK):
                ack = parse_ack(line)
                if ack is not None:
                    logger.info("Command %r failed: %s", command, line)
                    raise CommandFailed(f"Command failed: {ack.message}", ack=ack)
            lines.append(line)

    def _read_line(self, deadline: float) -> str | None:
        """Read one line before the deadline; None on EOF.

        Raises:
            TimeoutError: The deadline passed before a full line arrived.

        """
        if self._sock is None:
            return None
        while b"\n" not in self._buffer:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError
            self._sock.settimeout(remaining)
            chunk = self._sock.recv(_BUFSIZE)
            if not chunk:
                return None
            self._buffer += chunk
        raw, _, self._buffer = self._buffer.partition(b"\n")
        return raw.decode(errors="replace").strip()


def _command_name(line: str) -> str:
    """First word of a command line, for log messages."""
    return line.split(maxsplit=1)[0] if line.strip() else line
