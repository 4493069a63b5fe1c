"""Shared fixtures: a scripted fake MPD daemon served over real sockets."""

import socketserver
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest

from mb_mpc.mpd.connection import Connection
from mb_mpc.mpd.session import Session

GREETING = "OK MPD 0.20.0"
HANGUP = object()  # reply marker: close the connection instead of answering


class FakeMpd:
    """Scripted daemon state shared by every connection of one server."""

    def __init__(self) -> None:
        self.greeting = GREETING
        self.replies: dict[str, object] = {}  # exact line or command name -> raw reply, None (stall) or HANGUP
        self.received: list[str] = []
        self.connections = 0
        self.host = ""
        self.port = 0

    def on(self, key: str, *lines: str) -> None:
        """Answer ``key`` with the given lines followed by OK."""
        self.replies[key] = "".join(f"{line}\n" for line in lines) + "OK\n"

    def fail(self, key: str, ack: str) -> None:
        """Answer ``key`` with an ACK line."""
        self.replies[key] = ack + "\n"

    def stall(self, key: str) -> None:
        """Never answer ``key``."""
        self.replies[key] = None

    def hang_up(self, key: str) -> None:
        """Close the connection when ``key`` arrives."""
        self.replies[key] = HANGUP

    def reply(self, line: str) -> object:
        if line in self.replies:
            return self.replies[line]
        name = line.split(" ", 1)[0]
        return self.replies.get(name, "OK\n")

    def set_queue(self, length: int, *, song: int = 0, state: str = "play", elapsed: int = 0) -> None:
        """Script status, stats and playlistinfo for a queue of complete tracks."""
        tracks: list[str] = []
        for pos in range(length):
            tracks += [
                f"file: music/{pos}.flac",
                "Artist: Artist",
                "Album: Album",
                f"Title: Song {pos}",
                f"Track: {pos + 1}",
                "Time: 200",
                f"Pos: {pos}",
                f"Id: {pos + 10}",
            ]
        self.on("playlistinfo", *tracks)
        status = ["volume: 80", "repeat: 0", "random: 1", "single: 0", "consume: 0", f"playlistlength: {length}", f"state: {state}"]
        if state != "stop":
            status += [f"song: {song}", f"songid: {song + 10}", f"time: {elapsed}:200", f"elapsed: {elapsed}.000"]
        self.on("status", *status)
        self.on("stats", "artists: 3", "albums: 4", "songs: 5", "uptime: 100", "playtime: 50", "db_playtime: 1000", "db_update: 1700000000")


class _Handler(socketserver.StreamRequestHandler):
    """Greets, then answers every line according to the script."""

    def handle(self) -> None:
        fake: FakeMpd = self.server.fake  # type: ignore[attr-defined]
        fake.connections += 1
        self.wfile.write(f"{fake.greeting}\n".encode())
        if not fake.greeting.startswith("OK"):
            return
        in_list = False
        for raw in self.rfile:
            line = raw.decode().rstrip("\n")
            fake.received.append(line)
            if line == "command_list_begin":
                in_list = True
                continue
            if in_list and line != "command_list_end":
                continue
            in_list = False
            reply = fake.reply(line)
            if reply is HANGUP:
                return
            if reply is None:
                continue
            self.wfile.write(str(reply).encode())


class _TCPServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


class _UnixServer(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True


def _serve(server: socketserver.BaseServer, fake: FakeMpd) -> Iterator[FakeMpd]:
    server.fake = fake  # type: ignore[attr-defined]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield fake
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def mpd() -> Iterator[FakeMpd]:
    """Fake daemon listening on a loopback TCP port."""
    fake = FakeMpd()
    server = _TCPServer(("127.0.0.1", 0), _Handler)
    fake.host, fake.port = server.server_address[:2]
    yield from _serve(server, fake)


@pytest.fixture
def mpd_unix(tmp_path: Path) -> Iterator[FakeMpd]:
    """Fake daemon listening on a unix domain socket."""
    fake = FakeMpd()
    sock_path = tmp_path / "mpd.sock"
    server = _UnixServer(str(sock_path), _Handler)
    fake.host = str(sock_path)
    yield from _serve(server, fake)


@pytest.fixture
def connection(mpd: FakeMpd) -> Iterator[Connection]:
    """Unopened connection to the TCP fake daemon."""
    conn = Connection(mpd.host, mpd.port, timeout=2, connect_timeout=2)
    yield conn
    conn.close()


@pytest.fixture
def session(connection: Connection) -> Session:
    """Session over an unopened connection to the TCP fake daemon."""
    return Session(connection)
