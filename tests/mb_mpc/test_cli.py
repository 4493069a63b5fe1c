"""End-to-end CLI tests against a fake daemon."""

import json
import socket

import pytest
from typer.testing import CliRunner

from mb_mpc.cli import app

runner = CliRunner()


@pytest.fixture
def invoke(mpd, tmp_path):
    """Run the CLI in JSON mode against the fake daemon and decode its envelope."""

    def run(*args):
        base = ["--json", "--data-dir", str(tmp_path), "--host", mpd.host, "--port", str(mpd.port)]
        result = runner.invoke(app, [*base, *args])
        return result.exit_code, json.loads(result.stdout)

    return run


class TestStatusCommands:
    """Read-only commands."""

    def test_status(self, invoke, mpd):
        """status reports the player and the current track."""
        mpd.set_queue(3, song=2)
        exit_code, data = invoke("status")
        assert exit_code == 0
        assert data["data"]["status"]["state"] == "play"
        assert data["data"]["track"]["Title"] == "Song 2"

    def test_queue(self, invoke, mpd):
        """queue lists every track and the current index."""
        mpd.set_queue(3, song=1)
        _, data = invoke("queue")
        assert len(data["data"]["tracks"]) == 3
        assert data["data"]["current"] == 1

    def test_complete_queue_marks_current(self, invoke, mpd):
        """With incomplete tracks left out, the marker still follows the playing track."""
        mpd.set_queue(3, song=2)
        tracks = [
            "file: music/0.flac", "Album: Album", "Title: Song 0", "Track: 1", "Time: 200", "Pos: 0", "Id: 10",
            "file: music/1.flac", "Artist: A", "Album: Album", "Title: Song 1", "Track: 2", "Time: 200", "Pos: 1", "Id: 11",
            "file: music/2.flac", "Artist: A", "Album: Album", "Title: Song 2", "Track: 3", "Time: 200", "Pos: 2", "Id: 12",
        ]  # fmt: skip
        mpd.on("playlistinfo", *tracks)
        _, data = invoke("queue", "--complete")
        assert [t["Title"] for t in data["data"]["tracks"]] == ["Song 1", "Song 2"]
        assert data["data"]["current"] == 1

    def test_stats(self, invoke, mpd):
        """stats reports the counters."""
        mpd.set_queue(1)
        _, data = invoke("stats")
        assert data["data"]["stats"]["artists"] == 3

    def test_playlists(self, invoke, mpd):
        """playlists lists the stored playlist names."""
        mpd.on("listplaylists", "playlist: chill", "playlist: rock")
        _, data = invoke("playlists")
        assert data["data"] == {"playlists": ["chill", "rock"]}


class TestPlaybackCommands:
    """Commands that change playback."""

    def test_skip_is_one_based(self, invoke, mpd):
        """skip 1 plays queue position 0."""
        mpd.set_queue(3, song=2)
        exit_code, _ = invoke("skip", "1")
        assert exit_code == 0
        assert 'play "0"' in mpd.received

    def test_add_batches(self, invoke, mpd):
        """add sends every URI in one command list."""
        mpd.set_queue(0, state="stop")
        _, data = invoke("add", "a.flac", "b.flac")
        assert data["data"] == {"added": 2}
        start = mpd.received.index("command_list_begin")
        assert mpd.received[start:] == ["command_list_begin", 'add "a.flac"', 'add "b.flac"', "command_list_end"]


class TestCallCommand:
    """Arbitrary command passthrough."""

    def test_known(self, invoke, mpd):
        """A known command prints its normalized result."""
        mpd.on("find", "file: a.flac", "Title: A")
        _, data = invoke("call", "find", "Artist", "Can")
        assert data["data"] == {"command": "find", "result": [{"file": "a.flac", "Title": "A"}]}

    def test_unknown(self, invoke):
        """An unknown command fails before connecting."""
        exit_code, data = invoke("call", "bogus")
        assert exit_code == 1
        assert data["error"] == "unknown_command"

    def test_daemon_error(self, invoke, mpd):
        """A daemon ACK becomes an error envelope."""
        mpd.fail("seekcur", "ACK [2@0] {seekcur} Not playing")
        exit_code, data = invoke("call", "seekcur", "10")
        assert exit_code == 1
        assert data["error"] == "command_failed"
        assert data["message"] == "Command failed: Not playing"


class TestConnectionErrors:
    """Failures reaching the daemon."""

    def test_refused(self, tmp_path):
        """An unreachable daemon exits with a connection error."""
        with socket.socket() as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]
        base = ["--json", "--data-dir", str(tmp_path), "--host", "127.0.0.1", "--port", str(port)]
        result = runner.invoke(app, [*base, "status"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == "connection_failed"
