"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201

import dataclasses
import json
import sys
from typing import NoReturn

import typer

from mb_mpc.mpd.normalize import Record, Result
from mb_mpc.mpd.session import PlayerStatus, ServerStats

_STATE_LABELS = {"play": "playing", "pause": "paused", "stop": "stopped"}


def format_duration(seconds: int) -> str:
    """Render seconds as ``mm:ss``, or ``hh:mm:ss`` from one hour on."""
    seconds = max(seconds, 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def describe_track(track: Record) -> str:
    """One-line human-readable track description."""
    title = track.get("Title") or track.get("file", "")
    artist = track.get("Artist")
    return f"{artist} - {title}" if artist else title


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Status ---

    def print_status(self, player: PlayerStatus, track: Record) -> None:
        """Print player state and the current track."""
        lines = []
        if player.active:
            lines.append(f"[{_STATE_LABELS[player.state]}] {describe_track(track)}")
            position = f"#{player.song + 1}/{player.playlist_length}"
            lines.append(f"{position} {format_duration(player.elapsed)}/{format_duration(player.duration)}")
        lines.append(
            f"volume: {player.volume}%  repeat: {_on_off(player.repeat)}  random: {_on_off(player.random)}"
            f"  single: {player.single}  consume: {_on_off(player.consume)}"
        )
        self._success({"status": dataclasses.asdict(player), "track": track}, "\n".join(lines))

    def print_stats(self, stats: ServerStats) -> None:
        """Print daemon statistics."""
        message = "\n".join(
            [
                f"Artists:   {stats.artists}",
                f"Albums:    {stats.albums}",
                f"Songs:     {stats.songs}",
                f"Play time: {format_duration(stats.playtime)}",
                f"Uptime:    {format_duration(stats.uptime)}",
                f"DB time:   {format_duration(stats.db_playtime)}",
            ]
        )
        self._success({"stats": dataclasses.asdict(stats)}, message)

    # --- Queue ---

    def print_tracks(self, tracks: list[Record], current: int | None = None) -> None:
        """Print queued tracks, marking the current one."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"tracks": tracks, "current": current}}))
            return
        for index, track in enumerate(tracks):
            marker = ">" if index == current else " "
            length = format_duration(_seconds(track.get("Time")))
            print(f"{marker}{index + 1:4d}. {describe_track(track)} ({length})")

    def print_track(self, track: Record) -> None:
        """Print the track that is now current."""
        message = f"Now: {describe_track(track)}" if track else "Queue is empty."
        self._success({"track": track}, message)

    def print_added(self, count: int) -> None:
        """Print queue insertion confirmation."""
        self._success({"added": count}, f"Added {count} item(s) to the queue.")

    # --- Playback ---

    def print_paused(self) -> None:
        """Print pause toggle confirmation."""
        self._success({}, "Playback paused.")

    def print_stopped(self) -> None:
        """Print stop confirmation."""
        self._success({}, "Playback stopped.")

    # --- Misc ---

    def print_list(self, key: str, items: list[str]) -> None:
        """Print a list of names, one per line."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {key: items}}))
        else:
            for item in items:
                print(item)

    def print_result(self, command: str, result: Result) -> None:
        """Print the normalized result of an arbitrary command."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"command": command, "result": result}}))
            return
        if isinstance(result, dict):
            _print_record(result)
        elif isinstance(result, list):
            for index, item in enumerate(result):
                if isinstance(item, dict):
                    if index:
                        print()
                    _print_record(item)
                else:
                    print(item)
        else:
            print("OK")


def _print_record(record: Record) -> None:
    for key, value in record.items():
        print(f"{key}: {value}")


def _on_off(flag: bool) -> str:
    return "on" if flag else "off"


def _seconds(value: str | None) -> int:
    try:
        return int(float(value)) if value else 0
    except ValueError:
        return 0
