"""MPD wire format: command serialization and response line grammar.

Plain text, one line per message, ``\\n`` terminated.

Command:   play "3"
Success:   OK
Error:     ACK [50@0] {play} Bad song index
Greeting:  OK MPD 0.23.5
Batch:     command_list_begin / <commands> / command_list_end
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum

OK = "OK"
ACK = "ACK"
NEWLINE = "\n"

CLIST_BEGIN = "command_list_begin"
CLIST_END = "command_list_end"

_ACK_RE = re.compile(r"^ACK \[(\d+)@(\d+)\] \{(.*?)\}\s?(.*)$")
_PAIR_RE = re.compile(r"^(.*?):\s(.*)$")
_PATCH_RE = re.compile(r"^(\d+\.\d+)\.\d+$")


class AckCode(IntEnum):
    """Error codes the daemon reports in ``ACK`` lines."""

    NOT_LIST = 1
    ARG = 2
    PASSWORD = 3
    PERMISSION = 4
    UNKNOWN = 5
    NO_EXIST = 50
    PLAYLIST_MAX = 51
    SYSTEM = 52
    PLAYLIST_LOAD = 53
    UPDATE_ALREADY = 54
    PLAYER_SYNC = 55
    EXIST = 56


@dataclass(frozen=True)
class Ack:
    """Parsed ``ACK [code@index] {command} message`` line."""

    error_code: int
    command_index: int
    command: str
    message: str


def serialize_command(name: str, args: Sequence[object] = ()) -> str:
    """Build a wire line from a command name and its arguments.

    List and tuple arguments are dropped, never valid wire values. Every other
    argument is stringified, has embedded double quotes escaped, and is quoted.
    """
    line = str(name).strip()
    quoted = [
        '"' + str(arg).replace('"', '\\"') + '"' for arg in args if not isinstance(arg, (list, tuple))
    ]
    if quoted:
        line += " " + " ".join(quoted)
    return line


def command_list(lines: Iterable[str]) -> str:
    """Wrap serialized command lines into one bracketed batch."""
    return NEWLINE.join([CLIST_BEGIN, *lines, CLIST_END])


def parse_ack(line: str) -> Ack | None:
    """Parse an error line, or return None if the line does not follow the ACK grammar."""
    match = _ACK_RE.match(line)
    if match is None:
        return None
    code, index, command, message = match.groups()
    return Ack(error_code=int(code), command_index=int(index), command=command, message=message)


def parse_pair(line: str) -> tuple[str, str] | None:
    """Split a ``key: value`` line, or return None if it is not one."""
    match = _PAIR_RE.match(line)
    if match is None:
        return None
    return match.group(1), match.group(2)


def parse_greeting(line: str) -> str:
    """Return the canonical protocol version from an ``OK MPD <version>`` greeting.

    The daemon reports the patch level unreliably, so it is replaced with ``x``
    (``0.20.0`` becomes ``0.20.x``). Returns an empty string when no version is present.
    """
    parts = line.split()
    if len(parts) < 3:
        return ""
    return _PATCH_RE.sub(r"\1.x", parts[2])
