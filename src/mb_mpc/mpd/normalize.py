"""Normalize raw response lines into structured results.

The shape of a response is decided by the command that produced it, never by
the lines themselves: ``status`` is one record, ``find`` is a list of
records, ``list`` is a list of values, ``play`` is just success.
"""

import logging
from collections.abc import Iterable, Sequence

from mb_mpc.mpd.commands import CommandSpec, Shape, lookup
from mb_mpc.mpd.errors import EssentialTagsMissing
from mb_mpc.mpd.protocol import parse_pair

logger = logging.getLogger(__name__)

Record = dict[str, str]
Result = bool | Record | list[str] | list[Record]

# Daemon-assigned fields
ESSENTIAL_MPD_TAGS = ("file", "Pos", "Id")
# Descriptive tags every track is expected to carry
ESSENTIAL_ID3_TAGS = ("Artist", "Album", "Title", "Track", "Time")
ESSENTIAL_TAGS = ESSENTIAL_MPD_TAGS + ESSENTIAL_ID3_TAGS


def normalize(
    lines: Sequence[str], command: str, *, tag_filtering: bool = True, report_missing_tags: bool = False
) -> Result:
    """Convert the raw lines of one response according to the command's shape.

    Args:
        lines: Non-terminator response lines, in order.
        command: Name of the command that produced them.
        tag_filtering: Reduce track records to the essential tags.
        report_missing_tags: Raise if any track record lacks an essential tag.

    Raises:
        EssentialTagsMissing: Incomplete track records while ``report_missing_tags`` is set.

    """
    spec = lookup(command) or CommandSpec(Shape.MAP)
    match spec.shape:
        case Shape.BOOL:
            return True
        case Shape.VALUES:
            return values(lines, spec.value_key)
        case Shape.TRACKS:
            tracks, missing = chunk_records(lines, ESSENTIAL_TAGS, keep_extra=not tag_filtering)
            if missing and report_missing_tags:
                raise EssentialTagsMissing(_missing_message(command, missing), missing)
            return tracks
        case Shape.LIST:
            return split_records(lines)
        case Shape.MAP:
            records = split_records(lines)
            return records[-1] if records else {}


def values(lines: Iterable[str], key: str | None = None) -> list[str]:
    """Collect the values of ``key: value`` lines, optionally only those of one key."""
    result: list[str] = []
    for line in lines:
        pair = parse_pair(line)
        if pair is None:
            continue
        if key is None or pair[0] == key:
            result.append(pair[1])
    return result


def split_records(lines: Iterable[str]) -> list[Record]:
    """Split key/value lines into records, starting a new one whenever a key repeats."""
    records: list[Record] = []
    current: Record = {}
    for line in lines:
        pair = parse_pair(line)
        if pair is None:
            logger.debug("Skipping unparseable line: %r", line)
            continue
        key, value = pair
        if key in current:
            records.append(current)
            current = {}
        current[key] = value
    if current:
        records.append(current)
    return records


def chunk_records(
    lines: Iterable[str], essential: Sequence[str], *, keep_extra: bool = False
) -> tuple[list[Record], dict[str, list[str]]]:
    """Reassemble a flat key/value stream into per-item records.

    There is no record delimiter on the wire. Each record carries every
    essential field once, so an essential field that was already seen in the
    record under construction marks the start of the next record. Other
    fields never start a record and are copied only when ``keep_extra`` is set.

    Returns:
        The records in input order, and the identifier of every incomplete
        record mapped to the essential fields it lacks.

    """
    records: list[Record] = []
    missing: dict[str, list[str]] = {}
    checklist = dict.fromkeys(essential, False)
    current: Record = {}

    def close_record() -> None:
        unseen = [name for name, seen in checklist.items() if not seen]
        if unseen:
            missing[_identify(current, len(records))] = unseen
        records.append(current)

    for line in lines:
        pair = parse_pair(line)
        if pair is None:
            continue
        key, value = pair
        if key not in checklist:
            if keep_extra:
                current[key] = value
            continue
        if checklist[key]:
            close_record()
            checklist = dict.fromkeys(essential, False)
            current = {}
        checklist[key] = True
        current[key] = value

    if current:
        close_record()
    return records, missing


def is_complete(record: Record, required: Iterable[str]) -> bool:
    """Check whether a record carries every required field."""
    return all(name in record for name in required)


def _identify(record: Record, index: int) -> str:
    """Identifier used when reporting an incomplete record."""
    return record.get("Id") or record.get("file") or f"#{index}"


def _missing_message(command: str, missing: dict[str, list[str]]) -> str:
    details = "; ".join(f"track {ident} is missing {', '.join(fields)}" for ident, fields in missing.items())
    return f'The command "{command}" returned tracks missing essential tags ({", ".join(ESSENTIAL_TAGS)}). {details}.'
