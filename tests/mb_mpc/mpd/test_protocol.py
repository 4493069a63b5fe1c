"""Tests for MPD wire format serialization and line parsing."""

from mb_mpc.mpd.protocol import AckCode, command_list, parse_ack, parse_greeting, parse_pair, serialize_command


class TestSerializeCommand:
    """serialize_command() builds one wire line."""

    def test_quotes_every_argument(self):
        """Arguments are quoted and space-joined after the name."""
        assert serialize_command("find", ["Artist", "Pink Floyd"]) == 'find "Artist" "Pink Floyd"'

    def test_bare_command(self):
        """No arguments leaves just the name."""
        assert serialize_command("status") == "status"

    def test_name_is_trimmed(self):
        """Whitespace around the name is stripped."""
        assert serialize_command("  play ", [1]) == 'play "1"'

    def test_numbers_are_stringified(self):
        """Numeric arguments are quoted like strings."""
        assert serialize_command("seekcur", [42.5]) == 'seekcur "42.5"'

    def test_escapes_double_quotes(self):
        """Embedded double quotes are escaped with a backslash."""
        assert serialize_command("add", ['say "hi".mp3']) == 'add "say \\"hi\\".mp3"'

    def test_drops_sequence_arguments(self):
        """List and tuple arguments never reach the wire."""
        assert serialize_command("add", ["a.flac", ["nested"], ("t",)]) == 'add "a.flac"'

    def test_only_sequence_arguments(self):
        """Dropping every argument leaves the bare name."""
        assert serialize_command("status", [["x"]]) == "status"


class TestCommandList:
    """command_list() brackets a batch."""

    def test_framing(self):
        """Lines are wrapped in begin/end markers, newline separated."""
        batch = command_list(['add "a"', 'add "b"'])
        assert batch == 'command_list_begin\nadd "a"\nadd "b"\ncommand_list_end'


class TestParseAck:
    """parse_ack() reads error lines."""

    def test_full_line(self):
        """All four parts are extracted."""
        ack = parse_ack("ACK [50@1] {play} Bad song index")
        assert ack is not None
        assert ack.error_code == AckCode.NO_EXIST
        assert ack.command_index == 1
        assert ack.command == "play"
        assert ack.message == "Bad song index"

    def test_empty_command_and_message(self):
        """Greeting-time errors may omit the command name and message."""
        ack = parse_ack("ACK [5@0] {}")
        assert ack is not None
        assert ack.error_code == AckCode.UNKNOWN
        assert ack.command == ""
        assert ack.message == ""

    def test_not_an_ack(self):
        """Other lines return None."""
        assert parse_ack("OK") is None
        assert parse_ack("ACK something else") is None


class TestParsePair:
    """parse_pair() splits key/value lines."""

    def test_simple(self):
        """Key and value are split at the first colon-space."""
        assert parse_pair("volume: 80") == ("volume", "80")

    def test_value_with_colon(self):
        """Only the first separator splits."""
        assert parse_pair("Title: Time: The Song") == ("Title", "Time: The Song")

    def test_not_a_pair(self):
        """Lines without a separator return None."""
        assert parse_pair("garbage") is None


class TestParseGreeting:
    """parse_greeting() extracts a canonical version."""

    def test_patch_replaced(self):
        """The patch component becomes x."""
        assert parse_greeting("OK MPD 0.20.0") == "0.20.x"
        assert parse_greeting("OK MPD 0.23.15") == "0.23.x"

    def test_two_component_version(self):
        """A version without patch level is kept as is."""
        assert parse_greeting("OK MPD 0.21") == "0.21"

    def test_no_version(self):
        """A bare OK yields an empty version."""
        assert parse_greeting("OK") == ""
