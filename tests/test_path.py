"""Tests for path parsing and formatting."""

import pytest

from pentenv.errors import PathSyntaxError
from pentenv.path import Field, Index, format_path, parse_path


class TestParsePath:
    """Tests for parse_path."""

    def test_single_field(self):
        assert parse_path("ip") == (Field("ip"),)

    def test_field_and_index(self):
        """Fields and indices mix freely after the leading field."""
        assert parse_path("creds[0].password") == (Field("creds"), Index(0), Field("password"))

    def test_nested_indices(self):
        """Consecutive indices address nested arrays."""
        assert parse_path("a[0][12]") == (Field("a"), Index(0), Index(12))

    def test_dotted_fields(self):
        assert parse_path("a.b.c") == (Field("a"), Field("b"), Field("c"))

    def test_field_names_allow_other_punctuation(self):
        """Anything but delimiters and whitespace is part of a name."""
        assert parse_path("api-key.x_y:z") == (Field("api-key"), Field("x_y:z"))

    def test_surrounding_whitespace_stripped(self):
        assert parse_path("  ip \n") == (Field("ip"),)

    @pytest.mark.parametrize(
        "text, message",
        [
            ("", "path is empty"),
            ("   ", "path is empty"),
            ("[0]", "path must start with a field name"),
            (".a", "path must start with a field name"),
            ("a.", "empty field name"),
            ("a..b", "empty field name"),
            ("a.[0]", "empty field name"),
            ("a[", "unclosed '['"),
            ("a[0", "unclosed '['"),
            ("a[]", "index must be a non-negative integer"),
            ("a[-1]", "index must be a non-negative integer"),
            ("a[x]", "index must be a non-negative integer"),
            ("a[1.5]", "index must be a non-negative integer"),
            ("a]", "unexpected character"),
            ("a b", "unexpected character"),
            ("a[0]b", "unexpected character"),
        ],
    )
    def test_malformed_paths(self, text, message):
        """Malformed paths raise PathSyntaxError with a reason."""
        with pytest.raises(PathSyntaxError) as exc_info:
            parse_path(text)
        assert message in str(exc_info.value)

    def test_error_position(self):
        """The error points at the offending character."""
        with pytest.raises(PathSyntaxError) as exc_info:
            parse_path("creds[0]x")
        assert exc_info.value.position == 8
        assert exc_info.value.text == "creds[0]x"

    def test_non_ascii_digits_rejected(self):
        """Only ASCII digits form an index."""
        with pytest.raises(PathSyntaxError):
            parse_path("a[١]")

    def test_lone_surrogate_rejected(self):
        """A key that UTF-8 cannot store is not a valid field name."""
        with pytest.raises(PathSyntaxError) as exc_info:
            parse_path("a.b\udc00")
        assert exc_info.value.position == 3


class TestFormatPath:
    """Tests for format_path."""

    @pytest.mark.parametrize(
        "text",
        ["ip", "creds[0].password", "hosts[2].tags[0]", "a[0][1].b.c"],
    )
    def test_canonical_paths_round_trip(self, text):
        assert format_path(parse_path(text)) == text

    def test_format_prefix(self):
        steps = parse_path("a.b[3].c")
        assert format_path(steps[:3]) == "a.b[3]"
        assert format_path(()) == ""

    def test_step_str(self):
        assert str(Field("ip")) == "ip"
        assert str(Index(4)) == "[4]"
