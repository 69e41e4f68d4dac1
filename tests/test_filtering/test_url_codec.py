"""Tests for query-string encoding of filter values."""

from urllib.parse import unquote

from src.filtering.url_codec import (
    InMemoryLocation,
    decode,
    decode_value,
    encode,
    encode_value,
)


class TestEncode:
    """Tests for encode()."""

    def test_values_are_compact_json(self):
        """Test the wire form of each value kind."""
        assert encode_value(["a", "b"]) == '["a","b"]'
        assert encode_value([10, 20]) == "[10,20]"
        assert encode_value(True) == "true"
        assert encode_value("hello") == '"hello"'

    def test_inactive_values_omitted(self):
        query = encode({"search": "", "status": [], "type": None, "featured": False})

        assert query == "featured=false"

    def test_empty_set_encodes_to_empty_string(self):
        assert encode({}) == ""

    def test_keys_sorted_and_percent_encoded(self):
        query = encode({"status": ["active"], "search": "alpha beta"})

        assert query.startswith("search=")
        assert " " not in query
        assert unquote(query) == 'search="alpha beta"&status=["active"]'

    def test_non_serializable_value_skipped(self):
        query = encode({"search": "alpha", "bad": object()})

        assert query == "search=%22alpha%22"


class TestDecode:
    """Tests for decode()."""

    def test_example_query(self):
        """Test the documented example query string."""
        values = decode('status=["active","pending"]&search="alpha"')

        assert values == {"status": ["active", "pending"], "search": "alpha"}

    def test_plain_scalar_falls_back_to_string(self):
        values = decode("search=alpha&page=2")

        assert values == {"search": "alpha", "page": 2}

    def test_malformed_json_kept_as_string(self):
        values = decode('status=["active"')

        assert values == {"status": '["active"'}

    def test_nan_is_not_a_number(self):
        assert decode_value("NaN") == "NaN"
        assert decode_value("Infinity") == "Infinity"

    def test_leading_question_mark(self):
        assert decode("?featured=true") == {"featured": True}

    def test_blank_params_skipped(self):
        assert decode("search=&featured=true") == {"featured": True}

    def test_unknown_keys_preserved(self):
        """Test that decoding never rejects unrecognised keys."""
        values = decode('utm_source="mail"&status=["active"]')

        assert values == {"utm_source": "mail", "status": ["active"]}

    def test_empty_query(self):
        assert decode("") == {}


class TestRoundTrip:
    """decode(encode(x)) == x for typed values."""

    def test_round_trip(self):
        values = {
            "search": "alpha & omega = 100% \"quoted\"",
            "status": ["active", "pending"],
            "valueRange": [10, 2000000],
            "dateRange": ["2024-01-01", None],
            "featured": False,
            "forensicRating": 4,
            "price": 12.5,
            "label": "123",
            "unicode": "Zürich €",
        }

        assert decode(encode(values)) == values

    def test_round_trip_keeps_string_digits_as_strings(self):
        assert decode(encode({"search": "42"})) == {"search": "42"}
        assert decode(encode({"search": "true"})) == {"search": "true"}


class TestInMemoryLocation:
    def test_read_write(self):
        location = InMemoryLocation("a=1")

        assert location.read() == "a=1"
        location.write("b=2")
        assert location.read() == "b=2"
        assert location.writes == 1
