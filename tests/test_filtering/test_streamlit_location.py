"""Tests for the Streamlit query-parameter location."""

import pytest

from src.filtering import streamlit_location
from src.filtering.store import FilterValueStore
from src.filtering.streamlit_location import StreamlitQueryParamsLocation


class FakeQueryParams:
    """Stand-in for st.query_params (a str-to-str mapping)."""

    def __init__(self, params=None):
        self.params = dict(params or {})

    def to_dict(self):
        return dict(self.params)

    def clear(self):
        self.params.clear()

    def update(self, params):
        self.params.update(params)


class FakeStreamlit:
    def __init__(self, params=None):
        self.query_params = FakeQueryParams(params)


@pytest.fixture
def fake_st(monkeypatch):
    fake = FakeStreamlit()
    monkeypatch.setattr(streamlit_location, "st", fake)
    return fake


class TestStreamlitQueryParamsLocation:
    """Tests for StreamlitQueryParamsLocation."""

    def test_read_encodes_params(self, fake_st):
        fake_st.query_params.params = {"status": '["active"]', "search": '"alpha"'}

        query = StreamlitQueryParamsLocation().read()

        assert query == "search=%22alpha%22&status=%5B%22active%22%5D"

    def test_write_replaces_params(self, fake_st):
        fake_st.query_params.params = {"stale": "1"}

        StreamlitQueryParamsLocation().write("type=%22ipo%22&verified=true")

        assert fake_st.query_params.params == {"type": '"ipo"', "verified": "true"}

    def test_write_empty_clears(self, fake_st):
        fake_st.query_params.params = {"type": '"ipo"'}

        StreamlitQueryParamsLocation().write("")

        assert fake_st.query_params.params == {}

    def test_store_round_trip(self, fake_st, deals_fields):
        """Test a store writing to and hydrating from the page URL."""
        writer = FilterValueStore(deals_fields, location=StreamlitQueryParamsLocation())
        writer.set_values({"status": ["active", "pending"], "search": "alpha beta"})

        reader = FilterValueStore(deals_fields, location=StreamlitQueryParamsLocation())
        reader.hydrate_from_location()

        assert fake_st.query_params.params["status"] == '["active","pending"]'
        assert reader.get_snapshot() == writer.get_snapshot()
