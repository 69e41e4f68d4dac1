"""Location port backed by Streamlit's browser query parameters."""

from urllib.parse import parse_qsl, quote, urlencode

import streamlit as st

from config.logging_config import get_logger

logger = get_logger("streamlit_location")


class StreamlitQueryParamsLocation:
    """
    Bind a filter store to the page URL of a Streamlit app.

    Usage:
        store = FilterValueStore(fields, location=StreamlitQueryParamsLocation())
        store.hydrate_from_location()
    """

    def read(self) -> str:
        params = st.query_params.to_dict()
        return urlencode(sorted(params.items()), quote_via=quote)

    def write(self, query: str) -> None:
        params = dict(parse_qsl(query, keep_blank_values=True))
        st.query_params.clear()
        if params:
            st.query_params.update(params)
        logger.debug("Wrote %d query params", len(params))
