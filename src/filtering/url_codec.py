"""Query-string encoding of filter value sets.

Each active filter becomes one parameter, ``field_id=<JSON value>``:
multi-select lists appear as ``["a","b"]``, ranges as ``[10,20]``, booleans
as ``true``/``false`` and text as ``"hello"`` (quotes included). Inactive
filters are omitted; there is no sentinel for an explicitly cleared filter.
"""

import json
from typing import Any, Dict, Mapping, Protocol
from urllib.parse import parse_qsl, quote, urlencode

from config.logging_config import get_logger

from .values import FilterValueSet, is_empty_value

logger = get_logger("url_codec")


class LocationPort(Protocol):
    """Addressable location holding the current query string."""

    def read(self) -> str:
        ...

    def write(self, query: str) -> None:
        ...


class InMemoryLocation:
    """Location port backed by a plain string, for tests and headless use."""

    def __init__(self, query: str = ""):
        self.query = query
        self.writes = 0

    def read(self) -> str:
        return self.query

    def write(self, query: str) -> None:
        self.query = query
        self.writes += 1


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON; treat the parameter as a literal string
    raise ValueError(f"non-standard JSON constant {name}")


def encode_value(value: Any) -> str:
    """Serialize one filter value as compact JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def decode_value(raw: str) -> Any:
    """
    Parse one query parameter value.

    Falls back to the raw string when it is not valid JSON, so hand-typed
    parameters such as ``?search=alpha`` still work.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw


def encode(values: Mapping[str, Any]) -> str:
    """
    Encode a filter value set as a query string (without leading ``?``).

    Args:
        values: Filter values keyed by field id.

    Returns:
        Query string with one parameter per active filter, keys sorted.
    """
    params = []
    for key in sorted(values):
        value = values[key]
        if is_empty_value(value):
            continue
        try:
            params.append((key, encode_value(value)))
        except (TypeError, ValueError):
            logger.warning("Filter %s has a value that is not JSON-serializable; omitting", key)
    return urlencode(params, quote_via=quote)


def decode(query: str) -> FilterValueSet:
    """
    Decode a query string into a filter value set.

    Unknown keys are kept; filtering them against a schema is the caller's
    job. Empty parameters are skipped. When a key repeats, the last
    occurrence wins.
    """
    if query.startswith("?"):
        query = query[1:]

    values: Dict[str, Any] = {}
    for key, raw in parse_qsl(query, keep_blank_values=True):
        if raw == "":
            continue
        values[key] = decode_value(raw)
    return values
