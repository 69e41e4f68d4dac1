"""Apply a filter value set to tabular records.

This is the consumer side of the filter engine: given the fields of a module
and the current values, narrow a DataFrame down to the matching rows.
"""

from datetime import timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from config.logging_config import get_logger

from .dependencies import compute_visibility
from .fields import FieldDescriptor, FieldType
from .values import is_empty_value

logger = get_logger("matching")


def _text_mask(df: pd.DataFrame, field: FieldDescriptor, term: str) -> Optional[pd.Series]:
    needle = term.lower()
    if field.column:
        if field.column not in df.columns:
            logger.warning("Column %s for filter %s not found in records; skipping", field.column, field.id)
            return None
        columns = [field.column]
    else:
        columns = [c for c in df.columns if df[c].dtype == object or pd.api.types.is_string_dtype(df[c])]

    if not columns:
        return pd.Series(False, index=df.index)

    hits = [
        df[c].astype(str).str.lower().str.contains(needle, regex=False, na=False)
        for c in columns
    ]
    return pd.concat(hits, axis=1).any(axis=1)


def _date_series(series: pd.Series) -> pd.Series:
    dates = pd.to_datetime(series, errors="coerce", utc=True)
    return dates.dt.tz_convert(None)


def _field_mask(df: pd.DataFrame, field: FieldDescriptor, value: Any) -> Optional[pd.Series]:
    if field.type is FieldType.TEXT_SEARCH:
        return _text_mask(df, field, value)

    column = field.record_column
    if column not in df.columns:
        logger.warning("Column %s for filter %s not found in records; skipping", column, field.id)
        return None
    series = df[column]

    if field.type in (FieldType.SINGLE_SELECT, FieldType.BOOLEAN):
        return series == value
    if field.type is FieldType.MULTI_SELECT:
        return series.isin(list(value))
    if field.type is FieldType.NUMERIC_RANGE:
        low, high = value
        return pd.to_numeric(series, errors="coerce").between(low, high)
    if field.type is FieldType.DATE_RANGE:
        start, end = value
        dates = _date_series(series)
        mask = dates.notna()
        if start is not None:
            mask &= dates >= pd.Timestamp(start)
        if end is not None:
            # Inclusive of the whole end day
            mask &= dates < pd.Timestamp(end) + timedelta(days=1)
        return mask
    if field.type is FieldType.RATING:
        return pd.to_numeric(series, errors="coerce") >= value

    return None


def apply_filters(
    df: pd.DataFrame,
    fields: Sequence[FieldDescriptor],
    values: Mapping[str, Any],
    respect_visibility: bool = True,
) -> pd.DataFrame:
    """
    Return the rows of ``df`` matching every active filter.

    Args:
        df: Records to filter.
        fields: Field descriptors of the module.
        values: Current filter values.
        respect_visibility: Ignore values of fields that are currently
            hidden or disabled by their dependencies.

    Returns:
        Filtered copy of ``df``.
    """
    eligible = compute_visibility(fields, values) if respect_visibility else {f.id for f in fields}
    mask = pd.Series(True, index=df.index)

    for field in fields:
        value = values.get(field.id)
        if is_empty_value(value) or field.is_empty(value):
            continue
        if field.id not in eligible:
            logger.debug("Filter %s is not eligible; ignoring its value", field.id)
            continue

        field_mask = _field_mask(df, field, value)
        if field_mask is not None:
            mask &= field_mask.fillna(False).astype(bool)

    unknown = set(values) - {f.id for f in fields}
    if unknown:
        logger.debug("Ignoring values for undeclared filters: %s", sorted(unknown))

    return df[mask].copy()


def filter_records(
    records: Iterable[Mapping[str, Any]],
    fields: Sequence[FieldDescriptor],
    values: Mapping[str, Any],
) -> List[Dict[str, Any]]:
    """Convenience wrapper of :func:`apply_filters` for lists of dicts."""
    rows = list(records)
    if not rows:
        return []
    df = pd.DataFrame.from_records(rows)
    matched = apply_filters(df, fields, values)
    return [rows[i] for i in matched.index]
