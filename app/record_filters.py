import json
import math

import pandas as pd
from boto3.dynamodb.types import Binary

from attribute_values import STRUCTURED_TYPES, stringify
from classifier import StoreJSONEncoder


def available_columns(records):
    """Columns are taken from the first scanned record."""
    if not records:
        return []
    return list(records[0].keys())


def _cell_text(value):
    # Missing attributes show up as NaN once the records are framed
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ''
    if isinstance(value, STRUCTURED_TYPES) or isinstance(value, Binary):
        return json.dumps(value, cls=StoreJSONEncoder, ensure_ascii=False)
    return stringify(value)


def filter_records(records, search_term='', column_filters=None):
    """
    Case-insensitive substring filtering of scanned records.

    search_term must appear in at least one attribute of a record; every
    non-empty entry of column_filters must appear in that column. Returns the
    matching records in their original order.
    """
    column_filters = {c: v for c, v in (column_filters or {}).items() if v}
    if not records:
        return []
    if not search_term and not column_filters:
        return list(records)

    # object dtype keeps ints from turning into floats next to missing cells
    frame = pd.DataFrame(records, dtype=object)
    if frame.columns.empty:
        return []

    text = frame.map(_cell_text).apply(lambda col: col.str.lower())
    mask = pd.Series(True, index=frame.index)

    if search_term:
        term = search_term.lower()
        mask &= text.apply(lambda col: col.str.contains(term, regex=False)).any(axis=1)

    for column, value in column_filters.items():
        if column not in text.columns:
            return []
        mask &= text[column].str.contains(value.lower(), regex=False)

    return [records[i] for i in frame.index[mask.to_numpy()]]
