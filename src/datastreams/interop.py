'''
Optional conversions between `Table` and external tabular structures
(`polars.DataFrame`, `pyarrow.Table`), kept apart from the transfer core.

'''
from __future__ import annotations

from typing import Any

import polars as pl
import pyarrow as pa

from datastreams.schema import Schema
from datastreams.table import NullableColumn, Table


def table_to_frame(table: Table) -> pl.DataFrame:
    '''
    Copy every column into a `pl.DataFrame`, nulls are preserved and
    `PtrString` columns become owned `pl.String` columns.

    '''
    series = [
        col.to_polars(name)
        for name, col in zip(table.header, table.data, strict=True)
    ]
    return pl.DataFrame(series)


def table_from_frame(frame: pl.DataFrame, other: Any = None) -> Table:
    rows, _ = frame.shape
    schema = Schema(frame.columns, frame.dtypes, rows)
    data = [
        NullableColumn.from_values(series.to_list(), series.dtype)
        for series in frame.get_columns()
    ]
    return Table(schema, data, other)


def table_to_arrow(table: Table) -> pa.Table:
    return table_to_frame(table).to_arrow()


def table_from_arrow(arrow_table: pa.Table, other: Any = None) -> Table:
    return table_from_frame(pl.DataFrame(arrow_table), other)
