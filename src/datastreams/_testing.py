from datetime import datetime, timedelta, timezone
from typing import Any, Generator, Sequence

import polars as pl

from datastreams.errors import SinkClosedError, SourceExhaustedError
from datastreams.interfaces import SinkState, SourceState
from datastreams.schema import Schema
from datastreams.stream import register_stream, stream_rows
from datastreams.table import Table


epoch = datetime(year=1970, month=1, day=1, tzinfo=timezone.utc)

block_time_step = timedelta(seconds=0.5)


block_schema = Schema(
    ('number', 'timestamp', 'hash'),
    (pl.Int64, pl.Datetime, pl.String),
    metadata={'chain': 'testnet'},
)


def block_stream(
    start_number: int = 0,
    end_number: int = 1_000,
    start_date: datetime = epoch,
    time_step: timedelta = block_time_step,
) -> Generator[tuple[int, datetime, str], None, None]:
    total_blocks = end_number - start_number
    if total_blocks <= 0:
        raise ValueError('start_number must be < than end_number')

    h: str = '00' * 32

    for i in range(total_blocks):
        hex_i = hex(i)[2:]  # hex i repr without 0x
        yield (
            start_number + i,
            start_date + (time_step * i),
            hex_i + h[len(hex_i):],
        )


def block_table(end_number: int = 1_000) -> Table:
    return Table.from_array(
        list(block_stream(end_number=end_number)),
        header=block_schema.header,
    )


class RowListSource:
    '''
    Minimal third party style source: rows held in a python list, pulled one
    at a time through `read_row`.

    '''

    def __init__(self, schema: Schema, rows: Sequence[Sequence[Any]]) -> None:
        self.schema = schema.replace(rows=len(rows))
        self._rows = list(rows)
        self._pos = 0
        self._state = SourceState.BEGINNING if self._rows else SourceState.DONE

    @property
    def read_state(self) -> SourceState:
        return self._state

    def reset(self) -> None:
        self._pos = 0
        self._state = SourceState.BEGINNING if self._rows else SourceState.DONE

    def is_done(self) -> bool:
        return self._state is SourceState.DONE

    def read_row(self) -> Sequence[Any]:
        if self._state is SourceState.DONE:
            raise SourceExhaustedError('RowListSource exhausted')

        row = self._rows[self._pos]
        self._pos += 1
        self._state = (
            SourceState.DONE if self._pos == len(self._rows) else SourceState.READING
        )
        return row


class RowListSink:
    '''
    Collects written rows into a python list.

    '''

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.rows: list[tuple] = []
        self._state = SinkState.BEGINNING

    @property
    def write_state(self) -> SinkState:
        return self._state

    def write_row(self, row: Sequence[Any]) -> None:
        if self._state is SinkState.DONE:
            raise SinkClosedError('RowListSink closed')

        self.rows.append(tuple(row))
        self._state = SinkState.WRITING

    def close(self) -> None:
        self._state = SinkState.DONE


register_stream(RowListSource, Table, stream_rows)
register_stream(RowListSource, RowListSink, stream_rows)
register_stream(Table, RowListSink, stream_rows)
