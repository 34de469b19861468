from __future__ import annotations

import logging
import warnings
from typing import Any, Iterable, Sequence

from datastreams._utils import DataStreamsWarning, synth_header
from datastreams.dtypes import DataTypeExt, dtype_name, same_dtype
from datastreams.errors import (
    ColumnIndexError,
    ColumnTypeError,
    SchemaMismatchError,
    SinkClosedError,
    SourceExhaustedError,
    UnsupportedOperationError,
)
from datastreams.interfaces import Source, SinkState, SourceState
from datastreams.schema import Schema
from datastreams.stream import register_stream
from datastreams.table.column import NullableColumn as NullableColumn


log = logging.getLogger(__name__)


class Table:
    '''
    In-memory columnar store, one `NullableColumn` per schema column.

    A `Table` is both a source and a sink: it can be the destination of one
    `stream` and the origin of the next, and is the default place to
    materialize any source into memory with `stream(source, Table)`.

    `other` is an opaque slot for caller metadata or back references, never
    interpreted here.

    '''

    def __init__(
        self,
        schema: Schema | None = None,
        data: Sequence[NullableColumn] | None = None,
        other: Any = None,
    ) -> None:
        schema = Schema() if schema is None else schema
        self.schema = schema
        self.other = other

        # null slots allocated from the row hint, not data
        self._preallocated = data is None
        if data is None:
            rows = schema.rows
            data = [NullableColumn(t, rows) for t in schema.types]

        self.data: list[NullableColumn] = list(data)

        if len(self.data) != schema.cols:
            warnings.warn(
                f'Table has {len(self.data)} columns but its schema declares {schema.cols}',
                DataStreamsWarning,
                stacklevel=2,
            )

        elif any(len(col) != schema.rows for col in self.data):
            warnings.warn(
                f'Table column lengths {[len(c) for c in self.data]} differ '
                f'from schema rows {schema.rows}',
                DataStreamsWarning,
                stacklevel=2,
            )

        self._read_pos = 0
        self._read_state = self._initial_read_state()

        self._write_pos = 0
        self._write_state = SinkState.BEGINNING

    # alternative constructors

    @staticmethod
    def from_header(
        header: Iterable[Any],
        types: Iterable[DataTypeExt],
        rows: int = 0,
        other: Any = None,
    ) -> Table:
        return Table(Schema(header, types, rows), other=other)

    @staticmethod
    def from_types(
        types: Iterable[DataTypeExt],
        rows: int = 0,
        other: Any = None,
    ) -> Table:
        return Table(Schema.from_types(types, rows), other=other)

    @staticmethod
    def from_source(source: Source, other: Any = None) -> Table:
        '''
        Allocate an empty table shaped like `source`, data is not copied,
        `stream` into it afterwards.

        '''
        return Table(source.schema, other=other)

    @staticmethod
    def from_array(
        array: Sequence[Sequence[Any]],
        header: Iterable[Any] | None = None,
        other: Any = None,
    ) -> Table:
        '''
        Build from a rectangular sequence of rows, each column type is
        inferred from its first (non null) cell.

        '''
        rows = len(array)
        cols = len(array[0]) if rows else 0

        for i, row in enumerate(array):
            if len(row) != cols:
                raise ValueError(
                    f'Table.from_array expects a rectangular array, row {i} '
                    f'has {len(row)} cells, expected {cols}'
                )

        data = [
            NullableColumn.from_values(row[j] for row in array)
            for j in range(cols)
        ]

        header = tuple(header) if header is not None else ()
        if not header:
            header = synth_header(cols)

        schema = Schema(header, (col.dtype for col in data), rows)
        return Table(schema, data, other)

    # shape

    @property
    def header(self) -> tuple[str, ...]:
        return self.schema.header

    @property
    def types(self) -> tuple[DataTypeExt, ...]:
        return self.schema.types

    def size(self, dim: int | None = None) -> tuple[int, int] | int:
        return self.schema.size(dim)

    # column & cell access

    def _resolve(self, j: int | str) -> int:
        return self.schema.index(j) if isinstance(j, str) else j

    def column(self, j: int | str, dtype: DataTypeExt | None = None) -> NullableColumn:
        '''
        Column at position `j` (or named `j`), checked against `dtype`, or
        against the schema type when `dtype` is not given.

        '''
        j = self._resolve(j)
        cols = self.schema.cols
        if not 0 <= j < cols:
            raise ColumnIndexError(j, cols)

        col = self.unsafe_column(j)
        expected = self.schema.types[j] if dtype is None else dtype
        if not same_dtype(col.dtype, expected):
            raise ColumnTypeError(
                f'Column {j} holds {dtype_name(col.dtype)}, not {dtype_name(expected)}'
            )

        return col

    def unsafe_column(self, j: int, dtype: DataTypeExt | None = None) -> NullableColumn:
        '''
        Hot path variant of `column`, no bounds or type check is done, the
        caller guarantees both. `dtype` is accepted for signature parity and
        ignored.

        '''
        return self.data[j]

    def __getitem__(self, key: tuple[int | slice, int | str | slice]) -> Any:
        match key:
            case (_, slice()):
                raise UnsupportedOperationError(
                    'row-level indexing not supported by Table, access columns '
                    'individually or convert it with '
                    '`datastreams.interop.table_to_frame` for more involved '
                    'data manipulation needs'
                )

            case (i, j):
                return self.column(j)[i]

        raise UnsupportedOperationError(
            f'Table indexing expects [row, column], got {key!r}'
        )

    def __setitem__(self, key: tuple[int, int | str], value: Any) -> None:
        i, j = key
        self.column(j)[i] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented

        return self.schema == other.schema and self.data == other.data

    __hash__ = None

    def __repr__(self) -> str:
        rows, cols = self.size()
        return f'Table(rows={rows}, cols={cols}, header={list(self.header)})'

    # source role

    def _stored_rows(self) -> int:
        return len(self.data[0]) if self.data else self.schema.rows

    def _initial_read_state(self) -> SourceState:
        return SourceState.BEGINNING if self._stored_rows() > 0 else SourceState.DONE

    @property
    def read_state(self) -> SourceState:
        return self._read_state

    def reset(self) -> None:
        self._read_pos = 0
        self._read_state = self._initial_read_state()

    def is_done(self) -> bool:
        return self._read_state is SourceState.DONE

    def _advance(self, n: int) -> None:
        self._read_pos += n
        self._read_state = (
            SourceState.DONE
            if self._read_pos >= self._stored_rows()
            else SourceState.READING
        )

    def read_row(self) -> tuple[Any, ...]:
        if self._read_state is SourceState.DONE:
            raise SourceExhaustedError('Table source is exhausted, reset() it first')

        i = self._read_pos
        row = tuple(col[i] for col in self.data)
        self._advance(1)
        return row

    def read_columns(self) -> list[NullableColumn]:
        '''
        All remaining rows as columns, leaves the source `DONE`.

        '''
        if self._read_state is SourceState.DONE:
            raise SourceExhaustedError('Table source is exhausted, reset() it first')

        pos = self._read_pos
        columns = [col[pos:] for col in self.data]
        self._advance(self._stored_rows() - pos)
        return columns

    # sink role

    @property
    def write_state(self) -> SinkState:
        return self._write_state

    def is_closed(self) -> bool:
        return self._write_state is SinkState.DONE

    def _check_writable(self, width: int) -> None:
        if self._write_state is SinkState.DONE:
            raise SinkClosedError('Table sink is closed')

        if width != self.schema.cols:
            raise SchemaMismatchError(
                f'write of {width} columns into table with {self.schema.cols}'
            )

    def write_row(self, row: Sequence[Any]) -> None:
        self._check_writable(len(row))

        i = self._write_pos
        for col, v in zip(self.data, row, strict=True):
            if i < len(col):
                col[i] = v

            else:
                col.append(v)

        self._write_pos += 1
        self._write_state = SinkState.WRITING

    def write_columns(self, columns: Sequence[NullableColumn]) -> None:
        self._check_writable(len(columns))

        lengths = {len(col) for col in columns}
        if len(lengths) > 1:
            raise ValueError(f'write_columns got columns of uneven lengths {sorted(lengths)}')

        n = lengths.pop() if lengths else 0
        start = self._write_pos
        for dst, src in zip(self.data, columns, strict=True):
            if len(dst) < start + n:
                dst.resize(start + n)

            for k, v in enumerate(src):
                dst[start + k] = v

        self._write_pos += n
        self._write_state = SinkState.WRITING

    def close(self) -> None:
        '''
        Finish the write side: trim the columns to the written row count,
        record it on the schema and make the table readable from its first
        row. Preallocated null rows are never exposed as data, a table
        allocated from a row hint and closed without writes ends up empty.
        A table built over existing columns keeps them when nothing was
        written.

        '''
        if self._write_state is SinkState.DONE:
            return

        if self._write_state is SinkState.WRITING or self._preallocated:
            for col in self.data:
                col.resize(self._write_pos)

            self.schema = self.schema.replace(rows=self._write_pos)

        self._write_state = SinkState.DONE
        self.reset()
        log.debug(f'table sink closed at size {self.size()}')


@register_stream(Table, Table)
def stream_table(source: Table, sink: Table) -> None:
    '''
    Column at a time copy between tables.

    '''
    if not source.is_done():
        sink.write_columns(source.read_columns())

