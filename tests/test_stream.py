import logging

import pytest
import polars as pl

from datastreams.errors import (
    IncompleteStreamError,
    NoStreamHandlerError,
    SourceExhaustedError,
)
from datastreams.interfaces import (
    RowSink,
    RowSource,
    Sink,
    SinkState,
    Source,
    SourceState,
    header,
    is_done,
    reset,
    schema,
    size,
    types,
)
from datastreams.schema import Schema
from datastreams.stream import (
    StreamRegistry,
    default_registry,
    stream,
    stream_rows,
)
from datastreams.table import Table, stream_table

from datastreams._testing import (
    RowListSink,
    RowListSource,
    block_schema,
    block_stream,
    block_table,
)


class SubTable(Table): ...


def test_table_satisfies_both_roles(ab_table):
    assert isinstance(ab_table, Source)
    assert isinstance(ab_table, Sink)
    assert isinstance(ab_table, RowSource)
    assert isinstance(ab_table, RowSink)
    assert not isinstance(object(), Source)


def test_generic_accessors(ab_table):
    assert schema(ab_table) is ab_table.schema
    assert header(ab_table) == ('a', 'b')
    assert types(ab_table) == (pl.Int64, pl.String)
    assert size(ab_table) == (2, 2)
    assert size(ab_table, 2) == 2

    ab_table.read_row()
    ab_table.read_row()
    assert is_done(ab_table)
    reset(ab_table)
    assert not is_done(ab_table)


def test_stream_into_table_kind(ab_table):
    sink = stream(ab_table, Table)

    assert isinstance(sink, Table)
    assert sink.schema == ab_table.schema
    assert sink.write_state is SinkState.DONE
    assert ab_table.read_state is SourceState.DONE
    assert sink == ab_table


def test_stream_kind_matches_explicit_sink(ab_table):
    lazy = stream(ab_table, Table)

    ab_table.reset()
    explicit = Table(schema(ab_table))
    returned = stream(ab_table, explicit)

    assert returned is explicit
    assert lazy == explicit


def test_pipeline_of_tables(ab_table):
    first = stream(ab_table, Table)
    second = stream(first, Table)

    assert second == ab_table
    assert first.is_done()


def test_stream_into_preallocated_table(ab_table):
    sink = Table(ab_table.schema.replace(rows=10))
    stream(ab_table, sink)

    assert sink.size() == (2, 2)
    assert list(sink.column(0)) == [1, 2]


def test_stream_empty_source():
    src = RowListSource(block_schema, [])
    assert src.is_done()

    sink = stream(src, Table)
    assert sink.size() == (0, 3)
    assert sink.is_closed()


def test_row_source_into_table():
    rows = list(block_stream(end_number=10))
    src = RowListSource(block_schema, rows)

    t = stream(src, Table)

    assert t.schema == block_schema.replace(rows=10)
    assert t[3, 'number'] == 3
    assert t[9, 'hash'] == rows[9][2]
    assert src.is_done()


def test_table_into_row_sink():
    sink = stream(block_table(5), RowListSink)

    assert sink.rows == list(block_stream(end_number=5))
    assert sink.write_state is SinkState.DONE


def test_row_source_into_row_sink():
    rows = [(1, 'a'), (2, 'b')]
    src = RowListSource(Schema(['n', 's'], [pl.Int64, pl.String]), rows)

    assert stream(src, RowListSink).rows == rows


def test_exhausted_source_must_be_reset(ab_table):
    first = stream(ab_table, Table)

    with pytest.raises(SourceExhaustedError, match='reset'):
        stream(ab_table, Table)

    ab_table.reset()
    assert stream(ab_table, Table) == first


def test_exhausted_row_source_must_be_reset():
    src = RowListSource(block_schema, list(block_stream(end_number=3)))
    stream(src, Table)

    sink = RowListSink(block_schema)
    with pytest.raises(SourceExhaustedError):
        stream(src, sink)

    assert sink.rows == []
    assert sink.write_state is SinkState.BEGINNING


def test_empty_source_into_preallocated_table():
    sink = Table(block_schema.replace(rows=4))
    stream(RowListSource(block_schema, []), sink)

    assert sink.size() == (0, 3)
    assert sink.is_closed()


def test_no_handler(ab_table):
    with pytest.raises(NoStreamHandlerError):
        stream(ab_table, Table, registry=StreamRegistry())

    with pytest.raises(LookupError):
        stream(RowListSource(block_schema, []), RowListSink, registry=StreamRegistry())


def test_incomplete_handler(ab_table):
    registry = StreamRegistry()

    @registry.register(Table, Table)
    def one_row(source, sink):
        sink.write_row(source.read_row())

    sink = Table(ab_table.schema)
    with pytest.raises(IncompleteStreamError):
        stream(ab_table, sink, registry=registry)

    assert sink.write_state is SinkState.WRITING


def test_handler_errors_propagate(ab_table):
    registry = StreamRegistry()

    def broken(source, sink):
        source.read_row()
        raise RuntimeError('disk on fire')

    registry.register(Table, Table, broken)

    sink = Table(ab_table.schema)
    with pytest.raises(RuntimeError, match='disk on fire'):
        stream(ab_table, sink, registry=registry)

    assert not sink.is_closed()
    assert ab_table.read_state is SourceState.READING


def test_handler_lookup_walks_mro(ab_table):
    sub = SubTable(ab_table.schema, ab_table.data)
    assert default_registry.handler_for(sub, Table()) is stream_table

    sink = stream(sub, SubTable)
    assert isinstance(sink, SubTable)
    assert sink == ab_table


def test_specific_handler_wins(ab_table):
    registry = StreamRegistry()
    registry.register(Table, Table, stream_table)
    registry.register(SubTable, Table, stream_rows)

    sub = SubTable(ab_table.schema, ab_table.data)
    assert registry.handler_for(sub, Table()) is stream_rows
    assert registry.handler_for(ab_table, Table()) is stream_table
    assert (SubTable, Table) in registry

    registry.unregister(SubTable, Table)
    assert registry.handler_for(sub, Table()) is stream_table


def test_stream_logs(ab_table, caplog):
    caplog.set_level(logging.DEBUG, logger='datastreams.stream')
    stream(ab_table, Table)

    assert 'stream Table -> Table via stream_table' in caplog.text


def test_stream_logs_unexpected_start_state(ab_table, caplog):
    caplog.set_level(logging.DEBUG, logger='datastreams.stream')
    ab_table.read_row()
    stream(ab_table, Table)

    assert 'in state READING, expected BEGINNING' in caplog.text


class EmptyLenHandler:
    def __len__(self):
        return 0

    def __call__(self, source, sink):
        stream_table(source, sink)


def test_falsy_handler_objects_are_found(ab_table):
    registry = StreamRegistry()
    handler = EmptyLenHandler()
    registry.register(Table, Table, handler)

    assert registry.handler_for(ab_table, Table()) is handler
    assert stream(ab_table, Table, registry=registry) == ab_table
