'''
# Sources & Sinks

A *source* wraps a "true data source" (file, database query, in-memory
structure) and exposes it through this interface, a *sink* wraps a data
destination. Any object can take either role by providing the members of the
`Source` / `Sink` protocols, no base class is required.

## Source states

    BEGINNING -> READING -> DONE

- `BEGINNING`: right after construction, ready to be read from.
- `READING`: the first unit of data has been extracted, more remains.
- `DONE`: all expected data was extracted, only `reset()` leaves this state.

A source expecting zero rows has nothing to yield so it starts out (and
resets to) `DONE`. Extraction calls on a `DONE` source must raise
`SourceExhaustedError`.

## Sink states

    BEGINNING -> WRITING -> DONE

- `BEGINNING`: right after construction, including any initial metadata
  write (eg. column headers).
- `WRITING`: at least one write was accepted, more may follow.
- `DONE`: closed, writes must raise `SinkClosedError`.

The data pull/push primitives themselves are left to each source and sink,
`stream` handlers registered per (source, sink) pair decide which ones to use.
`RowSource` & `RowSink` are the row at a time flavor `stream_rows` knows how
to drive.

'''
from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, Sequence, runtime_checkable

from datastreams.dtypes import DataTypeExt
from datastreams.schema import Schema


class SourceState(Enum):
    BEGINNING = 'beginning'
    READING = 'reading'
    DONE = 'done'


class SinkState(Enum):
    BEGINNING = 'beginning'
    WRITING = 'writing'
    DONE = 'done'


@runtime_checkable
class Source(Protocol):
    schema: Schema

    @property
    def read_state(self) -> SourceState:
        ...

    def reset(self) -> None:
        '''
        Go back to `BEGINNING` from any state, a no-op when already there.

        '''
        ...

    def is_done(self) -> bool:
        '''
        True once all expected data was extracted (state is `DONE`).

        '''
        ...


@runtime_checkable
class Sink(Protocol):
    '''
    Sink kinds must also be constructible from a single `Schema` argument,
    `stream(source, SinkKind)` relies on it.

    '''
    schema: Schema

    @property
    def write_state(self) -> SinkState:
        ...

    def close(self) -> None:
        '''
        Transition to `DONE`, idempotent.

        '''
        ...


@runtime_checkable
class RowSource(Source, Protocol):
    def read_row(self) -> Sequence[Any]:
        ...


@runtime_checkable
class RowSink(Sink, Protocol):
    def write_row(self, row: Sequence[Any]) -> None:
        ...


SourceOrSink = Source | Sink


# generic accessors, work on anything storing its schema under `.schema`


def schema(io: SourceOrSink) -> Schema:
    return io.schema


def header(io: SourceOrSink) -> tuple[str, ...]:
    return schema(io).header


def types(io: SourceOrSink) -> tuple[DataTypeExt, ...]:
    return schema(io).types


def size(io: SourceOrSink, dim: int | None = None) -> tuple[int, int] | int:
    return schema(io).size(dim)


def reset(source: Source) -> None:
    source.reset()


def is_done(source: Source) -> bool:
    return source.is_done()
