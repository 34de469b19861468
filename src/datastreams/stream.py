from __future__ import annotations

import logging
from inspect import isclass
from typing import Callable, TypeVar

from datastreams.errors import (
    IncompleteStreamError,
    NoStreamHandlerError,
    SourceExhaustedError,
)
from datastreams.interfaces import (
    RowSink,
    RowSource,
    Sink,
    Source,
    SourceState,
    schema,
)


log = logging.getLogger(__name__)


SinkT = TypeVar('SinkT', bound=Sink)

StreamHandler = Callable[[Source, Sink], object]


class StreamRegistry:
    '''
    Transfer handlers keyed by (source kind, sink kind).

    Lookup walks the MRO of both the source and the sink type, source first,
    so a handler registered for base classes covers their subclasses unless a
    more specific pair is registered.

    '''

    def __init__(self) -> None:
        self._handlers: dict[tuple[type, type], StreamHandler] = {}

    def register(
        self,
        source_kind: type,
        sink_kind: type,
        handler: StreamHandler | None = None,
    ):
        '''
        Register `handler` for the pair, usable as a decorator when `handler`
        is not passed.

        '''
        def _register(fn: StreamHandler) -> StreamHandler:
            key = (source_kind, sink_kind)
            if key in self._handlers:
                log.debug(
                    f'replacing stream handler for {source_kind.__name__} -> '
                    f'{sink_kind.__name__}'
                )

            self._handlers[key] = fn
            return fn

        if handler is not None:
            return _register(handler)

        return _register

    def unregister(self, source_kind: type, sink_kind: type) -> None:
        del self._handlers[(source_kind, sink_kind)]

    def handler_for(self, source: Source, sink: Sink) -> StreamHandler:
        for src_cls in type(source).__mro__:
            for sink_cls in type(sink).__mro__:
                handler = self._handlers.get((src_cls, sink_cls))
                if handler is not None:
                    return handler

        raise NoStreamHandlerError(
            f'No stream handler registered for {type(source).__name__} -> '
            f'{type(sink).__name__}'
        )

    def __contains__(self, pair: tuple[type, type]) -> bool:
        return pair in self._handlers


# process wide default registry
default_registry = StreamRegistry()


def register_stream(
    source_kind: type,
    sink_kind: type,
    handler: StreamHandler | None = None,
):
    return default_registry.register(source_kind, sink_kind, handler)


def stream(
    source: Source,
    sink: SinkT | type[SinkT],
    *,
    registry: StreamRegistry | None = None,
) -> SinkT:
    '''
    Transfer all data from `source` into `sink`, blocking until the source is
    exhausted, then close the sink and return it.

    `sink` may also be a sink kind (class), in which case a new sink is built
    from the source schema with `sink(schema(source))` first.

    `source` is expected to be in its `BEGINNING` state, `reset()` a
    previously consumed source before streaming it again: a `DONE` source
    that holds rows raises `SourceExhaustedError` before any sink is built.
    If the handler raises, the error propagates and the sink is left as is.

    '''
    if source.is_done() and schema(source).rows > 0:
        raise SourceExhaustedError(
            f'{type(source).__name__} was already streamed, reset() it first'
        )

    if isclass(sink):
        sink = sink(schema(source))

    registry = registry or default_registry
    handler = registry.handler_for(source, sink)

    if source.read_state is not SourceState.BEGINNING:
        log.debug(
            f'streaming from {type(source).__name__} in state '
            f'{source.read_state.name}, expected BEGINNING'
        )

    log.debug(
        f'stream {type(source).__name__} -> {type(sink).__name__} '
        f'via {getattr(handler, "__name__", handler)}, size={schema(source).size()}'
    )

    handler(source, sink)

    if not source.is_done():
        raise IncompleteStreamError(
            f'handler {getattr(handler, "__name__", handler)} returned before '
            f'{type(source).__name__} was exhausted'
        )

    sink.close()

    log.debug(f'stream into {type(sink).__name__} done, size={schema(sink).size()}')
    return sink


def stream_rows(source: RowSource, sink: RowSink) -> None:
    '''
    Generic row at a time transfer, register it for any pair implementing
    `read_row` / `write_row`.

    '''
    while not source.is_done():
        sink.write_row(source.read_row())
