'''
Glossary:
    - Source: anything that can report a schema, tell when it's exhausted and
      be reset to be read again.
    - Sink: anything that can report a schema and accept data until closed.
    - Schema: shape of a tabular dataset, column names, types & row count.
    - stream: drives a transfer from a source into a sink (or sink kind).
    - Table: in-memory columnar source & sink, the reference implementation.
    - Nullable column: fixed length sequence of values each with a null flag.
    - PointerString: fixed length text view over someone else's buffer.

'''

from .errors import DataStreamsError as DataStreamsError

from .pointerstring import (
    NULL_STRING as NULL_STRING,
    NULL_STRING16 as NULL_STRING16,
    NULL_STRING32 as NULL_STRING32,
    PointerString as PointerString,
)

from .dtypes import PtrString as PtrString

from .schema import EMPTY_SCHEMA as EMPTY_SCHEMA, Schema as Schema

from .interfaces import (
    Sink as Sink,
    SinkState as SinkState,
    Source as Source,
    SourceState as SourceState,
)

from .stream import (
    StreamRegistry as StreamRegistry,
    register_stream as register_stream,
    stream as stream,
    stream_rows as stream_rows,
)

from .table import NullableColumn as NullableColumn, Table as Table
