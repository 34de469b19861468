from __future__ import annotations

from typing import Any, Iterable

from datastreams._utils import synth_header
from datastreams.dtypes import (
    DataTypeExt,
    DataTypeMeta,
    class_of,
    dtype_name,
    is_dtype,
)
from datastreams.errors import (
    DuplicateColumnError,
    SchemaError,
    SchemaMismatchError,
)
from datastreams.structs import FrozenStruct


class SchemaMeta(FrozenStruct, frozen=True):
    header: list[str]
    types: list[DataTypeMeta]
    rows: int = 0
    metadata: dict[str, Any] = {}


class Schema:
    '''
    Describes a tabular dataset: a set of named, typed columns with records
    as rows.

    `rows` is the expected row count, a hint adapters size storage with,
    nothing checks it against actual data. `metadata` is free-form and does
    not take part in equality.

    '''

    __slots__ = ('_header', '_types', '_rows', 'metadata')

    def __init__(
        self,
        header: Iterable[Any] = (),
        types: Iterable[DataTypeExt] = (),
        rows: int = 0,
        metadata: dict | None = None,
    ) -> None:
        header = tuple(str(name) for name in header)
        types = tuple(types)

        if len(header) != len(types):
            raise SchemaMismatchError(
                f'len(header): {len(header)} must == len(types): {len(types)}'
            )

        for t in types:
            if not is_dtype(t):
                raise SchemaError(f'Column type {t!r} is not a polars data type')

        if len(set(header)) != len(header):
            dupes = sorted({name for name in header if header.count(name) > 1})
            raise DuplicateColumnError(f'Duplicate column names: {dupes}')

        if rows < 0:
            raise SchemaError(f'rows must be >= 0, got {rows}')

        self._header: tuple[str, ...] = header
        self._types: tuple[DataTypeExt, ...] = types
        self._rows = int(rows)
        self.metadata: dict = dict(metadata) if metadata else {}

    @staticmethod
    def from_types(
        types: Iterable[DataTypeExt],
        rows: int = 0,
        metadata: dict | None = None,
    ) -> Schema:
        types = tuple(types)
        return Schema(synth_header(len(types)), types, rows, metadata)

    @staticmethod
    def from_like(s: SchemaLike) -> Schema:
        match s:
            case Schema():
                return s

            case dict() | SchemaMeta():
                if isinstance(s, dict):
                    s = SchemaMeta.convert(s)

                return Schema(
                    s.header,
                    (t.decode() for t in s.types),
                    s.rows,
                    s.metadata,
                )

            case (header, types):
                return Schema(header, types)

        raise TypeError(f'Can not build a Schema from {type(s).__name__}')

    @staticmethod
    def from_json(raw: str | bytes) -> Schema:
        return Schema.from_like(SchemaMeta.from_json(raw))

    @property
    def header(self) -> tuple[str, ...]:
        return self._header

    @property
    def types(self) -> tuple[DataTypeExt, ...]:
        return self._types

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return len(self._header)

    def size(self, dim: int | None = None) -> tuple[int, int] | int:
        '''
        `(rows, cols)`, or a single dimension: 1 for rows, 2 for cols, 0 for
        any other axis.

        '''
        if dim is None:
            return (self._rows, self.cols)

        if dim == 1:
            return self._rows

        if dim == 2:
            return self.cols

        return 0

    def index(self, name: str) -> int:
        try:
            return self._header.index(name)

        except ValueError:
            raise KeyError(f'No column named {name!r}') from None

    def replace(
        self,
        *,
        rows: int | None = None,
        metadata: dict | None = None,
    ) -> Schema:
        return Schema(
            self._header,
            self._types,
            self._rows if rows is None else rows,
            self.metadata if metadata is None else metadata,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented

        return (
            self._header == other._header
            and self._types == other._types
            and self.size() == other.size()
        )

    def __hash__(self) -> int:
        return hash((
            self._header,
            tuple(class_of(t).__name__ for t in self._types),
            self._rows,
        ))

    def __repr__(self) -> str:
        cols = ', '.join(
            f'{name}: {dtype_name(t)}'
            for name, t in zip(self._header, self._types, strict=True)
        )
        return f'Schema(rows={self._rows}, cols={self.cols}, [{cols}])'

    def encode(self) -> SchemaMeta:
        return SchemaMeta(
            header=list(self._header),
            types=[DataTypeMeta.from_dtype(t) for t in self._types],
            rows=self._rows,
            metadata=self.metadata,
        )

    def to_json(self) -> str:
        return self.encode().to_json()


SchemaLike = Schema | SchemaMeta | dict | tuple

EMPTY_SCHEMA = Schema()
