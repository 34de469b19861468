from __future__ import annotations

from typing import Any, Iterable, Iterator

import polars as pl

from datastreams.dtypes import (
    DataTypeExt,
    PtrString,
    class_of,
    dtype_for_value,
    dtype_name,
    is_custom_type,
    py_type_for,
    same_dtype,
    storage_type,
)
from datastreams.errors import ColumnTypeError


class NullableColumn:
    '''
    Fixed length sequence of (value, is null) pairs, all values of a single
    column type.

    Null slots hold `None` in `values` and read back as `None`.

    '''

    __slots__ = ('dtype', '_values', '_nulls', '_py_type')

    def __init__(self, dtype: DataTypeExt, length: int = 0) -> None:
        if length < 0:
            raise ValueError(f'column length must be >= 0, got {length}')

        self.dtype = dtype
        self._py_type = py_type_for(dtype)
        self._values: list[Any] = [None] * length
        self._nulls: list[bool] = [True] * length

    @staticmethod
    def from_values(
        values: Iterable[Any],
        dtype: DataTypeExt | None = None,
    ) -> NullableColumn:
        '''
        Build a column from python values, `None` entries become nulls.

        When `dtype` is not given it's inferred from the first non null value.

        '''
        values = list(values)
        if dtype is None:
            first = next((v for v in values if v is not None), None)
            dtype = dtype_for_value(first)

        col = NullableColumn(dtype)
        col.extend(values)
        return col

    @property
    def values(self) -> list[Any]:
        return self._values

    @property
    def nulls(self) -> list[bool]:
        return self._nulls

    @property
    def null_count(self) -> int:
        return sum(self._nulls)

    def is_null(self, i: int) -> bool:
        return self._nulls[self._check_index(i)]

    def _check_index(self, i: int) -> int:
        if not 0 <= i < len(self._values):
            raise IndexError(
                f'row index {i} out of range for column of length {len(self._values)}'
            )

        return i

    def _check_value(self, value: Any) -> Any:
        if not isinstance(value, self._py_type):
            raise ColumnTypeError(
                f'Can not store {type(value).__name__} value {value!r} in '
                f'{dtype_name(self.dtype)} column'
            )

        # keep float columns homogeneous
        if self._py_type == (float, int) and not isinstance(value, float):
            return float(value)

        return value

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __getitem__(self, i: int | slice) -> Any:
        if isinstance(i, slice):
            col = NullableColumn(self.dtype)
            col._values = self._values[i]
            col._nulls = self._nulls[i]
            return col

        return self._values[self._check_index(i)]

    def __setitem__(self, i: int, value: Any) -> None:
        self._check_index(i)
        if value is None:
            self._values[i] = None
            self._nulls[i] = True
            return

        self._values[i] = self._check_value(value)
        self._nulls[i] = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NullableColumn):
            return NotImplemented

        return (
            same_dtype(self.dtype, other.dtype)
            and self._nulls == other._nulls
            and self._values == other._values
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f'NullableColumn({dtype_name(self.dtype)}, {self._values!r})'

    def append(self, value: Any) -> None:
        if value is None:
            self._values.append(None)
            self._nulls.append(True)
            return

        self._values.append(self._check_value(value))
        self._nulls.append(False)

    def extend(self, values: Iterable[Any]) -> None:
        for v in values:
            self.append(v)

    def resize(self, length: int) -> None:
        '''
        Truncate, or pad with nulls, to exactly `length` slots.

        '''
        if length < 0:
            raise ValueError(f'column length must be >= 0, got {length}')

        cur = len(self._values)
        if length < cur:
            del self._values[length:]
            del self._nulls[length:]

        else:
            self._values.extend([None] * (length - cur))
            self._nulls.extend([True] * (length - cur))

    def copy(self) -> NullableColumn:
        return self[:]

    def as_strings(self) -> NullableColumn:
        '''
        Copy a `PtrString` column into an owned `pl.String` column, safe to
        keep around after the parsed buffer goes away.

        '''
        if class_of(self.dtype) is not PtrString:
            raise ColumnTypeError(
                f'as_strings expects a PtrString column, got {dtype_name(self.dtype)}'
            )

        col = NullableColumn(pl.String)
        col._values = [None if v is None else str(v) for v in self._values]
        col._nulls = list(self._nulls)
        return col

    def to_polars(self, name: str = '') -> pl.Series:
        if is_custom_type(self.dtype):
            return self.as_strings().to_polars(name)

        return pl.Series(name, self._values, dtype=storage_type(self.dtype))
