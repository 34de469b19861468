'''
# Column element types

Schemas tag every column with a `polars` data type (class or instance, eg.
`pl.Int64` or `pl.Datetime('us')`), the same tags a polars frame would use,
so tables convert to and from frames without a mapping layer.

# Extended `polars.DataType`

## PtrString

Columns of `PointerString` views into an external buffer. Its python type is
`PointerString` and it falls back to `pl.String` storage whenever the column
is handed to polars (the views get copied into owned strings).

'''

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from inspect import isclass
from typing import Any, Literal, TypeGuard

import polars as pl
from polars.datatypes.classes import classinstmethod
from polars._typing import PythonDataType

from datastreams.pointerstring import PointerString
from datastreams.structs import FrozenStruct


class PtrString(pl.DataType):
    '''
    For string columns holding non-owning views into a parsed buffer.

    '''

    @classinstmethod
    def to_python(cls) -> PythonDataType:
        return PointerString

    @classinstmethod
    def fallback_type(cls) -> type[pl.DataType]:
        return pl.String


# our custom extended types
DataTypeCustom = type[PtrString] | PtrString

# all types, polars std + our custom types
DataTypeExt = type[pl.DataType] | pl.DataType


custom_types: tuple[type[pl.DataType], ...] = (PtrString, )


def class_of(dtype: DataTypeExt) -> type[pl.DataType]:
    return type(dtype) if not isclass(dtype) else dtype


def is_dtype(obj: Any) -> TypeGuard[DataTypeExt]:
    return isinstance(obj, pl.DataType) or (
        isclass(obj) and issubclass(obj, pl.DataType)
    )


def is_custom_type(dtype: DataTypeExt) -> TypeGuard[DataTypeCustom]:
    return class_of(dtype) in custom_types


def storage_type(dtype: DataTypeExt) -> DataTypeExt:
    '''
    Type polars should use to store a column of `dtype`.

    '''
    return dtype.fallback_type() if is_custom_type(dtype) else dtype


def dtype_name(dtype: DataTypeExt) -> str:
    return dtype.__name__ if isclass(dtype) else repr(dtype)


def same_dtype(a: DataTypeExt, b: DataTypeExt) -> bool:
    '''
    Type tag equality, a bare class matches any of its parametrized
    instances (`pl.Datetime == pl.Datetime('ms')`).

    '''
    return class_of(a) is class_of(b) and (
        isclass(a) or isclass(b) or a == b
    )


# python type inference

# exact python type -> column type, bool must not fall into int
python_dtype_map: dict[type, DataTypeExt] = {
    bool: pl.Boolean,
    int: pl.Int64,
    float: pl.Float64,
    Decimal: pl.Decimal,
    str: pl.String,
    bytes: pl.Binary,
    date: pl.Date,
    datetime: pl.Datetime,
    time: pl.Time,
    timedelta: pl.Duration,
    PointerString: PtrString,
    type(None): pl.Null,
}


def dtype_for_value(value: Any) -> DataTypeExt:
    '''
    Infer the column type a python value would be stored under, unknown
    types map to `pl.Object`.

    '''
    if isinstance(value, list):
        inner = dtype_for_value(value[0]) if value else pl.Null
        return pl.List(inner)

    return python_dtype_map.get(type(value), pl.Object)


def py_type_for(dtype: DataTypeExt) -> type | tuple[type, ...]:
    '''
    Given any data type we support on columns (standard and custom) obtain
    which python type(s) a value must be to be stored in such a column.

    '''
    cls = class_of(dtype)

    if cls is pl.Object:
        return object

    if cls is pl.Null:
        return type(None)

    if cls is pl.List or cls is pl.Array:
        return list

    py_type = dtype.to_python()

    # ints are valid floats & decimals
    if py_type is float:
        return (float, int)

    if py_type is Decimal:
        return (Decimal, int)

    return py_type


# data type serialization

# a tiny, serializable dtype tag
DTypeTag = Literal[
    'u8',
    'u16',
    'u32',
    'u64',
    'i8',
    'i16',
    'i32',
    'i64',
    'f32',
    'f64',
    'decimal',
    'bool',
    'date',
    'time',
    'datetime',
    'duration',
    'binary',
    'string',
    'ptrstring',
    'null',
    'object',

    # nested sequences
    'list',
]

# Maps between runtime dtype classes and tags
dtype_tag_map: dict[type[pl.DataType], DTypeTag] = {
    pl.UInt8: 'u8',
    pl.UInt16: 'u16',
    pl.UInt32: 'u32',
    pl.UInt64: 'u64',
    pl.Int8: 'i8',
    pl.Int16: 'i16',
    pl.Int32: 'i32',
    pl.Int64: 'i64',
    pl.Float32: 'f32',
    pl.Float64: 'f64',
    pl.Decimal: 'decimal',
    pl.Boolean: 'bool',
    pl.Date: 'date',
    pl.Time: 'time',
    pl.Datetime: 'datetime',
    pl.Duration: 'duration',
    pl.Binary: 'binary',
    pl.String: 'string',
    PtrString: 'ptrstring',
    pl.Null: 'null',
    pl.Object: 'object',
    pl.List: 'list',
}

# inverse of dtype_tag_map
tag_dtype_map: dict[DTypeTag, type[pl.DataType]] = {
    v: k for (k, v) in dtype_tag_map.items()
}


class DataTypeMeta(FrozenStruct, frozen=True):
    tag: DTypeTag
    kwargs: dict[str, Any] = {}

    @staticmethod
    def from_dtype(dtype: DataTypeExt) -> DataTypeMeta:
        kwargs = {}

        # bare classes carry no parameters
        if not isclass(dtype):
            match dtype:
                case pl.Decimal():
                    kwargs['precision'] = dtype.precision
                    kwargs['scale'] = dtype.scale

                case pl.Datetime():
                    kwargs['time_unit'] = dtype.time_unit
                    kwargs['time_zone'] = dtype.time_zone

                case pl.Duration():
                    kwargs['time_unit'] = dtype.time_unit

                case pl.List():
                    kwargs['inner'] = DataTypeMeta.from_dtype(dtype.inner)

                case _ if dtype.is_nested():
                    raise NotImplementedError(
                        f'Only List nested types supported, got: {dtype}'
                    )

        elif dtype.is_nested() and dtype is not pl.List:
            raise NotImplementedError(
                f'Only List nested types supported, got: {dtype}'
            )

        return DataTypeMeta(tag=dtype_tag_map[class_of(dtype)], kwargs=kwargs)

    def decode(self) -> DataTypeExt:
        cls = tag_dtype_map[self.tag]

        if not self.kwargs:
            return cls

        if cls is pl.List:
            inner_meta = DataTypeMeta.convert(self.kwargs['inner'])
            return pl.List(inner_meta.decode())

        return cls(**self.kwargs)
