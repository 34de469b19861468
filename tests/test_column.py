import pytest
import polars as pl

from datastreams.dtypes import PtrString
from datastreams.errors import ColumnTypeError
from datastreams.pointerstring import PointerString
from datastreams.table import NullableColumn


def test_allocated_column_is_all_null():
    col = NullableColumn(pl.Int64, 3)

    assert len(col) == 3
    assert col.null_count == 3
    assert list(col) == [None, None, None]
    assert col.is_null(0)


def test_set_and_clear():
    col = NullableColumn(pl.Int64, 2)

    col[1] = 5
    assert col[1] == 5
    assert not col.is_null(1)
    assert col.nulls == [True, False]

    col[1] = None
    assert col[1] is None
    assert col.null_count == 2


def test_type_checked_writes():
    col = NullableColumn(pl.Int64, 1)

    with pytest.raises(ColumnTypeError):
        col[0] = 'nope'

    with pytest.raises(TypeError):
        col.append(1.5)


def test_float_column_accepts_ints():
    col = NullableColumn(pl.Float64, 1)
    col[0] = 1

    assert col[0] == 1.0
    assert isinstance(col[0], float)


@pytest.mark.parametrize('i', [-1, 3, 10])
def test_index_out_of_range(i):
    col = NullableColumn(pl.Int64, 3)

    with pytest.raises(IndexError):
        col[i]

    with pytest.raises(IndexError):
        col[i] = 1


def test_from_values_infers_from_first_non_null():
    col = NullableColumn.from_values([None, 2, 3])

    assert col.dtype is pl.Int64
    assert col.nulls == [True, False, False]
    assert col.values == [None, 2, 3]


def test_from_values_explicit_dtype():
    col = NullableColumn.from_values([1, 2], pl.Float64)
    assert col.values == [1.0, 2.0]


def test_slice_and_copy():
    col = NullableColumn.from_values([1, None, 3, 4])
    sub = col[1:3]

    assert isinstance(sub, NullableColumn)
    assert list(sub) == [None, 3]
    assert sub.nulls == [True, False]

    cp = col.copy()
    cp[0] = 100
    assert col[0] == 1
    assert cp != col


def test_resize():
    col = NullableColumn.from_values([1, 2, 3])

    col.resize(1)
    assert list(col) == [1]

    col.resize(3)
    assert list(col) == [1, None, None]
    assert col.null_count == 2


def test_equality():
    assert NullableColumn.from_values([1, None]) == NullableColumn.from_values([1, None])
    assert NullableColumn.from_values([1, None]) != NullableColumn.from_values([1, 2])
    assert NullableColumn.from_values([1]) != NullableColumn.from_values([1.0])


def test_pointer_string_column_as_strings():
    buf = b'foobar'
    col = NullableColumn.from_values([
        PointerString.from_buffer(buf, 0, 3),
        None,
        PointerString.from_buffer(buf, 3, 3),
    ])
    assert col.dtype is PtrString

    owned = col.as_strings()
    assert owned.dtype is pl.String
    assert list(owned) == ['foo', None, 'bar']
    assert all(isinstance(v, str) for v in owned if v is not None)

    with pytest.raises(ColumnTypeError):
        owned.as_strings()


def test_to_polars():
    series = NullableColumn.from_values([None, 2, 3]).to_polars('n')

    assert series.name == 'n'
    assert series.dtype == pl.Int64
    assert series.to_list() == [None, 2, 3]
    assert series.null_count() == 1


def test_pointer_string_column_to_polars():
    col = NullableColumn.from_values([PointerString.from_buffer(b'ab')])
    series = col.to_polars('s')

    assert series.dtype == pl.String
    assert series.to_list() == ['ab']
