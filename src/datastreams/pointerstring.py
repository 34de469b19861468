'''
# PointerString

A fixed-width text view over memory owned by someone else, useful when
parsing large buffers (files read into memory, database wire payloads) into
string columns without copying every field.

The view is a `memoryview` of code units, so the exporting buffer is kept
alive for as long as the view exists and a `bytearray` can not be resized
under it. What is *not* guarded is in-place mutation of the parent buffer:
the view reflects whatever bytes are currently there. Call `str()` to get an
owned copy whenever the text must outlive or be independent from the buffer.

Iteration is fixed-width: every code unit decodes to exactly one character,
no variable-width (utf-8 / utf-16 surrogate) decoding is done. Picking a code
unit width that matches the buffer encoding is the caller's responsibility.

'''
from __future__ import annotations

from typing import Iterator, Literal


Buffer = bytes | bytearray | memoryview

CodeUnitWidth = Literal[1, 2, 4]

# memoryview cast formats per code unit width
width_formats: dict[int, str] = {
    1: 'B',
    2: 'H',
    4: 'I',
}


def _cast_units(buffer: Buffer, width: CodeUnitWidth) -> memoryview:
    if width not in width_formats:
        raise ValueError(f'code unit width must be one of 1, 2 or 4, got {width}')

    view = memoryview(buffer)
    if view.format != 'B' or view.ndim != 1:
        view = view.cast('B')

    return view.cast(width_formats[width])


class PointerString:
    __slots__ = ('_units',)

    def __init__(self, units: memoryview) -> None:
        if units.format not in width_formats.values():
            raise ValueError(
                f'PointerString expects a B, H or I memoryview, got {units.format!r}'
            )

        self._units = units

    @staticmethod
    def from_buffer(
        buffer: Buffer,
        offset: int = 0,
        length: int | None = None,
        *,
        width: CodeUnitWidth = 1,
    ) -> PointerString:
        '''
        View `length` code units of `buffer` starting at code unit `offset`.

        '''
        units = _cast_units(buffer, width)

        if offset < 0 or offset > len(units):
            raise IndexError(f'offset {offset} outside buffer of {len(units)} units')

        end = len(units) if length is None else offset + length
        if length is not None and (length < 0 or end > len(units)):
            raise IndexError(
                f'length {length} at offset {offset} overruns buffer of {len(units)} units'
            )

        return PointerString(units[offset:end])

    @property
    def width(self) -> int:
        return self._units.itemsize

    @property
    def last_index(self) -> int:
        '''
        End position in code units, same as `len()` since every code unit is
        a single character.

        '''
        return len(self._units)

    @property
    def is_null(self) -> bool:
        return len(self._units) == 0

    @property
    def nbytes(self) -> int:
        return self._units.nbytes

    def release(self) -> None:
        '''
        Drop the buffer export, any further use of this view raises
        `ValueError`. The shared null sentinels are never released.

        '''
        if any(self is s for s in null_sentinels):
            return

        self._units.release()

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[str]:
        for unit in self._units:
            yield chr(unit)

    def __getitem__(self, i: int | slice) -> str | PointerString:
        if isinstance(i, slice):
            return PointerString(self._units[i])

        return chr(self._units[i])

    def __str__(self) -> str:
        return ''.join(self)

    def __repr__(self) -> str:
        return f'PointerString({str(self)!r}, width={self.width})'

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PointerString):
            return str(self) == str(other)

        if isinstance(other, str):
            return str(self) == other

        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __bool__(self) -> bool:
        return len(self._units) > 0


# zero length sentinels, one per code unit width
NULL_STRING = PointerString(_cast_units(b'', 1))
NULL_STRING16 = PointerString(_cast_units(b'', 2))
NULL_STRING32 = PointerString(_cast_units(b'', 4))

null_sentinels = (NULL_STRING, NULL_STRING16, NULL_STRING32)
