from typing import Any, Self

import msgspec

from datastreams.pointerstring import PointerString


def ext_enc_hook(obj: Any) -> Any:
    '''
    Extended encoder hook for msgspec, lets free-form schema metadata carry
    text views, encoded as owned strings.

    '''
    match obj:
        case PointerString():
            return str(obj)

    raise NotImplementedError(f'Objects of type {type(obj)} are not supported')


class _Struct:
    @classmethod
    def from_json(cls, s: str | bytes) -> Self:
        return msgspec.json.decode(s, type=cls)

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        return msgspec.msgpack.decode(raw, type=cls)

    def encode(self) -> bytes:
        return msgspec.msgpack.encode(self, enc_hook=ext_enc_hook)

    @classmethod
    def convert(cls, obj: Any) -> Self:
        return msgspec.convert(obj, type=cls)

    def to_dict(self) -> dict:
        return msgspec.to_builtins(self, enc_hook=ext_enc_hook)

    def to_json(self) -> str:
        return msgspec.json.encode(self, enc_hook=ext_enc_hook).decode()


class FrozenStruct(msgspec.Struct, _Struct, frozen=True): ...

