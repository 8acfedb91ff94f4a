'''
# Chunk types

Each chunk is identified by a 4-byte type code restricted to ASCII letters:
the case of each letter is not decorative but encodes a property of the chunk
via the fifth bit (value 32) of the byte

 1. ancillary bit (first byte): 0 (uppercase) = critical, 1 (lowercase) = ancillary.
 2. private bit (second byte): 0 (uppercase) = public, 1 (lowercase) = private.
 3. reserved bit (third byte): must be 0 (uppercase) in files conforming to this version of PNG.
 4. safe-to-copy bit (fourth byte): 0 (uppercase) = unsafe to copy, 1 (lowercase) = safe to copy.

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html#Chunk-naming-conventions>.
'''
from bitstring import Bits

from ... import fields
from ...exceptions import (
    InvalidChunkTypeException,
    InvalidLengthException,
)


CHUNK_TYPE_SIZE = 4
# position of the property bit counting from the most significant one
PROPERTY_BIT = 2


def is_ascii_letter(byte: int) -> bool:
    return 0x41 <= byte <= 0x5a or 0x61 <= byte <= 0x7a


class ChunkType(object):
    '''Immutable 4-byte chunk type code.

    Use ChunkType.from_bytes() or ChunkType.from_str() to build it.'''

    __slots__ = ('_code',)

    def __init__(self, code: bytes):
        code = bytes(code)

        if len(code) != CHUNK_TYPE_SIZE:
            raise InvalidLengthException(f'chunk type must be {CHUNK_TYPE_SIZE} bytes long, not {len(code)}')

        if not all(is_ascii_letter(_) for _ in code):
            raise InvalidChunkTypeException(f'chunk type {code!r} must contain only ASCII letters')

        object.__setattr__(self, '_code', code)

    @classmethod
    def from_bytes(cls, code: bytes) -> "ChunkType":
        return cls(code)

    @classmethod
    def from_str(cls, name: str) -> "ChunkType":
        code = name.encode('utf-8')

        if len(code) != CHUNK_TYPE_SIZE:
            raise InvalidLengthException(f'chunk type \'{name}\' must be {CHUNK_TYPE_SIZE} bytes long, not {len(code)}')

        return cls.from_bytes(code)

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __reduce__(self):
        return (self.__class__, (self._code,))

    def __bytes__(self):
        return self._code

    def __str__(self):
        try:
            return self._code.decode('ascii')
        except UnicodeDecodeError:
            return 'Invalid UTF-8'

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented

        return self._code == other._code

    def __hash__(self):
        return hash(self._code)

    @property
    def bytes(self) -> bytes:
        return self._code

    def _property_bit(self, index: int) -> bool:
        return Bits(self._code[index:index + 1])[PROPERTY_BIT]

    @property
    def is_critical(self) -> bool:
        return not self._property_bit(0)

    @property
    def is_public(self) -> bool:
        return not self._property_bit(1)

    @property
    def is_reserved_bit_valid(self) -> bool:
        return not self._property_bit(2)

    @property
    def is_safe_to_copy(self) -> bool:
        return self._property_bit(3)

    @property
    def is_valid(self) -> bool:
        return all(is_ascii_letter(_) for _ in self._code) and self.is_reserved_bit_valid


class ChunkTypeField(fields.Field):
    '''Field holding a ChunkType, the unpacking fails for codes not made of letters.'''

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.value)

    def _set_value(self, value) -> None:
        if value is not None and not isinstance(value, ChunkType):
            value = ChunkType.from_str(value) if isinstance(value, str) else ChunkType.from_bytes(value)

        self._value = value

    def _get_size(self):
        return CHUNK_TYPE_SIZE

    def _get_raw(self) -> bytes:
        return bytes(self.value) if self.value is not None else b'\x00' * CHUNK_TYPE_SIZE

    def unpack(self, stream):
        raw = self.read(stream, CHUNK_TYPE_SIZE)
        self.value = ChunkType.from_bytes(raw)
