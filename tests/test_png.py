import struct
import zlib

import pytest

from pngstruct.exceptions import (
    BadSignatureException,
    ChunkNotFoundException,
    ChunkTooShortException,
    CRCMismatchException,
    InvalidChunkTypeException,
    InvalidLengthException,
    NotUtf8Exception,
    TruncatedException,
)
from pngstruct.images.png import PNG_SIGNATURE, PNGChunk, PNGFile, PNGHeader
from pngstruct.images.png.chunk_type import ChunkType


MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def make_chunk(chunk_type: bytes, data: bytes, crc: int = None) -> bytes:
    crc = zlib.crc32(chunk_type + data) if crc is None else crc
    return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)


def test_header():
    """Check header is right"""
    png_header = PNGHeader()

    assert png_header.magic.value == b'\x89PNG\x0d\x0a\x1a\x0a'


def test_chunk_build():
    chunk = PNGChunk.build(ChunkType.from_str('RuSt'), MESSAGE)

    assert chunk.length.value == 42
    assert chunk.crc.value == MESSAGE_CRC
    assert chunk.crc.value == PNGChunk.compute_crc(chunk.chunk_type, chunk.payload)
    assert chunk.pack() == make_chunk(b'RuSt', MESSAGE, MESSAGE_CRC)


def test_chunk_build_from_name():
    chunk = PNGChunk.build('tEXt', b'')

    assert chunk.length.value == 0
    assert chunk.chunk_type == ChunkType.from_str('tEXt')
    assert chunk.crc.value == zlib.crc32(b'tEXt')


def test_chunk_from_bytes(secret_chunk_data):
    chunk = PNGChunk(secret_chunk_data)

    assert chunk.length.value == 42
    assert str(chunk.type.value) == 'RuSt'
    assert chunk.data_as_string() == MESSAGE.decode()
    assert chunk.crc.value == MESSAGE_CRC
    assert chunk.pack() == secret_chunk_data
    assert chunk.size == len(secret_chunk_data)


def test_chunk_str(secret_chunk_data):
    chunk = PNGChunk(secret_chunk_data)

    assert str(chunk) == '42 RuSt %s 2882656334' % ' '.join(str(_) for _ in MESSAGE)


def test_chunk_crc_mismatch(secret_chunk_data):
    corrupted = secret_chunk_data[:-1] + bytes([secret_chunk_data[-1] ^ 0x01])

    with pytest.raises(CRCMismatchException) as excinfo:
        PNGChunk(corrupted)

    assert excinfo.value.chain == ['crc']


def test_chunk_data_corrupted(secret_chunk_data):
    corrupted = secret_chunk_data[:10] + b'X' + secret_chunk_data[11:]

    with pytest.raises(CRCMismatchException):
        PNGChunk(corrupted)


def test_chunk_too_short():
    with pytest.raises(ChunkTooShortException):
        PNGChunk(b'\x00\x00\x00\x00IEND\x00')


def test_chunk_truncated(secret_chunk_data):
    with pytest.raises(TruncatedException) as excinfo:
        PNGChunk(secret_chunk_data[:20])

    assert excinfo.value.chain == ['data']


def test_chunk_missing_crc():
    data = struct.pack('>I', 4) + b'RuSt' + b'abcd' + b'\x00\x00'

    with pytest.raises(TruncatedException) as excinfo:
        PNGChunk(data)

    assert excinfo.value.chain == ['crc']


def test_chunk_invalid_type():
    with pytest.raises(InvalidChunkTypeException):
        PNGChunk(make_chunk(b'Ru1t', b'whatever'))


def test_chunk_is_read_only():
    """length, type, data and crc can't drift apart once the chunk exists."""
    chunk = PNGChunk.build('RuSt', b'hello')

    with pytest.raises(AttributeError):
        chunk.length.value = 99

    with pytest.raises(AttributeError):
        chunk.data.value = b'world!'

    with pytest.raises(AttributeError):
        chunk.type.value = 'IEND'

    with pytest.raises(AttributeError):
        chunk.crc.update()

    with pytest.raises(AttributeError):
        chunk.length = 99

    assert chunk.length.value == 5
    assert chunk.crc.value == PNGChunk.compute_crc(chunk.chunk_type, b'hello')
    assert chunk.pack() == make_chunk(b'RuSt', b'hello')


def test_chunk_unpacked_is_read_only(secret_chunk_data):
    chunk = PNGChunk(secret_chunk_data)

    with pytest.raises(AttributeError):
        chunk.data.value = b'world!'

    assert chunk.pack() == secret_chunk_data


def test_chunk_rebuild():
    """Changing a chunk means building a new one, with length and crc derived again."""
    chunk = PNGChunk.build('RuSt', b'hello')
    rebuilt = PNGChunk.build(chunk.chunk_type, b'world!')

    assert rebuilt.length.value == len(rebuilt.payload) == 6
    assert rebuilt.crc.value == PNGChunk.compute_crc(rebuilt.chunk_type, b'world!')
    assert PNGChunk(rebuilt.pack()).payload == b'world!'
    assert chunk.payload == b'hello'


def test_chunk_data_not_utf8():
    chunk = PNGChunk.build('RuSt', b'\xff\xfe\xfd')

    with pytest.raises(NotUtf8Exception):
        chunk.data_as_string()


def test_png_file(png_data):
    """Check unpacking a PNG file written by another library is fine"""
    png = PNGFile(png_data)

    types = [str(_.type.value) for _ in png.chunks]

    assert types[0] == 'IHDR'
    assert types[-1] == 'IEND'
    assert 'IDAT' in types

    for chunk in png.chunks:
        assert chunk.crc.value == PNGChunk.compute_crc(chunk.type.value, chunk.data.value)


def test_png_file_roundtrip(png_data):
    png = PNGFile(png_data)

    assert png.pack() == png_data
    assert PNGFile(png.pack()).pack() == png_data


def test_png_file_empty():
    png = PNGFile()

    assert len(png.chunks) == 0
    assert png.pack() == PNG_SIGNATURE
    assert len(PNGFile(PNG_SIGNATURE).chunks) == 0


@pytest.mark.parametrize('data', [
    b'',
    b'\x89PNG',
    b'\x89PNX\r\n\x1a\n' + make_chunk(b'IEND', b''),
    b'GIF89a\x00\x00\x00\x00',
])
def test_png_file_bad_signature(data):
    with pytest.raises(BadSignatureException):
        PNGFile(data)


def test_png_file_corrupted_chunk(png_data):
    """A single broken chunk makes the whole file fail."""
    data = PNG_SIGNATURE + make_chunk(b'IHDR', b'abc') + make_chunk(b'RuSt', b'def', crc=0)

    with pytest.raises(CRCMismatchException) as excinfo:
        PNGFile(data)

    assert excinfo.value.chain == ['crc', '[1]', 'chunks']

    with pytest.raises(ChunkTooShortException):
        PNGFile(png_data + b'\x00\x00')


def test_append_and_find(png_data):
    png = PNGFile(png_data)
    n_chunks = len(png.chunks)
    chunk = PNGChunk.build('TEST', b'hidden')

    png.append_chunk(chunk)

    assert len(png.chunks) == n_chunks + 1
    assert png.chunk_by_type('TEST') is chunk
    assert png.chunk_by_type('TEST').data.value == b'hidden'
    assert png.chunk_by_type('FrSt') is None

    reloaded = PNGFile(png.pack())

    assert reloaded.chunk_by_type('TEST').data.value == b'hidden'
    assert reloaded.pack() == png.pack()


def test_append_reserved_bit_invalid(png_data):
    """No validity check on append: a type with the reserved bit set is accepted."""
    png = PNGFile(png_data)
    chunk = PNGChunk.build('Rust', b'reserved')

    png.append_chunk(chunk)

    assert not png.chunk_by_type('Rust').type.value.is_valid

    reloaded = PNGFile(png.pack())

    assert reloaded.pack() == png.pack()
    assert reloaded.chunk_by_type('Rust').data.value == b'reserved'
    assert reloaded.chunk_by_type('Rust').crc.value == PNGChunk.compute_crc(chunk.chunk_type, b'reserved')


def test_find_invalid_name(png_data):
    png = PNGFile(png_data)

    with pytest.raises(InvalidLengthException):
        png.chunk_by_type('TOOLONG')

    with pytest.raises(InvalidChunkTypeException):
        png.chunk_by_type('T3ST')


def test_append_duplicates(png_data):
    png = PNGFile(png_data)
    first = PNGChunk.build('ruSt', b'first')
    second = PNGChunk.build('ruSt', b'second')

    png.append_chunk(first)
    png.append_chunk(second)

    assert png.chunk_by_type('ruSt') is first
    assert png.chunks_by_type('ruSt') == [first, second]


def test_remove(png_data):
    png = PNGFile(png_data)
    original = [str(_.type.value) for _ in png.chunks]

    with pytest.raises(ChunkNotFoundException):
        png.remove_chunk('ruSt')

    png.append_chunk(PNGChunk.build('ruSt', b'first'))
    png.append_chunk(PNGChunk.build('ruSt', b'second'))

    png.remove_chunk('ruSt')

    assert len(png.chunks) == len(original) + 1
    assert png.chunk_by_type('ruSt').data.value == b'second'

    png.remove_chunk('ruSt')

    assert [str(_.type.value) for _ in png.chunks] == original
    assert png.pack() == png_data

    with pytest.raises(ChunkNotFoundException):
        png.remove_chunk('ruSt')


def test_remove_keeps_order(png_data):
    png = PNGFile(png_data)
    png.append_chunk(PNGChunk.build('aaAa', b'1'))
    png.append_chunk(PNGChunk.build('bbBb', b'2'))
    png.append_chunk(PNGChunk.build('ccCc', b'3'))

    png.remove_chunk('bbBb')

    assert [str(_.type.value) for _ in png.chunks][-2:] == ['aaAa', 'ccCc']


def test_png_file_str(png_data):
    png = PNGFile(png_data)
    png.append_chunk(PNGChunk.build('RuSt', MESSAGE))

    lines = str(png).splitlines()

    assert len(lines) == len(png.chunks)
    assert lines[0].startswith('[00] 13 IHDR ')
    assert lines[-1].endswith(' RuSt %s 2882656334' % ' '.join(str(_) for _ in MESSAGE))
