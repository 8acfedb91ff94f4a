import io
import struct

import pytest
from PIL import Image


MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def make_chunk(chunk_type: bytes, data: bytes, crc: int) -> bytes:
    return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)


@pytest.fixture
def secret_chunk_data():
    """Raw bytes of a chunk of type RuSt containing the secret message."""
    return make_chunk(b'RuSt', MESSAGE, MESSAGE_CRC)


@pytest.fixture
def png_data():
    """A real 4x4 image, as written by Pillow."""
    buffer = io.BytesIO()
    Image.new('RGB', (4, 4), 'red').save(buffer, format='PNG')

    return buffer.getvalue()


@pytest.fixture
def png_path(tmp_path, png_data):
    path = tmp_path / 'red.png'
    path.write_bytes(png_data)

    return path
