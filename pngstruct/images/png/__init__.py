'''
# Portable Network Graphics

Format created to replace patent-emcumbered GIF files.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

Here the data of each chunk is kept opaque: a file is a list of chunks that
can be inspected, extended with new (private) chunks and pruned, and then
packed back without touching the chunks that were not modified.
'''
from typing import List, Optional, Union
from zlib import crc32

from ...core import Chunk
from ... import fields
from ...properties import Dependency
from ...common import crc
from ...exceptions import (
    ChunkNotFoundException,
    ChunkTooShortException,
    NotUtf8Exception,
)
from .chunk_type import ChunkType, ChunkTypeField


PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk

    Once built or unpacked the chunk is frozen: length and crc can only be
    derived from type and data, so to change a chunk build a new one.
    '''
    MIN_SIZE = 12  # length + type + crc

    length = fields.StructField('I', endianess=fields.Endianess.BIG_ENDIAN)
    type   = ChunkTypeField()
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=fields.Endianess.BIG_ENDIAN)  # network byte order

    @classmethod
    def build(cls, chunk_type: Union[ChunkType, str], data: bytes) -> "PNGChunk":
        '''Create a new chunk: the length and the crc are derived from the arguments.'''
        chunk = cls()
        chunk.type.value = chunk_type
        chunk.data.value = data
        chunk.crc.update()
        chunk.relayout()
        chunk.freeze()

        return chunk

    @staticmethod
    def compute_crc(chunk_type: ChunkType, data: bytes) -> int:
        return crc32(bytes(chunk_type) + bytes(data))

    def __str__(self):
        return '%d %s %s %d' % (
            self.length.value,
            self.type.value,
            ' '.join(str(_) for _ in self.data.value),
            self.crc.value,
        )

    @property
    def chunk_type(self) -> ChunkType:
        return self.type.value

    @property
    def payload(self) -> bytes:
        return self.data.value

    def data_as_string(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise NotUtf8Exception(f'data of chunk {self.type.value} is not valid UTF-8: {e}') from e

    def unpack(self, stream):
        remaining = stream.remaining()
        if remaining < self.MIN_SIZE:
            raise ChunkTooShortException(f'a chunk needs at least {self.MIN_SIZE} bytes, only {remaining} available')

        super().unpack(stream)
        self.freeze()


class PNGFile(Chunk):
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    def __str__(self):
        return '\n'.join(['[%02d] %s' % (idx, chunk) for idx, chunk in enumerate(self.chunks)])

    def append_chunk(self, chunk: PNGChunk) -> None:
        self.logger.debug(f'appending chunk {chunk.type.value}')
        self.chunks.append(chunk)

    def chunks_by_type(self, name: str) -> List[PNGChunk]:
        chunk_type = ChunkType.from_str(name)

        return [_ for _ in self.chunks if _.type.value == chunk_type]

    def chunk_by_type(self, name: str) -> Optional[PNGChunk]:
        '''Returns the first chunk with the given type, None if there is not.'''
        chunks = self.chunks_by_type(name)

        return chunks[0] if chunks else None

    def remove_chunk(self, name: str) -> None:
        '''Remove the first chunk with the given type.'''
        chunk = self.chunk_by_type(name)

        if chunk is None:
            raise ChunkNotFoundException(f'no chunk with type {name}')

        self.logger.debug(f'removing chunk {name} at offset {chunk.offset}')
        self.chunks.remove(chunk)
