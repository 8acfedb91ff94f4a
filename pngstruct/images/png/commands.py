'''
Operations on PNG files: this is the only place where the files are read and written,
the rest of the package works on bytes.
'''
import logging
import sys
from typing import Optional

from ...exceptions import StructException
from . import PNGFile, PNGChunk


logger = logging.getLogger(__name__)


def load(path) -> PNGFile:
    with open(path, 'rb') as f:
        data = f.read()

    logger.debug(f'read {len(data)} bytes from \'{path}\'')

    return PNGFile(data)


def save(png: PNGFile, path) -> None:
    data = png.pack()

    with open(path, 'wb') as f:
        f.write(data)

    logger.debug(f'written {len(data)} bytes to \'{path}\'')


def encode(path, chunk_type: str, message: str, output=None) -> PNGChunk:
    '''Hide the message into a new chunk appended to the file.

    If output is not indicated the original file is overwritten.'''
    png = load(path)
    chunk = PNGChunk.build(chunk_type, message.encode('utf-8'))

    png.append_chunk(chunk)
    save(png, output if output is not None else path)

    return chunk


def decode(path, chunk_type: str) -> Optional[str]:
    png = load(path)
    chunk = png.chunk_by_type(chunk_type)

    if chunk is None:
        return None

    return chunk.data_as_string()


def remove(path, chunk_type: str) -> None:
    png = load(path)
    png.remove_chunk(chunk_type)
    save(png, path)


def dump(path) -> str:
    return str(load(path))


COMMANDS = {
    'encode': 'encode',
    '-e': 'encode',
    'decode': 'decode',
    '-d': 'decode',
    'remove': 'remove',
    '-r': 'remove',
    'print': 'print',
    '-p': 'print',
}


def usage(progname):
    print(f'''usage: {progname} encode <png file> <chunk type> <message> [output file]
       {progname} decode <png file> <chunk type>
       {progname} remove <png file> <chunk type>
       {progname} print <png file>''')
    sys.exit(1)


def main(progname, args) -> int:
    '''Command line entry point, it returns the exit status.'''
    if len(args) < 2 or args[0] not in COMMANDS:
        usage(progname)

    command = COMMANDS[args[0]]
    args = args[1:]

    try:
        if command == 'encode':
            if len(args) not in (3, 4):
                usage(progname)
            encode(*args)
        elif command == 'decode':
            if len(args) != 2:
                usage(progname)
            message = decode(*args)
            print(f'Secret Message: {message}' if message is not None else 'No secret message')
        elif command == 'remove':
            if len(args) != 2:
                usage(progname)
            remove(*args)
        elif command == 'print':
            if len(args) != 1:
                usage(progname)
            print(dump(args[0]))
    except (StructException, OSError) as e:
        logger.error(f'{e}')
        return 1

    return 0
