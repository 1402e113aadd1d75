#!/usr/bin/env python3
'''
Hide, read and remove messages into the chunks of a PNG file.

 $ pngchunk.py encode image.png ruSt "my secret"
 $ pngchunk.py decode image.png ruSt
 $ pngchunk.py remove image.png ruSt
 $ pngchunk.py print image.png
'''
import logging
import os
import sys
from pathlib import Path

from pngstruct.exceptions import PngStructException
from pngstruct.png import Chunk, Container, TypeCode
from pngstruct.png.utils import describe_chunk, payload_repr


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'''usage: {progname} encode <png file> <chunk type> <message>
       {progname} decode <png file> <chunk type>
       {progname} remove <png file> <chunk type>
       {progname} print  <png file>''')
    sys.exit(1)


def load(path):
    return Container.parse(Path(path).read_bytes())


def save(path, png):
    Path(path).write_bytes(png.as_bytes())


def encode(path, chunk_type, message):
    png = load(path)
    png.append_chunk(Chunk.new(TypeCode.parse_str(chunk_type), message.encode('utf-8')))
    save(path, png)

    print(f'after encoding {png}')


def decode(path, chunk_type):
    png = load(path)
    chunk = png.chunk_by_type(TypeCode.parse_str(chunk_type))

    if chunk is None:
        print(f'no chunk of this type: {chunk_type}')
        return

    print(f'the content is: {chunk.data_as_text()}')


def remove(path, chunk_type):
    png = load(path)
    chunk = png.remove_chunk(TypeCode.parse_str(chunk_type))
    save(path, png)

    logger.info(f'removed {describe_chunk(chunk)}')


def dump(path):
    png = load(path)

    for idx, chunk in enumerate(png.chunks):
        print(f'[{idx:02d}] {describe_chunk(chunk)}')
        print(f'     {payload_repr(chunk)}')


COMMANDS = {
    'encode': (encode, 3),
    'decode': (decode, 2),
    'remove': (remove, 2),
    'print': (dump, 1),
}


if __name__ == '__main__':
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        usage(sys.argv[0])

    command, n_args = COMMANDS[sys.argv[1]]
    args = sys.argv[2:]

    if len(args) != n_args:
        usage(sys.argv[0])

    try:
        command(*args)
    except (PngStructException, OSError) as e:
        logger.error(f'{sys.argv[1]} failed: {e}')
        sys.exit(1)
