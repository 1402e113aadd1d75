'''
# Portable Network Graphics

Format created to replace patent-emcumbered GIF files.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

Here we are interested only in the container: a fixed signature followed by
chunks, without giving any meaning to their payload.
'''
import logging
from typing import List, Optional

from ..core import Struct
from .. import fields as base_fields
from ..common import crc
from ..enum import Compliant
from ..exceptions import NotFound, NotUtf8, TrailingData
from ..properties import Dependency
from ..streams import Stream
from .fields import TypeCodeField
from .type_code import TypeCode


logger = logging.getLogger(__name__)

SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'
# the length is stored as an unsigned 32 bits integer
MAX_LENGTH = 2 ** 32 - 1


class Chunk(Struct):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    A chunk is defined as critical or ancillary depending on the case of the
    starting letter of the type field (see TypeCode for the other properties).

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    A chunk is immutable once built: to change its content remove it from
    the container and add a new one.
    '''
    length     = base_fields.StructField('I', endianess=base_fields.Endianess.BIG_ENDIAN)
    chunk_type = TypeCodeField()
    data       = base_fields.StringField(Dependency('.length'))
    crc        = crc.CRCField(['chunk_type', 'data'], endianess=base_fields.Endianess.BIG_ENDIAN)  # network byte order

    __hash__ = None

    def __init__(self, source=None, **kwargs):
        super().__init__(source, **kwargs)
        self.sealed = True

    @classmethod
    def new(cls, chunk_type, data) -> 'Chunk':
        '''Build a chunk of the given type around data, length and crc are calculated.'''
        if len(data) > MAX_LENGTH:
            raise ValueError(f'a chunk can contain at most {MAX_LENGTH} bytes, not {len(data)}')

        return cls(chunk_type=chunk_type, data=data)

    @classmethod
    def read(cls, stream, compliant=Compliant.STRICT) -> 'Chunk':
        '''Read one chunk from a Stream or a binary file object, consuming only its bytes.'''
        return cls(stream, compliant=compliant)

    @classmethod
    def from_bytes(cls, buffer, compliant=Compliant.STRICT) -> 'Chunk':
        '''The buffer must contain exactly one chunk.'''
        stream = Stream(buffer)
        chunk = cls.read(stream, compliant=compliant)

        if not stream.at_eof():
            raise TrailingData(f'{stream.remaining()} bytes left after the chunk')

        return chunk

    def __eq__(self, other):
        if not isinstance(other, Chunk):
            return NotImplemented

        return self.chunk_type.value == other.chunk_type.value and self.data.value == other.data.value

    def __str__(self):
        return 'length: %d, type: %s, data: %r, crc: %d' % (
            self.length.value,
            self.chunk_type.value,
            self.data.value,
            self.crc.value,
        )

    def isCritical(self):
        return self.chunk_type.value.is_critical()

    def as_bytes(self) -> bytes:
        return self.pack()

    def data_as_text(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise NotUtf8(f'payload of chunk {self.chunk_type.value} is not UTF-8 ({e.reason} at byte {e.start})') from e


class Container(Struct):
    '''The whole file: the signature and then the chunks, in the order they appear.

    There is no constraint on the order nor on the number of chunks of the same
    type: this is the job of a decoder giving meaning to them.
    '''
    signature = base_fields.StringField(8, default=SIGNATURE, is_magic=True)
    chunks    = base_fields.ArrayField(Chunk)

    @classmethod
    def parse(cls, buffer, compliant=Compliant.STRICT) -> 'Container':
        return cls(buffer, compliant=compliant)

    @classmethod
    def from_chunks(cls, chunks) -> 'Container':
        container = cls()
        for chunk in chunks:
            container.append_chunk(chunk)

        return container

    def __iter__(self):
        return iter(self.chunks)

    def __len__(self):
        return len(self.chunks)

    def __str__(self):
        lines = ['%s with %d chunks' % (self.__class__.__name__, len(self))]
        for idx, chunk in enumerate(self.chunks):
            lines.append(f' [{idx:02d}] {chunk}')

        return '\n'.join(lines)

    def as_bytes(self) -> bytes:
        return self.pack()

    @staticmethod
    def _type_name(type_name) -> str:
        '''The four characters to look for, from a str, bytes or TypeCode'''
        if isinstance(type_name, (bytes, bytearray)):
            return bytes(type_name).decode('latin-1')

        if isinstance(type_name, (str, TypeCode)):
            return str(type_name)

        raise TypeError(f"a chunk type can't be a '{type_name.__class__.__name__}'")

    def _index_of(self, type_name) -> Optional[int]:
        type_name = self._type_name(type_name)
        for idx, chunk in enumerate(self.chunks):
            if str(chunk.chunk_type.value) == type_name:
                return idx

        return None

    def append_chunk(self, chunk: Chunk) -> None:
        self.insert_chunk(len(self.chunks), chunk)

    def insert_chunk(self, index: int, chunk: Chunk) -> None:
        if not isinstance(chunk, Chunk):
            raise TypeError(f"only instances of Chunk can be added, not '{chunk.__class__.__name__}'")

        if chunk.father is not None:
            raise ValueError(f'chunk {chunk.chunk_type.value} already belongs to a container, remove it first')

        logger.debug(f'inserting chunk {chunk.chunk_type.value} at index {index}')
        self.chunks._insert(index, chunk)

    def remove_chunk(self, type_name) -> Chunk:
        '''Remove the first chunk of the given type and return it.'''
        idx = self._index_of(type_name)

        if idx is None:
            raise NotFound(f'no chunk of type \'{type_name}\'')

        logger.debug(f'removing chunk {type_name} at index {idx}')

        return self.chunks._pop(idx)

    def chunk_by_type(self, type_name) -> Optional[Chunk]:
        idx = self._index_of(type_name)

        return self.chunks[idx] if idx is not None else None

    def chunks_by_type(self, type_name) -> List[Chunk]:
        type_name = self._type_name(type_name)

        return [_ for _ in self.chunks if str(_.chunk_type.value) == type_name]


__all__ = [
    'SIGNATURE',
    'MAX_LENGTH',
    'Chunk',
    'Container',
    'TypeCode',
]
