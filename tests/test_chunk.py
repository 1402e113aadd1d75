import io
import struct
import zlib

import pytest

from pngstruct.enum import Compliant
from pngstruct.exceptions import (
    ChecksumMismatch,
    InvalidTypeCode,
    NotUtf8,
    TrailingData,
    TruncatedInput,
)
from pngstruct.png import Chunk, MAX_LENGTH
from pngstruct.png.type_code import TypeCode
from pngstruct.streams import Stream


MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def build_raw(chunk_type=b'RuSt', data=MESSAGE, crc=MESSAGE_CRC, length=None):
    length = len(data) if length is None else length
    return struct.pack('>I', length) + chunk_type + data + struct.pack('>I', crc)


def test_new_chunk():
    chunk = Chunk.new(TypeCode.parse_str('RuSt'), MESSAGE)

    assert chunk.length.value == 42
    assert chunk.length.value == len(MESSAGE)
    assert chunk.chunk_type.value == TypeCode(b'RuSt')
    assert chunk.data.value == MESSAGE
    assert chunk.crc.value == MESSAGE_CRC


def test_new_chunk_from_str_type():
    chunk = Chunk.new('RuSt', MESSAGE)

    assert chunk.crc.value == MESSAGE_CRC


def test_crc_is_iso_hdlc():
    for name, data in (('RuSt', MESSAGE), ('IEND', b''), ('tEXt', b'Comment\x00hello')):
        chunk = Chunk.new(name, data)
        assert chunk.crc.value == zlib.crc32(name.encode() + data)


def test_empty_chunk():
    chunk = Chunk.new('IEND', b'')

    assert chunk.length.value == 0
    assert chunk.as_bytes() == b'\x00\x00\x00\x00IEND\xaeB`\x82'


def test_as_bytes():
    chunk = Chunk.new('RuSt', MESSAGE)

    assert chunk.as_bytes() == build_raw()
    assert bytes(chunk) == build_raw()
    assert chunk.size == 12 + len(MESSAGE)


def test_valid_chunk_from_bytes():
    chunk = Chunk.from_bytes(build_raw())

    assert chunk.length.value == 42
    assert str(chunk.chunk_type.value) == 'RuSt'
    assert chunk.data_as_text() == MESSAGE.decode()
    assert chunk.crc.value == MESSAGE_CRC
    assert chunk.layout == {
        'length': (0, 4),
        'chunk_type': (4, 4),
        'data': (8, 42),
        'crc': (50, 4),
    }


def test_read_from_stream():
    """Reading consumes only the bytes of the chunk"""
    stream = Stream(build_raw() + b'whatever follows')

    chunk = Chunk.read(stream)

    assert chunk.data.value == MESSAGE
    assert stream.tell() == 12 + len(MESSAGE)


def test_round_trip():
    for name, data in (('RuSt', MESSAGE), ('IEND', b''), ('zzZz', bytes(range(256)))):
        original = Chunk.new(name, data)
        chunk = Chunk.read(Stream(original.as_bytes()))

        assert chunk.chunk_type.value == original.chunk_type.value
        assert chunk.data.value == original.data.value
        assert chunk.crc.value == original.crc.value
        assert chunk == original


def test_invalid_crc():
    with pytest.raises(ChecksumMismatch) as excinfo:
        Chunk.from_bytes(build_raw(crc=MESSAGE_CRC - 1))

    assert excinfo.value.expected == MESSAGE_CRC
    assert excinfo.value.found == MESSAGE_CRC - 1
    assert excinfo.value.chain == ['crc']


def test_corrupted_payload_or_crc():
    """Any byte changed after the type code breaks the checksum"""
    raw = build_raw()

    for idx in range(8, len(raw)):
        corrupted = bytearray(raw)
        corrupted[idx] ^= 0x20

        with pytest.raises(ChecksumMismatch):
            Chunk.from_bytes(corrupted)


def test_repair_crc():
    chunk = Chunk.from_bytes(build_raw(crc=0xcafebabe), compliant=Compliant.NONE)

    assert chunk.crc.value == MESSAGE_CRC
    assert chunk.as_bytes() == build_raw()


def test_truncated():
    raw = build_raw()

    for cut in range(len(raw)):
        with pytest.raises(TruncatedInput):
            Chunk.from_bytes(raw[:cut])


def test_truncated_chain():
    with pytest.raises(TruncatedInput) as excinfo:
        Chunk.from_bytes(build_raw(length=100))

    assert excinfo.value.chain == ['data']


def test_invalid_type_code():
    with pytest.raises(InvalidTypeCode) as excinfo:
        Chunk.from_bytes(build_raw(chunk_type=b'Ru5t'))

    assert excinfo.value.chain == ['chunk_type']


def test_trailing_data():
    with pytest.raises(TrailingData):
        Chunk.from_bytes(build_raw() + b'\x00')


def test_data_as_text():
    chunk = Chunk.new('RuSt', 'è un segreto'.encode('utf-8'))

    assert chunk.data_as_text() == 'è un segreto'


def test_data_not_utf8():
    chunk = Chunk.new('RuSt', b'\xff\xfe\x00')

    with pytest.raises(NotUtf8):
        chunk.data_as_text()

    assert chunk.data.value == b'\xff\xfe\x00'


def test_immutable():
    chunk = Chunk.new('RuSt', MESSAGE)

    with pytest.raises(AttributeError):
        chunk.data.value = b'another message'

    with pytest.raises(AttributeError):
        chunk.crc = 0

    with pytest.raises(AttributeError):
        chunk.chunk_type.value = 'IEND'

    assert chunk.data.value == MESSAGE
    assert chunk.length.value == len(MESSAGE)
    assert chunk.crc.value == MESSAGE_CRC


def test_too_large():
    class Huge(bytes):
        def __len__(self):
            return MAX_LENGTH + 1

    with pytest.raises(ValueError):
        Chunk.new('RuSt', Huge())


def test_display():
    chunk = Chunk.new('RuSt', MESSAGE)

    assert str(chunk) == f'length: 42, type: RuSt, data: {MESSAGE!r}, crc: {MESSAGE_CRC}'
    assert 'Chunk' in repr(chunk)


def test_critical():
    assert Chunk.new('IHDR', b'').isCritical()
    assert not Chunk.new('tEXt', b'').isCritical()


def test_read_from_file_object():
    """A binary file is read from its position, one chunk at a time"""
    buffer = io.BytesIO(build_raw() + Chunk.new('IEND', b'').as_bytes())

    first = Chunk.read(buffer)
    second = Chunk.read(buffer)

    assert first.data.value == MESSAGE
    assert str(second.chunk_type.value) == 'IEND'
    assert buffer.tell() == len(buffer.getvalue())

    with pytest.raises(TruncatedInput):
        Chunk.read(buffer)
