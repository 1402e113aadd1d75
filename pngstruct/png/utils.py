import logging

from ..exceptions import NotUtf8


logger = logging.getLogger(__name__)


def payload_repr(chunk) -> str:
    '''The payload as text when it's valid UTF-8, otherwise the representation
    of the raw bytes.'''
    try:
        return chunk.data_as_text()
    except NotUtf8 as e:
        logger.debug(f'{e}, using the raw bytes')

    return repr(chunk.data.value)


def describe_chunk(chunk) -> str:
    type_code = chunk.chunk_type.value
    flags = [
        'critical' if chunk.isCritical() else 'ancillary',
        'public' if type_code.is_public() else 'private',
        'safe-to-copy' if type_code.is_safe_to_copy() else 'unsafe-to-copy',
    ]

    return f'{type_code} ({", ".join(flags)}) length={chunk.length.value} crc=0x{chunk.crc.value:08x}'
