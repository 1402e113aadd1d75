'''
We are implementing fields to handle CRC calculation.
'''
import logging
from zlib import crc32 as _zlib_crc32

from .. import fields
from ..enum import Compliant
from ..exceptions import ChecksumMismatch


logger = logging.getLogger(__name__)


def crc32(data: bytes) -> int:
    '''CRC-32/ISO-HDLC of data (reversed polynomial 0xedb88320), as an unsigned 32 bits integer.

    The lookup table lives inside zlib, built once and never modified.'''
    return _zlib_crc32(data) & 0xffffffff


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The 32-bit CRC register is initialized to all 1's, and then the data from each byte is processed
    from the least significant bit (1) to the most significant bit (128). After all the data bytes are processed,
    the CRC register is inverted (its ones complement is taken). This value is transmitted (stored in the file)
    MSB first.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.

    The checksum covers the raw bytes of the sibling fields named in "fields", in that
    order; it is recalculated on update and verified on unpack.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def calculate(self):
        value = b''.join(getattr(self.father, field_name).raw for field_name in self.fields)

        return crc32(value)

    def _update_value(self):
        self.value = self.calculate()

    def unpack(self, stream):
        super().unpack(stream)

        expected = self.calculate()

        if self.value == expected:
            return

        if self.is_compliant(Compliant.CRC):
            raise ChecksumMismatch(expected, self.value)

        logger.warning(f'checksum 0x{self.value:08x} doesn\'t match, replacing it with 0x{expected:08x}')
        self.value = expected
