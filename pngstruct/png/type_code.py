'''
# Chunk type codes

A type code is made of four bytes, each restricted to the ASCII letters
(A-Z and a-z, 65-90 and 97-122 decimal) so that it can be handled as text.

The case of each letter, i.e. bit 5 of the byte, encodes a property of the
chunk the decoder can act upon even if it doesn't know the type:

 | byte | uppercase (bit 5 = 0) | lowercase (bit 5 = 1) |
 |------|-----------------------|-----------------------|
 | 0    | critical              | ancillary             |
 | 1    | public                | private               |
 | 2    | reserved bit valid    | not valid             |
 | 3    | unsafe to copy        | safe to copy          |

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html#Chunk-naming-conventions>.
'''
from bitstring import Bits

from ..exceptions import InvalidTypeCode


CASE_BIT = 5


def is_ascii_letter(byte: int) -> bool:
    return 65 <= byte <= 90 or 97 <= byte <= 122


class TypeCode(object):
    '''Immutable four letters chunk type.'''

    __slots__ = ('_raw',)

    def __init__(self, raw):
        raw = bytes(raw)

        if len(raw) != 4:
            raise InvalidTypeCode(f'a type code has 4 bytes, not {len(raw)}')

        for idx, byte in enumerate(raw):
            if not is_ascii_letter(byte):
                raise InvalidTypeCode(f'byte {idx} of type code {raw!r} is not an ASCII letter')

        object.__setattr__(self, '_raw', raw)

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __reduce__(self):
        return (self.__class__, (self._raw,))

    @classmethod
    def parse(cls, raw) -> 'TypeCode':
        return cls(raw)

    @classmethod
    def parse_str(cls, text: str) -> 'TypeCode':
        if len(text) != 4 or not text.isascii() or not text.isalpha():
            raise InvalidTypeCode(f'{text!r} is not made of 4 ASCII letters')

        return cls.parse(text.encode('ascii'))

    @property
    def raw(self) -> bytes:
        return self._raw

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return self._raw.decode('ascii')

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __eq__(self, other):
        if not isinstance(other, TypeCode):
            return NotImplemented

        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def _is_lowercase(self, idx: int) -> bool:
        '''bit 5 of the byte at the given index, bits are counted from the MSB'''
        return Bits(self._raw)[idx * 8 + 7 - CASE_BIT]

    def is_critical(self) -> bool:
        return not self._is_lowercase(0)

    def is_public(self) -> bool:
        return not self._is_lowercase(1)

    def is_reserved_bit_valid(self) -> bool:
        return not self._is_lowercase(2)

    def is_safe_to_copy(self) -> bool:
        return self._is_lowercase(3)

    def is_valid(self) -> bool:
        # the letters have been checked on construction
        return self.is_reserved_bit_valid()
