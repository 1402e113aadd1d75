'''
Fields specific to the PNG format.
'''
from .. import fields
from .type_code import TypeCode


class TypeCodeField(fields.Field):
    '''The four letters identifying the kind of a chunk: the value is a TypeCode,
    unpacking bytes that are not ASCII letters raises InvalidTypeCode.'''

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value})>'

    def _set_value(self, value) -> None:
        if isinstance(value, str):
            value = TypeCode.parse_str(value)
        elif isinstance(value, (bytes, bytearray)):
            value = TypeCode.parse(value)
        elif value is not None and not isinstance(value, TypeCode):
            raise ValueError(f"'{value.__class__.__name__}' can't be used as a type code")

        super()._set_value(value)

    def _get_size(self):
        return 4

    def _get_raw(self) -> bytes:
        if self.value is None:
            raise ValueError(f"type code for field '{self.name}' is not set")

        return self.value.raw

    def unpack(self, stream):
        self.value = TypeCode.parse(stream.read_exact(self.size))
