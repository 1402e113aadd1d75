"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable: it knows its size, its raw representation and how to read
itself from a stream.
"""
import logging
import struct

from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import Dependency
from .exceptions import BadSignature, TrailingData, UnpackException


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic
        self.sealed = False

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def is_compliant(self, level):
        '''Returns True if the field, or the first father not inheriting, asks for level'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def is_sealed(self):
        '''A field can't be modified anymore once it or one of its fathers is sealed'''
        instance = self
        while instance is not None:
            if instance.sealed:
                return True

            instance = instance.father

        return False

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        if self.is_sealed():
            raise AttributeError(f"field '{self.name}' belongs to an immutable structure")

        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def _update_value(self):
        '''This is used to update the value before packing'''
        pass

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _set_value(self, value) -> None:
        try:
            struct.pack(self.get_format(), value)
        except struct.error as e:
            raise ValueError(f"value {value!r} doesn't fit into field '{self.name}' ({e})") from e

        super()._set_value(value)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def unpack(self, stream):
        raw = stream.read_exact(self.size)
        self.value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The number of bytes is fixed via "n" or is tied to another field
    by passing a Dependency: in the latter case setting the value updates
    the field it depends on.

    A magic field must match its default while unpacking: if the data is not
    required to be compliant the mismatch is logged and the default is used.
    """

    def __init__(self, n=None, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.n = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return len(self.value)

    @property
    def length(self):
        '''the number of bytes to unpack'''
        if isinstance(self.n, Dependency):
            return self.n.resolve(self)

        return self.n

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'' if isinstance(self.n, Dependency) else b'\x00' * self.n

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency, in that case we are going to write back the length where necessary."""
        value = bytes(value)
        if not isinstance(self.n, Dependency) and len(value) != self.n:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.n} bytes)')

        if self.is_magic and value != self.default:
            raise ValueError(f"magic field '{self.name}' can only be {self.default!r}")

        super()._set_value(value)

        if isinstance(self.n, Dependency):
            self.n.resolve_and_set(self, len(value))

    def _get_size(self):
        return len(self.value)

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        if not self.is_magic:
            self.value = stream.read_exact(self.length)
            return

        raw = stream.read(self.length)

        if raw != self.default:
            if self.is_compliant(Compliant.MAGIC):
                raise BadSignature(f'magic is {raw!r} instead of {self.default!r}')

            logger.warning(f'magic for field \'{self.name}\' failed, using {self.default!r}')
            raw = self.default

        self.value = raw


class ArrayField(Field):
    '''Un/Pack an array of structures of the given class.

    The elements are unpacked one after the other until the stream is exhausted;
    if the bytes left are not enough for even the smallest element they are
    reported as trailing data.

    This class behaves like a read-only sequence: the structure owning it
    mutates it only through _insert() and _pop(), the value is a tuple.
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return []

    def _get_value(self):
        return tuple(self._value)

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for element in self.value:
            size += element.relayout(offset=offset + size)

        return size

    def instance_element(self, stream):
        return self.field_cls(stream, father=self)

    def unpack(self, stream):
        self._value = []
        minimum_size = self.field_cls.minimum_size()

        while not stream.at_eof():
            if stream.remaining() < minimum_size:
                raise TrailingData(
                    f'{stream.remaining()} bytes left at offset {stream.tell()}, '
                    f'not enough for a {self.field_cls.__name__} ({minimum_size} bytes at least)')

            index = len(self.value)
            logger.debug('unpacking %s[%d] at offset %d' % (self.name, index, stream.tell()))

            try:
                element = self.instance_element(stream)
            except UnpackException as e:
                e.chain.insert(0, index)
                raise

            self._value.append(element)

    def _set_value(self, value) -> None:
        raise AttributeError(f"field '{self.name}' can be modified only element by element")

    def _insert(self, index, element):
        if self.is_sealed():
            raise AttributeError(f"field '{self.name}' belongs to an immutable structure")

        element.father = self
        self._value.insert(index, element)

    def _pop(self, index):
        if self.is_sealed():
            raise AttributeError(f"field '{self.name}' belongs to an immutable structure")

        element = self._value.pop(index)
        element.father = None

        return element
