"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .enum import Compliant
from .meta import MetaStruct
from .streams import Stream
from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Struct(Field, metaclass=MetaStruct):
    """
    Together with Field is the main class that defines a format: a Struct is
    an ordered sequence of fields, declared as class attributes, and can be
    used itself as a field of another Struct (or as element of an ArrayField).

    Passing some data to the constructor unpacks it, otherwise the keyword
    arguments are used as values of the fields with the same name; the fields
    derived from others (like checksums) are updated afterwards.

    When no compliance level is indicated a Struct without father is strict,
    otherwise it inherits the level of the structure containing it.
    """

    def __init__(self, source=None, father=None, compliant=None, **values):
        if compliant is None:
            compliant = Compliant.STRICT if father is None else Compliant.INHERIT

        super().__init__(father=father, compliant=compliant)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if source is not None:
            stream = source if isinstance(source, Stream) else Stream(source)
            logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, stream))
            self.unpack(stream)
        else:
            for name, value in values.items():
                if name not in self._meta.fields:
                    raise TypeError(f"{self.__class__.__name__} has no field named '{name}'")
                getattr(self, name).value = value

            self.update()
            self.relayout()

    @classmethod
    def minimum_size(cls) -> int:
        '''The size of an instance with all the fields at their default'''
        return sum(getattr(cls, name).size for name in cls._meta.fields)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def __bytes__(self):
        return self.pack()

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        return b''.join(field.raw for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the children to reset the offsets so that
        they reflect the position they would have once packed.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            size += field_instance.relayout(offset=offset + size)

        return size

    def update(self):
        '''Recalculate the fields whose value is derived from other fields'''
        for field_name, field_instance in self.get_fields():
            field_instance._update_value()

    def pack(self) -> bytes:
        self.relayout()

        return self.raw

    def unpack(self, stream):
        '''Take the binary data and transform it into the representation given by the class.

        The fields are unpacked in order, each one consuming the bytes it
        needs; a failure of a field is re-raised with its name prepended to the chain.
        '''
        for field_name, field in self.get_fields():
            offset = stream.tell()
            logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, offset))

            try:
                field.unpack(stream)
            except UnpackException as e:
                e.chain.insert(0, field_name)
                raise

            field.offset = offset
