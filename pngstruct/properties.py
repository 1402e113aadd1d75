import logging
from typing import List


logger = logging.getLogger(__name__)


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Struct):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the (internal) length of the string contained in the field named 'data'
    strictly connected to the field named 'length'.

    The relation is defined in one direction (for unpacking, "length" tells
    how many bytes "data" has) and is reversed when the value is set
    (assigning "data" updates "length").

    The expression is resolved starting from the father of the field,
    each component separated by a dot is an attribute to follow, like
    module resolution: '.length' is the sibling field named "length".
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f"dependency '{expression}' must be relative, i.e. start with '.'")
        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        logger.debug('trying to resolve \'%s\' using class \'%s\'' % (
            self.expression,
            self.__class__.__name__,
        ))

        if instance.father is None:
            raise AttributeError(f"cannot resolve '{self.expression}' for a field without father")

        # '.miao.bau'.split(".") -> ['', 'miao', 'bau']
        fields_path: List[str] = self.expression.split('.')[1:]

        field = instance.father
        for component_name in fields_path:
            field = getattr(field, component_name)
            logger.debug(' resolved sub-component "%s" from "%s"' % (
                field.__class__.__name__, component_name))

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        return self.resolve_field(instance).value

    def resolve_and_set(self, instance, value):
        """Write back the value in the field we depend on."""
        if instance.father is None:
            return

        real_field = self.resolve_field(instance)
        if real_field.value != value:
            real_field.value = value
