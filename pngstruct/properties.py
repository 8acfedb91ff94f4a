import logging
from enum import Enum, auto
from typing import List


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    RELAYOUTING = auto()
    PACKING   = auto()
    UNPACKING = auto()
    DONE      = auto()


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the (internal) length of the string contained in the field named 'data'
    strictly connected to the field named 'length': unpacking reads the length
    from the sibling, setting a new value on 'data' writes its size back.

    The expression is a path relative to the father of the field: '.length'
    indicates a field at the same level (a sibling), '.header.length' a field
    inside a sibling chunk.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f'the dependency \'{expression}\' must be relative, i.e. start with a dot')

        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        # '.miao'.split(".") -> ['', 'miao']
        fields_path: List[str] = self.expression.split('.')[1:]
        field = instance.father

        for component_name in fields_path:
            field = getattr(field, component_name)

        self.logger.debug(' resolved as field %s' % field.__class__.__name__)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        return self.resolve_field(instance).value

    def resolve_and_set(self, instance, value):
        real_field = self.resolve_field(instance)
        if not hasattr(real_field, 'value'):
            raise ValueError(f'something is wrong with the Dependency resolution!')
        real_field.value = value


class PropertyDescriptor(object):
    """This the glue for dependency management: the attribute can be a plain
    value or a Dependency; in the latter case reading and writing are forwarded
    to the field the Dependency points to.

    Until the field has a father the Dependency can't be resolved and the
    value is cached in the instance."""

    def __init__(self, name: str, _type: type, default=None):
        self.name = name
        self.type = _type
        self.default = default

    @property
    def cache_name(self):
        return '_%s_cache' % self.name

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            if instance.father is None:
                return data.get(self.cache_name, self.default)

            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        # the first time we add without thinking much
        if self.name not in data:
            data[self.name] = value
            return

        attribute = data[self.name]

        if not isinstance(attribute, Dependency):
            data[self.name] = value
            return

        if instance.father is None:
            data[self.cache_name] = value
            return

        attribute.resolve_and_set(instance, value)
