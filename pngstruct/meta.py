import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Field related class: each instance of
    the chunk lazily receives its own copy of the field declared in the class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self.field

        data = instance.__dict__

        if self.field.name in data:
            return data[self.field.name]

        self.logger.debug("create new field for field named '%s'", self.field.name)
        new_field = self.field.create(father=instance)
        data[self.field.name] = new_field

        return new_field

    def __set__(self, instance, value):
        self.logger.debug("__set__ from %s for field named '%s'", instance.__class__.__name__, self.field.name)
        data = instance.__dict__

        if instance.frozen:
            raise AttributeError(f'field \'{self.field.name}\' of a frozen {instance.__class__.__name__} is read-only')

        # if the value is the same type then set as it is
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the format"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''Fields are collected in order of declaration, after the ones of the parents;
        everything else goes into the class as usual.'''
        fields = [(name, value) for name, value in attrs.items() if isinstance(value, FieldBase)]
        new_attrs = {name: value for name, value in attrs.items() if not isinstance(value, FieldBase)}

        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaChunk)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                if obj_name not in new_cls._meta.fields:
                    new_cls._meta.fields.append(obj_name)

        for obj_name, obj in fields:
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, field):
        logging.getLogger(__name__).debug('contribute_to_chunk() for field \'%s\'' % name)
        if name not in cls._meta.fields:
            cls._meta.fields.append(name)
        field.contribute_to_chunk(cls, name)
