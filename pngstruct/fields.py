"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .streams import Stream
from .exceptions import StructException, BadSignatureException, TruncatedException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic
        self._frozen = False

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    def _set_value_if_not_frozen(self, value) -> None:
        if self._frozen:
            raise AttributeError(f'field \'{self.name}\' is read-only')

        self._set_value(value)

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value_if_not_frozen(value))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        '''From now on the value cannot be changed anymore.'''
        self._frozen = True

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

    def read(self, stream, size):
        '''Read exactly size bytes from the stream'''
        data = stream.read(size)

        if len(data) != size:
            self.logger.debug('wanted %d bytes for \'%s\', found %d' % (size, self.name, len(data)))
            exc = BadSignatureException if self.is_magic else TruncatedException
            raise exc(f'field \'{self.name}\' needs {size} bytes, only {len(data)} available')

        return data

    def relayout(self, offset=0):
        self.logger.debug("relayouting %s", self.__class__.__name__)
        self.offset = offset

        return self.size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream
        stream.write(self.raw)

        return stream.getvalue()

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

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def unpack(self, stream):
        raw = self.read(stream, self.size)
        self.value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be fixed or a Dependency from another field."""

    length = PropertyDescriptor('length', int, default=0)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _get_size(self):
        return len(self.value)

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency, in that case we are going to write back the size where necessary."""
        length = len(value)
        if not isinstance(self.__dict__['length'], Dependency) and length != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = bytes(value)
        self.length = length

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        data = self.read(stream, self.length)

        if self.is_magic and data != self.default:
            self.logger.debug(f'the magic doesn\'t correspond: {data!r}')
            raise BadSignatureException(f'field \'{self.name}\' has a wrong magic {data!r}')

        self._value = data


class ArrayField(Field):
    '''Un/Pack a sequence of Chunks, one after the other until the end of the stream.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls
        kw.setdefault('default', [])

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
        return list(self.default)

    def clear(self):
        self.value.clear()

    def _get_raw(self):
        return b''.join([element.raw for element in self.value])

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def relayout(self, offset=0):
        self.offset = offset
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for element in self.value:
            stream.seek(element.offset)
            element.pack(stream=stream, relayout=False)

        return stream.getvalue()

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        self.value = []

        while stream.remaining() > 0:
            element = self.instance_element()
            idx = len(self.value)
            self.logger.debug('unpacking element %d of %s at offset %d' % (idx, self.name, stream.tell()))

            try:
                element.unpack(stream)
            except StructException as e:
                e.chain.append('[%d]' % idx)
                raise

            self.value.append(element)

        self._phase = ChunkPhase.DONE

    def append(self, element):
        element.father = self
        self.value.append(element)

    def remove(self, element):
        '''Remove exactly this element (identity, not equality).'''
        for idx, _ in enumerate(self.value):
            if _ is element:
                del self.value[idx]
                return

        raise ValueError(f'{element!r} not in {self.name}')
