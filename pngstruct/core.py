"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import StructException
from .properties import ChunkPhase


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: it's an ordered
    composition of fields (that can be chunks themselves) declared as class attributes.

        class Simple(Chunk):
            length = fields.StructField('I')
            data   = fields.StringField(Dependency('.length'))

    Passing some data to the constructor unpacks it, otherwise every field
    is initialized with its default.
    """

    def __init__(self, data=None, **kwargs):
        super().__init__(**kwargs)

        if data is not None:
            stream = Stream(data)
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
            self.unpack(stream)
        else:
            self.relayout()

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

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def freeze(self):
        '''Make read-only every field, the chunk itself included.'''
        for _, field in self.get_fields():
            field.freeze()

        super().freeze()

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def _get_raw(self):
        return b''.join([field.raw for _, field in self.get_fields()])

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets
        in order to pack correctly.

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        phase_old = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            self.logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        self._phase = phase_old

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the chunk into its binary representation, returns the
        content of the whole stream.'''
        self._phase = ChunkPhase.PACKING
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for field_name, field_instance in self.get_fields():
            if field_instance.offset is None:
                raise AttributeError(f'offset for field named "{field_name}" {field_instance!r} is not defined!')

            stream.seek(field_instance.offset)

            self.logger.debug('packing %s.%s at offset %08x' % (self.__class__.__name__, field_name, field_instance.offset))
            field_instance.pack(stream=stream, relayout=False)

        self._phase = ChunkPhase.DONE

        return stream.getvalue()

    def unpack(self, stream):
        '''Read the fields one after the other from the actual position of the stream.

        Any exception raised by a field is propagated as is, after having appended
        the name of the field to its chain, so to know where the data went wrong.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            field.offset = stream.tell()

            try:
                field.unpack(stream)
            except StructException as e:
                e.chain.append(field_name)
                raise

        self._phase = ChunkPhase.DONE
