'''
We are implementing fields to handle CRC calculation.
'''
from zlib import crc32

from .. import fields
from ..exceptions import CRCMismatchException


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]; it's the same CRC-32 implemented by zlib. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The value is computed over the raw representation of the sibling fields
    listed in "fields", in that order.

    When unpacking, the stored value is checked against the calculated one and
    a mismatch is treated as corruption: the value is never fixed silently.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def calculate(self):
        value = b''.join([getattr(self.father, field_name).raw for field_name in self.fields])

        return crc32(value)

    def update(self):
        '''Set the value from the actual content of the fields'''
        self.value = self.calculate()

        return self.value

    def unpack(self, stream):
        super().unpack(stream)

        expected = self.calculate()
        if self.value != expected:
            self.logger.debug(f'crc stored 0x{self.value:08x} but calculated 0x{expected:08x}')
            raise CRCMismatchException(f'crc 0x{self.value:08x} doesn\'t match the data (expected 0x{expected:08x})')
