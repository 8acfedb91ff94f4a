class StructException(Exception):
    '''Base class to extend in order to throw exception in pngstruct.

    It takes an optional message and the chain of the layers that caused the
    exception: every layer that sees the exception passing through appends
    its own name, so the innermost field comes first.
    '''

    def __init__(self, msg=None, chain=None):
        self.msg = msg
        self.chain = chain if chain is not None else []
        super().__init__(msg)

    def __str__(self):
        msg = self.msg or self.__class__.__name__
        if not self.chain:
            return msg

        return '%s (at %s)' % (msg, '.'.join(reversed(self.chain)))


class UnpackException(StructException):
    '''The binary data doesn't frame correctly.'''
    pass


class ChunkTooShortException(UnpackException):
    pass


class TruncatedException(UnpackException):
    pass


class CRCMismatchException(UnpackException):
    '''The stored checksum doesn't match the data: this is corruption.'''
    pass


class BadSignatureException(StructException):
    pass


class InvalidLengthException(StructException):
    pass


class InvalidChunkTypeException(StructException):
    pass


class ChunkNotFoundException(StructException):
    pass


class NotUtf8Exception(StructException):
    pass
