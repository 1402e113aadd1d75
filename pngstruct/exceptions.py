class PngStructException(Exception):
    '''Base class to extend in order to throw exception in pngstruct.

    It takes a message and the chain of the layers that caused the exception:
    each structure the exception passes through prepends its own field name,
    so that the outermost component comes first.
    '''

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    def __str__(self):
        where = '.'.join(str(_) for _ in self.chain)
        return f'{where}: {self.message}' if where else self.message


class UnpackException(PngStructException):
    '''The data doesn't describe a valid instance of the format.'''
    pass


class InvalidTypeCode(UnpackException):
    pass


class TruncatedInput(UnpackException):
    pass


class ChecksumMismatch(UnpackException):

    def __init__(self, expected, found, chain=None):
        self.expected = expected
        self.found = found
        super().__init__(f'checksum is 0x{found:08x} but 0x{expected:08x} was expected', chain=chain)


class BadSignature(UnpackException):
    pass


class TrailingData(UnpackException):
    pass


class NotFound(PngStructException):
    pass


class NotUtf8(PngStructException):
    pass
