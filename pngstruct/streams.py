import io
import logging

from .exceptions import TruncatedInput


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around an in-memory buffer or a binary file to
    uniform its properties: mainly we need exact reads and to know
    how many bytes are left to unpack.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to build a stream from' % self._type.__name__)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%d/%d)>' % (self.__class__.__name__, self.tell(), self._size)

    def init_bytes(self):
        '''We think these are raw bytes'''
        self._size = len(self.obj)
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = bytes(self.obj)
        self.init_bytes()

    def init_memoryview(self):
        self.obj = self.obj.tobytes()
        self.init_bytes()

    def init_file(self):
        '''A seekable binary file object, read from its current position'''
        position = self.obj.tell()
        self._size = self.obj.seek(0, io.SEEK_END)
        self.obj.seek(position)

    init_BytesIO = init_file
    init_BufferedReader = init_file
    init_BufferedRandom = init_file

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def read_exact(self, n):
        '''Read exactly n bytes or fail: a short read means the data ended
        in the middle of something.'''
        offset = self.tell()
        data = self.obj.read(n)

        if len(data) != n:
            logger.debug('short read at offset %d: wanted %d bytes, got %d' % (offset, n, len(data)))
            raise TruncatedInput(f'expected {n} bytes at offset {offset} but only {len(data)} are available')

        return data

    def remaining(self):
        return self._size - self.tell()

    def at_eof(self):
        return self.remaining() <= 0

