import sys
from typing import BinaryIO

from ibf.runtime.errors import IoWriteFailure


class InputDevice:
    def next_byte(self) -> int | None:
        ''' Produces one byte, None when the input is exhausted '''
        raise NotImplementedError()


class OutputDevice:
    def emit_byte(self, value: int):
        ''' Consumes one byte, raises OSError on failure '''
        raise NotImplementedError()

    def flush(self):
        pass


class ConsoleInput(InputDevice):
    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream if stream is not None else sys.stdin.buffer

    def next_byte(self) -> int | None:
        buf = self.stream.read(1)

        if not buf:
            return None

        return buf[0]


class ConsoleOutput(OutputDevice):
    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream if stream is not None else sys.stdout.buffer

    def emit_byte(self, value: int):
        self.stream.write(bytes((value,)))

        if value == 0x0A:
            self.stream.flush()

    def flush(self):
        try:
            self.stream.flush()
        except OSError as e:
            raise IoWriteFailure(e) from e


class BytesInput(InputDevice):
    def __init__(self, data: bytes = b''):
        self.data = data
        self.position = 0

    def next_byte(self) -> int | None:
        if self.position >= len(self.data):
            return None

        value = self.data[self.position]
        self.position += 1
        return value


class BufferOutput(OutputDevice):
    def __init__(self):
        self.buffer = bytearray()

    def emit_byte(self, value: int):
        self.buffer.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)
