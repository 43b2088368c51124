import ibf.common.ops as ops
from ibf.runtime.tape import Tape
from ibf.runtime.devices import InputDevice, OutputDevice
from ibf.runtime.errors import EndOfInput, IoWriteFailure


class Executor():
    def __init__(self, tape: Tape, stdin: InputDevice, stdout: OutputDevice):
        self.tape = tape        # Ref. to tape
        self.stdin = stdin      # Ref. to input device
        self.stdout = stdout    # Ref. to output device

    # - Operations - #

    def plus(self):
        self.tape.increment()

    def minus(self):
        self.tape.decrement()

    def previous(self):
        self.tape.move_left()

    def next(self):
        self.tape.move_right()

    def input(self):
        value = self.stdin.next_byte()

        if value is None:
            raise EndOfInput()

        self.tape.write(value)

    def output(self):
        try:
            self.stdout.emit_byte(self.tape.read())
        except OSError as e:
            raise IoWriteFailure(e) from e

    HANDLERS = {
        ops.PLUS: plus,
        ops.MINUS: minus,
        ops.PREVIOUS: previous,
        ops.NEXT: next,
        ops.INPUT: input,
        ops.OUTPUT: output
    }

    # -- Implementation -- #

    def execute(self, c: str) -> bool:
        ''' Applies a non-bracket instruction, anything else is a comment '''
        handler = self.HANDLERS.get(c)

        if handler is None:
            return False

        handler(self)
        return True
