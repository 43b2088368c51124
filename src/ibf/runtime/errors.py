class InterpreterError(Exception):
    message = 'Interpreter error.'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class UnmatchedLoopEnd(InterpreterError):
    message = 'Unmatched loop end.'


class UnmatchedLoopStart(InterpreterError):
    message = 'Unmatched loop start.'


class LoopBufferCapacityExceeded(InterpreterError):
    message = 'Max loop size exceeded.'


class LoopDepthExceeded(InterpreterError):
    message = 'Max loop depth exceeded.'


class LineLengthExceeded(InterpreterError):
    message = 'Max line length exceeded.'


class EndOfInput(InterpreterError):
    message = 'End of input.'


class IoWriteFailure(InterpreterError):
    def __init__(self, reason: OSError):
        super().__init__(f'Output write failed: {reason}')
        self.reason = reason
