import logging as lg

import ibf.common.ops as ops
from ibf.common.conf import LOOP_BUFFER_SIZE, MAX_LOOP_DEPTH
from ibf.runtime.executor import Executor
from ibf.runtime.errors import LoopBufferCapacityExceeded, LoopDepthExceeded


class LoopBuffer:
    '''
    Characters of the pending top-level loop, outer brackets included.

    While depth is above zero every instruction is recorded here instead
    of being executed. The buffer is complete when depth gets back to 0.
    '''

    body: list[str]
    depth: int

    def __init__(self, capacity: int = LOOP_BUFFER_SIZE, max_depth: int = MAX_LOOP_DEPTH):
        self.capacity = capacity
        self.max_depth = max_depth
        self.body = []
        self.depth = 0

    def __len__(self) -> int:
        return len(self.body)

    def is_open(self) -> bool:
        return self.depth > 0

    def append(self, c: str):
        if len(self.body) >= self.capacity:
            raise LoopBufferCapacityExceeded()

        self.body.append(c)

    def open(self):
        if self.depth >= self.max_depth:
            raise LoopDepthExceeded()

        self.append(ops.LOOP_START)
        self.depth += 1

    def close(self) -> bool:
        ''' Returns True when the outermost loop got closed '''
        self.append(ops.LOOP_END)
        self.depth -= 1
        return self.depth == 0

    def clear(self):
        self.body = []
        self.depth = 0


def skip_loop(body: list[str] | str, p: int) -> int:
    ''' Position right after the bracket matching the one at p '''
    depth = 0

    while True:
        c = body[p]
        p += 1

        if c == ops.LOOP_START:
            depth += 1
        elif c == ops.LOOP_END:
            depth -= 1

            if depth == 0:
                return p


def run_loop(executor: Executor, body: list[str] | str):
    '''
    Interprets a complete bracket-balanced loop.

    Jumps are resolved with a stack of open bracket positions; a nested
    loop whose guard is zero is skipped without executing any of it.
    '''

    tape = executor.tape

    if tape.read() == 0:
        lg.debug(f'Loop of {len(body)} skipped')
        return

    lg.debug(f'Loop of {len(body)} entered')

    stack: list[int] = []
    p = 0

    while p < len(body):
        c = body[p]

        if c == ops.LOOP_START:
            if tape.read() == 0:
                p = skip_loop(body, p)
            else:
                stack.append(p)
                p += 1

        elif c == ops.LOOP_END:
            if tape.read() != 0:
                p = stack[-1] + 1
            else:
                stack.pop()
                p += 1

        else:
            executor.execute(c)
            p += 1
