import logging as lg
from typing import Iterable

import ibf.common.ops as ops
from ibf.common.conf import DUMP_CELLS
from ibf.common.settings import Settings
from ibf.runtime.tape import Tape
from ibf.runtime.devices import InputDevice, OutputDevice
from ibf.runtime.executor import Executor
from ibf.runtime.loop import LoopBuffer, run_loop
from ibf.runtime.errors import (
    UnmatchedLoopEnd, UnmatchedLoopStart,
    LoopBufferCapacityExceeded, LoopDepthExceeded
)


class Context:
    settings: Settings
    tape: Tape
    loop: LoopBuffer
    executor: Executor

    def __init__(
        self,
        stdin: InputDevice,
        stdout: OutputDevice,
        settings: Settings | None = None
    ):
        self.settings = settings if settings is not None else Settings()
        self.tape = Tape(self.settings.tape_size)
        self.loop = LoopBuffer(self.settings.loop_buffer_size, self.settings.max_loop_depth)
        self.executor = Executor(self.tape, stdin, stdout)

    @property
    def depth(self) -> int:
        return self.loop.depth

    def debug_dump(self):
        cells = self.tape.peek(0, DUMP_CELLS)
        cursor = self.tape.cursor
        lg.debug(' '.join(str(v) for v in cells))
        lg.debug('  ' * cursor + '^')
        lg.debug('  ' * cursor + str(cursor))


def run_pending(context: Context):
    try:
        run_loop(context.executor, context.loop.body)
    finally:
        context.loop.clear()


def feed_char(context: Context, c: str):
    loop = context.loop

    if c == ops.LOOP_START:
        loop.open()

    elif c == ops.LOOP_END:
        if not loop.is_open():
            raise UnmatchedLoopEnd()

        if loop.close():
            lg.debug(f'Loop of {len(loop)} buffered')
            run_pending(context)

    elif loop.is_open():
        if c in ops.SIMPLE:
            loop.append(c)

    else:
        context.executor.execute(c)


def feed(context: Context, chunk: str):
    ''' Processes one chunk, an open loop carries over to the next one '''
    try:
        for c in chunk:
            feed_char(context, c)

            if context.settings.trace:
                context.debug_dump()

    except (LoopBufferCapacityExceeded, LoopDepthExceeded):
        lg.debug('Pending loop discarded')
        context.loop.clear()
        raise


def end_of_stream(context: Context):
    if context.loop.is_open():
        context.loop.clear()
        raise UnmatchedLoopStart()


def run(context: Context, chunks: Iterable[str]):
    for chunk in chunks:
        feed(context, chunk)

    end_of_stream(context)
