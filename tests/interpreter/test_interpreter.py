import logging

import pytest

from ibf.common.settings import Settings
from ibf.runtime.devices import BytesInput
from ibf.runtime.interpreter import Context, feed, end_of_stream, run
from ibf.runtime.errors import (
    UnmatchedLoopEnd, UnmatchedLoopStart, LoopBufferCapacityExceeded,
    LoopDepthExceeded, EndOfInput, IoWriteFailure
)

from unit_utils import make_context, run_chunks, find_file, load_file, FailingOutput


@pytest.mark.parametrize('n', [0, 1, 64, 255, 256, 300])
def test_plus_wraps(n):
    assert run_chunks(['+' * n + '.']) == bytes([n % 256])


def test_multiply_scenario():
    assert run_chunks(['++++++++[>++++++++<-]>.']) == bytes([64])


def test_balanced_stream_succeeds():
    context, stdout = make_context()
    feed(context, '+++++.')
    end_of_stream(context)
    assert stdout.getvalue() == bytes([5])


def test_open_loop_at_end_of_stream():
    context, _ = make_context()
    feed(context, '++[')

    with pytest.raises(UnmatchedLoopStart):
        end_of_stream(context)

    assert context.depth == 0
    assert len(context.loop) == 0


def test_unmatched_loop_end_keeps_prior_state():
    context, stdout = make_context()

    with pytest.raises(UnmatchedLoopEnd):
        feed(context, '++.]+++.')

    assert stdout.getvalue() == bytes([2])
    assert context.tape.read() == 2

    feed(context, '+.')
    end_of_stream(context)
    assert stdout.getvalue() == bytes([2, 3])


def test_loop_spans_chunks():
    single = run_chunks(['++++++++[>++++++++<-]>.'])
    split = run_chunks(['++++++++', '[', '>++++', '++++', '<-', ']', '>.'])
    assert split == single == bytes([64])


def test_nested_loop_spans_chunks():
    chunks = ['+++', '[>++', '[>+', '<-]', '<-', ']>>.']
    assert run_chunks(chunks) == run_chunks([''.join(chunks)]) == bytes([6])


def test_loop_runs_when_closed():
    context, stdout = make_context()
    feed(context, '+++[.-')
    assert stdout.getvalue() == b''
    assert context.depth == 1

    feed(context, ']')
    assert stdout.getvalue() == bytes([3, 2, 1])
    assert context.depth == 0
    assert len(context.loop) == 0


def test_zero_guard_skips_body(monkeypatch):
    context, stdout = make_context()
    calls = []
    execute = context.executor.execute

    def counting(c: str):
        calls.append(c)
        return execute(c)

    monkeypatch.setattr(context.executor, 'execute', counting)
    feed(context, '[.....]')
    assert calls == []
    assert stdout.getvalue() == b''


@pytest.mark.parametrize('start', [1, 7, 255])
def test_clear_loop_idempotent(start):
    context, _ = make_context()
    context.tape.write(start)
    feed(context, '+[-]')
    assert context.tape.read() == 0

    feed(context, '[-]')
    assert context.tape.read() == 0


def test_digit_zero_is_a_comment():
    assert run_chunks(['+0+.0']) == bytes([2])


def test_comments_inside_loop_are_not_buffered():
    settings = Settings().update(loop_buffer_size=4)
    assert run_chunks(['+[ minus one  - ]+.'], settings=settings) == bytes([1])


def test_capacity_exceeded_discards_loop():
    settings = Settings().update(loop_buffer_size=4)
    context, stdout = make_context(settings=settings)

    with pytest.raises(LoopBufferCapacityExceeded):
        feed(context, '+[+++]')

    assert context.depth == 0
    assert len(context.loop) == 0

    feed(context, '.')
    end_of_stream(context)
    assert stdout.getvalue() == bytes([1])


def test_depth_exceeded_discards_loop():
    settings = Settings().update(max_loop_depth=2)
    context, stdout = make_context(settings=settings)
    feed(context, '+[[-]]')

    with pytest.raises(LoopDepthExceeded):
        feed(context, '+[[[-]]]')

    assert context.depth == 0
    feed(context, '.')
    assert stdout.getvalue() == bytes([1])


def test_end_of_input_propagates_and_clears_loop():
    context, stdout = make_context(b'ab')
    feed(context, ',.+')

    with pytest.raises(EndOfInput):
        feed(context, '[,.]')

    assert stdout.getvalue() == b'ab'
    assert context.depth == 0
    assert len(context.loop) == 0


def test_write_failure_propagates():
    context = Context(BytesInput(), FailingOutput())

    with pytest.raises(IoWriteFailure):
        feed(context, '+[.-]')

    assert len(context.loop) == 0


def test_contexts_are_independent():
    first, _ = make_context()
    second, _ = make_context()
    feed(first, '+++>')
    feed(second, '[')
    assert second.tape.peek(0, 2) == bytes(2)
    assert first.depth == 0
    assert second.depth == 1


def test_hello_world_by_lines():
    lines = load_file('testdata/programs/hello.b').splitlines()
    assert run_chunks(lines) == load_file('testdata/programs/hello.log').encode()


def test_echo_program():
    lines = find_file('testdata/programs/echo.b').read_text().splitlines()
    assert run_chunks(lines, data=b'semu\x00') == b'semu'


def test_run_reports_open_loop():
    context, _ = make_context()

    with pytest.raises(UnmatchedLoopStart):
        run(context, ['+', '[', '-'])


def test_trace_dumps_tape(caplog):
    settings = Settings().update(trace=True)
    context, _ = make_context(settings=settings)

    with caplog.at_level(logging.DEBUG):
        feed(context, '+>')

    messages = [r.getMessage() for r in caplog.records]
    assert '1 0 0 0 0 0 0 0 0 0' in messages
    assert '  ^' in messages
    assert '  1' in messages


def test_small_tape_wraps():
    settings = Settings().update(tape_size=2)
    assert run_chunks(['+>++>+++.<.'], settings=settings) == bytes([4, 2])
