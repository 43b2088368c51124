import os
import sys
import platform
from pathlib import Path
import logging as lg
from typing import BinaryIO

import click

import ibf.common.conf as conf
from ibf.common.settings import Settings
from ibf.runtime.devices import ConsoleInput, ConsoleOutput
from ibf.runtime.interpreter import Context, feed, end_of_stream
from ibf.runtime.errors import InterpreterError, LineLengthExceeded, EndOfInput, IoWriteFailure


EXIT_OK = 0
EXIT_INTERPRETER_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_END_OF_INPUT = 4

PROMPT = '>>> '
CONTINUATION_PROMPT = '... '

CONSOLE_COMMANDS = {
    'help': (
        'Type instructions + - < > . , [ ] at the prompt and press enter.\n'
        'A loop may span several lines, "..." is shown until it is closed.\n'
        'Any other character is a comment. End the session with EOF (Ctrl-D).'
    ),
    'copyright': 'Copyright (c) the IBF authors.\nAll Rights Reserved.',
    'credits': 'The brainfuck language was designed by Urban Mueller in 1993.',
    'license': 'IBF is distributed under the MIT License.'
}


def read_line(stream: BinaryIO, limit: int = conf.MAX_LINE_LENGTH, until: bytes = b'\n') -> str | None:
    '''
    Reads one line without its terminator, None at the end of the stream.

    A line longer than the limit is consumed up to its terminator and
    reported as LineLengthExceeded.
    '''

    line = bytearray()

    while True:
        ch = stream.read(1)

        if not ch:
            if not line:
                return None
            break

        if ch == until:
            break

        if len(line) >= limit:
            while ch and ch != until:
                ch = stream.read(1)

            raise LineLengthExceeded()

        line += ch

    return line.decode('latin-1').rstrip('\r')


def flush_pending_input(stream: BinaryIO):
    if not stream.isatty():
        return

    if sys.platform == 'win32':
        import msvcrt

        while msvcrt.kbhit():
            msvcrt.getch()
    else:
        import termios

        termios.tcflush(stream.fileno(), termios.TCIFLUSH)


def unbuffered(stream: BinaryIO) -> BinaryIO:
    ''' Raw stream under a buffered one, a terminal flush then leaves nothing behind '''
    return getattr(stream, 'raw', stream)


def detach_stdout():
    ''' Points the stdout descriptor at devnull so the exit-time flush cannot fail again '''
    try:
        fd = sys.stdout.fileno()
    except (OSError, ValueError):
        return

    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


def banner() -> str:
    python = f'{platform.python_implementation()} {platform.python_version()}'
    return f'IBF {conf.VERSION} (tags/v{conf.VERSION}) [{python}] on {sys.platform}'


def report(e: InterpreterError):
    click.echo(f'Error: {e}', err=True)


def run_console(context: Context, stream: BinaryIO):
    ''' Interactive session, errors are reported and the session goes on unless output fails '''
    click.echo(banner(), err=True)
    click.echo(
        'Type "help", "copyright", "credits" or "license" for more information.',
        err=True
    )

    limit = context.settings.max_line_length
    stdout = context.executor.stdout

    while True:
        stdout.flush()
        click.echo(CONTINUATION_PROMPT if context.loop.is_open() else PROMPT, err=True, nl=False)

        try:
            line = read_line(stream, limit)

            if line is None:
                click.echo(err=True)
                break

            if line.strip() in CONSOLE_COMMANDS and not context.loop.is_open():
                click.echo(CONSOLE_COMMANDS[line.strip()], err=True)
                continue

            feed(context, line)

        except EndOfInput:
            lg.info('Program input exhausted')
            break

        except IoWriteFailure:
            raise

        except InterpreterError as e:
            report(e)

        except KeyboardInterrupt:
            click.echo('\nKeyboardInterrupt', err=True)

        flush_pending_input(stream)

    stdout.flush()
    end_of_stream(context)


def run_file(context: Context, stream: BinaryIO):
    limit = context.settings.max_line_length
    stdout = context.executor.stdout

    while True:
        line = read_line(stream, limit)

        if line is None:
            break

        feed(context, line)
        stdout.flush()

    end_of_stream(context)


def run_command(context: Context, command: str):
    feed(context, command)
    context.executor.stdout.flush()
    end_of_stream(context)


def execute(context: Context, stream: BinaryIO, command: str | None, program: str | None):
    if command is not None:
        run_command(context, command)
        return

    if program is not None and program != '-':
        path = Path(program)

        try:
            source = path.open('rb')
        except OSError as e:
            click.echo(f"ibf: Cannot open file '{program}': [Errno {e.errno}] {e.strerror}", err=True)
            sys.exit(EXIT_INTERPRETER_ERROR)

        with source:
            run_file(context, source)

        return

    if program is None and stream.isatty():
        run_console(context, stream)
    else:
        run_file(context, stream)


def print_version(ctx: click.Context, _param: click.Parameter, value: bool):
    if not value or ctx.resilient_parsing:
        return

    click.echo(f'IBF {conf.VERSION}', err=True)
    ctx.exit()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.pass_context
@click.option(
    '-v', '--version', is_flag=True, expose_value=False, is_eager=True,
    callback=print_version, help='Prints the version and exits'
)
@click.option('-c', '--command', type=str, help='Program passed in as a string')
@click.option('--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--trace', is_flag=True, help='Dumps the tape after every character')
@click.option('--tape-size', type=click.IntRange(min=1), help='Number of tape cells')
@click.option('--loop-buffer-size', type=click.IntRange(min=1), help='Capacity of a pending loop')
@click.option('--max-loop-depth', type=click.IntRange(min=1), help='Nesting limit of a pending loop')
@click.option('--max-line-length', type=click.IntRange(min=1), help='Longest accepted source line')
@click.argument('program', type=str, required=False)
def run(ctx: click.Context, command: str | None, program: str | None, verbose: bool, **params):
    ''' Runs PROGRAM (a file, or - for stdin) or an interactive console '''
    ctx.ensure_object(Settings)
    ctx.obj.update(**params)

    lg.basicConfig(level=lg.DEBUG if verbose or ctx.obj.trace else lg.WARNING)
    lg.info(f'IBF {conf.VERSION}')

    stream = sys.stdin.buffer

    if command is None and program is None and stream.isatty():
        stream = unbuffered(stream)

    stdout = ConsoleOutput(sys.stdout.buffer)
    context = Context(ConsoleInput(stream), stdout, ctx.obj)
    status = EXIT_OK
    output_failed = False

    try:
        execute(context, stream, command, program)

    except EndOfInput:
        lg.info('Execution stopped, program input exhausted')
        status = EXIT_END_OF_INPUT

    except IoWriteFailure as e:
        report(e)
        status = EXIT_INTERPRETER_ERROR
        output_failed = True

    except InterpreterError as e:
        report(e)
        status = EXIT_INTERPRETER_ERROR

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        status = EXIT_KEYBOARD

    if not output_failed:
        try:
            stdout.flush()
        except IoWriteFailure as e:
            report(e)
            status = EXIT_INTERPRETER_ERROR
            output_failed = True

    if output_failed:
        detach_stdout()

    lg.info('Execution finished')
    sys.exit(status)


if __name__ == '__main__':
    run()
