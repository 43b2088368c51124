import ibf.common.conf as conf


class Settings:
    tape_size: int
    loop_buffer_size: int
    max_loop_depth: int
    max_line_length: int
    trace: bool

    def __init__(self):
        self.tape_size = conf.TAPE_SIZE
        self.loop_buffer_size = conf.LOOP_BUFFER_SIZE
        self.max_loop_depth = conf.MAX_LOOP_DEPTH
        self.max_line_length = conf.MAX_LINE_LENGTH
        self.trace = False

    @staticmethod
    def check_size(name: str, value: int):
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f'{name} must be a positive integer, got {value!r}')

        return value

    def update(
        self,
        tape_size: int | None = None,
        loop_buffer_size: int | None = None,
        max_loop_depth: int | None = None,
        max_line_length: int | None = None,
        trace: bool | None = None
    ):
        if tape_size is not None:
            self.tape_size = self.check_size('tape_size', tape_size)

        if loop_buffer_size is not None:
            self.loop_buffer_size = self.check_size('loop_buffer_size', loop_buffer_size)

        if max_loop_depth is not None:
            self.max_loop_depth = self.check_size('max_loop_depth', max_loop_depth)

        if max_line_length is not None:
            self.max_line_length = self.check_size('max_line_length', max_line_length)

        if trace is not None:
            self.trace = trace

        return self
