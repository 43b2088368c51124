from ibf.common.conf import TAPE_SIZE, CELL_MASK


class Tape():
    cells: bytearray
    cursor: int

    def __init__(self, size: int = TAPE_SIZE):
        self.cells = bytearray(size)
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.cells)

    def increment(self):
        self.cells[self.cursor] = (self.cells[self.cursor] + 1) & CELL_MASK

    def decrement(self):
        self.cells[self.cursor] = (self.cells[self.cursor] - 1) & CELL_MASK

    def move_left(self):
        self.cursor = (self.cursor - 1) % len(self.cells)

    def move_right(self):
        self.cursor = (self.cursor + 1) % len(self.cells)

    def read(self) -> int:
        return self.cells[self.cursor]

    def write(self, value: int):
        self.cells[self.cursor] = value & CELL_MASK

    def peek(self, start: int, count: int) -> bytes:
        end = min(start + count, len(self.cells))
        return bytes(self.cells[start:end])
