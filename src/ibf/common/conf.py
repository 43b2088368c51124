VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0
VERSION = f'{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}'

TAPE_SIZE        = 30000    # cells
CELL_MASK        = 0xFF     # 8-bit unsigned cells
LOOP_BUFFER_SIZE = 30000    # characters of one pending top-level loop
MAX_LOOP_DEPTH   = 1000     # open brackets of one pending loop
MAX_LINE_LENGTH  = 1000     # characters of one line read from a stream

DUMP_CELLS = 10             # cells shown by a debug dump
