# Cells
PLUS = '+'      # M[P] + 1 -> M[P]
MINUS = '-'     # M[P] - 1 -> M[P]

# Cursor
PREVIOUS = '<'  # P - 1 -> P
NEXT = '>'      # P + 1 -> P

# I/O
OUTPUT = '.'    # M[P] -> out
INPUT = ','     # in -> M[P]

# Flow
LOOP_START = '['    # if M[P] .eq 0 jmp past matching ]
LOOP_END = ']'      # if M[P] .ne 0 jmp past matching [

SIMPLE = frozenset((PLUS, MINUS, PREVIOUS, NEXT, OUTPUT, INPUT))
