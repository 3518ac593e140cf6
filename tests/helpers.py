from __future__ import annotations

# Emits a-3, a-2, a-3, a-2, ... forever, so only a == 3 yields 0, 1, 0, 1, ...
CLOCK_SRC = """\
dec a
dec a
dec a
cpy a b
out b
inc b
out b
dec b
jnz 1 -4
"""

# Reference program for `tgl`; halts with a == 3.
TOGGLE_SRC = "cpy 2 a\ntgl a\ntgl a\ntgl a\ncpy 1 a\ndec a\ndec a\n"

# Same shape with a fourth `tgl a`; both later `tgl`s become `inc`, so it halts with a == -1.
TOGGLE_FOUR_SRC = "cpy 2 a\ntgl a\ntgl a\ntgl a\ntgl a\ncpy 1 a\ndec a\ndec a\n"
