from __future__ import annotations


class ProgramError(Exception):
    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        prefix = ""
        if line is not None:
            prefix = f"line {line}: "
        super().__init__(prefix + str(message))


class VMError(Exception):
    """Raised only by strict-mode execution when an operand has the wrong kind."""
