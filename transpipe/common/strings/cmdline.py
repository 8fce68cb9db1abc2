# transpipe/common/strings/cmdline.py
from __future__ import annotations

from typing import List

from transpipe.domain.errors import TokenizeError

_BLANKS = (" ", "\t")
_QUOTES = ('"', "'")


def parse_command_line(command: str) -> List[str]:
    """
    Split a free-form command string into an argv list.

    Small state machine over three states:
      - start:  skipping blanks between arguments
      - arg:    inside an unquoted argument; a blank ends it
      - quotes: inside '...' or "..."; only the matching quote ends it

    Outside quotes a backslash copies the next character literally.
    The escape flag starts *set*, so the first character of the command is
    always taken literally and can neither open quotes nor end an argument:
    ' -i x' -> [' -i', 'x'] and '"a b"' is an unclosed quote.
    Callers depend on that, keep it.

    Raises TokenizeError when the command ends inside quotes.
    """
    args: List[str] = []
    state = "start"
    current = ""
    quote = '"'
    escape_next = True

    for c in command:
        if state == "quotes":
            if c != quote:
                current += c
            else:
                args.append(current)
                current = ""
                state = "start"
            continue

        if escape_next:
            current += c
            escape_next = False
            continue

        if c == "\\":
            escape_next = True
            continue

        if c in _QUOTES:
            state = "quotes"
            quote = c
            continue

        if state == "arg":
            if c in _BLANKS:
                args.append(current)
                current = ""
                state = "start"
            else:
                current += c
            continue

        if c not in _BLANKS:
            state = "arg"
            current += c

    if state == "quotes":
        raise TokenizeError(f"Unclosed quote in command line: {command}", command=command)

    if current != "":
        args.append(current)

    return args
