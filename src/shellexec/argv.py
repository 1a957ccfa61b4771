"""Splitting command strings into argument vectors.

This is not a shell parser. Commands are split on single spaces, and a quoted
phrase containing spaces is glued back together into one argument. There is no
support for escapes, nested quotes, or more than the simple cases.
"""

import re

QUOTE_CHARS = re.compile(r"['\"]")


class EmptyCommandError(ValueError):
    """Raised when a command string contains no program to run."""


def join_continuations(command: str) -> str:
    """Remove backslash-newline line continuations."""
    return command.replace("\\\n", "")


def split_command(command: str) -> list[str]:
    """Split `command` into an argument vector.

    A token holding exactly one quote character opens a quoted span, which
    swallows following tokens until one with a single matching quote closes
    it. The opening quote character is then removed from the whole span. A
    span that is never closed is dropped.
    """
    parts: list[str] = []
    span = ""
    # Quote character that opened the current span, if any.
    span_quote: str | None = None
    for token in join_continuations(command).split(" "):
        quote_count = len(QUOTE_CHARS.findall(token))
        if span_quote is None:
            if quote_count == 1:
                span_quote = '"' if '"' in token else "'"
                span = token
            else:
                parts.append(token)
            continue
        span = f"{span} {token}"
        if quote_count == 1 and span_quote in token:
            parts.append(span.replace(span_quote, ""))
            span = ""
            span_quote = None

    if not parts or not parts[0]:
        raise EmptyCommandError(f"No program found in command: {command!r}")
    return parts
