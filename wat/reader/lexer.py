"""
  Wat lexer

Turns source text into a flat list of tokens: "(", ")" or an atom string.
String literals keep their double quotes; atoms are classified by the parser.

- A double quote toggles quoting. While quoted every character, including
  parens, whitespace and ';', is part of the current token.
- Outside quotes whitespace separates tokens, parens are always their own
  token, and ';' starts a comment that runs to the end of the line.
"""

from __future__ import annotations

from typing import Iterator

from wat.errors import WatUnclosedQuote

PARENS = "()"
QUOTE = '"'
COMMENT = ";"


def lex(source: str) -> Iterator[str]:
    """Token generator over `source`."""
    buffer: list[str] = []
    quoted = False
    in_comment = False

    for ch in source:
        if in_comment:
            if ch == "\n":
                in_comment = False
            continue

        if ch == QUOTE:
            quoted = not quoted
            buffer.append(ch)
            continue

        if quoted:
            buffer.append(ch)
            continue

        if ch == COMMENT:
            if buffer:
                yield "".join(buffer)
                buffer.clear()
            in_comment = True
        elif ch.isspace():
            if buffer:
                yield "".join(buffer)
                buffer.clear()
        elif ch in PARENS:
            if buffer:
                yield "".join(buffer)
                buffer.clear()
            yield ch
        else:
            buffer.append(ch)

    if quoted:
        raise WatUnclosedQuote("Syntax error: unclosed quote")
    if buffer:
        yield "".join(buffer)


def tokenize(source: str) -> list[str]:
    """Tokenize all of `source`; raises WatUnclosedQuote on an open string."""
    return list(lex(source))
