"""
cmdpro command-line matcher: bind raw tokens to registered parameters.

Algorithm
- Walk the tokens left to right with a cursor.
- A token equal to a known alias binds its parameter:
  • flag parameters take no value: presence is recorded and the cursor advances by one;
  • any other parameter consumes the next token as its raw value and the cursor
    advances by two (MissingValueForParameterError when there is no next token).
- A token that is no alias fails with UnrecognizedTokenError; nothing is ignored or
  passed through, not even value-looking tokens before the first alias.
- A parameter bound more than once keeps its last raw value ("last flag wins"), which
  lets callers override earlier settings by repeating an alias.
- A terminator token (e.g. a help switch) at an alias position stops the scan; the
  match so far is returned together with the terminator.
"""
import difflib
from collections.abc import Iterable
from types import MappingProxyType
from typing import NamedTuple

from .faults import UnrecognizedTokenError, MissingValueForParameterError
from .utils import *


class RawMatch(NamedTuple):
    """
    Transient result of one scan.

    - values: name → raw text, or True for a present flag.
    - positions: name → 1-based position of the alias that produced the value.
    - terminator: the terminator token that stopped the scan, or None.
    """
    values: MappingProxyType
    positions: MappingProxyType
    terminator: str | None = None


def match(registry, tokens, /, terminators=frozenset()):
    """
    Scan 'tokens' against 'registry' and return a RawMatch.

    Parameters
    - registry: Registry providing lookup(alias).
    - tokens: iterable of str, the argument vector without the program name.
    - terminators: tokens that stop the scan when found at an alias position.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("match() tokens must be an iterable of strings")
    tokens = tuple(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("match() tokens must be an iterable of strings")

    values = {}
    positions = {}
    terminator = None
    cursor = 0

    while cursor < len(tokens):
        token = tokens[cursor]

        if token in terminators:
            terminator = token
            break

        definition = registry.lookup(token)
        if definition is None:
            suggestions = difflib.get_close_matches(token, registry.aliases.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "use one of the registered aliases"
            raise UnrecognizedTokenError(
                "unrecognized token %r at %s position" % (token, ordinal(cursor + 1)),
                hint=hint,
                token=token,
                index=cursor + 1,
                suggestions=tuple(suggestions),
            )

        if definition.type.flag:
            values[definition.name] = True
            positions[definition.name] = cursor + 1
            cursor += 1
            continue

        if cursor + 1 >= len(tokens):
            raise MissingValueForParameterError(
                "parameter %r at %s position expects a value after %r" % (
                    definition.name, ordinal(cursor + 1), token
                ),
                hint="pass it as '%s <value>'" % token,
                parameter=definition.name,
                token=token,
                index=cursor + 1,
            )

        # last occurrence wins
        values[definition.name] = tokens[cursor + 1]
        positions[definition.name] = cursor + 1
        cursor += 2

    return RawMatch(MappingProxyType(values), MappingProxyType(positions), terminator)


__all__ = (
    "RawMatch",
    "match",
)
