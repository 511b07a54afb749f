"""
cmdpro resolution engine: reconcile matches, defaults and requiredness.

For each definition, in registration order:
1. matched     → coerce the raw value; a failure aborts with ConversionFailureError;
2. defaulted   → the registered default, as-is (defaults are conformed at registration);
3. required    → abort with MissingRequiredParameterError;
4. otherwise   → the absence marker. Flags resolve to False instead, since a
                 missing flag is itself a value.

Resolution is all-or-nothing: either a complete ValueStore covering every registered
parameter is returned, or the first fault is raised.
"""
import warnings

from .coercion import ParameterType, coerce
from .faults import ConversionFailureError, MissingRequiredParameterError, EmptyValueWarning
from .matching import match
from .utils import *
from .values import ResolvedValue, ValueStore


def _position(raw, name):
    try:
        return " at %s position" % ordinal(raw.positions[name])
    except KeyError:
        return ""


def resolve(registry, raw, /):
    """
    Build the ValueStore of 'registry' from the RawMatch 'raw'.
    """
    values = {}

    for name, definition in registry.items():
        if name in raw.values:
            text = raw.values[name]
            try:
                payload = coerce(definition.type, text)
            except ValueError as exception:
                raise ConversionFailureError(
                    "cannot convert %r to %s for parameter %r%s: %s" % (
                        text, definition.type.value, name, _position(raw, name), exception
                    ),
                    hint="pass a valid %s value for %r" % (definition.type.value, name),
                    parameter=name,
                    type=definition.type,
                    raw=text,
                    index=raw.positions.get(name),
                ) from None
            if definition.type is ParameterType.TEXT and not payload:
                warnings.warn(EmptyValueWarning(
                    "empty value for parameter %r%s" % (name, _position(raw, name)),
                    hint="pass a non-empty value or omit %r to use its default" % name,
                    parameter=name,
                    index=raw.positions.get(name),
                ), stacklevel=2)
            values[name] = ResolvedValue(definition.type, payload)
        elif definition.default is not Unset:
            values[name] = ResolvedValue(definition.type, definition.default)
        elif definition.required:
            raise MissingRequiredParameterError(
                "required parameter %r was not given" % name,
                hint="pass it with %s" % (
                    " or ".join(repr(alias) for alias in definition.aliases) or "one of its aliases"
                ),
                parameter=name,
            )
        elif definition.type is ParameterType.FLAG:
            values[name] = ResolvedValue(definition.type, coerce(definition.type, False))
        else:
            values[name] = ResolvedValue(definition.type)

    return ValueStore(values)


def parse(registry, tokens, /):
    """
    Parse 'tokens' (argument vector without program name) against 'registry'.

    The registry is frozen by the first parse. Returns a ValueStore or raises the
    first ParseError met (UnrecognizedTokenError, MissingValueForParameterError,
    ConversionFailureError, MissingRequiredParameterError).
    """
    registry.freeze()
    return resolve(registry, match(registry, tokens))


__all__ = (
    "resolve",
    "parse",
)
