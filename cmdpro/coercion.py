"""
Parameter types and the coercion functions that turn raw tokens into typed values.

Every function in here is pure: it takes the raw text of one token and returns a
typed value or raises ValueError with a short, lowercase reason. Callers that know
which parameter is being converted (see cmdpro.resolution) translate the ValueError
into a ConversionFailureError carrying the parameter, the type and the raw text.

Numeric coercions are strict: no surrounding whitespace, no digit separators, and
out-of-range values are rejected rather than truncated.
"""
import re
from enum import Enum
from pathlib import Path, PurePath

# 64-bit bounds for the integer types
UNSIGNED_MAXIMUM = 2 ** 64 - 1
SIGNED_MINIMUM = -2 ** 63
SIGNED_MAXIMUM = 2 ** 63 - 1


class ParameterType(Enum):
    """
    Closed set of parameter kinds; decides the coercion function and the valid accessor.
    """
    TEXT = "text"
    UNSIGNED_INTEGER = "unsigned integer"
    SIGNED_INTEGER = "signed integer"
    FLOATING_POINT = "floating point"
    FLAG = "flag"
    BOOLEAN = "boolean"
    PATH = "path"

    @property
    def flag(self):
        """
        Whether the type is presence-only (its alias consumes no following token).
        """
        return self is ParameterType.FLAG


def coerce_text(raw, /):
    if not isinstance(raw, str):
        raise ValueError("text expected")
    return raw


def coerce_unsigned_integer(raw, /):
    if not isinstance(raw, str) or not re.fullmatch(r"\+?[0-9]+", raw):
        raise ValueError("not an unsigned decimal integer")
    if (value := int(raw)) > UNSIGNED_MAXIMUM:
        raise ValueError("out of range (maximum is %d)" % UNSIGNED_MAXIMUM)
    return value


def coerce_signed_integer(raw, /):
    if not isinstance(raw, str) or not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise ValueError("not a decimal integer")
    if not SIGNED_MINIMUM <= (value := int(raw)) <= SIGNED_MAXIMUM:
        raise ValueError("out of range (%d to %d)" % (SIGNED_MINIMUM, SIGNED_MAXIMUM))
    return value


def coerce_floating_point(raw, /):
    # float() is lenient with whitespace and underscores; the command line is not
    if not isinstance(raw, str) or not raw or raw != raw.strip() or "_" in raw:
        raise ValueError("not a floating point number")
    try:
        return float(raw)
    except ValueError:
        raise ValueError("not a floating point number") from None


def coerce_flag(raw, /):
    """
    Presence → True, absence → False. The matcher records presence as True.
    """
    if not isinstance(raw, bool):
        raise ValueError("flags take no value")
    return raw


def coerce_boolean(raw, /):
    match raw:
        case "true":
            return True
        case "false":
            return False
    raise ValueError("expected 'true' or 'false'")


def coerce_path(raw, /):
    """
    Any syntactically valid path; existence on disk is the caller's concern.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("empty path")
    if "\x00" in raw:
        raise ValueError("path contains a NUL character")
    return Path(raw)


def coerce(type, raw, /):
    """
    Dispatch the raw value to the coercion function of 'type'.
    """
    match type:
        case ParameterType.TEXT:
            return coerce_text(raw)
        case ParameterType.UNSIGNED_INTEGER:
            return coerce_unsigned_integer(raw)
        case ParameterType.SIGNED_INTEGER:
            return coerce_signed_integer(raw)
        case ParameterType.FLOATING_POINT:
            return coerce_floating_point(raw)
        case ParameterType.FLAG:
            return coerce_flag(raw)
        case ParameterType.BOOLEAN:
            return coerce_boolean(raw)
        case ParameterType.PATH:
            return coerce_path(raw)
    raise TypeError("coerce() argument must be a parameter type")


def conform(type, default, /):
    """
    Validate a registration-time default against 'type' and return its canonical form.

    Defaults are never coerced from text at parse time, so they must already be
    well-typed here:
    - TEXT: str
    - UNSIGNED_INTEGER / SIGNED_INTEGER: int (bool rejected) within range
    - FLOATING_POINT: float, or int widened to float
    - FLAG / BOOLEAN: bool
    - PATH: PurePath, or a non-empty str normalized to Path

    Raises
    - TypeError: the default is not of the expected kind.
    - ValueError: the default is of the expected kind but out of range/empty.
    """
    match type:
        case ParameterType.TEXT:
            if isinstance(default, str):
                return default
        case ParameterType.UNSIGNED_INTEGER | ParameterType.SIGNED_INTEGER:
            if isinstance(default, int) and not isinstance(default, bool):
                if type is ParameterType.UNSIGNED_INTEGER and not 0 <= default <= UNSIGNED_MAXIMUM:
                    raise ValueError(f"{type.value} default {default!r} is out of range")
                if type is ParameterType.SIGNED_INTEGER and not SIGNED_MINIMUM <= default <= SIGNED_MAXIMUM:
                    raise ValueError(f"{type.value} default {default!r} is out of range")
                return default
        case ParameterType.FLOATING_POINT:
            if isinstance(default, float):
                return default
            if isinstance(default, int) and not isinstance(default, bool):
                try:
                    return float(default)
                except OverflowError:
                    raise ValueError(f"{type.value} default {default!r} is out of range") from None
        case ParameterType.FLAG | ParameterType.BOOLEAN:
            if isinstance(default, bool):
                return default
        case ParameterType.PATH:
            if isinstance(default, PurePath):
                return default
            if isinstance(default, str):
                return coerce_path(default)
        case _:
            raise TypeError("conform() argument must be a parameter type")
    raise TypeError(f"{type.value} default must not be {default!r}")


__all__ = (
    "ParameterType",
    "UNSIGNED_MAXIMUM",
    "SIGNED_MINIMUM",
    "SIGNED_MAXIMUM",
    "coerce_text",
    "coerce_unsigned_integer",
    "coerce_signed_integer",
    "coerce_floating_point",
    "coerce_flag",
    "coerce_boolean",
    "coerce_path",
    "coerce",
    "conform",
)
