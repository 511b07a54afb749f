"""
cmdpro resolved values and the read-only store handed back by a parse.

- ResolvedValue: tagged variant (type, payload). The payload is the coerced value or
  Unset, the absence marker of an optional parameter that was neither matched nor
  defaulted. Absence is distinct from a coerced zero or empty value.
- ValueStore: immutable mapping name → ResolvedValue with one accessor per type.
  Accessors never coerce; they only check the tag and hand the payload back.
"""
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from .coercion import ParameterType
from .faults import TypeMismatchError, NoValueError
from .utils import *


class ResolvedValue(NamedTuple):
    type: ParameterType
    payload: object = Unset

    @property
    def present(self):
        return self.payload is not Unset


class ValueStore(Mapping, metaclass=IntrospectableType):
    """
    Read-only snapshot of the values of one parse.

    Keys are parameter names; accessors accept either a name or the definition
    handle returned by registration. Reading a name that was never registered
    raises KeyError.

    Accessors
    - read_text, read_unsigned_integer, read_signed_integer, read_floating_point,
      read_flag, read_boolean, read_path, and the generic read(name, type).

    Errors (scoped to the single read)
    - TypeMismatchError: the stored tag differs from the accessor's type.
    - NoValueError: the parameter holds the absence marker and no fallback was given.
    """

    __introspectable__ = (
        "contents",
    )

    def __init__(self, values=()):
        values = dict(values)
        for name, value in values.items():
            if not isinstance(value, ResolvedValue):
                raise TypeError(f"{type(self).__typename__} value of {name!r} must be a resolved value")
        self._contents = MappingProxyType(values)

    def __getitem__(self, name):
        return self._contents[getattr(name, "name", name)]

    def __iter__(self):
        return iter(self._contents)

    def __len__(self):
        return len(self._contents)

    def read(self, name, type, /, fallback=Unset):
        """
        Return the payload of 'name' when it is tagged 'type'.

        'fallback' is returned instead of raising NoValueError when the parameter
        holds no value.
        """
        if not isinstance(type, ParameterType):
            raise TypeError("read() type must be a parameter type")
        value = self[name]
        name = getattr(name, "name", name)
        if value.type is not type:
            raise TypeMismatchError(
                "parameter %r holds a %s value, not a %s value" % (name, value.type.value, type.value),
                hint="read it with read_%s()" % value.type.name.lower(),
                parameter=name,
                expected=type,
                actual=value.type,
            )
        if not value.present:
            if fallback is not Unset:
                return fallback
            raise NoValueError(
                "parameter %r was not given and has no default" % name,
                hint="pass a fallback or register a default for %r" % name,
                parameter=name,
            )
        return value.payload

    def read_text(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.TEXT, fallback)

    def read_unsigned_integer(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.UNSIGNED_INTEGER, fallback)

    def read_signed_integer(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.SIGNED_INTEGER, fallback)

    def read_floating_point(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.FLOATING_POINT, fallback)

    def read_flag(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.FLAG, fallback)

    def read_boolean(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.BOOLEAN, fallback)

    def read_path(self, name, /, fallback=Unset):
        return self.read(name, ParameterType.PATH, fallback)


__all__ = (
    "ResolvedValue",
    "ValueStore",
)
