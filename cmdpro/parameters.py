"""
cmdpro parameter definitions and the registry that owns them.

Overview
- ParameterDefinition: immutable record {name, type, required, default, descr, aliases}.
  Metadata is sanitized on construction; malformed metadata raises TypeError/ValueError.
- Registry: ordered mapping name → ParameterDefinition plus an alias index for O(1)
  lookups while matching. Uniqueness of names and aliases is enforced across the
  whole registry and reported as DuplicateDefinitionError.

Lifecycle
- Built incrementally with register(...) during setup.
- Frozen by the first parse; later registrations raise RuntimeError.

Quick example:
    >>> from cmdpro import Registry, ParameterType
    >>> registry = Registry()
    >>> path = registry.register("path", ParameterType.PATH, aliases={"-p"})
    >>> registry.lookup("-p") is path
    True
"""
import builtins
from collections.abc import Iterable, Mapping

from rich.text import Text

from .coercion import ParameterType, conform
from .faults import DuplicateDefinitionError
from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate definition metadata in place.

    - name: non-empty string (trimmed).
    - type: ParameterType member.
    - default: Unset, or a value accepted by conform(type, default).
    - descr: Unset | str | Text, non-empty when provided; Unset becomes None.
    - aliases: iterable of non-empty strings without duplicates. Strings are
      rejected as a whole to avoid silently splitting "-p" into "-" and "p".
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["type"], ParameterType):
        raise TypeError(f"{cls.__typename__} 'type' must be a parameter type")

    if metadata["default"] is not Unset:
        metadata["default"] = conform(metadata["type"], metadata["default"])

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if isinstance(metadata["aliases"], str) or not isinstance(metadata["aliases"], Iterable):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
    aliases = []
    for alias in metadata["aliases"]:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        elif not alias or alias != alias.strip():
            raise ValueError(f"{cls.__typename__} aliases must be non-empty tokens without surrounding spaces")
        elif alias in aliases:
            raise ValueError(f"{cls.__typename__} 'aliases' cannot contain duplicates")
        aliases.append(alias)
    metadata["aliases"] = tuple(aliases)


class ParameterDefinition(metaclass=IntrospectableType):
    """
    Named, typed command-line parameter.

    The definition is the handle returned by Registry.register(); its identity for
    value lookups is its name. Every field is exposed as a read-only property.

    Properties
    - name: str
    - type: ParameterType
    - required: bool
    - default: the conformed default, or Unset when none was registered
    - descr: str | Text | None
    - aliases: tuple[str, ...] in declaration order (implicit aliases last)
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
        "default",
        "descr",
        "aliases",
    )

    def __init__(self, name, type, required=False, default=Unset, descr=Unset, aliases=()):
        metadata = {
            "name": name,
            "type": type,
            "required": bool(required),
            "default": default,
            "descr": descr,
            "aliases": aliases,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)


class Registry(Mapping, metaclass=IntrospectableType):
    """
    Ordered mapping of parameter names to definitions, with an alias index.

    Parameters
    - prefixes: iterable of str
      Implicit alias prefixes; for each prefix, "<prefix><name>" is added to the
      aliases of every registered parameter (unless already declared or reserved).
    - reserved: iterable of str
      Tokens that no parameter may declare as an alias (e.g., help and version
      switches). An implicit alias equal to a reserved token is left out, so a
      parameter named "h" keeps its other aliases while "--h" stays reserved.

    Invariants
    - names are unique;
    - aliases are unique across the registry;
    - no alias equals the name of a different parameter, and no name equals the
      alias of a different parameter.
    """

    __introspectable__ = (
        "definitions",
        "aliases",
        "prefixes",
        "reserved",
        "frozen",
    )
    __displayable__ = (
        "definitions",
        "frozen",
    )

    def __init__(self, *, prefixes=(), reserved=()):
        metadata = {"prefixes": prefixes, "reserved": reserved}
        for name, object in metadata.items():
            if isinstance(object, str) or not isinstance(object, Iterable):
                raise TypeError(f"{type(self).__typename__} {name!r} must be an iterable of strings")
            object = tuple(object)
            if not all(isinstance(item, str) and item for item in object):
                raise TypeError(f"{type(self).__typename__} {name!r} must be an iterable of non-empty strings")
            metadata[name] = object

        self._definitions = {}
        self._aliases = {}
        self._prefixes = metadata["prefixes"]
        self._reserved = frozenset(metadata["reserved"])
        self._frozen = False

    def __getitem__(self, name):
        return self._definitions[getattr(name, "name", name)]

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def lookup(self, alias, /):
        """
        Return the definition bound to 'alias', or None when the token is unknown.
        """
        try:
            return self._definitions[self._aliases[alias]]
        except KeyError:
            return None

    def freeze(self):
        """
        Forbid further registrations; called by the first parse.
        """
        self._frozen = True

    def register(self, name, type, required=False, default=Unset, descr=Unset, aliases=()):
        """
        Register a new parameter and return its definition (the caller's handle).

        Parameters
        - name: str — unique, non-empty identifier.
        - type: ParameterType — decides coercion and the valid accessor.
        - required: bool — fail the parse when neither matched nor defaulted.
        - default: value used, as-is, when the parameter is not matched.
        - descr: str — short help text.
        - aliases: iterable of str — tokens that designate the parameter.

        Errors
        - DuplicateDefinitionError: the name or one alias collides with an existing
          name or alias, or a declared alias is reserved. Nothing is inserted in that case.
        - TypeError/ValueError: malformed metadata (see ParameterDefinition).
        - RuntimeError: the registry is frozen.
        """
        if self._frozen:
            raise RuntimeError(f"{builtins.type(self).__typename__} is frozen, parameters must be registered before parsing")

        definition = ParameterDefinition(name, type, required, default, descr, aliases)
        name = definition.name

        # implicit aliases come last; declared and reserved tokens are skipped
        aliases = list(definition.aliases)
        for prefix in self._prefixes:
            implicit = prefix + name
            if implicit not in aliases and implicit not in self._reserved:
                aliases.append(implicit)
        if len(aliases) != len(definition.aliases):
            definition = ParameterDefinition(name, type, required, default, descr, aliases)

        if name in self._definitions:
            self._conflict(name, "parameter name %r is already registered" % name)
        if name in self._aliases:
            self._conflict(name, "parameter name %r is already an alias of parameter %r" % (name, self._aliases[name]))
        for alias in definition.aliases:
            if alias in self._reserved:
                self._conflict(alias, "alias %r of parameter %r is reserved" % (alias, name))
            if alias in self._aliases:
                self._conflict(alias, "alias %r of parameter %r is already bound to parameter %r" % (
                    alias, name, self._aliases[alias]
                ))
            if alias != name and alias in self._definitions:
                self._conflict(alias, "alias %r of parameter %r is the name of another parameter" % (alias, name))

        self._definitions[name] = definition
        self._aliases.update(dict.fromkeys(definition.aliases, name))
        return definition

    def _conflict(self, token, message):
        raise DuplicateDefinitionError(
            message,
            hint="choose another name or alias than %r" % token,
            token=token,
        )


__all__ = (
    "ParameterDefinition",
    "Registry",
)
