"""
cmdpro command-line processor: registry + parse + rendering, in one object.

What this module provides
- CommandLineProcessor: owns a Registry and wraps the core parse with:
  • implicit aliases ("--<name>" and "/<name>" by default) for every parameter;
  • help and version terminators ("--help"/"--h", "--version"/"--v");
  • shell mode: faults and warnings are rendered on stderr with rich, the help table
    is shown and the process exits with status 1; outside shell mode they are raised
    (errors) or emitted through the warnings module (warnings);
  • access to the last ValueStore for callers that keep the processor around.

Quick start
    from cmdpro import CommandLineProcessor, ParameterType

    processor = CommandLineProcessor("tool", version="tool 1.0", shell=True)
    path = processor.add_parameter("path", ParameterType.PATH, descr="file path", aliases={"-p"})
    value = processor.add_parameter("value", ParameterType.UNSIGNED_INTEGER, descr="value", aliases={"-v"})

    if (values := processor.parse_command_line()) is not None:
        print(values.read_path(path), values.read_unsigned_integer(value))
"""
import os.path
import sys
import warnings
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .faults import *
from .matching import match
from .parameters import Registry
from .resolution import resolve
from .utils import *


class CommandLineProcessor(metaclass=IntrospectableType):
    """
    Declarative command-line processor for a flat set of named parameters.

    Parameters
    - name: Unset | str (positional-only)
      Program name used in usage lines and fault headers. Defaults to the basename
      of argv[0] at parse time.
    - version: Unset | str
      Text printed by the version terminators.
    - descr: Unset | str
      Short description shown under the usage line.
    - prefixes: iterable of str
      Implicit alias prefixes applied to every parameter name.
    - helpers / versioners: iterable of str
      Terminator tokens for help and version output. They are reserved: no
      parameter may use them as aliases.
    - shell / fancy / colorful: bool
      Rendering switches (see module docstring).
    """

    __introspectable__ = (
        "name",
        "version",
        "descr",
        "registry",
        "helpers",
        "versioners",
        "values",
        "aborted",
        "shell",
        "fancy",
        "colorful",
    )
    __displayable__ = (
        "name",
        "version",
        "registry",
        "values",
        "aborted",
    )

    def __init__(
            self,
            name=Unset,
            /,
            version=Unset,
            descr=Unset,
            *,
            prefixes=("--", "/"),
            helpers=("--help", "--h"),
            versioners=("--version", "--v"),
            shell=False,
            fancy=False,
            colorful=True,
    ):
        for key, object in (("name", name), ("version", version), ("descr", descr)):
            if not isinstance(object, str | Text | Unset):
                raise TypeError(f"{type(self).__typename__} {key!r} must be a string")
            elif isinstance(object, str) and not object.strip():
                raise ValueError(f"{type(self).__typename__} {key!r} cannot be empty")

        self._name = coalesce(name)
        self._version = coalesce(version)
        self._descr = coalesce(descr)
        self._helpers = frozenset(helpers)
        self._versioners = frozenset(versioners)
        self._registry = Registry(prefixes=prefixes, reserved=self._helpers | self._versioners)
        self._values = None
        self._aborted = False
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._stderr = False

    @property
    def prog(self):
        """
        Program name for messages: explicit name, else basename of argv[0].
        """
        if self._name is not None:
            return str(self._name)
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cmdpro"

    def add_parameter(self, name, type, required=False, default=Unset, descr=Unset, aliases=()):
        """
        Register a parameter with every detail; see Registry.register().

        Implicit aliases that equal a help or version token ("--h" for a parameter
        named "h") are left out; the terminator keeps the token.
        """
        return self._registry.register(name, type, required, default, descr, aliases)

    def add_simple_parameter(self, name, type, descr=Unset):
        """
        Register a required parameter reachable through its implicit aliases only.
        """
        return self._registry.register(name, type, True, Unset, descr)

    def add_optional_parameter(self, name, type, default=Unset, descr=Unset):
        """
        Register an optional parameter (with a default when one is given).
        """
        return self._registry.register(name, type, False, default, descr)

    def get_parameter_value(self, name, /):
        """
        Return the ResolvedValue of 'name' from the last parse, or None.
        """
        if self._values is None:
            return None
        return self._values.get(getattr(name, "name", name))

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this processor's rendering options merged in.

        In shell mode, the help table is printed on stderr before an error.
        """
        if isinstance(fault, ParameterException) and self._shell:
            self._stderr = True
            try:
                self._helper()
            finally:
                self._stderr = False
        trigger(fault, **options, prog=self.prog, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def parse(self, tokens, /):
        """
        Parse 'tokens' (argument vector without the program name).

        Returns
        - ValueStore on success (also kept as self.values);
        - None when a help/version terminator was met (self.aborted becomes True).

        Errors
        - ParseError subclasses outside shell mode; in shell mode the fault is
          rendered and the process exits with status 1.
        """
        self._values = None
        self._aborted = False
        self._registry.freeze()

        fault = None
        with warnings.catch_warnings(record=True) as records:
            warnings.simplefilter("always")
            try:
                raw = match(self._registry, tokens, self._helpers | self._versioners)
                if raw.terminator is None:
                    values = resolve(self._registry, raw)
            except ParseError as exception:
                fault = exception

        # warnings first, they are context for whatever comes next
        for warning in map(lambda x: x.message, records):
            if isinstance(warning, ParameterWarning):
                self.trigger(warning)
            else:
                warnings.warn(warning, stacklevel=2)

        if fault is not None:
            return self.trigger(fault)

        if raw.terminator in self._helpers:
            self._aborted = True
            return self._helper()
        if raw.terminator in self._versioners:
            self._aborted = True
            return self._versioner()

        self._values = values
        return values

    def parse_command_line(self, argv=Unset, /):
        """
        Parse the process argument vector (sys.argv by default), skipping argv[0].
        """
        argv = list(coalesce(argv, sys.argv))
        if self._name is None and argv and argv[0]:
            self._name = os.path.basename(argv[0])
        return self.parse(argv[1:])

    def _styles(self):
        return defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "group-label": "bold #FFFFFF",
            "alias": "bold #00E6FF",
            "flag-alias": "bold #22C55E",
            "type": "bold #FFD600",
            "required": "bold #EF4444",
            "default": "#E5E7EB",
            "argument-description": "#9CA3AF",
            "table-border": "#4B5563",
            "panel-title": "bold #FF4D94",
            "version": "bold #E6E6F0",
        } | getattr(__import__('__main__'), "__styles__", {}))

    def _helper(self):
        """
        Render the help table: usage, description, then one row per parameter
        with its aliases, type, requiredness, default and description.

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        console = Console(stderr=self._stderr)
        styles = self._styles()

        def styler(style):
            return styles[style] if self._colorful else ""

        renders = [Text.assemble(
            ("USAGE", styler("usage-label")),
            " ",
            (self.prog, styler("program-name")),
            " ",
            ("[OPTIONS]", styler("usage-section")),
        )]
        if self._descr:
            renders.append(Text(str(self._descr), styler("description-section")))

        table = Table(
            box=ROUNDED if self._fancy else None,
            border_style=styler("table-border"),
            show_header=True,
            header_style=styler("group-label"),
            pad_edge=False,
        )
        for column in ("parameter", "type", "required", "default", "description"):
            table.add_column(column)

        for definition in self._registry.values():
            style = styler("flag-alias" if definition.type.flag else "alias")
            table.add_row(
                Text(", ").join(Text(alias, style) for alias in definition.aliases),
                Text(definition.type.value, styler("type")),
                Text("yes" if definition.required else "no", styler("required") if definition.required else ""),
                Text("" if definition.default is Unset else str(definition.default), styler("default")),
                Text(str(definition.descr or ""), styler("argument-description")),
            )

        renders.append(Text("OPTIONS", styler("usage-label")))
        renders.append(table)

        if self._fancy:
            console.print(Panel(Group(*renders), title=Text(self.prog, styler("panel-title")), title_align="left"))
        else:
            console.print(Group(*renders))

    def _versioner(self):
        console = Console(stderr=self._stderr)
        styles = self._styles()
        if self._version is None:
            return console.print("no version text has been set")
        console.print(Text(str(self._version), styles["version"] if self._colorful else ""))


__all__ = (
    "CommandLineProcessor",
)
