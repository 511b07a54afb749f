"""
cmdpro faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ParameterException / ParameterWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- RegistrationError / ParseError / AccessError: the three families a caller can
  catch, one per phase (setup, parse, read).
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: parse faults include the ordinal position of the token.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The core (registry, matcher, resolution, value store) raises faults directly.
- CommandLineProcessor re-triggers them with its runtime options: in shell mode they
  are rendered via rich on stderr, otherwise they are raised/warned as usual.
"""
import copy
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across cmdpro (stable identifiers).

    grouping (by high-level domain)
    - registration (1110x)
      • DUPLICATE_DEFINITION
    - matching (1111x)
      • UNRECOGNIZED_TOKEN, MISSING_VALUE
    - resolution (1112x)
      • CONVERSION_FAILURE, MISSING_REQUIRED
    - access (1113x)
      • TYPE_MISMATCH, NO_VALUE
    - warnings (12xxx)
      • EMPTY_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registration errors (11xxx) ---
    DUPLICATE_DEFINITION = 11101

    # --- matching errors (11xxx) ---
    UNRECOGNIZED_TOKEN   = 11111
    MISSING_VALUE        = 11112

    # --- resolution errors (11xxx) ---
    CONVERSION_FAILURE   = 11121
    MISSING_REQUIRED     = 11122

    # --- access errors (11xxx) ---
    TYPE_MISMATCH        = 11131
    NO_VALUE             = 11132

    # --- warnings (12xxx) ---
    EMPTY_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    # __prog__ in __main__ wins, then the processor name, then argv[0]
    main = __import__("__main__")
    try:
        fallback = options["prog"]
    except KeyError:
        fallback = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cmdpro"
    return getattr(main, "__prog__", fallback)


def _render(fault, palette, kind):
    """
    shared rich renderer for exceptions and warnings.

    layout
    - header: "[ <prog> — <code> | <title> ]"
    - body: the message, then " → <hint>" when a hint exists
    - fancy: everything wrapped in a rounded Panel titled by the header
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", False)
    fancy = fault.options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    header = Text.assemble(
        "[ ",
        text(_program(fault.options), styler("prog-name")),
        " — ",
        text(fault.code.normalize(), styler("code")),
        " | ",
        text(fault.title.title(), styler(f"{kind}-title")),
        " ]"
    )
    message = text(fault.message, styler(f"{kind}-message"))
    renders = [message]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParameterException(Exception):
    """
    base type of every cmdpro error.

    contract
    - message: one lowercase sentence, position-first for parse faults.
    - options: read-only mapping of rendering options (code, title, hint, shell,
      fancy, colorful, prog) and structured context (token, index, parameter, ...).
      context keys are also readable as attributes (e.g., fault.token).
    """
    code = None
    title = "parameter error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationError(ParameterException): ...
class ParseError(ParameterException): ...
class AccessError(ParameterException): ...


class DuplicateDefinitionError(RegistrationError):
    code = FaultCode.DUPLICATE_DEFINITION
    title = "duplicate definition"


class UnrecognizedTokenError(ParseError):
    code = FaultCode.UNRECOGNIZED_TOKEN
    title = "unrecognized token"


class MissingValueForParameterError(ParseError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class ConversionFailureError(ParseError):
    code = FaultCode.CONVERSION_FAILURE
    title = "conversion failure"


class MissingRequiredParameterError(ParseError):
    code = FaultCode.MISSING_REQUIRED
    title = "missing required parameter"


class TypeMismatchError(AccessError):
    code = FaultCode.TYPE_MISMATCH
    title = "type mismatch"


class NoValueError(AccessError):
    code = FaultCode.NO_VALUE
    title = "no value"


class ParameterWarning(Warning):
    """
    base type of every cmdpro warning (non-fatal feedback).
    """
    code = None
    title = "parameter warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ParameterWarning):
    code = FaultCode.EMPTY_VALUE
    title = "empty value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParameterException",
    "RegistrationError",
    "ParseError",
    "AccessError",
    "DuplicateDefinitionError",
    "UnrecognizedTokenError",
    "MissingValueForParameterError",
    "ConversionFailureError",
    "MissingRequiredParameterError",
    "TypeMismatchError",
    "NoValueError",
    "ParameterWarning",
    "EmptyValueWarning",
    "trigger",
)
