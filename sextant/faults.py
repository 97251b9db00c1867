"""
Sextant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every error kind a parse
  can end with, plus the warnings it may emit on the way.
- ParseException / ParseWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser itself never raises: nodes return error results (see sextant.results)
  and the caller decides what to do with them. Result.fault() turns an error
  result into the matching exception below.
- In non-shell mode, exceptions are raised and warnings are emitted through the
  warnings module; in shell mode, both are rendered via rich on stderr.
"""
import copy
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
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - values (2110x)
      • CONVERSION_ERROR, VALIDATION_ERROR, MISSING_VALUE
    - structure (2111x)
      • CARDINALITY_ERROR, UNRECOGNIZED_TOKEN
    - delegated (2113x)
      • RUNTIME_ERROR
    - warnings (22xxx)
      • DEPRECATED_ARGUMENT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- value errors (21xxx) ---
    CONVERSION_ERROR    = 21101
    VALIDATION_ERROR    = 21102
    MISSING_VALUE       = 21103

    # --- structural errors (21xxx) ---
    CARDINALITY_ERROR   = 21111
    UNRECOGNIZED_TOKEN  = 21112

    # --- delegated errors (21xxx) ---
    RUNTIME_ERROR       = 21131

    # --- warnings (22xxx) ---
    DEPRECATED_ARGUMENT = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    prog = text(getattr(main, "__prog__", options.get("prog") or "sextant"), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if code else "?", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left", width=console.width - 4)

    return Group(header, *renders)


class ParseException(Exception):
    """
    base type of every terminal parse fault.

    the message is the exact text the parser produced; options carry rendering
    context (code, title, hint, index, prog, shell, fancy, colorful).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
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


class ConversionError(ParseException): ...
class ValidationError(ParseException): ...
class MissingValueError(ParseException): ...
class CardinalityError(ParseException): ...
class UnrecognizedTokenError(ParseException): ...
class DelegatedError(ParseException): ...


class ParseWarning(Warning):
    """
    base type of non-fatal notices emitted while matching (never stops a parse).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=4)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedArgumentWarning(ParseWarning): ...


# error code → (exception type, default title)
_FAULTS = MappingProxyType({
    FaultCode.CONVERSION_ERROR: (ConversionError, "conversion error"),
    FaultCode.VALIDATION_ERROR: (ValidationError, "invalid value"),
    FaultCode.MISSING_VALUE: (MissingValueError, "missing value"),
    FaultCode.CARDINALITY_ERROR: (CardinalityError, "cardinality error"),
    FaultCode.UNRECOGNIZED_TOKEN: (UnrecognizedTokenError, "unrecognized token"),
    FaultCode.RUNTIME_ERROR: (DelegatedError, "rejected value"),
})


def fault(code, message, /, **options):
    """
    build the exception matching an error code.

    the default title for the code is used unless one is given in options.
    """
    try:
        cls, title = _FAULTS[code]
    except KeyError:
        raise ValueError(f"fault() code {code!r} is not an error code") from None
    return cls(message, **({"title": title, "docs": getdoc(code)} | options | {"code": code}))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted.

    typical options
    - prog, shell, fancy, colorful, title, code, hint, index.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseException",
    "ConversionError",
    "ValidationError",
    "MissingValueError",
    "CardinalityError",
    "UnrecognizedTokenError",
    "DelegatedError",
    "ParseWarning",
    "DeprecatedArgumentWarning",
    "fault",
    "trigger",
    "getdoc",
)
