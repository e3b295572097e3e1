"""
Flagship faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParseException / ParseWarning: base types that carry message + options and
  know how to render themselves with rich in a short, lowercased, actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Surfacing rules
- The parser absorbs almost every anomaly silently: unknown flags are dropped and
  an optional argument that is missing resolves to "no value".
- The only error is MissingCompulsoryArgumentError, raised when an option that
  requires an argument is not followed by one.
- UnknownOptionWarning is opt-in (strict parsers) and never stops the parse.

Integration
- The parser builds a fault and calls trigger(fault, **context).
- In non-shell mode, errors are raised and warnings go through warnings.warn;
  in shell mode, both are rendered via rich on stderr and errors exit with status 1.
"""
import inspect
import sys
import warnings
from abc import ABC
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
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - errors (21xxx)
      • MISSING_COMPULSORY_ARGUMENT
    - warnings (22xxx)
      • UNKNOWN_OPTION

    normalize() lets the host remap codes to its own labels through a
    __codes__ mapping in __main__.
    """
    # --- errors (21xxx) ---
    MISSING_COMPULSORY_ARGUMENT = 21111

    # --- warnings (22xxx) ---
    UNKNOWN_OPTION              = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ has no __codes__ mapping, the numeric value is returned
        as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    """
    Build the rich renderable shared by errors and warnings.

    Layout
    - header: [ prog — code | title ]
    - body: the message
    - footer: → hint, then the docs link (when one is known)

    The palette is merged with __styles__ from __main__; when the fault is not
    colorful every style is dropped.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

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

    parser = options.get("parser")
    prog = getattr(main, "__prog__", None) or getattr(parser, "prog", None) or "flagship"
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
    if docs := options.get("docs"):
        renders.append(text(docs, styler("docs")))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParseException(Exception):
    """
    Base type for every parse error.

    Carries a message plus a read-only mapping of options (code, title, hint and
    whatever context the parser attached, e.g. the option and its token index).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

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
            "docs": "underline #00E5FF dim",  # docs link footer
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingCompulsoryArgumentError(ParseException): ...


class ParseWarning(ABC, Warning):
    """
    Base type for parse diagnostics that never stop the parse.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

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
            "docs": "underline #00E5FF dim",  # docs link footer
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors
      are raised and warnings are emitted.

    typical options
    - parser, shell, fancy, colorful, title, code, hint, docs, and any other
      context the renderer may want to show (e.g., key/token/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; when nothing is found, None is returned.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseException",
    "MissingCompulsoryArgumentError",
    "ParseWarning",
    "UnknownOptionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
