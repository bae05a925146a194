"""
Tristate faults (errors and warnings) and rendering.

Scope
- InvalidLiteralError: the single error of the value type itself. Raised by
  TriState.parse when a token is none of the recognized spellings. It is a
  plain ValueError so any host library that understands converters failing
  with ValueError (argparse, click, ...) handles it natively.
- FaultCode: canonical, stable numeric identifiers for the faults a FlagSet
  surfaces while parsing command-line tokens.
- FlagException / FlagWarning: base types that carry message + options and
  know how to render themselves with rich (header, message, hint).
- FlagExit: an exception group bundling every fault of a deferred parse.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Integration
- FlagSet.parse collects faults and calls FlagSet.trigger(fault, **ctx), which
  merges the runtime options (shell, fancy, colorful, deferred) in.
- In non-shell mode exceptions are raised and warnings are emitted through
  the warnings module; in shell mode they are rendered on stderr via rich.
"""
import copy
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


class InvalidLiteralError(ValueError):
    """
    the token is not one of the recognized tristate spellings.

    the message is always "bad tristate value" whatever the input was; the
    rejected text is kept on `input` for callers that want to quote it.
    """

    def __init__(self, input=Unset, /):
        super().__init__("bad tristate value")
        self.input = input


class FaultCode(IntEnum):
    """
    canonical fault codes used by the flag set (stable identifiers).

    grouping
    - tokens (1111x)
      • MALFORMED_TOKEN, UNKNOWN_FLAG, UNKNOWN_SHORTHAND, MISSING_VALUE
    - values (1112x)
      • INVALID_VALUE
    - warnings (12xxx)
      • REPEATED_FLAG
    """
    # --- token errors (11xxx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_FLAG                = 11112
    UNKNOWN_SHORTHAND           = 11113
    MISSING_VALUE               = 11114

    # --- value errors (11xxx) ---
    INVALID_VALUE               = 11121

    # --- warnings (12xxx) ---
    REPEATED_FLAG               = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, styles, kind):
    """
    shared rich renderer for FlagException and FlagWarning.

    `kind` selects the title/message style keys ("error" or "warning").
    """
    main = __import__("__main__")
    styles = defaultdict(str, styles | getattr(main, "__styles__", {}))
    options = fault.options

    def styler(style):
        return styles[style] if options.get("colorful", True) else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options.get("colorful", True):
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    fancy = options.get("fancy", False)
    width = console.width - 4 * fancy

    try:
        name = options["flagset"].name
    except KeyError:
        name = "tristate"
    prog = text(getattr(main, "__prog__", name), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize() if "code" in options else "", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class FlagException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

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

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from self.__cause__
        console.print(self)
        if self.options.get("deferred"):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replacement = type(self)(self.message, **{**self.options, **overrides})
        replacement.__cause__ = self.__cause__
        return replacement


class MalformedTokenError(FlagException): ...
class UnknownFlagError(FlagException): ...
class UnknownShorthandError(FlagException): ...
class MissingValueError(FlagException): ...
class InvalidValueError(FlagException): ...


class FlagWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
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

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RepeatedFlagWarning(FlagWarning): ...


class FlagExit(ExceptionGroup[FlagException]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad flags", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad flags", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Flags)
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        try:
            name = self.options["flagset"].name
        except KeyError:
            name = "tristate"
        prog = text(getattr(main, "__prog__", name), "prog-name")

        header = Text.assemble("[ ", prog, " — ", text(self.message.title(), "title"), " ]")

        renders = []

        for exception in self.exceptions:
            renders.append(copy.replace(exception, ratio=2/3))

        if self.options.get("fancy"):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


class HelpRequested(Exception):
    """
    raised outside shell mode when --help/-h is given but not registered.

    `flagset` is the set whose usage was requested; in shell mode the usage
    is printed and the process exits with status 0 instead.
    """

    def __init__(self, flagset, /):
        super().__init__("help requested")
        self.flagset = flagset


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options).
    - in shell mode, rendering happens via rich console; otherwise, exceptions
      are raised and warnings are emitted.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


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
    "InvalidLiteralError",
    "FlagException",
    "MalformedTokenError",
    "UnknownFlagError",
    "UnknownShorthandError",
    "MissingValueError",
    "InvalidValueError",
    "FlagWarning",
    "RepeatedFlagWarning",
    "FlagExit",
    "HelpRequested",
    "FaultCode",
    "trigger",
    "getdoc",
)
