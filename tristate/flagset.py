"""
Tristate flag sets: register values under names and parse command-line tokens.

What this module provides
- Flag: the record of one registration (name, shorthand, usage, value,
  default, implied, changed).
- FlagSet: a named collection of flags with a pflag-compatible token grammar,
  rich usage output and fault reporting (raised, or rendered on stderr in
  shell mode, optionally deferred to the end of the pass).

Token grammar
- '--' ends flag parsing; everything after it is positional.
- '-' alone and any token not starting with '-' is positional. With
  interspersed=False the first positional ends flag parsing.
- '--name=value', '--name value' (the next token is taken as-is, so
  '--tristate -1' works) and '--name' alone when the flag has an implied value.
- '-t value', '-tvalue', '-t=value'; shorthands with an implied value may be
  combined ('-ab').
- '--help' / '-h' request help unless the set registers them itself.

Quick example
    >>> from tristate import FlagSet, TriStateValue
    >>> flagset = FlagSet("demo")
    >>> state = TriStateValue()
    >>> flag = flagset.var(state, "archived", "filter on archived rows", shorthand="a")
    >>> flagset.parse(["--archived=no", "report.csv"])
    >>> state, flagset.args
    (TriStateValue(False), ('report.csv',))
"""
import copy
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .faults import *
from .utils import *
from .values import Value

console = Console(stderr=True)
output = Console()


class Flag:
    """
    One registration inside a FlagSet.

    Fields are read-only except `changed`, which the owning set flips once the
    flag is seen on the command line or set programmatically.
    """
    __slots__ = ("_name", "_shorthand", "_usage", "_value", "_default", "_implied", "changed")

    name = view("name")
    shorthand = view("shorthand")
    usage = view("usage")
    value = view("value")
    default = view("default")
    implied = view("implied")

    def __init__(self, name, shorthand, usage, value, implied):
        self._name = name
        self._shorthand = shorthand
        self._usage = usage
        self._value = value
        self._default = str(value)
        self._implied = implied
        self.changed = False

    def __repr__(self):
        return "flag(name=%r, shorthand=%r, default=%r, changed=%r)" % (
            self._name, self._shorthand, self._default, self.changed
        )


class FlagSet:
    """
    Named collection of flags parsed against command-line tokens.

    Runtime options
    - shell: render faults on stderr and exit instead of raising.
    - fancy: render faults inside rich panels.
    - colorful: style faults and usage output.
    - deferred: collect every error of a pass and report them together as a
      FlagExit at the end.
    - interspersed: allow flags after positionals.
    """

    def __init__(self, name, /, *, shell=False, fancy=False, colorful=True, deferred=False, interspersed=True):
        if not isinstance(name, str):
            raise TypeError("flag set name must be a string")
        self.name = name
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.deferred = bool(deferred)
        self.interspersed = bool(interspersed)
        self._flags = {}
        self._shorthands = {}
        self._args = []
        self._faults = []
        self._seen = set()
        self._parsed = False

    @property
    def flags(self):
        return MappingProxyType(self._flags)

    @property
    def args(self):
        return tuple(self._args)

    @property
    def parsed(self):
        return self._parsed

    def var(self, value, name, usage="", *, shorthand="", implied=None):
        """
        Register `value` under `name` (and optionally a one-character shorthand).

        Parameters
        - value: Value
          Storage the flag writes into; its current str() is recorded as the default.
        - name: str
          Long name, used as '--name'.
        - usage: str
          Help text shown by usage().
        - shorthand: str
          Empty, or a single character used as '-c'.
        - implied: str | None
          Text applied when the flag is given without a value. None means the
          flag always needs one.

        Raises
        - TypeError / ValueError for malformed registrations and redefinitions.
        """
        if not isinstance(value, Value):
            raise TypeError("flag value must implement set(), get(), type() and __str__()")
        if not isinstance(name, str):
            raise TypeError("flag name must be a string")
        elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError("flag name %r must be a valid shell-style name (unicodes are allowed)" % name)
        if not isinstance(usage, str):
            raise TypeError("flag usage must be a string")
        if not isinstance(shorthand, str):
            raise TypeError("flag shorthand must be a string")
        elif len(shorthand) > 1:
            raise ValueError("%r shorthand is more than one character" % shorthand)
        elif shorthand in ("-", "="):
            raise ValueError("%r cannot be used as a shorthand" % shorthand)
        if not isinstance(implied, str | None):
            raise TypeError("flag implied value must be a string")

        if name in self._flags:
            raise ValueError("%s flag redefined: %s" % (self.name, name))
        if shorthand and shorthand in self._shorthands:
            raise ValueError("unable to redefine %r shorthand in %r flagset: it's already used for %r flag" % (
                shorthand, self.name, self._shorthands[shorthand].name
            ))

        flag = Flag(name, shorthand, usage, value, implied)
        self._flags[name] = flag
        if shorthand:
            self._shorthands[shorthand] = flag
        return flag

    def lookup(self, name, /):
        return self._flags.get(name)

    def shorthand_lookup(self, shorthand, /):
        return self._shorthands.get(shorthand)

    def changed(self, name, /):
        try:
            return self._flags[name].changed
        except KeyError:
            return False

    def set(self, name, text, /):
        """
        Set a flag programmatically, as if '--name=text' had been parsed.

        Raises
        - KeyError: unknown flag name.
        - whatever the value's set() raises for rejected text.
        """
        try:
            flag = self._flags[name]
        except KeyError:
            raise KeyError("no such flag -%s" % name) from None
        flag.value.set(text)
        flag.changed = True

    def __iter__(self):
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def __len__(self):
        return len(self._flags)

    def __contains__(self, name):
        return name in self._flags

    def __repr__(self):
        return "FlagSet(%r, flags=%r)" % (self.name, sorted(self._flags))

    def trigger(self, fault, /, **options):
        """
        Merge this set's runtime options into `fault` and surface it.

        Deferred errors are stored for the end of the pass; in shell mode the
        usage table is printed on stderr before the fault itself.
        """
        options = options | {
            "flagset": self,
            "shell": self.shell,
            "fancy": self.fancy,
            "colorful": self.colorful,
            "deferred": self.deferred,
        }
        if self.deferred and isinstance(fault, FlagException):
            return self._faults.append(copy.replace(fault, **options))
        if self.shell and isinstance(fault, FlagException):
            self.print_usage(stderr=True)
        trigger(fault, **options)

    def usage(self):
        """
        Build the rich table listing every visible flag.

        Rows read like pflag's: '-t, --tristate TriState   usage (default False)'.
        """
        table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 2))
        table.add_column("flag", no_wrap=True, style="bold #00E5FF" if self.colorful else "")
        table.add_column("usage")

        for flag in self:
            spelling = ("-%s, " % flag.shorthand if flag.shorthand else "    ") + "--" + flag.name
            if flag.implied is not None:
                spelling += "[=%s]" % flag.implied
            spelling += " " + flag.value.type()
            usage = Text(flag.usage)
            if flag.default:
                usage.append(" (default %s)" % flag.default, style="dim" if self.colorful else "")
            table.add_row(spelling, usage)
        return table

    def print_usage(self, *, stderr=False):
        title = Text("Usage of %s:" % self.name, style="bold" if self.colorful else "")
        (console if stderr else output).print(Group(title, self.usage()))

    def parse(self, arguments=Unset, /):
        """
        Parse command-line tokens into the registered values.

        Parameters
        - arguments:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Behavior
        - Positionals end up in `args`; `parsed` becomes True.
        - Faults are raised, rendered, or deferred according to the runtime
          options (see trigger()).
        """
        if arguments is Unset:
            tokens = sys.argv[1:]
        elif isinstance(arguments, str):
            tokens = shlex.split(arguments)
        elif isinstance(arguments, Iterable):
            tokens = list(arguments)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        self._parsed = True
        self._args.clear()
        self._faults.clear()
        self._seen.clear()

        tokens = deque(tokens)
        while tokens:
            token = tokens.popleft()

            if token == "--":
                self._args.extend(tokens)
                break

            if len(token) < 2 or not token.startswith("-"):
                self._args.append(token)
                if not self.interspersed:
                    self._args.extend(tokens)
                    break
                continue

            if token.startswith("--"):
                self._parse_long(token, tokens)
            else:
                self._parse_short(token, tokens)

        if self._faults:
            faults, self._faults = self._faults, []
            if self.shell:
                self.print_usage(stderr=True)
            trigger(FlagExit(faults), **{
                "flagset": self,
                "shell": self.shell,
                "fancy": self.fancy,
                "colorful": self.colorful,
            })

    def _help(self):
        if self.shell:
            self.print_usage()
            sys.exit(0)
        raise HelpRequested(self)

    def _parse_long(self, token, tokens):
        body = token[2:]
        if not body or body.startswith(("-", "=")):
            return self.trigger(MalformedTokenError(
                "bad flag syntax: %s" % token,
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="spell flags as --name=value or --name value",
                token=token,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        name, separator, value = body.partition("=")

        if (flag := self._flags.get(name)) is None:
            if name == "help":
                return self._help()
            return self.trigger(UnknownFlagError(
                "unknown flag: --%s" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint="try '%s --help' to see all available flags" % self.name,
                input=name,
                docs=getdoc(FaultCode.UNKNOWN_FLAG),
            ))

        if not separator:
            if flag.implied is not None:
                value = flag.implied
            elif tokens:
                value = tokens.popleft()
            else:
                return self._missing(flag, "--" + name)

        self._apply(flag, value, "--" + name)

    def _parse_short(self, token, tokens):
        body = token[1:]
        if body.startswith("="):
            return self.trigger(MalformedTokenError(
                "bad flag syntax: %s" % token,
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="spell shorthands as -c value or -cvalue",
                token=token,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        index = 0
        while index < len(body):
            shorthand = body[index]
            rest = body[index + 1:]

            if (flag := self._shorthands.get(shorthand)) is None:
                if shorthand == "h":
                    return self._help()
                return self.trigger(UnknownShorthandError(
                    "unknown shorthand flag: %r in %s" % (shorthand, token),
                    title="unknown shorthand flag",
                    code=FaultCode.UNKNOWN_SHORTHAND,
                    hint="try '%s --help' to see all available flags" % self.name,
                    input=shorthand,
                    token=token,
                    docs=getdoc(FaultCode.UNKNOWN_SHORTHAND),
                ))

            if rest.startswith("="):
                return self._apply(flag, rest[1:], "-" + shorthand)
            if flag.implied is not None and not rest:
                return self._apply(flag, flag.implied, "-" + shorthand)
            if flag.implied is not None:
                # combined shorthands: -ab applies a's implied value, then continues with b
                self._apply(flag, flag.implied, "-" + shorthand)
                index += 1
                continue
            if rest:
                return self._apply(flag, rest, "-" + shorthand)
            if tokens:
                return self._apply(flag, tokens.popleft(), "-" + shorthand)
            return self._missing(flag, "-" + shorthand)

    def _missing(self, flag, input):
        return self.trigger(MissingValueError(
            "flag needs an argument: %s" % input,
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="pass a value as %s=<%s> or %s <%s>" % (input, flag.value.type(), input, flag.value.type()),
            input=input,
            docs=getdoc(FaultCode.MISSING_VALUE),
        ))

    def _apply(self, flag, text, input):
        if flag.name in self._seen:
            self.trigger(RepeatedFlagWarning(
                "flag %s given more than once in the same command line" % input,
                title="repeated flag",
                code=FaultCode.REPEATED_FLAG,
                hint="keep a single %s on the command line" % input,
                input=input,
                docs=getdoc(FaultCode.REPEATED_FLAG),
            ))
        try:
            flag.value.set(text)
        except ValueError as exception:
            fault = InvalidValueError(
                "invalid argument %r for %r flag: %s" % (text, input, exception),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                hint="%s takes a %s value" % (input, flag.value.type()),
                input=input,
                value=text,
                docs=getdoc(FaultCode.INVALID_VALUE),
            )
            fault.__cause__ = exception
            return self.trigger(fault)
        flag.changed = True
        self._seen.add(flag.name)


__all__ = (
    "Flag",
    "FlagSet",
)
