"""
Tristate flag registration.

There are 8 functions for defining a TriState flag, named after some
combination of the suffixes "var", "p" and "fs":

    var: accepts a TriStateValue to bind instead of returning a new one
    p:   also takes a one-character shorthand used after a single dash
    fs:  accepts the FlagSet the flag is added to

Without "fs", flags go to `CommandLine`, the process-wide default set. It is
looked up on every call, so rebinding `tristate.flags.CommandLine` (or using
the `using()` context manager) redirects them.

Example
    >>> from tristate import flags, TriState
    >>> archived = flags.flag_p("archived", "a", TriState.NONE, "filter on archived rows")
    >>> flags.parse(["-a", "yes"])
    >>> archived.match(True, True)
    True
"""
import os.path
import sys
from contextlib import contextmanager

from .flagset import FlagSet
from .utils import Unset
from .values import TriState, TriStateValue

# Default flag set, named after the running program. Faults are rendered and
# exit the process, the way a command-line tool expects.
CommandLine = FlagSet(os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "tristate", shell=True)


def flag(name, value, usage):
    """
    Define a TriState flag on CommandLine and return the new TriStateValue
    holding it.
    """
    return flag_fs(CommandLine, name, value, usage)


def flag_p(name, shorthand, value, usage):
    """
    Like flag(), with a shorthand letter for use after a single dash.
    """
    return flag_p_fs(CommandLine, name, shorthand, value, usage)


def flag_var(ts, name, value, usage):
    """
    Like flag(), storing into the caller's TriStateValue.
    """
    flag_var_fs(CommandLine, ts, name, value, usage)


def flag_var_p(ts, name, shorthand, value, usage):
    """
    The combination of flag_var() and flag_p().
    """
    flag_var_p_fs(CommandLine, ts, name, shorthand, value, usage)


def flag_fs(fs, name, value, usage):
    """
    Like flag(), on the given FlagSet.
    """
    return flag_p_fs(fs, name, "", value, usage)


def flag_p_fs(fs, name, shorthand, value, usage):
    """
    Like flag_p(), on the given FlagSet.
    """
    ts = TriStateValue()
    flag_var_p_fs(fs, ts, name, shorthand, value, usage)
    return ts


def flag_var_fs(fs, ts, name, value, usage):
    """
    Like flag_var(), on the given FlagSet.
    """
    flag_var_p_fs(fs, ts, name, "", value, usage)


def flag_var_p_fs(fs, ts, name, shorthand, value, usage):
    """
    Store `value` into `ts` as its default and register it on `fs`.

    Every other entry point ends up here.

    Raises
    - TypeError: fs is not a FlagSet, ts is not a TriStateValue or value is
      not a TriState.
    - ValueError: from FlagSet.var() for bad names or redefinitions.
    """
    if not isinstance(fs, FlagSet):
        raise TypeError("flag set must be a FlagSet")
    if not isinstance(ts, TriStateValue):
        raise TypeError("flag variable must be a TriStateValue")
    if not isinstance(value, TriState):
        raise TypeError("flag default must be a TriState")
    ts.state = value
    fs.var(ts, name, usage, shorthand=shorthand)


@contextmanager
def using(fs, /):
    """
    Temporarily make `fs` the default flag set.

    The previous CommandLine is restored on exit, even when the body raises.
    """
    global CommandLine
    if not isinstance(fs, FlagSet):
        raise TypeError("using() argument must be a FlagSet")
    previous, CommandLine = CommandLine, fs
    try:
        yield fs
    finally:
        CommandLine = previous


def parse(arguments=Unset, /):
    """
    Parse CommandLine (sys.argv[1:] when no arguments are given).
    """
    CommandLine.parse(arguments)


__all__ = (
    "flag",
    "flag_p",
    "flag_var",
    "flag_var_p",
    "flag_fs",
    "flag_p_fs",
    "flag_var_fs",
    "flag_var_p_fs",
    "using",
    "parse",
)
