"""
Flags module behavioral tests (the eight registration entry points).

Scope
- Every entry point, every default and every target value, in the inline
  ('--tristate=X'), spaced ('--tristate X') and, for the shorthand variants,
  short ('-t X') forms; no tokens at all keeps the default.
- The default CommandLine set can be swapped and is restored afterwards.
- Argument validation of the entry points.

Conventions
- Test method names follow CamelCase per project convention.
- Entry points without an explicit flag set run inside using(...), so the
  process-wide CommandLine is never touched.
"""
import unittest
from unittest import TestCase

from tristate import FlagSet, TriState, TriStateValue, InvalidValueError
from tristate import flags


def _flag(fs, default, shorthand):
    return flags.flag("tristate", default, "tristate flag")


def _flag_p(fs, default, shorthand):
    return flags.flag_p("tristate", shorthand, default, "tristate flag")


def _flag_var(fs, default, shorthand):
    ts = TriStateValue()
    flags.flag_var(ts, "tristate", default, "tristate flag")
    return ts


def _flag_var_p(fs, default, shorthand):
    ts = TriStateValue()
    flags.flag_var_p(ts, "tristate", shorthand, default, "tristate flag")
    return ts


def _flag_fs(fs, default, shorthand):
    return flags.flag_fs(fs, "tristate", default, "tristate flag")


def _flag_p_fs(fs, default, shorthand):
    return flags.flag_p_fs(fs, "tristate", shorthand, default, "tristate flag")


def _flag_var_fs(fs, default, shorthand):
    ts = TriStateValue()
    flags.flag_var_fs(fs, ts, "tristate", default, "tristate flag")
    return ts


def _flag_var_p_fs(fs, default, shorthand):
    ts = TriStateValue()
    flags.flag_var_p_fs(fs, ts, "tristate", shorthand, default, "tristate flag")
    return ts


SETUPS = {
    "flag": _flag,
    "flag_p": _flag_p,
    "flag_var": _flag_var,
    "flag_var_p": _flag_var_p,
    "flag_fs": _flag_fs,
    "flag_p_fs": _flag_p_fs,
    "flag_var_fs": _flag_var_fs,
    "flag_var_p_fs": _flag_var_p_fs,
}


def _cases(what):
    """(default, tokens, want) triples for one entry point."""
    for default in TriState:
        yield default, [], default
        for want in TriState:
            yield default, ["--tristate=%s" % want], want
            yield default, ["--tristate", str(want)], want
            if what.endswith(("_p", "_p_fs")):
                yield default, ["-t", str(want)], want


class TestEntryPoints(TestCase):
    """End-to-end tests across all eight registration functions."""

    def testMatrix(self):
        for what, setup in SETUPS.items():
            for default, tokens, want in _cases(what):
                with self.subTest(what=what, default=default, tokens=tokens):
                    fs = FlagSet("test:" + what)
                    with flags.using(fs):
                        got = setup(fs, default, "t")
                        fs.parse(tokens)
                    self.assertIsInstance(got, TriStateValue)
                    self.assertEqual(got, want)

    def testRegistersIntoDefaultSet(self):
        fs = FlagSet("test")
        with flags.using(fs):
            flags.flag_p("tristate", "t", TriState.FALSE, "tristate flag")
        flag = fs.lookup("tristate")
        self.assertIsNotNone(flag)
        self.assertEqual(flag.shorthand, "t")
        self.assertEqual(flag.usage, "tristate flag")
        self.assertEqual(flag.default, "False")

    def testLongOnlyHasNoShorthand(self):
        fs = FlagSet("test")
        flags.flag_fs(fs, "tristate", TriState.TRUE, "tristate flag")
        self.assertEqual(fs.lookup("tristate").shorthand, "")
        self.assertEqual(len(fs), 1)

    def testVarStoresDefault(self):
        fs = FlagSet("test")
        ts = TriStateValue(TriState.TRUE)
        flags.flag_var_fs(fs, ts, "tristate", TriState.FALSE, "tristate flag")
        self.assertEqual(ts, TriState.FALSE)

    def testScenario(self):
        fs = FlagSet("test")
        ts = flags.flag_fs(fs, "tristate", TriState.FALSE, "tristate flag")
        fs.parse(["--tristate=yes"])
        self.assertEqual(ts, TriState.TRUE)
        fs.parse(["--tristate", "unknown"])
        self.assertEqual(ts, TriState.NONE)

    def testInvalidValueKeepsDefault(self):
        fs = FlagSet("test")
        ts = flags.flag_p_fs(fs, "tristate", "t", TriState.FALSE, "tristate flag")
        with self.assertRaises(InvalidValueError):
            fs.parse(["-t", "doug"])
        self.assertEqual(ts, TriState.FALSE)


class TestCommandLine(TestCase):
    """Behavioral tests for the process-wide default set."""

    def testDefaultIsShellMode(self):
        self.assertIsInstance(flags.CommandLine, FlagSet)
        self.assertTrue(flags.CommandLine.shell)

    def testUsingRestores(self):
        previous = flags.CommandLine
        fs = FlagSet("test")
        with flags.using(fs) as current:
            self.assertIs(current, fs)
            self.assertIs(flags.CommandLine, fs)
        self.assertIs(flags.CommandLine, previous)

    def testUsingRestoresOnError(self):
        previous = flags.CommandLine
        with self.assertRaises(ValueError):
            with flags.using(FlagSet("test")):
                flags.flag("tristate", TriState.NONE, "")
                flags.flag("tristate", TriState.NONE, "")
        self.assertIs(flags.CommandLine, previous)

    def testUsingRejectsNonFlagSet(self):
        with self.assertRaises(TypeError):
            with flags.using(object()):
                pass

    def testParseUsesDefaultSet(self):
        fs = FlagSet("test")
        with flags.using(fs):
            ts = flags.flag_p("tristate", "t", TriState.NONE, "")
            flags.parse(["-t", "no", "rest"])
        self.assertEqual(ts, TriState.FALSE)
        self.assertEqual(fs.args, ("rest",))


class TestValidation(TestCase):
    """Argument validation of the entry points."""

    def testDefaultMustBeTriState(self):
        for object in (None, True, "true", 0):
            with self.subTest(object=object):
                with self.assertRaises(TypeError):
                    flags.flag_fs(FlagSet("test"), "tristate", object, "")

    def testVariableMustBeTriStateValue(self):
        with self.assertRaises(TypeError):
            flags.flag_var_fs(FlagSet("test"), TriState.NONE, "tristate", TriState.NONE, "")

    def testFlagSetMustBeFlagSet(self):
        with self.assertRaises(TypeError):
            flags.flag_fs(object(), "tristate", TriState.NONE, "")

    def testShorthandMustBeOneCharacter(self):
        with self.assertRaises(ValueError):
            flags.flag_p_fs(FlagSet("test"), "tristate", "tt", TriState.NONE, "")


if __name__ == "__main__":
    unittest.main()
