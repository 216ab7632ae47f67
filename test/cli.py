"""
CLI adapter behavioral tests.

Scope
- Validate tokenize() over sys.argv, shell-like strings, and iterables.
- Validate parse_cli() program-name handling and report() rendering.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argosy import ArgumentParser, Integer, ParseOutcome, parse_cli, report, tokenize


def quiet_console():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestTokenize(TestCase):

    def testShellLikeString(self):
        self.assertEqual(tokenize("-d 3 --name 'two words'"), ["-d", "3", "--name", "two words"])

    def testIterableKeptVerbatim(self):
        self.assertEqual(tokenize((" a ", "--b=c")), [" a ", "--b=c"])

    def testDefaultsToSysArgv(self):
        with mock.patch("sys.argv", ["tool", "-v", "x"]):
            self.assertEqual(tokenize(), ["-v", "x"])

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            tokenize(42)
        with self.assertRaises(TypeError):
            tokenize(["a", 1])


class TestParseCli(TestCase):

    def testProgTakenFromArgv(self):
        parser = ArgumentParser()
        verbose = parser.add_option("verbose", ("v", "verbose"))
        outcome = parse_cli(parser, ["/usr/bin/tool", "-v"])
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.consumed, 1)
        self.assertEqual(parser.prog, "tool")
        self.assertIs(verbose.value, True)

    def testExplicitProgKept(self):
        parser = ArgumentParser(prog="mine")
        parse_cli(parser, "other --help")
        self.assertEqual(parser.prog, "mine")

    def testDefaultsToSysArgv(self):
        parser = ArgumentParser()
        number = parser.add_positional("number", Integer())
        with mock.patch("sys.argv", ["tool", "12"]):
            self.assertTrue(parse_cli(parser))
        self.assertEqual(number.value, 12)
        self.assertEqual(parser.prog, "tool")

    def testEmptyArgvParsesNothing(self):
        parser = ArgumentParser()
        outcome = parse_cli(parser, [])
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.consumed, 0)
        self.assertIsNone(parser.prog)

    def testRejectsNonParser(self):
        with self.assertRaises(TypeError):
            parse_cli(object(), [])


class TestReport(TestCase):

    def testSuccessPrintsNothing(self):
        console = quiet_console()
        self.assertTrue(report(ParseOutcome(consumed=2), console=console))
        self.assertEqual(console.file.getvalue(), "")

    def testFailurePrintsFault(self):
        parser = ArgumentParser()
        parser.add_option("verbose", "v")
        console = quiet_console()
        outcome = parse_cli(parser, ["tool", "-x"])
        self.assertFalse(report(outcome, console=console, colorful=False))
        output = console.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn("unknown flag '-x' at first position", output)

    def testFancyFailure(self):
        parser = ArgumentParser(prog="tool")
        console = quiet_console()
        self.assertFalse(report(parser.parse(["extra"]), console=console, fancy=True))
        self.assertIn("unexpected positional argument 'extra'", console.file.getvalue())

    def testRejectsNonOutcome(self):
        with self.assertRaises(TypeError):
            report(None)


if __name__ == "__main__":
    unittest.main()
