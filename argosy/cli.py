"""
Argosy CLI adapter: boundary glue between the process and the parser engine.

- tokenize(prompt): turn sys.argv, a shell-like string, or an iterable of
  strings into the token list the engine consumes.
- parse_cli(parser, argv): strip the program name (filling parser.prog when
  unset) and parse the rest.
- report(outcome): render a failed outcome's fault on stderr through rich.

The engine itself never prints or exits; deciding what to do with a failed
outcome stays with the caller:

    outcome = parse_cli(parser)
    if not report(outcome):
        sys.exit(2)
"""
import copy
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .parser import ArgumentParser, ParseOutcome
from .utils import *

console = Console(stderr=True)


def tokenize(prompt=Unset, /):
    """
    Normalize a prompt into a list of argument strings.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized sequence, kept verbatim.

    Raises
    - TypeError: when prompt is not Unset/str/Iterable[str], or when an
      iterable contains a non-string element.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("tokenize() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("tokenize() argument must be a string or an iterable of strings")


def parse_cli(parser, argv=Unset, /):
    """
    Parse a full argument vector (program name first) with `parser`.

    When parser.prog is unset, it is taken from the basename of argv[0].
    An empty argv parses no tokens.
    """
    if not isinstance(parser, ArgumentParser):
        raise TypeError("parse_cli() first argument must be an argument-parser")
    argv = sys.argv if argv is Unset else tokenize(argv)
    if argv and parser.prog is None:
        parser.prog = os.path.basename(argv[0])
    return parser.parse(argv[1:])


def report(outcome, /, *, console=console, colorful=True, fancy=False):
    """
    Print the fault of a failed outcome; return whether the outcome succeeded.
    """
    if not isinstance(outcome, ParseOutcome):
        raise TypeError("report() argument must be a parse-outcome")
    if outcome.success:
        return True
    console.print(copy.replace(outcome.error, colorful=colorful, fancy=fancy))
    return False


__all__ = (
    "tokenize",
    "parse_cli",
    "report",
)
