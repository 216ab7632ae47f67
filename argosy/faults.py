"""
Argosy faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every violation the
  parser engine can detect. One first-failure model: a parse stops at the first
  fault and reports exactly one.
- ParseError: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, and actionable way.
- ConversionError: raised by value converters when a raw token does not
  convert as a whole.

UX goals
- Position-first messages: every message includes the ordinal position of the
  offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The parser engine raises faults internally and returns them inside a
  ParseOutcome; it never prints. The CLI adapter renders them via rich.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser engine (stable identifiers).

    grouping (by high-level domain)
    - flags (1111x)
      • UNMATCHED_FLAG, MISSING_VALUE, DISALLOWED_JOINED_VALUE,
        DISALLOWED_SEPARATE_VALUE, UNEXPECTED_VALUE_ON_FLAG
    - values (1112x)
      • INVALID_VALUE
    - positionals (1113x)
      • NO_POSITIONAL_SLOT
    """
    # --- flag errors (1111x) ---
    UNMATCHED_FLAG              = 11111
    MISSING_VALUE               = 11112
    DISALLOWED_JOINED_VALUE     = 11113
    DISALLOWED_SEPARATE_VALUE   = 11114
    UNEXPECTED_VALUE_ON_FLAG    = 11115

    # --- value errors (1112x) ---
    INVALID_VALUE               = 11121

    # --- positional errors (1113x) ---
    NO_POSITIONAL_SLOT          = 11131

    def normalize(self):
        """
        return the code as a string label for headers and logs.
        """
        return str(self.value)


_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "error-title": "bold #FF4DA6",  # friendly pinky title

    # body
    "error-message": "#C8C8D0",  # soft light gray message
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}


class ParseError(Exception):
    """
    base type of every fault the parser engine reports.

    attributes
    - message: str, the human-readable, lowercased description.
    - options: read-only mapping of context (code, title, hint, input, index,
      declaration, ...). accessors below read the common keys.
    """
    code = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("parse error message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def title(self):
        return self.options.get("title", type(self).__name__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def input(self):
        return self.options.get("input")

    @property
    def index(self):
        return self.options.get("index")

    @property
    def declaration(self):
        return self.options.get("declaration")

    def __str__(self):
        return self.message

    def __rich__(self):
        styles = defaultdict(str, _STYLES | dict(self.options.get("styles", {})))
        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        header = Text.assemble(
            "[ ",
            text(self.options.get("prog") or "argosy", styler("prog-name")),
            " — ",
            text(self.code.normalize() if self.code else "?", styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options))


def _rebuild(cls, message, options, /):
    return cls(message, **options)


class UnmatchedFlagError(ParseError):
    code = FaultCode.UNMATCHED_FLAG


class MissingValueError(ParseError):
    code = FaultCode.MISSING_VALUE


class DisallowedJoinedValueError(ParseError):
    code = FaultCode.DISALLOWED_JOINED_VALUE


class DisallowedSeparateValueError(ParseError):
    code = FaultCode.DISALLOWED_SEPARATE_VALUE


class InvalidValueError(ParseError):
    code = FaultCode.INVALID_VALUE


class UnexpectedValueError(ParseError):
    code = FaultCode.UNEXPECTED_VALUE_ON_FLAG


class NoPositionalSlotError(ParseError):
    code = FaultCode.NO_POSITIONAL_SLOT


class ConversionError(ValueError):
    """
    raised by a converter when a raw string does not convert as a whole.

    attributes
    - raw: the rejected input string.
    - reason: short lowercase explanation (e.g. "expected an integer").
    """

    def __init__(self, raw, reason="invalid value", /):
        super().__init__(f"{reason}: {raw!r}")
        self.raw = raw
        self.reason = reason

    def __reduce__(self):
        return type(self), (self.raw, self.reason)


__all__ = (
    "FaultCode",
    "ParseError",
    "UnmatchedFlagError",
    "MissingValueError",
    "DisallowedJoinedValueError",
    "DisallowedSeparateValueError",
    "InvalidValueError",
    "UnexpectedValueError",
    "NoPositionalSlotError",
    "ConversionError",
)
