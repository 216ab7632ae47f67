r"""
Argosy value converters.

Overview
- A converter turns one raw token into a typed value, or raises ConversionError.
- Conversion is all-or-nothing: the whole string must be consumed. Trailing
  garbage ("12abc"), surrounding whitespace (" 12") and Python-only literal
  sugar ("1_000") are failures, never partial successes.

Built-ins
- Boolean(): true/false, yes/no, on/off, 1/0 (case-insensitive).
- Integer(signed=True, bits=Unset): decimal integers, optionally range-bounded.
- Float(): decimal literals with optional exponent, plus inf/infinity/nan.
- String(): identity, always succeeds.
- Choice(*choices, type=String()): converts, then requires membership.

Extension
- Subclass Converter and implement convert(raw), or wrap any callable
  `str -> T` with converter(callable). ValueError/TypeError raised by the
  callable become ConversionError, so builtins like int or pathlib.Path work
  out of the box.
"""
import re

from .faults import ConversionError
from .utils import *

_INTEGER = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_FLOAT = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

_TRUTHS = frozenset({"true", "yes", "on", "1"})
_FALSITIES = frozenset({"false", "no", "off", "0"})


class Converter:
    """
    Base converter: callable object mapping a raw string to a typed value.

    Subclasses implement convert(raw); __call__ validates the input type and
    lets ConversionError propagate to the caller (the declaration), which
    turns it into a recoverable failure.
    """
    metavar = "VALUE"

    def __call__(self, raw, /):
        if not isinstance(raw, str):
            raise TypeError(f"{type(self).__name__.lower()} converter argument must be a string")
        return self.convert(raw)

    def convert(self, raw, /):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__.lower()}()"


class Boolean(Converter):
    metavar = "BOOL"

    def convert(self, raw, /):
        lowered = raw.lower()
        if lowered in _TRUTHS:
            return True
        if lowered in _FALSITIES:
            return False
        raise ConversionError(raw, "expected a boolean")


class Integer(Converter):
    """
    Strict decimal integer converter.

    Parameters
    - signed: bool
      When False, a leading '-' is rejected.
    - bits: Unset | int
      When given, bounds the range to a two's complement (signed) or plain
      (unsigned) integer of that width.
    """
    metavar = "INT"

    def __init__(self, signed=True, bits=Unset):
        if not isinstance(bits, int | Unset) or isinstance(bits, bool):
            raise TypeError("integer converter 'bits' must be an integer")
        if isinstance(bits, int) and bits < 1:
            raise ValueError("integer converter 'bits' must be a positive integer")
        self._signed = bool(signed)
        self._bits = bits

    signed = mirror("signed")
    bits = mirror("bits")

    @property
    def bounds(self):
        """
        Inclusive (minimum, maximum); None marks an unbounded side.
        """
        if self._bits is Unset:
            return None if self._signed else 0, None
        if self._signed:
            return -(1 << (self._bits - 1)), (1 << (self._bits - 1)) - 1
        return 0, (1 << self._bits) - 1

    def convert(self, raw, /):
        pattern = _INTEGER if self._signed else _UNSIGNED
        if not pattern.fullmatch(raw):
            raise ConversionError(raw, "expected an integer" if self._signed else "expected an unsigned integer")
        try:
            value = int(raw, 10)
        except ValueError:
            # digit-count limit of int() (sys.set_int_max_str_digits)
            raise ConversionError(raw, "integer is too long") from None
        if self._bits is Unset:
            return value
        minimum, maximum = self.bounds
        if not minimum <= value <= maximum:
            raise ConversionError(raw, f"expected an integer between {minimum} and {maximum}")
        return value

    def __repr__(self):
        return f"integer(signed={self._signed!r}, bits={self._bits!r})"


class Float(Converter):
    metavar = "FLOAT"

    def convert(self, raw, /):
        if not (_FLOAT.fullmatch(raw) or _SPECIAL_FLOAT.fullmatch(raw)):
            raise ConversionError(raw, "expected a number")
        return float(raw)


class String(Converter):
    metavar = "TEXT"

    def convert(self, raw, /):
        return raw


class Choice(Converter):
    """
    Converts with an inner converter, then requires the result to be one of choices.
    """

    def __init__(self, *choices, type=Unset):
        if not choices:
            raise TypeError("choice converter must specify at least one choice")
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError("choice converter 'choices' cannot contain duplicates")
            sanitized.append(choice)
        self._choices = tuple(sanitized)
        self._type = coerce(coalesce(type, String()))

    choices = mirror("choices")
    type = mirror("type")

    @property
    def metavar(self):
        return "{%s}" % ",".join(map(str, self._choices))

    def convert(self, raw, /):
        value = self._type(raw)
        if value not in self._choices:
            raise ConversionError(raw, "expected one of %s" % ", ".join(map(repr, self._choices)))
        return value

    def __repr__(self):
        return f"choice({", ".join(map(repr, self._choices))}, type={self._type!r})"


class _Delegate(Converter):
    """
    Adapter for user callables `str -> T`.
    """

    def __init__(self, callback, metavar=Unset):
        self._callback = callback
        self._metavar = coalesce(metavar, getattr(callback, "__name__", "value").upper())

    @property
    def metavar(self):
        return self._metavar

    def convert(self, raw, /):
        try:
            return self._callback(raw)
        except ConversionError:
            raise
        except (ValueError, TypeError, ArithmeticError) as exception:
            raise ConversionError(raw, str(exception) or "invalid value") from exception

    def __repr__(self):
        return f"converter({self._callback!r})"


def converter(callback, /, metavar=Unset):
    """
    Wrap a callable `str -> T` into a Converter.

    Usage
    - As a function:
        parser.add_option("PATH", "path", converter(pathlib.Path))
    - As a decorator:
        @converter
        def even(raw):
            if int(raw) % 2:
                raise ValueError("expected an even number")
            return int(raw)
    """
    if not callable(callback):
        raise TypeError("converter() argument must be callable")
    if metavar is not Unset and not isinstance(metavar, str):
        raise TypeError("converter() 'metavar' must be a string")
    return _Delegate(callback, metavar)


def coerce(object, /):
    """
    Normalize a converter argument: Converter instances pass through, other
    callables are wrapped with converter().
    """
    if isinstance(object, Converter):
        return object
    if isinstance(object, type) and issubclass(object, Converter):
        return object()
    if callable(object):
        return converter(object)
    raise TypeError("converter must be a Converter or a callable")


__all__ = (
    "Converter",
    "Boolean",
    "Integer",
    "Float",
    "String",
    "Choice",
    "converter",
)
