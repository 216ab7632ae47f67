"""
Flag sets: the aliases that identify one option.

A FlagSet holds short flags (single characters, matched inside clusters such
as `-abc`) and long flags (whole names, matched after the long prefix such as
`--name`). It answers one question, "does this token name me?", by exact
equality only: no prefix or fuzzy matching.

Construction
- FlagSet(shorts, longs): explicit, discriminated construction.
- FlagSet.mixed("h", "help"): one list where length-1 strings are short flags
  and longer strings are long flags.
- FlagSet.coerce(x): normalize whatever a caller handed to the registry.

Collisions between flag sets of different declarations are not validated;
the registry resolves them by registration order.
"""
from collections.abc import Iterable

from .utils import *


def _sanitize_shorts(shorts, /):
    if isinstance(shorts, str) or not isinstance(shorts, Iterable):
        raise TypeError("flag-set 'shorts' must be an iterable of single characters")
    sanitized = set()
    for short in shorts:
        if not isinstance(short, str):
            raise TypeError("flag-set short flags must be strings")
        elif len(short) != 1:
            raise ValueError(f"flag-set short flag {short!r} must be exactly one character")
        elif short.isspace():
            raise ValueError("flag-set short flags cannot be whitespace")
        sanitized.add(short)
    return frozenset(sanitized)


def _sanitize_longs(longs, /):
    if isinstance(longs, str) or not isinstance(longs, Iterable):
        raise TypeError("flag-set 'longs' must be an iterable of strings")
    sanitized = set()
    for long in longs:
        if not isinstance(long, str):
            raise TypeError("flag-set long flags must be strings")
        elif not long.strip():
            raise ValueError("flag-set long flags cannot be empty-strings")
        sanitized.add(long)
    return frozenset(sanitized)


class FlagSet:
    """
    Immutable set of short and long aliases for one option.

    Properties
    - shorts: frozenset[str] of single characters.
    - longs: frozenset[str] of long names (without any prefix).
    """
    __slots__ = ("_shorts", "_longs")

    shorts = mirror("shorts")
    longs = mirror("longs")

    def __init__(self, shorts=(), longs=()):
        shorts = _sanitize_shorts(shorts)
        longs = _sanitize_longs(longs)
        if not shorts and not longs:
            raise ValueError("flag-set must specify at least one flag")
        object.__setattr__(self, "_shorts", shorts)
        object.__setattr__(self, "_longs", longs)

    @classmethod
    def mixed(cls, *flags):
        """
        Build a flag set from one mixed list of aliases.

        A string of exactly one character is a short flag; anything longer is
        a long flag:

            FlagSet.mixed("h", "help")
            FlagSet.mixed("foo", "f", "F", "FoO")
        """
        shorts = []
        longs = []
        for flag in flags:
            if not isinstance(flag, str):
                raise TypeError("flag-set flags must be strings")
            elif not flag:
                raise ValueError("flag-set flags cannot be empty-strings")
            (shorts if len(flag) == 1 else longs).append(flag)
        return cls(shorts, longs)

    @classmethod
    def coerce(cls, object, /):
        """
        Normalize a FlagSet, a single alias or an iterable of aliases into a FlagSet.
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, str):
            return cls.mixed(object)
        if isinstance(object, Iterable):
            return cls.mixed(*object)
        raise TypeError("flags must be a flag-set, a string, or an iterable of strings")

    def match_short(self, flag, /):
        """
        Return True when the single character names this flag set.
        """
        return flag in self._shorts

    def match_long(self, flag, /):
        """
        Return True when the long name names this flag set.
        """
        return flag in self._longs

    def __setattr__(self, name, value, /):
        raise AttributeError("flag-set is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("flag-set is immutable")

    def __eq__(self, other, /):
        if not isinstance(other, FlagSet):
            return NotImplemented
        return self._shorts == other._shorts and self._longs == other._longs

    def __hash__(self):
        return hash((self._shorts, self._longs))

    def __iter__(self):
        # shorts first, each kind sorted for a stable order
        yield from sorted(self._shorts)
        yield from sorted(self._longs)

    def __repr__(self):
        return f"flag-set({", ".join(map(repr, self))})"

    def __rich_repr__(self):
        yield "shorts", tuple(sorted(self._shorts))
        yield "longs", tuple(sorted(self._longs))


__all__ = (
    "FlagSet",
)
