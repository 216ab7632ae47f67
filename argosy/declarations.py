r"""
Argosy declarations and their registry.

Overview
- Declarations
  • Option: named declaration bound to a FlagSet. With a converter it is
    value-bearing (-d 5, --double=5); without one it is a presence-only switch
    (-v, --verbose) whose value flips to True when sighted.
  • Positional: value-bearing declaration matched by order among the
    positionals that have not matched yet.

- Registry
  • Owns every declaration for the parser's lifetime, in registration order.
  • Option order is the tie-break for overlapping flags: first registered wins.
  • Positional order is the consumption order.

Handles
- add_option/add_positional return the declaration itself. Callers keep it to
  configure defaults/help before parsing and to read value/matched after.
  The registry never removes declarations, so handles stay valid.

Shared interface (flat, discriminated by `kind`)
- name, help, default, value, matched, count, failure
- parse_value(token) -> bool: convert and store; never raises on bad input.
- Options additionally expose flags, valued, match_short() and match_long().
"""
import functools
import operator
import re

from .converters import String, coerce
from .faults import ConversionError
from .flags import FlagSet
from .utils import *


class DeclarationType(type):
    """
    Metaclass that gives declarations stable introspection.

    Responsibilities
    - __typename__ derived from the class name (camel-case split with hyphens),
      used in validation messages.
    - Read-only properties (via mirror) for every name listed in
      __introspectable__ that the class body does not define itself.
    - Compact __repr__ and __rich_repr__ over __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
                if field not in namespace and not any(hasattr(base, field) for base in bases)
            } | namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the fields every declaration shares.

    - name: required, non-empty string after trimming.
    - help: Unset | str; becomes None when Unset, must be non-empty when given.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(help := metadata["help"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)


class Declaration(metaclass=DeclarationType):
    """
    Common state and behavior of options and positionals.

    State is only ever accumulated: a parse marks declarations matched and
    stores values; nothing is cleared between parses unless reset() is called.
    """
    kind = Unset

    def __init__(self, name, converter, /, *, default=Unset, help=Unset):
        metadata = {"name": name, "help": help}
        _sanitize_metadata(type(self), metadata)
        self._name = metadata["name"]
        self._help = metadata["help"]
        self._converter = converter
        self._default = coalesce(default, self._fallback())
        self._value = self._default
        self._matched = False
        self._count = 0
        self._failure = None

    def _fallback(self):
        return None

    name = mirror("name")
    count = mirror("count")
    failure = mirror("failure")

    @property
    def help(self):
        return self._help

    @help.setter
    def help(self, help):
        metadata = {"name": self._name, "help": help}
        _sanitize_metadata(type(self), metadata)
        self._help = metadata["help"]

    @property
    def default(self):
        return self._default

    @default.setter
    def default(self, default):
        # a default is also the current value until something overrides it
        self._default = default
        self._value = default

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value

    @property
    def matched(self):
        return self._matched

    @matched.setter
    def matched(self, matched):
        self._matched = bool(matched)

    @property
    def metavar(self):
        return getattr(self._converter, "metavar", None)

    def sight(self):
        """
        Record one sighting of this declaration in the input.
        """
        self._matched = True
        self._count += 1

    def parse_value(self, token, /):
        """
        Convert `token` and store the result.

        Returns True on success (and marks the declaration matched). On a
        conversion failure the stored value is untouched, the ConversionError
        is kept in `failure`, and False is returned. A ValueError or
        ArithmeticError raised by a Converter subclass counts as a conversion
        failure too.
        """
        try:
            value = self._converter(token)
        except ConversionError as failure:
            self._failure = failure
            return False
        except (ValueError, ArithmeticError) as exception:
            self._failure = ConversionError(token, str(exception) or "invalid value")
            return False
        self._value = value
        self._matched = True
        self._failure = None
        return True

    def reset(self):
        """
        Restore the default and forget every sighting.
        """
        self._value = self._default
        self._matched = False
        self._count = 0
        self._failure = None


class Option(Declaration):
    """
    Named declaration bound to a FlagSet.

    Properties
    - flags: FlagSet identifying this option.
    - converter: Converter, or None for a presence-only switch.
    - valued: True when the option takes a value.
    """
    kind = "option"

    __introspectable__ = (
        "name",
        "flags",
        "converter",
        "default",
        "value",
        "matched",
        "help",
    )

    def __init__(self, name, flags, converter=Unset, /, *, default=Unset, help=Unset):
        self._flags = FlagSet.coerce(flags)
        super().__init__(name, Unset if converter is Unset else coerce(converter), default=default, help=help)

    def _fallback(self):
        return False if self._converter is Unset else None

    @property
    def converter(self):
        return coalesce(self._converter)

    @property
    def valued(self):
        return self._converter is not Unset

    def match_short(self, flag, /):
        return self._flags.match_short(flag)

    def match_long(self, flag, /):
        return self._flags.match_long(flag)

    def sight(self):
        super().sight()
        if not self.valued:
            self._value = True

    def parse_value(self, token, /):
        if not self.valued:
            raise TypeError(f"presence-only {type(self).__typename__} {self._name!r} cannot parse a value")
        return super().parse_value(token)


class Positional(Declaration):
    """
    Declaration matched by position among the still-unmatched positionals.
    """
    kind = "positional"

    __introspectable__ = (
        "name",
        "converter",
        "default",
        "value",
        "matched",
        "help",
    )

    def __init__(self, name, converter=Unset, /, *, default=Unset, help=Unset):
        super().__init__(name, coerce(coalesce(converter, String())), default=default, help=help)

    @property
    def converter(self):
        return self._converter

    @property
    def valued(self):
        return True

    def parse_value(self, token, /):
        if success := super().parse_value(token):
            self._count += 1
        return success


class Registry:
    """
    Ordered, append-only collection of declarations.

    Lookups are linear scans in registration order; the first match wins.
    """

    def __init__(self):
        self._options = []
        self._positionals = []

    options = mirror("options")
    positionals = mirror("positionals")

    def _claim(self, name, /):
        if isinstance(name, str) and any(declaration.name == name.strip() for declaration in self):
            raise ValueError(f"declaration name {name.strip()!r} is already in use")

    def add_option(self, name, flags, converter=Unset, /, *, default=Unset, help=Unset):
        """
        Register an option and return its handle.

        Parameters
        - name: str, human-readable name (also the key in values()).
        - flags: FlagSet | str | Iterable[str], e.g. ("d", "double").
        - converter: Converter | Callable[[str], T]; omitted for a presence-only switch.
        - default: initial value (False for switches, None otherwise).
        - help: short description for help renderers.
        """
        self._claim(name)
        option = Option(name, flags, converter, default=default, help=help)
        self._options.append(option)
        return option

    def add_positional(self, name, converter=Unset, /, *, default=Unset, help=Unset):
        """
        Register a positional and return its handle. Converter defaults to String().
        """
        self._claim(name)
        positional = Positional(name, converter, default=default, help=help)
        self._positionals.append(positional)
        return positional

    def find_short(self, flag, /):
        for option in self._options:
            if option.match_short(flag):
                return option
        return None

    def find_long(self, flag, /):
        for option in self._options:
            if option.match_long(flag):
                return option
        return None

    def next_positional(self):
        for positional in self._positionals:
            if not positional.matched:
                return positional
        return None

    def reset(self):
        for declaration in self:
            declaration.reset()

    def __iter__(self):
        yield from self._options
        yield from self._positionals

    def __len__(self):
        return len(self._options) + len(self._positionals)

    def __repr__(self):
        return f"registry(options={len(self._options)}, positionals={len(self._positionals)})"


__all__ = (
    "Declaration",
    "Option",
    "Positional",
    "Registry",
)

# The metaclass is an implementation detail; keep it out of the namespace.
del DeclarationType
