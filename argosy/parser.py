"""
Argosy parser engine: one pass over the argument vector, first fault wins.

What this module provides
- ParserConfig: immutable grammar settings (prefixes, separator, terminator,
  and the four joined/separate value policies).
- ArgumentParser: owns a Registry of declarations and walks a token sequence,
  classifying each token as terminator, long flag, short-flag cluster or
  positional.
- ParseOutcome: success flag plus the single ParseError that stopped the parse.

Token grammar (defaults shown)
- `--`                 terminator; every later token is positional.
- `--name`             long flag; a valued option takes the next token.
- `--name=value`       long flag with a joined value.
- `-abc`               short cluster; switches a and b, then c.
- `-dVALUE` / `-d V`   short flag with a joined or separate value; a valued
                       flag swallows the rest of its cluster.
- anything else        the next unmatched positional.

Design notes
- Single pass, no backtracking, no recovery: the first fault aborts.
- A token consumed as a separate value is never classified, so `-d -5`
  hands `-5` to `d`.
- State accumulates across parse() calls; nothing is cleared implicitly.
- The engine never prints; debug records go to the `argosy.parser` logger.
"""
import copy
import logging
from collections import deque
from collections.abc import Iterable
from types import MappingProxyType

from .declarations import Registry
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class ParserConfig:
    """
    Immutable grammar settings for one ArgumentParser.

    Fields
    - long_prefix: str (default "--"), non-empty.
    - short_prefix: str (default "-"), non-empty.
    - long_separator: str (default "="); empty disables inline splitting, so a
      long flag can only get its value as the following token.
    - terminator: str (default "--"); compared exactly, so an empty terminator
      ends flag parsing at the first empty token.
    - allow_joined_short / allow_joined_long: accept `-dVALUE` / `--name=VALUE`.
    - allow_separate_short / allow_separate_long: accept `-d VALUE` / `--name VALUE`.

    Use copy.replace(config, **changes) or config.replace(**changes) to derive
    a modified copy.
    """
    __slots__ = (
        "_long_prefix",
        "_short_prefix",
        "_long_separator",
        "_terminator",
        "_allow_joined_short",
        "_allow_joined_long",
        "_allow_separate_short",
        "_allow_separate_long",
    )

    __fields__ = (
        "long_prefix",
        "short_prefix",
        "long_separator",
        "terminator",
        "allow_joined_short",
        "allow_joined_long",
        "allow_separate_short",
        "allow_separate_long",
    )

    def __init__(
            self,
            *,
            long_prefix="--",
            short_prefix="-",
            long_separator="=",
            terminator="--",
            allow_joined_short=True,
            allow_joined_long=True,
            allow_separate_short=True,
            allow_separate_long=True
    ):
        for name, prefix in (("long_prefix", long_prefix), ("short_prefix", short_prefix)):
            if not isinstance(prefix, str):
                raise TypeError(f"parser-config {name!r} must be a string")
            elif not prefix:
                raise ValueError(f"parser-config {name!r} cannot be empty")
        for name, text in (("long_separator", long_separator), ("terminator", terminator)):
            if not isinstance(text, str):
                raise TypeError(f"parser-config {name!r} must be a string")

        metadata = {
            "long_prefix": long_prefix,
            "short_prefix": short_prefix,
            "long_separator": long_separator,
            "terminator": terminator,
            "allow_joined_short": bool(allow_joined_short),
            "allow_joined_long": bool(allow_joined_long),
            "allow_separate_short": bool(allow_separate_short),
            "allow_separate_long": bool(allow_separate_long),
        }
        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)

    long_prefix = mirror("long_prefix")
    short_prefix = mirror("short_prefix")
    long_separator = mirror("long_separator")
    terminator = mirror("terminator")
    allow_joined_short = mirror("allow_joined_short")
    allow_joined_long = mirror("allow_joined_long")
    allow_separate_short = mirror("allow_separate_short")
    allow_separate_long = mirror("allow_separate_long")

    def __setattr__(self, name, value, /):
        raise AttributeError("parser-config is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("parser-config is immutable")

    def asdict(self):
        """
        Return the fields as a read-only mapping.
        """
        return MappingProxyType({name: getattr(self, "_" + name) for name in self.__fields__})

    def replace(self, **overrides):
        """
        Return a copy with the given fields replaced.
        """
        unknown = overrides.keys() - set(self.__fields__)
        if unknown:
            raise TypeError("parser-config got unexpected field(s): %s" % ", ".join(sorted(unknown)))
        return type(self)(**{**self.asdict(), **overrides})

    def __replace__(self, /, **overrides):
        return self.replace(**overrides)

    def __eq__(self, other, /):
        if not isinstance(other, ParserConfig):
            return NotImplemented
        return self.asdict() == other.asdict()

    def __hash__(self):
        return hash(tuple(self.asdict().items()))

    def __repr__(self):
        return "parser-config(%s)" % ", ".join("%s=%r" % item for item in self.asdict().items())

    def __rich_repr__(self):
        yield from self.asdict().items()


class ParseOutcome:
    """
    Result of one ArgumentParser.parse() call.

    Attributes
    - success: bool, True when every token was consumed without a fault.
    - error: ParseError | None, the first fault on failure.
    - consumed: int, number of tokens processed (including the one that failed).

    The outcome is truthy exactly when the parse succeeded.
    """
    __slots__ = ("_error", "_consumed")

    def __init__(self, error=None, consumed=0):
        if error is not None and not isinstance(error, ParseError):
            raise TypeError("parse-outcome 'error' must be a parse error")
        self._error = error
        self._consumed = consumed

    error = mirror("error")
    consumed = mirror("consumed")

    @property
    def success(self):
        return self._error is None

    @property
    def message(self):
        return None if self._error is None else self._error.message

    def raise_for_error(self):
        """
        Raise the stored ParseError, if any.
        """
        if self._error is not None:
            raise self._error

    def __bool__(self):
        return self.success

    def __repr__(self):
        if self.success:
            return f"parse-outcome(success=True, consumed={self._consumed})"
        return f"parse-outcome(success=False, consumed={self._consumed}, message={self.message!r})"


def _sanitized(tokens, /):
    """
    Materialize the input as a deque of strings, rejecting anything else.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parse() argument must be an iterable of strings")
    sanitized = deque()
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be an iterable of strings")
        sanitized.append(token)
    return sanitized


class ArgumentParser:
    """
    Declaration registry plus the single-pass parser engine.

    Parameters
    - description, epilog, prog: Unset | str
      Program metadata, pure data for help renderers (not used by parsing).
    - config: Unset | ParserConfig
      Grammar settings; defaults to ParserConfig().
    - **overrides: individual ParserConfig fields applied on top of config.

    Example
        parser = ArgumentParser("This is a test program", "This is the big epilogue")
        verbose = parser.add_option("VERBOSE", ("v", "verbose"), help="say more")
        double = parser.add_option("DOUBLE", ("d", "double"), Float(), default=25.0)
        outcome = parser.parse(["-v", "--double=3.5"])
        if outcome:
            print(verbose.value, double.value)
    """

    def __init__(self, description=Unset, epilog=Unset, prog=Unset, *, config=Unset, **overrides):
        for name, text in (("description", description), ("epilog", epilog), ("prog", prog)):
            if not isinstance(text, str | Unset):
                raise TypeError(f"argument-parser {name!r} must be a string")
        if not isinstance(config, ParserConfig | Unset):
            raise TypeError("argument-parser 'config' must be a parser-config")

        self._description = coalesce(description)
        self._epilog = coalesce(epilog)
        self._prog = coalesce(prog)
        self._config = coalesce(config, ParserConfig()).replace(**overrides)
        self._registry = Registry()
        self._error = None
        self._tokens = deque()
        self._index = 0

    description = mirror("description")
    epilog = mirror("epilog")
    registry = mirror("registry")
    error = mirror("error")

    @property
    def prog(self):
        return self._prog

    @prog.setter
    def prog(self, prog):
        if prog is not None and not isinstance(prog, str):
            raise TypeError("argument-parser 'prog' must be a string")
        self._prog = prog

    @property
    def config(self):
        return self._config

    @config.setter
    def config(self, config):
        if not isinstance(config, ParserConfig):
            raise TypeError("argument-parser 'config' must be a parser-config")
        self._config = config

    def configure(self, **overrides):
        """
        Replace individual config fields between parses; returns the new config.
        """
        self._config = copy.replace(self._config, **overrides)
        return self._config

    @property
    def options(self):
        return self._registry.options

    @property
    def positionals(self):
        return self._registry.positionals

    def add_option(self, name, flags, converter=Unset, /, *, default=Unset, help=Unset):
        """
        Register an option; see Registry.add_option.
        """
        return self._registry.add_option(name, flags, converter, default=default, help=help)

    def add_positional(self, name, converter=Unset, /, *, default=Unset, help=Unset):
        """
        Register a positional; see Registry.add_positional.
        """
        return self._registry.add_positional(name, converter, default=default, help=help)

    def values(self):
        """
        Map every declaration name to its current value.
        """
        return {declaration.name: declaration.value for declaration in self._registry}

    def reset(self):
        """
        Restore every declaration to its default and clear the last error.
        """
        self._registry.reset()
        self._error = None

    def parse(self, tokens, /):
        """
        Parse an iterable of argument strings (program name already stripped).

        Returns a ParseOutcome. Parse faults never escape this method; a
        TypeError is raised only for input that is not an iterable of strings.
        """
        config = self._config
        self._tokens = _sanitized(tokens)
        self._index = 0
        logger.debug("parsing %d token(s) with %r", len(self._tokens), config)
        try:
            self._parseargs(config)
        except ParseError as fault:
            logger.debug("parse failed at %s position: %s", ordinal(self._index), fault.message)
            self._error = fault
            return ParseOutcome(fault, self._index)
        finally:
            self._tokens = deque()
        self._error = None
        return ParseOutcome(consumed=self._index)

    def parse_args(self, tokens, /):
        """
        Parse like parse(), but raise the ParseError on failure and return
        values() on success.
        """
        self.parse(tokens).raise_for_error()
        return self.values()

    def _fault(self, cls, message, /, **options):
        return cls(message, prog=self._prog, index=self._index, **options)

    def _parseargs(self, config):
        terminated = False
        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if terminated:
                self._parse_positional(token)
            elif token == config.terminator:
                logger.debug("terminator %r at %s position", token, ordinal(self._index))
                terminated = True
            elif token.startswith(config.long_prefix) and len(token) > len(config.long_prefix):
                self._parse_long(token, config)
            elif token.startswith(config.short_prefix) and len(token) > len(config.short_prefix):
                self._parse_short(token, config)
            else:
                self._parse_positional(token)

    def _parse_long(self, token, config):
        body = token[len(config.long_prefix):]
        if config.long_separator and config.long_separator in body:
            name, _, inline = body.partition(config.long_separator)
        else:
            name, inline = body, None
        flag = config.long_prefix + name

        option = self._registry.find_long(name)
        if option is None:
            raise self._fault(
                UnmatchedFlagError,
                "unknown flag %r at %s position" % (flag, ordinal(self._index)),
                title="unknown flag",
                hint="check the spelling of %r or remove it" % flag,
                input=flag,
            )
        logger.debug("long flag %r resolved to %r", flag, option.name)
        option.sight()

        if option.valued:
            if inline is not None:
                if not config.allow_joined_long:
                    raise self._joined_fault(option, flag, "%s <value>" % flag)
                self._assign(option, flag, inline)
            else:
                self._assign(option, flag, self._separate(option, flag, config.allow_separate_long, "%s%s<value>" % (flag, config.long_separator)))
        elif inline is not None:
            raise self._fault(
                UnexpectedValueError,
                "presence-only flag %r at %s position cannot take a value" % (flag, ordinal(self._index)),
                title="flag cannot take a value",
                hint="remove everything from %r (for example: %s)" % (config.long_separator, flag),
                input=flag,
                declaration=option,
            )

    def _parse_short(self, token, config):
        body = token[len(config.short_prefix):]
        for position, char in enumerate(body):
            flag = config.short_prefix + char

            option = self._registry.find_short(char)
            if option is None:
                raise self._fault(
                    UnmatchedFlagError,
                    "unknown flag %r at %s position" % (flag, ordinal(self._index)),
                    title="unknown flag",
                    hint="check the spelling of %r in %r or remove it" % (flag, token),
                    input=flag,
                )
            logger.debug("short flag %r resolved to %r", flag, option.name)
            option.sight()

            if not option.valued:
                continue

            # a value-bearing flag swallows the rest of its cluster
            if rest := body[position + 1:]:
                if not config.allow_joined_short:
                    raise self._joined_fault(option, flag, "%s <value>" % flag)
                self._assign(option, flag, rest)
            else:
                self._assign(option, flag, self._separate(option, flag, config.allow_separate_short, "%s<value>" % flag))
            break

    def _parse_positional(self, token):
        positional = self._registry.next_positional()
        if positional is None:
            raise self._fault(
                NoPositionalSlotError,
                "unexpected positional argument %r at %s position: no positional is ready to receive it" % (token, ordinal(self._index)),
                title="unexpected positional",
                hint="remove this extra value or pass %r after a flag that takes it" % token,
                input=token,
            )
        logger.debug("token %r at %s position goes to positional %r", token, ordinal(self._index), positional.name)
        if not positional.parse_value(token):
            raise self._fault(
                InvalidValueError,
                "positional %r at %s position received an invalid value %r (%s)" % (
                    positional.name, ordinal(self._index), token, positional.failure.reason
                ),
                title="invalid value",
                hint="pass a value %s can convert" % (positional.metavar or "the converter"),
                input=token,
                declaration=positional,
            )

    def _separate(self, option, flag, allowed, joined):
        """
        Consume the following token as the value of `option`.
        """
        if not self._tokens:
            raise self._fault(
                MissingValueError,
                "flag %r at %s position requires a value but received none" % (flag, ordinal(self._index)),
                title="missing value",
                hint="pass a value after the flag (for example: %s)" % ("%s <value>" % flag if allowed else joined),
                input=flag,
                declaration=option,
            )
        if not allowed:
            raise self._fault(
                DisallowedSeparateValueError,
                "flag %r at %s position was passed a separate value, but separate values are disallowed" % (flag, ordinal(self._index)),
                title="separate value disallowed",
                hint="attach the value to the flag (for example: %s)" % joined,
                input=flag,
                declaration=option,
            )
        self._index += 1
        return self._tokens.popleft()

    def _joined_fault(self, option, flag, separate):
        return self._fault(
            DisallowedJoinedValueError,
            "flag %r at %s position was passed a joined value, but joined values are disallowed" % (flag, ordinal(self._index)),
            title="joined value disallowed",
            hint="pass the value as the next argument (for example: %s)" % separate,
            input=flag,
            declaration=option,
        )

    def _assign(self, option, flag, value):
        if not option.parse_value(value):
            raise self._fault(
                InvalidValueError,
                "flag %r at %s position received an invalid value %r (%s)" % (
                    flag, ordinal(self._index), value, option.failure.reason
                ),
                title="invalid value",
                hint="pass a value %s can convert" % (option.metavar or "the converter"),
                input=flag,
                declaration=option,
            )

    def __repr__(self):
        return f"argument-parser(prog={self._prog!r}, registry={self._registry!r})"


__all__ = (
    "ParserConfig",
    "ParseOutcome",
    "ArgumentParser",
)
