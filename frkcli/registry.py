"""
frkcli registry: declare arguments, parse tokens, render help.

What this module provides
- ArgRegistry: holds the declared positionals, flags and options and rejects
  invalid configurations as soon as they are registered (fail-fast).
- ParseResult: the read-only outcome of a successful parse, two mappings
  (`values`: name → string, `flags`: name → bool).
- Matched / HelpRequested / Failed: the tri-state answer of evaluate().

Parsing model
- One left-to-right pass with a single token of lookahead for option values.
- Positionals and options interleave freely; the last occurrence of a
  repeated option wins.
- A help trigger reached during the scan short-circuits the rest, including
  unmet requirements.
- The first problem found stops the pass; faults are never accumulated.

Entry points
- evaluate(tokens): pure, returns Matched | HelpRequested | Failed.
- parse(tokens): returns (result, None) or (None, message); prints help and
  exits with status 0 on a help trigger.
- invoke(tokens): shell-style runner; prints help and exits 0, or renders the
  fault on stderr and exits 1.

Quick start
    from frkcli import ArgRegistry

    registry = ArgRegistry("resize", "Resize an image.")
    registry.add_positional("input", help="source image")
    registry.add_option("width", aliases=("-w",), help="target width")
    registry.add_flag("verbose", aliases=("-v",))

    result, error = registry.parse(["photo.png", "-w", "640", "-v"])
    # result.values == {"input": "photo.png", "width": "640"}
    # result.flags == {"verbose": True}
"""
import collections
import difflib
import inspect
import os.path
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from . import help
from .arguments import Kind, Settings, ArgumentSpec, validate_trigger
from .faults import *
from .utils import *

Matched = collections.namedtuple("Matched", ("result",))
HelpRequested = collections.namedtuple("HelpRequested", ("text",))
Failed = collections.namedtuple("Failed", ("fault",))


class ParseResult:
    """
    Read-only result of one parse call.

    - values: mapping of positional/option names to their string values.
    - flags: mapping of flag names to booleans.
    - result[name] looks up values first, then flags.
    """
    __slots__ = ("_values", "_flags")

    def __init__(self, values, flags, /):
        self._values = MappingProxyType(dict(values))
        self._flags = MappingProxyType(dict(flags))

    @property
    def values(self):
        return self._values

    @property
    def flags(self):
        return self._flags

    def __getitem__(self, name, /):
        try:
            return self._values[name]
        except KeyError:
            return self._flags[name]

    def __contains__(self, name, /):
        return name in self._values or name in self._flags

    def __eq__(self, other, /):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return self._values == other._values and self._flags == other._flags

    __hash__ = None

    def __rich_repr__(self):
        yield "values", dict(self._values)
        yield "flags", dict(self._flags)

    def __repr__(self):
        return f"parse-result(values={dict(self._values)!r}, flags={dict(self._flags)!r})"


class ArgRegistry:
    """
    Declarative argument registry with a single-pass parser and help renderer.

    Construction
    - name: program name shown in the usage line (defaults to basename of argv[0]).
    - description: optional text shown beneath the usage line (dedented).
    - helpers: help-trigger keys; an empty collection disables help.
    - indent: default indentation width for help output.
    - fancy/colorful: console rendering switches for help and faults.

    Registration
    - add_positional / add_flag / add_option accept either a Settings instance
      or the same fields as keyword arguments (help, aliases, default).
    - Every violation raises a ConfigurationError subclass immediately.

    Internal state
    - _arguments: name → ArgumentSpec, in registration order.
    - _triggers: trigger key → ArgumentSpec.
    - _positionals: ordered positional specs.
    - _required: names of required positionals and options.
    - _value_defaults / _flag_defaults: default-value tables.
    """
    name = mirror("name")
    description = mirror("description")
    helpers = mirror("helpers")
    indent = mirror("indent")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    positionals = mirror("positionals")
    required = mirror("required")

    def __init__(
            self,
            name=Unset,
            /,
            description=Unset,
            *,
            helpers=("-h", "--help"),
            indent=2,
            fancy=False,
            colorful=False
    ):
        name = coalesce(name, os.path.basename(sys.argv[0]) or "frkcli")
        if not isinstance(name, str):
            raise TypeError("registry 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("registry 'name' cannot be empty")

        if not isinstance(description, str | Unset):
            raise TypeError("registry 'description' must be a string")

        if isinstance(helpers, str) or not isinstance(helpers, Iterable):
            raise TypeError("registry 'helpers' must be an iterable of strings")
        helpers = tuple(map(validate_trigger, helpers))
        for index, key in enumerate(helpers):
            if key in helpers[:index]:
                raise DuplicateTriggerError("help trigger %r is declared twice" % key, key=key)

        if not isinstance(indent, int) or isinstance(indent, bool):
            raise TypeError("registry 'indent' must be an integer")
        elif indent < 0:
            raise ValueError("registry 'indent' cannot be negative")

        self._name = name
        self._description = inspect.cleandoc(description) if description else None
        self._helpers = helpers
        self._indent = indent
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._arguments = {}
        self._triggers = {}
        self._positionals = []
        self._required = []
        self._value_defaults = {}
        self._flag_defaults = {}

    # ── Introspection ─────────────────────────────────────────────────────────

    @property
    def flags(self):
        return tuple(x for x in self._arguments.values() if x.kind is Kind.FLAG)

    @property
    def options(self):
        return tuple(x for x in self._arguments.values() if x.kind is Kind.OPTION)

    @property
    def triggers(self):
        """
        Mapping of every registered trigger key to its argument name.
        """
        return {key: argument.name for key, argument in self._triggers.items()}

    @property
    def defaults(self):
        """
        Registered defaults, flags (always False) and values alike.
        """
        return self._flag_defaults | self._value_defaults

    def __contains__(self, name, /):
        return name in self._arguments

    def __getitem__(self, name, /):
        return self._arguments[name]

    def __rich_repr__(self):
        yield "name", self._name
        yield "description", self._description
        yield "helpers", self._helpers
        yield "arguments", tuple(self._arguments.values())

    def __repr__(self):
        return f"registry(name={self._name!r}, arguments={tuple(self._arguments)!r})"

    # ── Registration ──────────────────────────────────────────────────────────

    def _register(self, kind, name, settings, options, /):
        """
        Build the spec and check it against the registry without mutating it.
        """
        if settings is not Unset and options:
            raise TypeError(f"{kind.label} accepts either a settings object or keyword options, not both")
        elif settings is Unset:
            settings = Settings(**options)
        elif not isinstance(settings, Settings):
            raise TypeError(f"{kind.label} settings must be a Settings instance")

        argument = ArgumentSpec(name, kind, **dict(settings.items()))

        if argument.name in self._arguments:
            raise DuplicateNameError("argument name %r is already in use" % argument.name, name=argument.name)

        keys = []
        for key in argument.triggers:
            if key in self._helpers:
                raise HelperTriggerError(
                    "trigger key %r of %s %r is reserved for help" % (key, kind.label, argument.name),
                    name=argument.name,
                    key=key,
                )
            elif key in self._triggers or key in keys:
                raise DuplicateTriggerError(
                    "trigger key %r of %s %r is already in use" % (key, kind.label, argument.name),
                    name=argument.name,
                    key=key,
                )
            keys.append(key)

        return argument

    def _commit(self, argument, /):
        self._arguments[argument.name] = argument
        for key in argument.triggers:
            self._triggers[key] = argument
        if argument.kind is Kind.POSITIONAL:
            self._positionals.append(argument)
        if argument.kind is Kind.FLAG:
            self._flag_defaults[argument.name] = False
        elif argument.required:
            self._required.append(argument.name)
        else:
            self._value_defaults[argument.name] = argument.default
        return argument

    def add_positional(self, name, settings=Unset, /, **options):
        """
        Append a positional argument.

        A positional without a default is required and cannot follow an
        optional positional (PositionalOrderError).
        """
        argument = self._register(Kind.POSITIONAL, name, settings, options)
        if argument.required and self._positionals and not self._positionals[-1].required:
            raise PositionalOrderError(
                "required positional argument %r cannot follow optional positional argument %r" % (
                    argument.name, self._positionals[-1].name
                ),
                name=argument.name,
            )
        return self._commit(argument)

    def add_flag(self, name, settings=Unset, /, **options):
        """
        Register a boolean switch triggered by --name and its aliases.

        Flags never take a default (FlagDefaultError); they default to False.
        """
        return self._commit(self._register(Kind.FLAG, name, settings, options))

    def add_option(self, name, settings=Unset, /, **options):
        """
        Register a key-plus-value argument triggered by --name and its aliases.

        Without a default the option is required.
        """
        return self._commit(self._register(Kind.OPTION, name, settings, options))

    # ── Help ──────────────────────────────────────────────────────────────────

    def render_help(self, indent=Unset):
        return help.render(self, coalesce(indent, self._indent))

    # ── Parsing ───────────────────────────────────────────────────────────────

    def _tokenize(self, tokens, /):
        if tokens is Unset:
            return list(sys.argv[1:])
        if isinstance(tokens, str):
            return shlex.split(tokens)
        if not isinstance(tokens, Iterable):
            raise TypeError("tokens must be a string or an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("tokens must be strings")
        return tokens

    def _hint(self, token, /):
        if suggestions := difflib.get_close_matches(token, self._triggers.keys(), 3):
            return "did you mean %s?" % " or ".join(map(repr, suggestions))
        if self._helpers:
            return "try '%s %s' to list valid flags and options" % (self._name, self._helpers[-1])
        return Unset

    def evaluate(self, tokens=Unset, /):
        """
        Match tokens against the registry without side effects.

        Returns
        - HelpRequested(text) when a help trigger is reached before any problem.
        - Failed(fault) on the first parse problem (a ParseError instance).
        - Matched(result) otherwise, with defaults back-filled.
        """
        tokens = self._tokenize(tokens)
        values = {}
        flags = {}
        consumed = set()
        cursor = 0

        for index, token in enumerate(tokens):
            position = index + 1

            if token in self._helpers:
                return HelpRequested(self.render_help())

            if index in consumed:
                continue

            if not token.startswith("-"):
                if cursor >= len(self._positionals):
                    expected = len(self._positionals)
                    label = Kind.POSITIONAL.label
                    return Failed(TooManyPositionalsError(
                        "too many positional arguments: unexpected %r at %s position (expected at most %d %s)" % (
                            token, ordinal(position), expected,
                            label if expected == 1 else pluralize(label)
                        ),
                        token=token,
                        index=position,
                        hint="remove %r or pass it as the value of an option" % token,
                        prog=self._name,
                        docs=getdoc(TooManyPositionalsError.code),
                    ))
                values[self._positionals[cursor].name] = token
                cursor += 1
                continue

            try:
                argument = self._triggers[token]
            except KeyError:
                return Failed(UnknownTriggerError(
                    "unknown flag or option %r at %s position" % (token, ordinal(position)),
                    token=token,
                    index=position,
                    hint=self._hint(token),
                    prog=self._name,
                    docs=getdoc(UnknownTriggerError.code),
                ))

            if argument.kind is Kind.FLAG:
                flags[argument.name] = True
                continue

            if index + 1 >= len(tokens):
                return Failed(MissingOptionValueError(
                    "no value provided for option %r at %s position" % (token, ordinal(position)),
                    token=token,
                    index=position,
                    hint="provide a value after %s" % token,
                    prog=self._name,
                    docs=getdoc(MissingOptionValueError.code),
                ))
            values[argument.name] = tokens[index + 1]
            consumed.add(index + 1)

        for name in self._required:
            if name not in values and name not in flags:
                argument = self._arguments[name]
                if argument.kind is Kind.OPTION:
                    hint = "pass %s <value>" % argument.triggers[0]
                else:
                    hint = "add a value for <%s>" % name
                return Failed(MissingRequiredError(
                    "required arg not found: %s %r" % (argument.kind.label, name),
                    name=name,
                    hint=hint,
                    prog=self._name,
                    docs=getdoc(MissingRequiredError.code),
                ))

        for name, default in self._flag_defaults.items():
            flags.setdefault(name, default)
        for name, default in self._value_defaults.items():
            values.setdefault(name, default)

        return Matched(ParseResult(values, flags))

    def show_help(self, text=Unset, /, *, stderr=False):
        help.show(self, text, stderr=stderr, fancy=self._fancy, colorful=self._colorful)

    def parse(self, tokens=Unset, /):
        """
        Parse tokens into (result, error).

        - success: (ParseResult, None)
        - failure: (None, message)
        - help trigger: help is printed and the process exits with status 0;
          code after parse() does not run.
        """
        match self.evaluate(tokens):
            case HelpRequested(text):
                self.show_help(text)
                sys.exit(0)
            case Failed(fault):
                return None, str(fault)
            case Matched(result):
                return result, None

    def invoke(self, tokens=Unset, /, *, shell=True):
        """
        Shell-style runner around evaluate().

        - help trigger: print help and exit with status 0.
        - failure: in shell mode render the fault on stderr and exit with
          status 1; otherwise raise it.
        - success: return the ParseResult.
        """
        match self.evaluate(tokens):
            case HelpRequested(text):
                self.show_help(text)
                sys.exit(0)
            case Failed(fault):
                trigger(fault, shell=shell, fancy=self._fancy, colorful=self._colorful)
            case Matched(result):
                return result


__all__ = (
    "ArgRegistry",
    "ParseResult",
    "Matched",
    "HelpRequested",
    "Failed",
)
