r"""
frkcli argument specifications.

Overview
- Kind: the three argument kinds (positional, flag, option). The kind decides
  how the parser consumes tokens and which default rules apply.
- Settings: the per-registration options struct (help, aliases, default).
  Every field is independently defaultable through the Unset sentinel.
- ArgumentSpec: an immutable, introspectable description of one declared
  argument, owned by the registry for its whole lifetime.

Metadata (sanitized on construction)
- name: non-empty string without whitespace.
- help: Unset | str, trimmed, non-empty when provided (None when omitted).
- aliases: Iterable[str] of trigger keys, flags/options only, order preserved.
- default: Unset | str. Presence makes the argument optional; flags reject it.

Validation highlights
- Trigger keys must start with '-' and contain no whitespace.
- Repeated keys (inside one spec or across specs) are rejected by the registry.

Quick example:
    >>> spec = ArgumentSpec("width", Kind.OPTION, aliases=("-w",))
    >>> spec.triggers
    ('--width', '-w')
    >>> spec.required
    True
"""
import functools
import operator
from collections.abc import Iterable
from enum import Enum

from .faults import MalformedNameError, MalformedTriggerError, FlagDefaultError, AliasError
from .utils import *


class Kind(Enum):
    """
    argument kinds, in the order the help renderer lays out their sections.
    """
    POSITIONAL = "positional"
    FLAG = "flag"
    OPTION = "option"

    @property
    def label(self):
        return {
            Kind.POSITIONAL: "positional argument",
            Kind.FLAG: "flag",
            Kind.OPTION: "option",
        }[self]


def validate_trigger(key, /):
    """
    Check a candidate trigger key and return it unchanged.

    A key is valid iff it starts with '-' (single or double dash) and contains
    no whitespace. Anything else raises MalformedTriggerError naming the key.
    """
    if not isinstance(key, str):
        raise TypeError("trigger keys must be strings")
    if not key.startswith("-") or any(char.isspace() for char in key):
        raise MalformedTriggerError(
            "trigger key %r must start with '-' or '--' and contain no whitespace" % key,
            key=key,
        )
    return key


def _sanitize_metadata(kind, metadata, /):
    """
    Internal: normalize and validate the metadata shared by every kind.

    - name: must be a string; empty or whitespace-bearing names are rejected.
    - help: Unset or a non-empty string after trimming; Unset becomes None.
    - default: Unset or a string; flags reject any default.

    Raises
    - TypeError: wrong field types (programmer error).
    - MalformedNameError / FlagDefaultError: configuration violations.

    The dict is mutated in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{kind.label} name must be a string")
    elif not name or any(char.isspace() for char in name):
        raise MalformedNameError(
            "%s name %r must be non-empty and contain no whitespace" % (kind.label, name),
            name=name,
        )

    if not isinstance(help := metadata["help"], str | Unset):
        raise TypeError(f"{kind.label} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{kind.label} 'help' cannot be empty")
    metadata["help"] = coalesce(help)

    if kind is Kind.FLAG and metadata["default"] is not Unset:
        raise FlagDefaultError("flag %r cannot have a default value" % name, name=name)
    elif not isinstance(metadata["default"], str | Unset):
        raise TypeError(f"{kind.label} 'default' must be a string")


def _sanitize_aliases(kind, metadata, /):
    """
    Internal: validate aliases and keep their registration order.

    Positionals cannot carry aliases. Each alias must be a valid trigger key;
    the collection is normalized into a tuple.
    """
    aliases = metadata["aliases"]
    if isinstance(aliases, str) or not isinstance(aliases, Iterable):
        raise TypeError(f"{kind.label} 'aliases' must be an iterable of strings")

    if (aliases := tuple(aliases)) and kind is Kind.POSITIONAL:
        raise AliasError(
            "positional argument %r cannot have aliases" % metadata["name"],
            name=metadata["name"],
        )

    for alias in aliases:
        validate_trigger(alias)

    metadata["aliases"] = aliases


class Settings:
    """
    Options struct for a single registration call.

    Every field defaults to Unset so that “not provided” stays distinct from
    any real value:
    - help: short description shown in help output.
    - aliases: extra trigger keys (flags and options only).
    - default: default value; makes the argument optional.
    """
    __slots__ = ("_help", "_aliases", "_default")

    help = mirror("help")
    aliases = mirror("aliases")
    default = mirror("default")

    def __init__(self, help=Unset, aliases=Unset, default=Unset):
        self._help = help
        self._aliases = aliases if aliases is Unset or isinstance(aliases, str) else tuple(aliases)
        self._default = default

    def items(self):
        """
        Yield only the fields that were provided, as (name, value) pairs.
        """
        for name in ("help", "aliases", "default"):
            if (value := getattr(self, "_" + name)) is not Unset:
                yield name, value

    def __rich_repr__(self):
        yield from self.items()

    def __repr__(self):
        return f"settings({", ".join(map(functools.partial(operator.mod, "%s=%r"), self.items()))})"


class ArgumentSpec:
    """
    Immutable description of one declared argument.

    Read-only properties
    - name, kind, help, aliases, default: the sanitized metadata.
    - required: True when no default was given (flags are never required).
    - triggers: ("--name", *aliases) for flags/options, () for positionals.
    - key: the text used for the argument in help rows.
    """
    __introspectable__ = ("name", "kind", "help", "aliases", "default")

    name = mirror("name")
    kind = mirror("kind")
    help = mirror("help")
    aliases = mirror("aliases")

    def __init__(self, name, kind, /, help=Unset, aliases=(), default=Unset):
        if not isinstance(kind, Kind):
            raise TypeError("argument kind must be a Kind")

        metadata = {"name": name, "help": help, "aliases": aliases, "default": default}
        _sanitize_metadata(kind, metadata)
        _sanitize_aliases(kind, metadata)

        self._kind = kind
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __setattr__(self, name, value, /):
        if not name.startswith("_") or hasattr(self, name):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    @property
    def default(self):
        """
        The default value, or None when the argument has none.
        """
        return coalesce(self._default)

    @property
    def required(self):
        return self._kind is not Kind.FLAG and self._default is Unset

    @property
    def triggers(self):
        if self._kind is Kind.POSITIONAL:
            return ()
        return ("--" + self._name, *self._aliases)

    @property
    def key(self):
        if self._kind is Kind.POSITIONAL:
            return self._name
        return ", ".join(self.triggers)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"{self._kind.value}({", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))})"


__all__ = (
    "Kind",
    "Settings",
    "ArgumentSpec",
    "validate_trigger",
)
