"""
frkcli utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, registry and help layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the registry.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    copies for containers, so the public surface cannot mutate registry state.

- pluralize(text)
  • Best-effort English pluralization for fault messages.

- ordinal(number)
  • Human-friendly ordinal label ("first", "second", ..., "11th") for token positions.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(2)
    'second'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None could be mistaken for user input. A single instance, Unset,
    is exposed for use as the default in registration parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and "".
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0 or "" are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    - Sequence (non-string): a new tuple with each element processed.
    - Mapping: a new dict with the same keys and processed values.
    - Set: a new frozenset.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The property reads "_{name}" on the instance and returns a copy for
    container types, so callers can look but not touch.

    Example
    - Given self._aliases, declare aliases = mirror("aliases") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for fault messages.

    Only the last word of a phrase is pluralized; surrounding whitespace and
    basic casing are preserved.

    Examples
    - pluralize("argument")            -> "arguments"
    - pluralize("positional argument") -> "positional arguments"
    - pluralize("entry")               -> "entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not text:
        return text

    match = re.search(r'(\S+)(\s*)$', text)
    if not match:
        return text

    head = text[:match.start(1)]
    last = match.group(1)
    trail = match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes (11th, 21st, 112th).
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")

    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Distinct from None: a registration that omits `default` is required, while a
registration passing `default=""` is optional with an empty default.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
