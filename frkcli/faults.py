"""
frkcli faults (configuration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the library
  raises. Codes are grouped by domain so logs and searches stay predictable.
- ConfigurationError: registration-time violations of the registry invariants.
  These are programmer errors, raised immediately and never rendered.
- ParseError: runtime failures to match tokens against a registry. They carry
  a message + options and know how to render themselves with rich.
- trigger(): central entry point to surface a parse fault (raise, or render and
  exit when running in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse faults name the offending token and its
  ordinal position (“at second position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- The registry builds faults while parsing; evaluate() hands them back,
  parse() flattens them into a message and invoke() triggers them in shell mode.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - parsing (111xx)
      • UNKNOWN_TRIGGER, MISSING_OPTION_VALUE, TOO_MANY_POSITIONALS, MISSING_REQUIRED
    - configuration: names (211xx)
      • MALFORMED_NAME, DUPLICATED_NAME
    - configuration: trigger keys (211xx)
      • MALFORMED_TRIGGER, DUPLICATED_TRIGGER, HELPER_TRIGGER
    - configuration: defaults and ordering (211xx)
      • FLAG_DEFAULT, POSITIONAL_ALIAS, POSITIONAL_ORDER

    normalize() lets the host remap codes to friendlier labels.
    """
    # --- parse errors (11xxx) ---
    UNKNOWN_TRIGGER      = 11112
    MISSING_OPTION_VALUE = 11117
    TOO_MANY_POSITIONALS = 11121
    MISSING_REQUIRED     = 11125

    # --- configuration errors (21xxx) ---
    MALFORMED_NAME       = 21101
    DUPLICATED_NAME      = 21102
    MALFORMED_TRIGGER    = 21111
    DUPLICATED_TRIGGER   = 21112
    HELPER_TRIGGER       = 21113
    FLAG_DEFAULT         = 21121
    POSITIONAL_ALIAS     = 21122
    POSITIONAL_ORDER     = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(Exception):
    """
    registration-time violation of the registry's structural invariants.

    the offending argument name and/or trigger key are kept on the instance
    (as read-only `options`) so callers and tests can inspect them.
    """
    code = Unset

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code} | options)


class MalformedNameError(ConfigurationError):
    code = FaultCode.MALFORMED_NAME
class DuplicateNameError(ConfigurationError):
    code = FaultCode.DUPLICATED_NAME
class MalformedTriggerError(ConfigurationError):
    code = FaultCode.MALFORMED_TRIGGER
class DuplicateTriggerError(ConfigurationError):
    code = FaultCode.DUPLICATED_TRIGGER
class HelperTriggerError(ConfigurationError):
    code = FaultCode.HELPER_TRIGGER
class FlagDefaultError(ConfigurationError):
    code = FaultCode.FLAG_DEFAULT
class AliasError(ConfigurationError):
    code = FaultCode.POSITIONAL_ALIAS
class PositionalOrderError(ConfigurationError):
    code = FaultCode.POSITIONAL_ORDER


class ParseError(Exception):
    code = Unset
    title = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code, "title": type(self).title} | options)

    def __str__(self):
        return str(self.message) if self.message else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "dim #A0A0B0",  # muted documentation line
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "frkcli")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(str(self.options["title"]).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownTriggerError(ParseError):
    code = FaultCode.UNKNOWN_TRIGGER
    title = "unknown flag or option"
class TooManyPositionalsError(ParseError):
    code = FaultCode.TOO_MANY_POSITIONALS
    title = "too many positional arguments"
class MissingOptionValueError(ParseError):
    code = FaultCode.MISSING_OPTION_VALUE
    title = "no value provided for option"
class MissingRequiredError(ParseError):
    code = FaultCode.MISSING_REQUIRED
    title = "required arg not found"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via copy.replace before triggering.
    - in shell mode the fault is rendered on stderr and the process exits with
      status 1; otherwise the fault is raised.

    typical options
    - prog, shell, fancy, colorful, hint, docs, and any context the renderer may
      want to show (e.g., token/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "MalformedNameError",
    "DuplicateNameError",
    "MalformedTriggerError",
    "DuplicateTriggerError",
    "HelperTriggerError",
    "FlagDefaultError",
    "AliasError",
    "PositionalOrderError",
    "ParseError",
    "UnknownTriggerError",
    "TooManyPositionalsError",
    "MissingOptionValueError",
    "MissingRequiredError",
    "trigger",
    "getdoc",
)
