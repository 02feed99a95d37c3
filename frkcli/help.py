"""
frkcli help rendering.

render() turns the current registry state into plain, column-aligned usage
text; show() writes that text to a rich console, optionally styled and framed.

Layout
    usage: <prog> [options] <required> [optional]

      <description, each line indented>

    positional arguments:
      <name>  [required]          <help>

    flags:
      --name, -n  <help>

    options:
      --name, -n  [default: 'x']  <help>

- Sections appear only when non-empty, always in the order above.
- Within a section every column is padded to its widest cell and padded
  columns are joined by a single space; trailing whitespace is trimmed.
- Output depends on nothing but the registry state, so the same registry
  always renders byte-identical text.

Palette keys (show() with colorful=True)
- usage-label, section-label, trigger, annotation, panel-title
- Define a mapping named __styles__ in __main__ to override any entry.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .arguments import Kind
from .utils import *

_SECTIONS = (
    (Kind.POSITIONAL, "positional arguments"),
    (Kind.FLAG, "flags"),
    (Kind.OPTION, "options"),
)


def _annotation(argument):
    if argument.required:
        return "[required]"
    return f"[default: '{argument.default}']"


def _row(argument):
    if argument.kind is Kind.FLAG:
        return [argument.key, argument.help or ""]
    return [argument.key, _annotation(argument), argument.help or ""]


def _align(rows, indent):
    """
    Pad every column to the widest cell of that column and join with one space.

    Help text spanning several lines continues under the help column.
    """
    widths = [max(map(len, column)) for column in zip(*(row[:-1] for row in rows))]
    margin = " " * (indent + sum(width + 1 for width in widths))
    lines = []
    for row in rows:
        lead = " " * indent + "".join(cell.ljust(width) + " " for cell, width in zip(row, widths))
        first, *rest = row[-1].splitlines() or [""]
        lines.append((lead + first).rstrip())
        lines.extend((margin + line).rstrip() for line in rest)
    return lines


def usage(registry, /):
    """
    Build the single usage line (without a trailing newline).
    """
    parts = ["usage:", registry.name]
    if registry.flags or registry.options:
        parts.append("[options]")
    for argument in registry.positionals:
        parts.append(f"<{argument.name}>" if argument.required else f"[{argument.name}]")
    return " ".join(parts)


def render(registry, /, indent=2):
    """
    Render the registry into help text.

    Parameters
    - registry: the ArgRegistry to describe.
    - indent: non-negative width used for the description block and rows.

    Returns
    - str: newline-terminated lines, deterministic for a given registry state.
    """
    if not isinstance(indent, int) or isinstance(indent, bool):
        raise TypeError("help 'indent' must be an integer")
    elif indent < 0:
        raise ValueError("help 'indent' cannot be negative")

    lines = [usage(registry)]

    if registry.description:
        lines.append("")
        for line in registry.description.splitlines():
            lines.append((" " * indent + line).rstrip())

    groups = {
        Kind.POSITIONAL: registry.positionals,
        Kind.FLAG: registry.flags,
        Kind.OPTION: registry.options,
    }
    for kind, label in _SECTIONS:
        if not (arguments := groups[kind]):
            continue
        lines.append("")
        lines.append(label + ":")
        lines.extend(_align(list(map(_row, arguments)), indent))

    return "".join(line + "\n" for line in lines)


def show(registry, /, text=Unset, *, console=Unset, stderr=False, fancy=False, colorful=False):
    """
    Print help text to a rich console.

    - text defaults to registry.render_help().
    - console defaults to a fresh Console on stdout (stderr when asked).
    - fancy frames the text in a Panel titled "[ NAME HELP ]".
    - colorful styles labels, trigger keys and annotations.
    """
    console = coalesce(console, Console(stderr=stderr, highlight=False))
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "section-label": "bold #FFFFFF",  # Pure white headers
        "trigger": "bold #22C55E",  # GREEN for flags/options
        "annotation": "#FFD600",  # AMBER for required/default markers
        "panel-title": "bold #FF4D94",  # MAGENTA-PINK → brand pop
    } | getattr(__import__("__main__"), "__styles__", {}))

    renderable = Text(coalesce(text, registry.render_help()).rstrip("\n"))

    if colorful:
        renderable.highlight_regex(r"(?m)^usage:", styles["usage-label"])
        renderable.highlight_regex(r"(?m)^[a-z ]+:$", styles["section-label"])
        renderable.highlight_regex(r"(?<=[ ,])--?[^\s,]+", styles["trigger"])
        renderable.highlight_regex(r"\[required\]|\[default: '[^']*'\]", styles["annotation"])

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", f"{registry.name} HELP".upper(), " ", "]", style=styles["panel-title"] if colorful else ""),
            title_align="left",
        )

    console.print(renderable, soft_wrap=True)


__all__ = (
    "usage",
    "render",
    "show",
)
