"""
Lexonaut help/usage rendering.

This is a collaborator of the parser, not part of parsing: it only reads the
declared arguments (short_usage(), long_usage(), help()) and lays them out as
rich Text, word-wrapped to a target width.

Layout
    usage: prog [-h] [-a] [-i <integer>] <name>
                [--wrapped-items ...]

    description paragraph

    positional arguments:
      <name>                help text aligned on column 24 and wrapped

    optional arguments:
      -h, --help            show this help message and exit

Palette keys
- usage-label, program-name, section-label, description-section
- option-name, positional-name, argument-description

Customization
- A __styles__ mapping in __main__ overrides palette entries by key.
- When colorful is False, styling is suppressed.
"""
from rich.console import Console
from rich.text import Text

from .utils import *

PADDING = 2
COLUMN = 24

_PALETTE = {
    "usage-label": "bold #5FD7FF",
    "program-name": "bold #FF6EB4",
    "section-label": "bold",
    "description-section": "italic #B0B0B8",
    "option-name": "bold #5FD7FF",
    "positional-name": "bold #FFD75F",
    "argument-description": "#A8ADB8",
}


def _palette(colorful):
    styles = _PALETTE | getattr(__import__("__main__"), "__styles__", {})

    def styler(key):
        return styles.get(key, "") if colorful else ""

    return styler


def _width(width):
    # Unset → whatever rich detects for the terminal
    return coalesce(width, Console().width)


def render_usage(parser, width=Unset, /):
    """
    Build the usage line: "usage: <prog>" followed by every option fragment
    (declaration order) and then every positional fragment, wrapped with a
    hanging indent under the first fragment.
    """
    width = _width(width)
    styler = _palette(parser.colorful)
    registry = parser.registry

    usage = Text.assemble(("usage", styler("usage-label")), ": ", (parser.prog, styler("program-name")))
    fragments = [Text(option.short_usage(), styler("option-name")) for option in registry.options]
    fragments += [Text(positional.short_usage(), styler("positional-name")) for positional in registry.positionals]
    if not fragments:
        return usage

    indent = len(usage) + 1
    if indent + 4 >= width:
        # no room to hang under the program name
        indent = COLUMN
        usage.append("\n" + " " * indent)
    else:
        usage.append(" ")

    rows = [fragments[0]]
    for fragment in fragments[1:]:
        if len(rows[-1]) + 1 + len(fragment) > width - indent:
            rows.append(fragment)
        else:
            rows[-1] = Text.assemble(rows[-1], " ", fragment)

    return usage.append(Text("\n" + " " * indent).join(rows))


def _entry(argument, style, styler, console, width):
    entry = Text(" " * PADDING).append(argument.long_usage(), styler(style))
    if not (descr := argument.help()):
        return entry
    if not isinstance(descr, Text):
        descr = Text(descr, styler("argument-description"))

    if len(entry) < COLUMN:
        entry.append(" " * (COLUMN - len(entry)))
    else:
        entry.append("\n" + " " * COLUMN)

    lines = descr.wrap(console, max(width - COLUMN, 1))
    for line in lines:
        line.rstrip()
    return entry.append(Text("\n" + " " * COLUMN).join(lines))


def render_help(parser, width=Unset, /):
    """
    Build the full help text: usage, description, positional arguments, and
    optional arguments (each section omitted when empty).
    """
    width = _width(width)
    styler = _palette(parser.colorful)
    console = Console(width=width, color_system=None, force_terminal=False)

    help = render_usage(parser, width).append("\n")

    if descr := parser.descr:
        if not isinstance(descr, Text):
            descr = Text(descr, styler("description-section"))
        lines = descr.wrap(console, width)
        for line in lines:
            line.rstrip()
        help.append("\n").append(Text("\n").join(lines)).append("\n")

    sections = (
        ("positional arguments", parser.registry.positionals, "positional-name"),
        ("optional arguments", parser.registry.options, "option-name"),
    )
    for label, arguments, style in sections:
        if not arguments:
            continue
        help.append("\n").append(label, styler("section-label")).append(":\n")
        for argument in arguments:
            help.append(_entry(argument, style, styler, console, width)).append("\n")

    help.rstrip()
    return help


__all__ = (
    "render_usage",
    "render_help",
)
