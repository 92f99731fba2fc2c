"""
clapp help and version rendering.

The parser exposes its declarations (options in declaration order, name,
version, description, program name); this module turns them into rich Text:

    Sample Application 1.0.0
    Some really useful cli program.

    usage: prog [-h] -c <json config file> [-s] INPUT_FILE

    positionals:
      INPUT_FILE
          File to read.
          (required)

    options:
      -h, --help
          Print this help message.
      -c, --cfg <json config file>
          Sets the config file.
          (required)

Palette keys
- program-name, program-version, description-section
- usage-label, usage-program
- group-label, option-name, positional-name, metavar, choice
- argument-description, note

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed.

Rendering is a pure function of the declarations, so rendering twice with the
same declarations gives identical output.
"""
from collections import defaultdict

from rich.text import Text


def _palette(parser):
    styles = defaultdict(str, {
        # === Head sections ===
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "program-version": "bold #00E6FF",  # CYAN version
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Usage ===
        "usage-label": "bold #00E6FF",
        "usage-program": "bold #FF4D94",

        # === Groups / options ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "option-name": "bold #00E6FF",  # CYAN for named options
        "positional-name": "bold #22C55E",  # GREEN for positionals
        "metavar": "bold #FFD600",  # AMBER for parameters
        "choice": "bold #FF4D94",  # MAGENTA → choices stand out
        "argument-description": "#9CA3AF",  # Muted gray
        "note": "italic #737373",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    return styler


def _argument(option, styler):
    """
    Text for the value an option takes: {a,b}, <metavar> or <value>.
    """
    if option.choices:
        return Text.assemble("{", Text(",").join(Text(choice, styler("choice")) for choice in option.choices), "}")
    return Text.assemble("<", Text(option.metavar or "value", styler("metavar")), ">")


def _synopsis(option, styler):
    """
    Usage-line item for one option; optional items are bracketed.
    """
    if option.positional:
        synopsis = Text(option.metavar, styler("positional-name"))
    else:
        synopsis = Text(option.keys[0], styler("option-name"))
        if not option.flag:
            synopsis.append(" ").append_text(_argument(option, styler))
    if option.required:
        return synopsis
    return Text.assemble("[", synopsis, "]")


def _entry(option, styler):
    """
    Help block for one option: its names line, then description and notes.
    """
    lines = []
    if option.positional:
        names = Text(option.metavar, styler("positional-name"))
    else:
        names = Text(", ").join(Text(key, styler("option-name")) for key in option.keys)
        if not option.flag:
            names.append(" ").append_text(_argument(option, styler))
    lines.append(Text("  ").append_text(names))

    if option.descr:
        lines.append(Text("      ").append_text(Text(option.descr, styler("argument-description"))))

    notes = []
    if option.required:
        notes.append("required")
    if option.has_default:
        notes.append("default: %r" % (option.default,))
    if notes:
        lines.append(Text("      ").append_text(Text("(%s)" % ", ".join(notes), styler("note"))))
    return lines


def render_help(parser, /):
    """
    Render the help message of a parser.

    Returns
    - rich.text.Text: header, usage line and per-option blocks.
    """
    styler = _palette(parser)
    lines = []

    header = Text(" ").join(
        Text(fragment, styler(style))
        for fragment, style in ((parser.name, "program-name"), (parser.version, "program-version"))
        if fragment
    )
    if header:
        lines.append(header)
    if parser.descr:
        lines.append(Text(parser.descr, styler("description-section")))
    if lines:
        lines.append(Text(""))

    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(parser.prog, styler("usage-program"))
    for option in parser:
        usage.append(" ").append_text(_synopsis(option, styler))
    lines.append(usage)

    positionals = [option for option in parser if option.positional]
    named = [option for option in parser if not option.positional]
    for title, options in (("positionals", positionals), ("options", named)):
        if not options:
            continue
        lines.append(Text(""))
        lines.append(Text(title, styler("group-label")).append(":"))
        for option in options:
            lines.extend(_entry(option, styler))

    return Text("\n").join(lines)


def render_version(parser, /):
    """
    Render the version line of a parser: "<name or program> <version>".
    """
    styler = _palette(parser)
    return Text(" ").join((
        Text(parser.name or parser.prog, styler("program-name")),
        Text(parser.version or "(unversioned)", styler("program-version")),
    ))


__all__ = (
    "render_help",
    "render_version",
)
