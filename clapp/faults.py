"""
clapp faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): surface a fault on the stderr console and terminate (used by
  ArgumentParser.run()).

UX goals
- Position-first messages: parse-time messages include the ordinal position of
  the offending token (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.
- Styling configurable via __styles__ in __main__; codes relabelled via __codes__.

Integration
- ArgumentParser.parse() raises ParserException subclasses and emits warnings
  through the warnings module.
- ArgumentParser.run() catches ParserException and renders it via trigger().
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - declaration (2110x)
      • INVALID_DECLARATION
    - values (2111x)
      • UNCONVERTIBLE_VALUE, MISSING_ARGUMENT, INVALID_CHOICE
    - structure (2112x)
      • MISSING_REQUIRED_OPTION, UNEXPECTED_POSITIONAL
    - delegated (2113x)
      • DELEGATED_ERROR
    - warnings (2211x)
      • REPEATED_OPTION, EMPTY_INLINE_VALUE
    """
    # --- declaration errors ---
    INVALID_DECLARATION     = 21101

    # --- value errors ---
    UNCONVERTIBLE_VALUE     = 21111
    MISSING_ARGUMENT        = 21112
    INVALID_CHOICE          = 21113

    # --- structural errors ---
    MISSING_REQUIRED_OPTION = 21121
    UNEXPECTED_POSITIONAL   = 21122

    # --- delegated errors ---
    DELEGATED_ERROR         = 21131

    # --- warnings ---
    REPEATED_OPTION         = 22111
    EMPTY_INLINE_VALUE      = 22112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    Build a rich renderable for a fault: a header, the message and an optional hint.

    Recognized options
    - parser: the ArgumentParser (its name/prog labels the header).
    - colorful: bool, styles enabled (default True).
    - fancy: bool, wrap the body in a Panel.
    - code, title, hint: copy for the header and footer.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    options = fault.options
    colorful = options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style)

    parser = options.get("parser")
    label = getattr(main, "__prog__", None) or (parser.label if parser is not None else "clapp")

    header = Text.assemble(
        "[ ",
        text(label, styler("prog-name")),
        " — ",
        text(options["code"].normalize() if "code" in options else "", styler("code")),
        " | ",
        text(options.get("title", type(fault).__name__).title(), styler("title")),
        " ]"
    )
    message = text(coalesce(fault.message, ""), styler("message"))
    renders = [message]
    if options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ParserException(Exception):
    """
    Base class of every error raised by clapp.

    Parameters
    - message: human-readable, lowercased sentence.
    - **options: context shown by renderers and available to callers
      (code, title, hint, option, raw, position, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def option(self):
        """
        The Option the fault is about, when known.
        """
        return self.options.get("option")

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        Console(stderr=True).print(self)
        sys.exit(1)

    def __replace__(self, /, **overrides):
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class DeclarationError(ParserException, ValueError): ...
class ConversionError(ParserException): ...
class MissingArgumentError(ParserException): ...
class InvalidChoiceError(ParserException): ...
class MissingRequiredOptionError(ParserException): ...
class UnexpectedPositionalError(ParserException): ...
class DelegatedCallbackError(ParserException): ...


class ParserWarning(Warning):
    """
    Base class of the soft problems reported while parsing.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __replace__(self, /, **overrides):
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class RepeatedOptionWarning(ParserWarning): ...
class EmptyInlineValueWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given rendering options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParserException).
    - options are merged into the fault via copy.replace() before triggering.
    - the fault is printed on the stderr console and the process exits with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParserException",
    "DeclarationError",
    "ConversionError",
    "MissingArgumentError",
    "InvalidChoiceError",
    "MissingRequiredOptionError",
    "UnexpectedPositionalError",
    "DelegatedCallbackError",
    "ParserWarning",
    "RepeatedOptionWarning",
    "EmptyInlineValueWarning",
    "trigger",
)
