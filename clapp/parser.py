"""
clapp parser: declare options, parse an argument vector, dispatch callbacks.

What this module provides
- ArgumentParser: owns the option registry and a conversion registry, and
  implements the parse pipeline:
  • pre-processing: "--opt=value" is read as "--opt value" (split at the
    first '=');
  • scan: one left-to-right pass that matches named keys, consumes values,
    fills positionals in declaration order and records the invocation order;
  • defaults: options never matched take their default value;
  • overruling check: a set overruling option (help/version-like) runs
    its callback alone and ends the parse;
  • required check: the first required option left unset raises;
  • dispatch: callbacks run in invocation order.
- Outcome: how the last parse ended (PARSED, OVERRULED or EMPTY).

Quick start
    from clapp import ArgumentParser

    parser = ArgumentParser("Sample Application", version="1.0.0",
                            descr="Some really useful cli program.")
    parser.add_help()
    settings = {}
    parser.option("-c", "--cfg", metavar="json config file", required=True,
                  descr="Sets the config file.", store=binder(settings, "cfg"))
    silent = parser.option("-s", flag=True, descr="Silent mode")

    if parser.parse(["prog", "--cfg=config.json", "-s"]):
        print(settings["cfg"], silent.value)

Reuse
- A parser can parse several argument vectors: every parse() starts by putting
  each option back to its type-default (was_set False) and by clearing the
  invocation record. Storage setters are only called for new values.

Design notes
- parse() raises ParserException subclasses; run() is the process-level
  wrapper that renders them and exits.
- Faults lead with the ordinal position of the offending token
  ("at third position"), counted in argv with the program name at 0.
"""
import copy
import os.path
import sys
import warnings
from enum import Enum

from rich.console import Console

from .conversions import ConversionRegistry, converters
from .faults import *
from .helper import render_help, render_version
from .options import Option
from .registry import OptionRegistry
from .tokens import TokenStream, split
from .utils import *


class Outcome(Enum):
    """
    How the last ArgumentParser.parse() call ended.

    - PARSED: every check passed and callbacks were dispatched (parse() is True).
    - OVERRULED: an overruling option short-circuited the parse (parse() is False);
      this is a handled request such as --help, not a failure.
    - EMPTY: the argument vector held no argument; help was printed (parse() is False).
    """
    PARSED = "parsed"
    OVERRULED = "overruled"
    EMPTY = "empty"


def _sanitize_metadata(metadata, /):
    """
    Internal: validate and normalize parser metadata (mutated in place).

    - name, version, descr, prog: Unset | str, non-empty after trimming.
    - colorful, fancy: coerced to bool.
    """
    for name in ("name", "version", "descr", "prog"):
        if not isinstance(value := metadata[name], str | Unset):
            raise TypeError(f"argument-parser {name!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"argument-parser {name!r} cannot be empty")
        metadata[name] = value

    for name in ("colorful", "fancy"):
        metadata[name] = bool(metadata[name])


class ArgumentParser:
    """
    Command-line argument parser.

    Metadata (display-only, read-only properties; see configure())
    - name: program title shown in the help header.
    - version: version string shown in the help header and by add_version().
    - descr: program description shown in the help header.
    - prog: program name in the usage line; defaults to argv[0] of the last
      parse, then to the basename of sys.argv[0].
    - colorful: style help, version and fault output.
    - fancy: wrap rendered faults in a panel.

    Single-threaded: a parser must not be used by several threads at once.
    """

    def __init__(
            self,
            name=Unset,
            /,
            version=Unset,
            descr=Unset,
            *,
            prog=Unset,
            colorful=True,
            fancy=False,
    ):
        self._metadata = {}
        self.configure(
            name=name,
            version=version,
            descr=descr,
            prog=prog,
            colorful=colorful,
            fancy=fancy,
        )
        self._registry = OptionRegistry()
        self._converters = ConversionRegistry(converters)
        self._invocations = []
        self._outcome = None
        self._overruled = None
        self._argv0 = Unset

    def configure(self, **metadata):
        """
        Change any subset of name, version, descr, prog, colorful and fancy.

        Returns
        - ArgumentParser: self, so calls can be chained.
        """
        if self._metadata and (unknown := metadata.keys() - self._metadata.keys()):
            raise TypeError(f"configure() got an unexpected keyword argument {sorted(unknown)[0]!r}")
        sanitized = self._metadata | metadata
        _sanitize_metadata(sanitized)
        self._metadata = sanitized
        return self

    @property
    def name(self):
        return coalesce(self._metadata["name"])

    @property
    def version(self):
        return coalesce(self._metadata["version"])

    @property
    def descr(self):
        return coalesce(self._metadata["descr"])

    @property
    def colorful(self):
        return self._metadata["colorful"]

    @property
    def fancy(self):
        return self._metadata["fancy"]

    @property
    def prog(self):
        """
        Program name used in the usage line.
        """
        if self._metadata["prog"] is not Unset:
            return self._metadata["prog"]
        if self._argv0:
            return self._argv0
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "prog"

    @property
    def label(self):
        """
        Short label for headers of rendered faults: name, or else prog.
        """
        return self.name or self.prog

    @property
    def converters(self):
        """
        The parser-local ConversionRegistry (falls back to clapp.converters).
        """
        return self._converters

    @property
    def outcome(self):
        """
        Outcome of the last parse() call, or None before the first one or
        when it raised.
        """
        return self._outcome

    @property
    def overruled(self):
        """
        The overruling option that short-circuited the last parse, if any.
        """
        return self._overruled

    @property
    def invocations(self):
        """
        Options in the order the last scan matched them.
        """
        return tuple(self._invocations)

    # Declaration API.

    def register(self, tag, converter=Unset, /, *, initial=Unset):
        """
        Register a converter for a custom value type on this parser only.

        Same forms as ConversionRegistry.register (direct call or decorator).
        """
        return self._converters.register(tag, converter, initial=initial)

    def add(self, option, /):
        """
        Register an already built Option.

        Returns
        - Option: the option itself (the mutable descriptor handle).

        Raises
        - DeclarationError: on duplicated keys or positional names, or when
          the option's type is unknown to this parser.
        """
        if not isinstance(option, Option):
            raise TypeError("add() argument must be an option")
        option._bind(self._converters)
        return self._registry.add(option)

    def option(self, *keys, **metadata):
        """
        Declare a named option.

        Parameters
        - keys: one or more str, e.g. "-c", "--cfg".
        - **metadata: see Option (metavar, descr, type, flag, required,
          overruling, default, choices, store, callback).

        Returns
        - Option: the registered option.
        """
        if not keys:
            raise DeclarationError(
                "option() must specify at least one key",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
                hint="use positional() to declare a positional option",
            )
        return self.add(Option(*keys, registry=self._converters, **metadata))

    def positional(self, metavar, /, **metadata):
        """
        Declare a positional option; positionals are filled in declaration order.

        Parameters
        - metavar: str, display name (e.g., "INPUT_FILE").
        - **metadata: see Option (descr, type, required, default, store, callback).

        Returns
        - Option: the registered option.
        """
        return self.add(Option(metavar=metavar, registry=self._converters, **metadata))

    def add_help(self):
        """
        Declare -h/--help: an overruling flag that prints the help message.
        """
        @rename("print_help")
        def callback(value):
            self.print_help()

        return self.option(
            "-h", "--help",
            flag=True,
            overruling=True,
            descr="Print this help message.",
            callback=callback,
        )

    def add_version(self):
        """
        Declare -V/--version: an overruling flag that prints the version line.
        """
        @rename("print_version")
        def callback(value):
            self.print_version()

        return self.option(
            "-V", "--version",
            flag=True,
            overruling=True,
            descr="Print the version and exit.",
            callback=callback,
        )

    def __getitem__(self, name):
        """
        Option by key ("-c", "--cfg") or positional display name ("INPUT_FILE").
        """
        return self._registry[name]

    def __contains__(self, name):
        return name in self._registry

    def __iter__(self):
        return iter(self._registry)

    def __len__(self):
        return len(self._registry)

    # Help collaborator.

    def help(self):
        """
        Return the help message as plain text.
        """
        return render_help(self).plain + "\n"

    def print_help(self, file=Unset):
        Console(file=coalesce(file), highlight=False).print(render_help(self))

    def version_text(self):
        """
        Return the version line as plain text.
        """
        return render_version(self).plain + "\n"

    def print_version(self, file=Unset):
        Console(file=coalesce(file), highlight=False).print(render_version(self))

    # Runtime entry points.

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector (program name at index 0).

        Parameters
        - argv: Unset | Iterable[str]. Unset reads sys.argv.

        Returns
        - bool: True when parsing completed; False when an overruling option
          short-circuited (outcome OVERRULED) or argv held no argument and help
          was printed (outcome EMPTY).

        Raises
        - MissingArgumentError, InvalidChoiceError, ConversionError,
          UnexpectedPositionalError: during the scan.
        - MissingRequiredOptionError: when a required option stays unset.
        - DelegatedCallbackError: when a callback fails.
        """
        if argv is Unset:
            argv = sys.argv
        elif isinstance(argv, str):
            raise TypeError("parse() argument must be an iterable of strings, not a string")
        argv = list(argv)
        stream = TokenStream(argv)
        self._argv0 = os.path.basename(argv[0]) if argv and argv[0] else Unset

        for option in self._registry:
            option._reset()
        self._invocations.clear()
        self._outcome = None
        self._overruled = None

        if not stream:
            self.print_help()
            self._outcome = Outcome.EMPTY
            return False

        self._scan(stream)

        for option in self._registry:
            option._fallback()

        if self._overrule():
            return False

        self._require()

        for option in self._invocations:
            self._invoke(option)

        self._outcome = Outcome.PARSED
        return True

    def run(self, argv=Unset, /):
        """
        Parse like parse(), with process-level behavior.

        - success: returns the parser.
        - fault: prints help and the rendered fault on stderr, exits with status 1.
        - overruling option (e.g., --help): exits with status 0.
        - empty argument vector: help was printed, exits with status 1.
        """
        try:
            if self.parse(argv):
                return self
        except ParserException as fault:
            self.print_help(file=sys.stderr)
            trigger(fault, parser=self, colorful=self.colorful, fancy=self.fancy)
        sys.exit(0 if self._outcome is Outcome.OVERRULED else 1)

    # Resolution engine.

    def _scan(self, stream):
        """
        Single left-to-right pass over the tokens.

        - "key=value" is split at its first '=' and the value re-injected as
          the next token, so "--opt=value" reads as "--opt value".
        - a declared key resolves its option: flags take the empty value and
          consume nothing (an inline value on a flag is left for the next
          step), other options consume the next token (which must exist and
          not be a key).
        - any other token fills the next free positional in declaration order.
        """
        positionals = list(self._registry.positionals)
        positionals.reverse()
        injected = False

        while stream:
            token, position = stream.pop()

            # A re-injected inline value is never split again.
            key, value = (token, None) if injected else split(token)
            injected = False
            if value is not None:
                if not value:
                    warnings.warn(EmptyInlineValueWarning(
                        "empty inline value for %r at %s position" % (key, ordinal(position)),
                        title="empty inline value",
                        code=FaultCode.EMPTY_INLINE_VALUE,
                        option=self._registry.lookup(key),
                        position=position,
                        hint="add a value after '=' (for example: %s=<value>)" % key,
                    ), stacklevel=3)
                stream.push(value, position)
                token = key
                injected = True

            option = self._registry.lookup(token)

            if option is None:
                if not positionals:
                    raise UnexpectedPositionalError(
                        "unexpected positional argument %r at %s position" % (token, ordinal(position)),
                        title="unexpected positional",
                        code=FaultCode.UNEXPECTED_POSITIONAL,
                        raw=token,
                        position=position,
                        hint=self._positional_hint(),
                    )
                self._accept(positionals.pop(), token, position)
                continue

            if option.flag:
                self._accept(option, "", position)
                continue

            following = stream.peek()
            if following is None or self._registry.lookup(following[0]) is not None:
                got = "none was given" if following is None else "got option %r" % following[0]
                raise MissingArgumentError(
                    "expected a value after option %r at %s position, but %s" % (token, ordinal(position), got),
                    title="missing option value",
                    code=FaultCode.MISSING_ARGUMENT,
                    option=option,
                    position=position,
                    hint="pass it as '%s <value>' or '%s=<value>'" % (token, token),
                )
            raw, _ = stream.pop()
            injected = False

            if option.choices and raw not in option.choices:
                raise InvalidChoiceError(
                    "invalid choice %r for option %r at %s position" % (raw, token, ordinal(position)),
                    title="invalid choice",
                    code=FaultCode.INVALID_CHOICE,
                    option=option,
                    raw=raw,
                    position=position,
                    hint="choose one of: %s" % ", ".join(option.choices),
                )

            self._accept(option, raw, position)

    def _accept(self, option, raw, position):
        """
        Convert a raw value, store it and record the invocation.
        """
        try:
            value = self._converters.convert(option.type, raw)
        except ConversionError as fault:
            kind = "positional" if option.positional else "option"
            raise copy.replace(
                fault,
                message="cannot convert %r for %s %r at %s position" % (raw, kind, option.name, ordinal(position)),
                option=option,
                position=position,
            ) from fault.__cause__

        if not option.positional and any(option is other for other in self._invocations):
            warnings.warn(RepeatedOptionWarning(
                "option %r given again at %s position, the last value wins" % (option.name, ordinal(position)),
                title="repeated option",
                code=FaultCode.REPEATED_OPTION,
                option=option,
                position=position,
                hint="give %r only once" % option.name,
            ), stacklevel=4)

        option._assign(value)
        self._invocations.append(option)

    def _positional_hint(self):
        count = len(self._registry.positionals)
        if not count:
            return "this program takes no positional arguments"
        return "this program takes %d positional argument%s" % (count, "" if count == 1 else "s")

    # Validation & dispatch.

    def _overrule(self):
        """
        Run the first set overruling option (scan or default) alone; report whether one ran.
        """
        for option in self._registry:
            if option.overruling and option.was_set:
                self._overruled = option
                self._outcome = Outcome.OVERRULED
                self._invoke(option)
                return True
        return False

    def _require(self):
        """
        Raise for the first required option (declaration order) left unset.
        """
        for option in self._registry:
            if option.required and not option.was_set:
                kind = "positional" if option.positional else "option"
                raise MissingRequiredOptionError(
                    "%s %r is required" % (kind, option.name),
                    title="missing required %s" % kind,
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    option=option,
                    hint="try '%s --help' for usage" % self.prog if "--help" in self._registry
                    else "add %s to the command line" % option.name,
                )

    def _invoke(self, option):
        """
        Call an option's callback with its current value.

        ParserException raised by callbacks propagate unchanged; any other
        exception is wrapped in DelegatedCallbackError.
        """
        try:
            option()
        except ParserException:
            raise
        except Exception as exception:
            kind = "positional" if option.positional else "option"
            raise DelegatedCallbackError(
                "callback of %s %r failed: %s" % (kind, option.name, exception),
                title="delegated %s error" % kind,
                code=FaultCode.DELEGATED_ERROR,
                option=option,
                exception=exception,
                hint="check the traceback of the original error",
            ) from exception

    def __repr__(self):
        return f"{type(self).__name__}({", ".join(
            "%s=%r" % (name, getattr(self, name)) for name in ("name", "version", "prog")
        )}, options={len(self._registry)})"


__all__ = (
    "ArgumentParser",
    "Outcome",
)
