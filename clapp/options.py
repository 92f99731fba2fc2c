r"""
clapp option descriptors.

Overview
- Option: the declared specification and runtime state of one command-line
  option. An option is either
  • named: identified by one or more keys (e.g., -c/--cfg), matched anywhere
    in the argument vector, or
  • positional: no keys, matched by the order of non-option tokens and shown
    in help under its metavar (display name).

- Introspection & representation
  • OptionType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction and on configure())
- keys: Iterable[str] validated as shell-style option names; duplicates rejected.
- metavar: Unset | str (argument name in help; display name of a positional).
- descr: Unset | str (short help), non-empty when provided.
- type: value type tag resolved through a ConversionRegistry
  (defaults to bool for flags, str otherwise).
- flag: bool, presence-only; no value token is consumed.
- required: bool, must be set by the end of the parse.
- overruling: bool, short-circuits validation and dispatch (help/version-like).
- default: any value; applied when the option was never matched.
- choices: Iterable[str] of accepted raw values (duplicates rejected unless a Set).
- store: Callable[[Any], None] invoked every time the value changes.
- callback: Callable[[Any], Any] invoked with the value during dispatch.

Validation highlights
- Keys must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique within an option.
- Positional options need a metavar and cannot be flags, overruling or carry choices.
- Flags cannot carry choices.

Quick example:
    >>> from clapp.options import Option
    >>> config = Option("-c", "--cfg", metavar="json config file", required=True)
    >>> config.name
    '-c/--cfg'
    >>> Option(metavar="INPUT_FILE").positional
    True

Public API
- Classes: Option
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable, Set

from .conversions import converters
from .faults import DeclarationError, FaultCode
from .utils import *

_KEY = re.compile(r"--?[^\W\d_](-?[^\W_]+)*")


class OptionType(type):
    """
    Metaclass that turns option declarations into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(keys=('-v', '--verbose'), flag=True, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers (e.g., rich).
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_keys(cls, keys, /):
    """
    Internal: validate and normalize the lookup keys of an option.

    Accepted forms
    - short: "-x", "-i1"
    - long with single hyphen: "-cfg", "-long-name"
    - long with double hyphen: "--cfg", "--long-name"
    Unicode letters are allowed. Declaration order is preserved.

    Raises
    - TypeError: when a key is not a string.
    - DeclarationError: when a key is empty, malformed or duplicated.
    """
    sanitized = []
    for key in keys:
        if not isinstance(key, str):
            raise TypeError(f"{cls.__typename__} keys must be strings")
        elif not (key := key.strip()):
            raise DeclarationError(
                f"{cls.__typename__} keys cannot be empty-strings",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
            )
        elif not _KEY.fullmatch(key):
            raise DeclarationError(
                f"{cls.__typename__} key {key!r} is not a valid shell-style option name",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
                hint="use forms like -x, -name or --long-name",
            )
        elif key in sanitized:
            raise DeclarationError(
                f"{cls.__typename__} keys cannot contain duplicates ({key!r})",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
            )
        sanitized.append(key)
    return tuple(sanitized)


def _sanitize_metadata(cls, metadata, registry, /):
    """
    Internal: validate and normalize option metadata.

    Parameters
    - cls: the option class, used for typename in diagnostics.
    - metadata: dict with the configurable fields (see module docstring);
      mutated in place with sanitized values.
    - registry: ConversionRegistry used to validate the value type tag.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a string field is empty or choices contain duplicates.

    Notes
    - 'default' is not validated; any value (including None) is accepted.
    """
    for name in ("flag", "required", "overruling"):
        metadata[name] = bool(metadata[name])

    for name in ("metavar", "descr"):
        if not isinstance(value := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(value)

    # Flags carry the permissive boolean unless another type is requested.
    if metadata["type"] is Unset:
        metadata["type"] = bool if metadata["flag"] else str
    if not registry.supports(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be a registered type tag or a callable")

    for name in ("store", "callback"):
        if not (metadata[name] is Unset or callable(metadata[name])):
            raise TypeError(f"{cls.__typename__} {name!r} must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
    sanitized = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    # Sets have no order of their own; sort them for a stable help output.
    metadata["choices"] = tuple(sorted(sanitized) if isinstance(choices, Set) else sanitized)


def _sanitize_shape(cls, keys, metadata, /):
    """
    Internal: reject metadata combinations that make no sense for the option shape.
    """
    def reject(message):
        raise DeclarationError(
            f"{cls.__typename__} {message}",
            title="invalid declaration",
            code=FaultCode.INVALID_DECLARATION,
        )

    if not keys:
        if metadata["metavar"] is None:
            reject("without keys must specify a 'metavar' (positional display name)")
        if metadata["metavar"].startswith("-"):
            reject(f"positional name {metadata["metavar"]!r} cannot start with '-'")
        if metadata["flag"]:
            reject(f"positional {metadata["metavar"]!r} cannot be a flag")
        if metadata["overruling"]:
            reject(f"positional {metadata["metavar"]!r} cannot be overruling")
        if metadata["choices"]:
            reject(f"positional {metadata["metavar"]!r} cannot have 'choices'")
    elif metadata["flag"] and metadata["choices"]:
        reject("flag cannot have 'choices'")


class Option(metaclass=OptionType):
    """
    Declared specification and runtime state of one option.

    Options are usually created through ArgumentParser.option() and
    ArgumentParser.positional(), which also register them; building one
    directly and handing it to ArgumentParser.add() is equivalent.

    Runtime state
    - value: current typed value; starts as the type-default of its type tag
      ("" for str, 0 for int, 0.0 for float, False for bool, None otherwise).
    - was_set: True once a value was applied by the scan or by the default.

    Calling an option invokes its callback with the current value (no-op when
    no callback was given); the parser does so during dispatch.
    """

    __introspectable__ = (
        "keys",
        "metavar",
        "descr",
        "type",
        "flag",
        "required",
        "overruling",
        "choices",
        "store",
        "callback",
    )

    __displayable__ = (
        "keys",
        "metavar",
        "type",
        "flag",
        "required",
        "overruling",
        "choices",
        "default",
        "value",
        "was_set",
    )

    def __init__(
            self,
            *keys,
            metavar=Unset,
            descr=Unset,
            type=Unset,
            flag=False,
            required=False,
            overruling=False,
            default=Unset,
            choices=(),
            store=Unset,
            callback=Unset,
            registry=Unset,
    ):
        """
        Construct an option with the provided metadata.

        Parameters
        - keys: zero or more str. No keys declares a positional option.
        - metavar: Unset | str. Argument name shown in help; mandatory for
          positional options, where it is the display name.
        - descr: Unset | str. Short description for help.
        - type: Unset | Hashable | Callable. Value type tag.
        - flag: bool. Presence-only option.
        - required: bool. Must be set by the end of parsing.
        - overruling: bool. Short-circuits validation and dispatch.
        - default: Any. Applied when the option is not matched.
        - choices: Iterable[str]. Accepted raw values.
        - store: Callable[[Any], None]. Receives every new value.
        - callback: Callable[[Any], Any]. Invoked during dispatch.
        - registry: Unset | ConversionRegistry. Validates and converts the
          type tag; defaults to the module-level clapp.converters.
        """
        cls = builtins.type(self)
        self._keys = _sanitize_keys(cls, keys)
        self._converters = coalesce(registry, converters)
        self._update({
            "metavar": metavar,
            "descr": descr,
            "type": type,
            "flag": flag,
            "required": required,
            "overruling": overruling,
            "default": default,
            "choices": choices,
            "store": store,
            "callback": callback,
        })
        self._reset()

    def _update(self, metadata, /):
        """
        Sanitize a complete metadata set and, only once all of it is valid, apply it.
        """
        cls = builtins.type(self)
        sanitized = dict(metadata)
        _sanitize_metadata(cls, sanitized, self._converters)
        _sanitize_shape(cls, self._keys, sanitized)

        self._metadata = dict(metadata)
        for name, object in sanitized.items():
            setattr(self, "_" + name, object)

    def configure(self, **metadata):
        """
        Change any subset of the metadata given at construction (except keys).

        The whole resulting metadata set is validated before anything changes.
        While the option holds no value, it is moved to the type-default of a
        newly configured type.

        Returns
        - Option: self, so calls can be chained.
        """
        if unknown := metadata.keys() - self._metadata.keys():
            raise TypeError(f"configure() got an unexpected keyword argument {sorted(unknown)[0]!r}")
        self._update(self._metadata | metadata)
        if not self._was_set:
            self._value = self._converters.initial(self._type)
        return self

    @property
    def positional(self):
        """
        True when the option has no keys and is matched by position.
        """
        return not self._keys

    @property
    def name(self):
        """
        Display label used in messages: "-c/--cfg" or the positional metavar.
        """
        return "/".join(self._keys) if self._keys else self._metavar

    @property
    def has_default(self):
        return self._default is not Unset

    @property
    def default(self):
        """
        Default value, or None when the option has none (see has_default).
        """
        return coalesce(self._default)

    @property
    def value(self):
        return self._value

    @property
    def was_set(self):
        return self._was_set

    def __call__(self):
        if self._callback is Unset:
            return
        return self._callback(self._value)

    # Engine hooks (used by ArgumentParser only).

    def _bind(self, registry, /):
        """
        Attach the option to a parser's conversion registry.
        """
        if not registry.supports(self._type):
            raise DeclarationError(
                f"{builtins.type(self).__typename__} {self.name!r} has an unknown type {self._type!r}",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
                option=self,
            )
        self._converters = registry
        self._reset()

    def _reset(self):
        self._value = self._converters.initial(self._type)
        self._was_set = False

    def _assign(self, value, /):
        self._value = value
        self._was_set = True
        if self._store is not Unset:
            self._store(value)

    def _fallback(self):
        if not self._was_set and self._default is not Unset:
            self._assign(self._default)


__all__ = (
    "Option",
)

del OptionType
